from fastapi import APIRouter

from ..engine.confidence import ConfidenceResult, apply_confidence, calculate_confidence
from ..engine.eligibility import (
    EligibilityInput,
    EligibilityResult,
    check_eligibility,
    is_quick_eligible,
)
from ..engine.rules import RulesOutput, evaluate_rules
from ..schemas import Claim, ClaimForScoring, QuickEligibilityResponse
from . import graphs

router = APIRouter(prefix="/api/scoring", tags=["scoring"])


@router.post("/confidence", response_model=ConfidenceResult)
async def confidence(claim: Claim):
    graph = await graphs.store.load_graph(claim.id)
    return calculate_confidence(ClaimForScoring.from_claim(claim), graph)


@router.post("/recalculate", response_model=Claim)
async def recalculate(claim: Claim):
    graph = await graphs.store.load_graph(claim.id)
    result = calculate_confidence(ClaimForScoring.from_claim(claim), graph)
    return apply_confidence(claim, result)


@router.post("/eligibility", response_model=EligibilityResult)
async def eligibility(req: EligibilityInput):
    return check_eligibility(req)


@router.post("/eligibility/quick", response_model=QuickEligibilityResponse)
async def quick_eligibility(req: EligibilityInput):
    return QuickEligibilityResponse(eligible=is_quick_eligible(req))


@router.post("/rules", response_model=RulesOutput)
async def rules(claim: Claim):
    graph = await graphs.store.load_graph(claim.id)
    return evaluate_rules(ClaimForScoring.from_claim(claim), graph)
