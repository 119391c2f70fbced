"""Readiness scoring for a claim.

Produces the filing readiness score (six capped categories summing to 100),
a qualitative strength rating, missing fields, risk flags and improvement
suggestions. Deterministic and side-effect free, so it can run on every edit.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel

from ..config import Settings, settings as default_settings
from ..graph import queries
from ..graph.models import CaseGraph
from ..knowledge import category_for
from ..schemas import (
    Claim,
    ClaimForScoring,
    MissingField,
    RiskFlag,
    StrengthScore,
    Suggestion,
)
from .eligibility import EligibilityInput, check_eligibility, format_nis
from .graph_scoring import graph_evidence_points

logger = logging.getLogger(__name__)

CATEGORY_CAPS = {
    "required_fields": 40,
    "evidence": 15,
    "signature": 15,
    "valid_amount": 10,
    "demands": 10,
    "timeline": 10,
}

# (value getter, weight); weights add up to the required_fields cap
REQUIRED_FIELD_WEIGHTS = (
    (lambda c: c.plaintiff_name, 6),
    (lambda c: c.plaintiff_id, 4),
    (lambda c: c.plaintiff_phone, 4),
    (lambda c: c.plaintiff_address, 4),
    (lambda c: c.defendant, 8),
    (lambda c: c.defendant_address, 4),
    (lambda c: c.summary_text, 6),
    (lambda c: c.claim_type, 4),
)

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


class ScoreBreakdown(BaseModel):
    required_fields: int  # max 40
    evidence: int  # max 15
    signature: int  # max 15
    valid_amount: int  # max 10
    demands: int  # max 10
    timeline: int  # max 10

    @property
    def total(self) -> int:
        return (
            self.required_fields
            + self.evidence
            + self.signature
            + self.valid_amount
            + self.demands
            + self.timeline
        )


class ConfidenceResult(BaseModel):
    readiness_score: int
    strength_score: StrengthScore
    breakdown: ScoreBreakdown
    missing_fields: list[MissingField]
    risk_flags: list[RiskFlag]
    suggestions: list[Suggestion]


def calculate_confidence(
    claim: ClaimForScoring,
    graph: Optional[CaseGraph] = None,
    config: Settings | None = None,
) -> ConfidenceResult:
    """Score a claim snapshot.

    When the claim's graph is supplied, the evidence category is taken from the
    graph-aware scorer, so evidence only earns full credit once it is linked to
    the events it proves.
    """
    config = config or default_settings
    breakdown = _breakdown(claim, graph, config)
    missing = _missing_fields(claim, config)
    risks = _risk_flags(claim, config)
    suggestions = _suggestions(claim, graph, missing, risks, config)
    return ConfidenceResult(
        readiness_score=breakdown.total,
        strength_score=_strength(claim, config),
        breakdown=breakdown,
        missing_fields=missing,
        risk_flags=risks,
        suggestions=suggestions,
    )


def apply_confidence(claim: Claim, result: ConfidenceResult) -> Claim:
    """Copy of the claim with the scoring results written back onto it."""
    return claim.model_copy(
        update={
            "readiness_score": result.readiness_score,
            "strength_score": result.strength_score,
            "risk_flags": list(result.risk_flags),
            "missing_fields": list(result.missing_fields),
            "suggestions": list(result.suggestions),
        }
    )


def recalculate_confidence(
    claim: Claim, graph: Optional[CaseGraph] = None, config: Settings | None = None
) -> Claim:
    result = calculate_confidence(ClaimForScoring.from_claim(claim), graph, config)
    return apply_confidence(claim, result)


# ------------------------------------------------------------------
# Labels
# ------------------------------------------------------------------

READINESS_TIERS = (
    # (minimum percent, tier, label, color)
    (80, "success", "Ready to file", "#22c55e"),
    (50, "warning", "Almost ready", "#f59e0b"),
    (1, "intermediate", "In progress", "#f97316"),
    (0, "none", "Not started", "#9ca3af"),
)

STRENGTH_LABELS = {
    "strong": ("Strong", "#22c55e"),
    "medium": ("Medium", "#f59e0b"),
    "weak": ("Weak", "#ef4444"),
}


def get_score_tier(percent: float) -> str:
    """Tier of a 0-100 percentage (a category's share of its cap, or readiness)."""
    return _tier(percent)[1]


def get_readiness_label(score: float) -> str:
    return _tier(score)[2]


def get_readiness_color(score: float) -> str:
    return _tier(score)[3]


def get_strength_label(strength: StrengthScore) -> str:
    return STRENGTH_LABELS[strength][0]


def get_strength_color(strength: StrengthScore) -> str:
    return STRENGTH_LABELS[strength][1]


def _tier(percent: float) -> tuple:
    if percent <= 0:
        return READINESS_TIERS[-1]
    for tier in READINESS_TIERS[:-1]:
        if percent >= tier[0]:
            return tier
    # anything above zero is at least in progress
    return READINESS_TIERS[2]


# ------------------------------------------------------------------
# Breakdown
# ------------------------------------------------------------------


def _present(value) -> bool:
    return value is not None and str(value).strip() != ""


def _valid_amount(claim: ClaimForScoring, config: Settings) -> bool:
    return bool(claim.amount and 0 < claim.amount <= config.small_claims_max_amount_nis)


def _breakdown(
    claim: ClaimForScoring, graph: Optional[CaseGraph], config: Settings
) -> ScoreBreakdown:
    required_fields = sum(w for getter, w in REQUIRED_FIELD_WEIGHTS if _present(getter(claim)))

    if graph is not None:
        evidence = graph_evidence_points(graph, claim.evidence_count)
    else:
        evidence = min(CATEGORY_CAPS["evidence"], max(0, claim.evidence_count) * 5)

    signature = CATEGORY_CAPS["signature"] if claim.has_signature else 0
    valid_amount = CATEGORY_CAPS["valid_amount"] if _valid_amount(claim, config) else 0

    demand_count = sum(1 for d in claim.demands if d.strip())
    has_amount = bool(claim.amount and claim.amount > 0)
    if demand_count:
        # one clear demand is most of the way; a second one or a figure completes it
        demands = 7 + (3 if demand_count >= 2 or has_amount else 0)
    elif has_amount:
        demands = 5
    else:
        demands = 0

    if claim.timeline:
        timeline = min(CATEGORY_CAPS["timeline"], len(claim.timeline) * 5)
    elif _present(claim.incident_date):
        timeline = 4
    else:
        timeline = 0

    return ScoreBreakdown(
        required_fields=required_fields,
        evidence=evidence,
        signature=signature,
        valid_amount=valid_amount,
        demands=min(CATEGORY_CAPS["demands"], demands),
        timeline=timeline,
    )


# ------------------------------------------------------------------
# Strength
# ------------------------------------------------------------------


def _strength(claim: ClaimForScoring, config: Settings) -> StrengthScore:
    points = 0

    if claim.evidence_count <= 0:
        points -= 2
    elif claim.evidence_count >= 3:
        points += 3
    else:
        points += 1

    if not claim.timeline:
        if not _present(claim.incident_date):
            points -= 1
    elif len(claim.timeline) >= 2:
        points += 2
    else:
        points += 1

    demand_count = sum(1 for d in claim.demands if d.strip())
    if demand_count >= 2:
        points += 2
    elif demand_count == 1:
        points += 1

    if _valid_amount(claim, config):
        points += 1

    summary_length = len(claim.summary_text)
    if summary_length > 200:
        points += 2
    elif summary_length > 50:
        points += 1

    if claim.has_written_agreement:
        points += 2
    if claim.has_prior_notice:
        points += 1
    if claim.has_proof_of_payment:
        points += 1

    if points >= config.strong_strength_points:
        return "strong"
    if points >= config.medium_strength_points:
        return "medium"
    return "weak"


# ------------------------------------------------------------------
# Missing fields
# ------------------------------------------------------------------

REQUIRED_LABELS = (
    ("plaintiff_name", "Plaintiff full name", lambda c: c.plaintiff_name),
    ("plaintiff_id", "Plaintiff ID number", lambda c: c.plaintiff_id),
    ("plaintiff_phone", "Plaintiff phone number", lambda c: c.plaintiff_phone),
    ("plaintiff_address", "Plaintiff home address", lambda c: c.plaintiff_address),
    ("defendant", "Defendant / business name", lambda c: c.defendant),
    ("defendant_address", "Defendant address", lambda c: c.defendant_address),
    ("summary", "Description of what happened", lambda c: c.summary_text),
    ("claim_type", "Claim category", lambda c: c.claim_type),
)


def _missing_fields(claim: ClaimForScoring, config: Settings) -> list[MissingField]:
    missing = [
        MissingField(field=name, label=label, importance="required")
        for name, label, getter in REQUIRED_LABELS
        if not _present(getter(claim))
    ]
    if not claim.amount or claim.amount <= 0:
        missing.append(MissingField(field="amount", label="Claim amount", importance="required"))
    if not claim.has_signature:
        missing.append(MissingField(field="signature", label="Signature", importance="required"))
    if claim.evidence_count <= 0:
        missing.append(
            MissingField(field="evidence", label="Evidence (photos / documents)", importance="recommended")
        )
    if not claim.timeline:
        missing.append(
            MissingField(field="timeline", label="Timeline of events", importance="recommended")
        )
    if not any(d.strip() for d in claim.demands):
        missing.append(
            MissingField(field="demands", label="Demands / requested relief", importance="recommended")
        )
    return missing


# ------------------------------------------------------------------
# Risk flags
# ------------------------------------------------------------------


def _risk_flags(claim: ClaimForScoring, config: Settings) -> list[RiskFlag]:
    flags: list[RiskFlag] = []
    category = category_for(claim.claim_type)
    cap = config.small_claims_max_amount_nis

    if claim.amount and claim.amount > cap:
        flags.append(
            RiskFlag(
                id="amount_exceeds_limit",
                icon="⚠️",
                title="Amount exceeds the small claims ceiling",
                description=(
                    f"The claimed amount ({format_nis(claim.amount)}) is above the small claims "
                    f"ceiling ({format_nis(cap)}). The claim will be rejected unless you waive "
                    "the difference."
                ),
                severity="high",
            )
        )

    if claim.evidence_count <= 0:
        flags.append(
            RiskFlag(
                id="no_evidence",
                icon="📎",
                title="No evidence attached",
                description=(
                    "A claim without supporting evidence may be dismissed. Add photos, "
                    "receipts, contracts or correspondence."
                ),
                severity="high",
            )
        )

    if category.expects_written_agreement and not claim.has_written_agreement:
        flags.append(
            RiskFlag(
                id="no_written_agreement",
                icon="📝",
                title="No written agreement",
                description=(
                    "This kind of claim is hard to prove without a written agreement. Look for "
                    "any record of the deal: messages, emails, quotes."
                ),
                severity="medium",
            )
        )

    if category.expects_prior_notice and not claim.has_prior_notice:
        flags.append(
            RiskFlag(
                id="no_prior_notice",
                icon="✉️",
                title="No prior notice sent",
                description=(
                    "The court expects you to have tried to settle before filing. Send the "
                    "defendant a warning letter."
                ),
                severity="medium",
            )
        )

    if (
        category.expects_proof_of_payment
        and not claim.has_proof_of_payment
        and claim.amount
        and claim.amount > 0
    ):
        flags.append(
            RiskFlag(
                id="no_proof_of_payment",
                icon="💳",
                title="No proof of payment",
                description="Attach a receipt, bank transfer or statement showing what you paid.",
                severity="low",
            )
        )

    if len(claim.summary_text) < 50:
        flags.append(
            RiskFlag(
                id="vague_description",
                icon="📋",
                title="Description is not detailed enough",
                description=(
                    "A short description may not make your case clear. Finish the interview "
                    "to add detail."
                ),
                severity="medium",
            )
        )

    eligibility = check_eligibility(
        EligibilityInput(
            plaintiff_type=claim.plaintiff_type or "",
            claim_category=claim.claim_type or "",
        ),
        config,
    )
    for blocker in eligibility.blockers:
        if blocker.hard:
            flags.append(
                RiskFlag(
                    id=f"eligibility_{blocker.id}",
                    icon=blocker.icon,
                    title=blocker.title,
                    description=blocker.description,
                    severity="high",
                )
            )

    return flags


# ------------------------------------------------------------------
# Suggestions
# ------------------------------------------------------------------


def _suggestions(
    claim: ClaimForScoring,
    graph: Optional[CaseGraph],
    missing: list[MissingField],
    risks: list[RiskFlag],
    config: Settings,
) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    risk_ids = {r.id for r in risks}

    required_missing = [
        m for m in missing if m.importance == "required" and m.field not in ("signature", "amount")
    ]
    if required_missing:
        suggestions.append(
            Suggestion(
                id="complete_required_fields",
                icon="✏️",
                title="Complete the required fields",
                description=(
                    f"{len(required_missing)} required fields are missing: "
                    + ", ".join(m.label for m in required_missing)
                ),
                priority="high",
            )
        )

    if "amount_exceeds_limit" in risk_ids or not claim.amount or claim.amount <= 0:
        suggestions.append(
            Suggestion(
                id="fix_amount",
                icon="💰",
                title="Set a valid claim amount",
                description=(
                    "State a positive amount no higher than "
                    f"{format_nis(config.small_claims_max_amount_nis)}."
                ),
                priority="high",
            )
        )

    if claim.evidence_count <= 0:
        suggestions.append(
            Suggestion(
                id="add_evidence",
                icon="📷",
                title="Add evidence",
                description=(
                    "Photograph receipts, contracts and messages that support your claim. "
                    "More evidence means better odds."
                ),
                priority="high",
            )
        )
    elif claim.evidence_count < 3:
        suggestions.append(
            Suggestion(
                id="more_evidence",
                icon="📎",
                title="Add more evidence",
                description="The more supporting evidence you have, the stronger your case.",
                priority="medium",
            )
        )

    if (
        graph is not None
        and queries.get_evidence(graph)
        and (queries.get_uncovered_events(graph) or queries.get_unlinked_evidence(graph))
    ):
        suggestions.append(
            Suggestion(
                id="link_evidence",
                icon="🔗",
                title="Link evidence to events",
                description="Connect each piece of evidence to the event or demand it proves.",
                priority="medium",
            )
        )

    if "no_prior_notice" in risk_ids:
        suggestions.append(
            Suggestion(
                id="send_notice",
                icon="✉️",
                title="Send a warning letter",
                description=(
                    "Before filing, send the defendant a warning letter. It shows the court "
                    "you tried to resolve the dispute."
                ),
                priority="high",
            )
        )

    if not claim.has_signature:
        suggestions.append(
            Suggestion(
                id="add_signature",
                icon="✍️",
                title="Add your signature",
                description="A statement of claim must be signed.",
                priority="medium",
            )
        )

    if not claim.timeline:
        suggestions.append(
            Suggestion(
                id="add_timeline",
                icon="📅",
                title="Add a timeline",
                description="A clear timeline helps the judge follow what happened.",
                priority="medium",
            )
        )

    if not any(d.strip() for d in claim.demands):
        suggestions.append(
            Suggestion(
                id="add_demands",
                icon="🎯",
                title="Spell out your demands",
                description="List exactly what you are asking the court to award.",
                priority="medium",
            )
        )

    if claim.evidence_count > 0 and claim.summary_text:
        suggestions.append(
            Suggestion(
                id="mock_trial",
                icon="⚖️",
                title="Rehearse with a mock trial",
                description="Practicing with an AI judge prepares you for hard questions.",
                priority="low",
            )
        )

    # sorted() is stable, so ties keep the order above
    return sorted(suggestions, key=lambda s: PRIORITY_ORDER[s.priority])
