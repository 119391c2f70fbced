from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

StrengthScore = Literal["weak", "medium", "strong"]
Severity = Literal["high", "medium", "low"]


class MissingField(BaseModel):
    field: str
    label: str
    importance: Literal["required", "recommended"]


class RiskFlag(BaseModel):
    id: str
    icon: str
    title: str
    description: str
    severity: Severity


class Suggestion(BaseModel):
    id: str
    icon: str
    title: str
    description: str
    priority: Severity


class TimelineEntry(BaseModel):
    date: str = ""
    description: str = ""
    event: Optional[str] = None  # legacy alias of description

    @property
    def text(self) -> str:
        return self.description or self.event or ""


class EvidenceItem(BaseModel):
    id: str
    uri: str = ""
    type: str = "image"
    name: str = ""
    tag: Optional[str] = None


class Plaintiff(BaseModel):
    full_name: str = ""
    type: str = "individual"
    id_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class Defendant(BaseModel):
    name: str = ""
    address: Optional[str] = None
    phone: Optional[str] = None
    type: Optional[str] = None


class Claim(BaseModel):
    """The claim record owned by the persistence collaborator."""

    id: str
    user_id: str = ""
    status: str = "draft"
    claim_type: Optional[str] = None

    amount_claimed_nis: Optional[float] = None
    amount: Optional[float] = None  # legacy alias

    plaintiff: Optional[Plaintiff] = None
    plaintiff_name: Optional[str] = None
    plaintiff_id: Optional[str] = None
    plaintiff_phone: Optional[str] = None
    plaintiff_address: Optional[str] = None

    defendants: list[Defendant] = Field(default_factory=list)
    defendant: Optional[str] = None
    defendant_address: Optional[str] = None

    facts_summary: Optional[str] = None
    summary: Optional[str] = None  # legacy alias
    timeline: list[TimelineEntry] = Field(default_factory=list)
    demands: list[str] = Field(default_factory=list)
    incident_date: Optional[str] = None
    legal_basis: Optional[str] = None
    evidence: list[EvidenceItem] = Field(default_factory=list)

    has_written_agreement: bool = False
    has_prior_notice: bool = False
    has_proof_of_payment: bool = False

    signature_uri: Optional[str] = None
    signature_url: Optional[str] = None  # legacy alias

    # Written back by the recalculate action
    readiness_score: Optional[int] = None
    strength_score: Optional[StrengthScore] = None
    risk_flags: list[RiskFlag] = Field(default_factory=list)
    missing_fields: list[MissingField] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)


class ClaimForScoring(BaseModel):
    """Flat, read-only projection of a claim consumed by the scorers."""

    plaintiff_name: Optional[str] = None
    plaintiff_id: Optional[str] = None
    plaintiff_phone: Optional[str] = None
    plaintiff_address: Optional[str] = None
    plaintiff_type: Optional[str] = None
    defendant: Optional[str] = None
    defendant_address: Optional[str] = None
    amount: Optional[float] = None
    summary: Optional[str] = None
    facts_summary: Optional[str] = None
    claim_type: Optional[str] = None
    timeline: list[TimelineEntry] = Field(default_factory=list)
    demands: list[str] = Field(default_factory=list)
    evidence_count: int = 0
    has_signature: bool = False
    has_written_agreement: bool = False
    has_prior_notice: bool = False
    has_proof_of_payment: bool = False
    incident_date: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def summary_text(self) -> str:
        return (self.summary or self.facts_summary or "").strip()

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimForScoring":
        plaintiff = claim.plaintiff or Plaintiff()
        first_defendant = claim.defendants[0] if claim.defendants else None
        return cls(
            plaintiff_name=claim.plaintiff_name or plaintiff.full_name or None,
            plaintiff_id=claim.plaintiff_id or plaintiff.id_number,
            plaintiff_phone=claim.plaintiff_phone or plaintiff.phone,
            plaintiff_address=claim.plaintiff_address or plaintiff.address,
            plaintiff_type=plaintiff.type if claim.plaintiff else None,
            defendant=claim.defendant or (first_defendant.name if first_defendant else None),
            defendant_address=claim.defendant_address
            or (first_defendant.address if first_defendant else None),
            amount=claim.amount_claimed_nis or claim.amount,
            summary=claim.summary,
            facts_summary=claim.facts_summary,
            claim_type=claim.claim_type,
            timeline=list(claim.timeline),
            demands=list(claim.demands),
            evidence_count=len(claim.evidence),
            has_signature=bool(claim.signature_url or claim.signature_uri),
            has_written_agreement=claim.has_written_agreement,
            has_prior_notice=claim.has_prior_notice,
            has_proof_of_payment=claim.has_proof_of_payment,
            incident_date=claim.incident_date,
        )


# ------------------------------------------------------------------
# API payloads
# ------------------------------------------------------------------


class EdgeCreateRequest(BaseModel):
    source: str
    target: str
    kind: Literal["supports", "undermines"] = "supports"


class DemandCreateRequest(BaseModel):
    description: str
    amount_nis: Optional[float] = None
    legal_basis: Optional[str] = None


class QuickEligibilityResponse(BaseModel):
    eligible: bool
