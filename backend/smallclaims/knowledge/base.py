from dataclasses import dataclass, field


@dataclass
class PlaintiffType:
    type_id: str
    display_name: str
    description: str
    blocked_reason: str = ""  # non-empty = may not file a small claim


@dataclass
class ClaimCategory:
    category_id: str
    display_name: str
    description: str
    icon: str
    # Category-specific prerequisites the court usually expects to see
    expects_written_agreement: bool = False
    expects_prior_notice: bool = True
    expects_proof_of_payment: bool = False
    keywords: list[str] = field(default_factory=list)  # contract-ish wording in the narrative
