"""Pre-interview gate: can this dispute be filed as a small claim at all?"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import Settings, settings as default_settings
from ..knowledge import PLAINTIFF_TYPES

logger = logging.getLogger(__name__)

EligibilityVerdict = Literal["eligible", "ineligible", "borderline"]


class EligibilityInput(BaseModel):
    plaintiff_type: str = ""
    estimated_amount_nis: float = 0  # 0 = not known yet
    claim_category: str = ""
    is_government_defendant: bool = False
    is_class_action: bool = False
    is_statute_expired: bool = False
    is_real_estate_ownership: bool = False
    is_defamation: bool = False

    @field_validator("plaintiff_type", "claim_category", mode="before")
    @classmethod
    def _normalize_id(cls, value):
        # same normalization as knowledge.category_for
        if value is None:
            return ""
        return value.strip().lower() if isinstance(value, str) else value


class EligibilityBlocker(BaseModel):
    id: str
    title: str
    description: str
    icon: str
    hard: bool  # a hard blocker makes the claim ineligible
    fixable: bool
    suggestion: Optional[str] = None


class EligibilityResult(BaseModel):
    verdict: EligibilityVerdict
    blockers: list[EligibilityBlocker] = Field(default_factory=list)
    verdict_text: str
    alternative_court: Optional[str] = None


def check_eligibility(
    data: EligibilityInput, config: Settings | None = None
) -> EligibilityResult:
    config = config or default_settings
    blockers = _collect_blockers(data, config)

    if any(b.hard for b in blockers):
        verdict: EligibilityVerdict = "ineligible"
        verdict_text = "This case cannot be filed as a small claim"
        alternative_court = _alternative_court(blockers)
    elif blockers:
        verdict = "borderline"
        verdict_text = "This may be possible; further review is needed"
        alternative_court = None
    else:
        verdict = "eligible"
        verdict_text = "This case can be filed as a small claim"
        alternative_court = None

    logger.debug("Eligibility verdict %s with blockers %s", verdict, [b.id for b in blockers])
    return EligibilityResult(
        verdict=verdict,
        blockers=blockers,
        verdict_text=verdict_text,
        alternative_court=alternative_court,
    )


def is_quick_eligible(data: EligibilityInput, config: Settings | None = None) -> bool:
    """Coarse gate for UI badges before the interview starts.

    Stricter than ``check_eligibility``: an unrecognized plaintiff type is a
    "no" here, and every hard blocker is a "no".
    """
    config = config or default_settings
    if data.plaintiff_type not in config.valid_plaintiff_types:
        return False
    if data.estimated_amount_nis > config.small_claims_max_amount_nis:
        return False
    if data.claim_category and data.claim_category not in config.claim_categories:
        return False
    return not (
        data.is_government_defendant
        or data.is_class_action
        or data.is_statute_expired
        or data.is_real_estate_ownership
    )


# ------------------------------------------------------------------
# Fees & amount validation
# ------------------------------------------------------------------


def calculate_court_fee(amount_nis: float, config: Settings | None = None) -> float:
    config = config or default_settings
    fee = round(amount_nis * config.court_fee_percent)
    return max(fee, config.court_fee_min_nis)


def validate_claim_amount(
    amount_nis: float, config: Settings | None = None
) -> tuple[bool, Optional[str]]:
    config = config or default_settings
    if amount_nis <= 0:
        return False, "The claim amount must be positive"
    if amount_nis > config.small_claims_max_amount_nis:
        return False, (
            f"The claim amount exceeds the small claims ceiling "
            f"({format_nis(config.small_claims_max_amount_nis)}). "
            "File in the magistrates' court instead."
        )
    return True, None


def format_nis(amount: float) -> str:
    return f"₪{amount:,.0f}"


# ------------------------------------------------------------------
# Internal
# ------------------------------------------------------------------


def _collect_blockers(data: EligibilityInput, config: Settings) -> list[EligibilityBlocker]:
    blockers: list[EligibilityBlocker] = []
    cap = config.small_claims_max_amount_nis

    if data.plaintiff_type in config.blocked_plaintiff_types:
        known = PLAINTIFF_TYPES.get(data.plaintiff_type)
        blockers.append(
            EligibilityBlocker(
                id="blocked_plaintiff_type",
                title=f"{known.display_name if known else data.plaintiff_type} may not sue",
                description=(
                    known.blocked_reason
                    if known and known.blocked_reason
                    else "This plaintiff type may not sue in the small claims court"
                ),
                icon="🚫",
                hard=True,
                fixable=False,
            )
        )
    elif data.plaintiff_type and data.plaintiff_type not in config.valid_plaintiff_types:
        blockers.append(
            EligibilityBlocker(
                id="unknown_plaintiff_type",
                title="Unrecognized plaintiff type",
                description="Only individuals and sole proprietors may file small claims.",
                icon="❓",
                hard=False,
                fixable=True,
                suggestion="Confirm whether you are suing as a private person.",
            )
        )

    if data.estimated_amount_nis > cap:
        blockers.append(
            EligibilityBlocker(
                id="amount_too_high",
                title="Amount exceeds the small claims ceiling",
                description=(
                    f"The ceiling is {format_nis(cap)}; the amount you entered "
                    f"({format_nis(data.estimated_amount_nis)}) is above it."
                ),
                icon="💰",
                hard=True,
                fixable=True,
                suggestion=(
                    "Reduce the claimed amount to the ceiling and waive the difference, "
                    "or file in the magistrates' court."
                ),
            )
        )

    if data.claim_category and data.claim_category not in config.claim_categories:
        blockers.append(
            EligibilityBlocker(
                id="category_unsupported",
                title="Claim category is not supported",
                description=f"'{data.claim_category}' is not a small claims category.",
                icon="🗂️",
                hard=True,
                fixable=True,
                suggestion="Pick the closest category, or 'other'.",
            )
        )

    if data.is_government_defendant:
        blockers.append(
            EligibilityBlocker(
                id="government_defendant",
                title="Claim against a government body",
                description=(
                    "Claims against the state or public authorities follow special rules "
                    "and often cannot be filed as small claims."
                ),
                icon="🏛️",
                hard=True,
                fixable=False,
                suggestion="Consult a lawyer; the administrative court may be the right forum.",
            )
        )

    if data.is_class_action:
        blockers.append(
            EligibilityBlocker(
                id="class_action",
                title="Class action",
                description="Class actions are not heard in the small claims court.",
                icon="👥",
                hard=True,
                fixable=False,
                suggestion="Class actions are filed in the district court.",
            )
        )

    if data.is_statute_expired:
        blockers.append(
            EligibilityBlocker(
                id="statute_expired",
                title="Limitation period may have passed",
                description=(
                    f"More than {config.statute_of_limitations_years} years since the "
                    "incident may bar the claim."
                ),
                icon="⏰",
                hard=True,
                fixable=False,
                suggestion="Check the exact date of the incident.",
            )
        )

    if data.is_real_estate_ownership:
        blockers.append(
            EligibilityBlocker(
                id="real_estate",
                title="Real estate ownership dispute",
                description="Ownership of real estate is not decided in small claims.",
                icon="🏗️",
                hard=True,
                fixable=False,
                suggestion="File in the magistrates' or district court by property value.",
            )
        )

    if data.is_defamation:
        blockers.append(
            EligibilityBlocker(
                id="defamation",
                title="Defamation claim",
                description=(
                    "Defamation can be a small claim only up to the ceiling, and "
                    "publication must be proven."
                ),
                icon="🗣️",
                hard=False,
                fixable=True,
                suggestion="Keep the amount under the ceiling and gather proof of publication.",
            )
        )

    return blockers


def _alternative_court(blockers: list[EligibilityBlocker]) -> str:
    ids = {b.id for b in blockers}
    if "class_action" in ids:
        return "District court"
    if "government_defendant" in ids:
        return "Administrative affairs court"
    if "real_estate" in ids:
        return "Magistrates' court (real estate)"
    return "Magistrates' court"
