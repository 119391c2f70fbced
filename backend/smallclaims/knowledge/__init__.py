from .base import ClaimCategory, PlaintiffType
from .categories import CONSUMER, CONTRACT, EMPLOYER, LANDLORD, NEIGHBOR, OTHER
from .parties import COMPANY, INDIVIDUAL, NGO, PARTNERSHIP, SOLE_PROPRIETOR

CLAIM_CATEGORIES: dict[str, ClaimCategory] = {
    c.category_id: c for c in (CONSUMER, LANDLORD, EMPLOYER, NEIGHBOR, CONTRACT, OTHER)
}

PLAINTIFF_TYPES: dict[str, PlaintiffType] = {
    p.type_id: p for p in (INDIVIDUAL, SOLE_PROPRIETOR, COMPANY, NGO, PARTNERSHIP)
}


def category_for(claim_type: str | None) -> ClaimCategory:
    """Knowledge for a claim type, falling back to the generic category."""
    if not claim_type:
        return OTHER
    return CLAIM_CATEGORIES.get(claim_type.strip().lower(), OTHER)
