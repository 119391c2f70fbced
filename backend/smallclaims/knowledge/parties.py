from .base import PlaintiffType

INDIVIDUAL = PlaintiffType(
    type_id="individual",
    display_name="Individual",
    description="A private person",
)

SOLE_PROPRIETOR = PlaintiffType(
    type_id="sole_proprietor",
    display_name="Sole proprietor",
    description="Self-employed / licensed dealer",
)

COMPANY = PlaintiffType(
    type_id="company",
    display_name="Limited company",
    description="A registered company",
    blocked_reason="A company may not sue in the small claims court",
)

NGO = PlaintiffType(
    type_id="ngo",
    display_name="Non-profit association",
    description="A registered association",
    blocked_reason="An association may not sue in the small claims court",
)

PARTNERSHIP = PlaintiffType(
    type_id="partnership",
    display_name="Partnership",
    description="A registered partnership",
    blocked_reason="A partnership may not sue in the small claims court",
)
