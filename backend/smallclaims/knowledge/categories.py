from .base import ClaimCategory

CONSUMER = ClaimCategory(
    category_id="consumer",
    display_name="Consumer",
    description="Defective product, poor service, non-delivery",
    icon="🛒",
    expects_proof_of_payment=True,
)

LANDLORD = ClaimCategory(
    category_id="landlord",
    display_name="Rental",
    description="Deposit, damage to the apartment, repairs",
    icon="🏠",
    expects_written_agreement=True,
    expects_proof_of_payment=True,
)

EMPLOYER = ClaimCategory(
    category_id="employer",
    display_name="Employment",
    description="Wages, severance, employee rights",
    icon="💼",
    expects_written_agreement=True,
)

NEIGHBOR = ClaimCategory(
    category_id="neighbor",
    display_name="Neighbors",
    description="Property damage, noise nuisance",
    icon="🏘️",
)

CONTRACT = ClaimCategory(
    category_id="contract",
    display_name="Contract",
    description="Breach of agreement, financial loss",
    icon="📝",
    expects_written_agreement=True,
    expects_proof_of_payment=True,
    keywords=["contract", "agreement", "undertaking", "חוזה", "הסכם", "התחייבות"],
)

OTHER = ClaimCategory(
    category_id="other",
    display_name="Other",
    description="Any other reason",
    icon="⚖️",
)
