from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Israeli Small Claims Court ceiling. Revisions of the product have used
    # 38,800 / 39,900 / 87,600; keep the authoritative value here only.
    small_claims_max_amount_nis: float = 39_900
    court_fee_percent: float = 0.01
    court_fee_min_nis: float = 50

    claim_categories: list[str] = [
        "consumer",
        "landlord",
        "employer",
        "neighbor",
        "contract",
        "other",
    ]
    valid_plaintiff_types: list[str] = ["individual", "sole_proprietor"]
    blocked_plaintiff_types: list[str] = ["company", "ngo", "partnership"]

    statute_of_limitations_years: int = 7
    statute_warning_days: int = 180

    # Strength point thresholds for the flat claim scorer
    strong_strength_points: int = 6
    medium_strength_points: int = 2
    # Average-percentage thresholds for the graph scorer
    strong_graph_average: float = 70
    medium_graph_average: float = 40

    database_url: str = ""
    log_level: str = "INFO"

    model_config = {"env_file": ".env"}


settings = Settings()
