from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Cooperative backend
    coop_api_base_url: str = "http://127.0.0.1:8000/api"
    payment_setup_path: str = "/properties/{property_id}/payment-setup"
    http_timeout_seconds: float = 15.0

    # Reconciliation
    # Max gap between backend total_paid and the reconstructed sum before flagging
    totals_tolerance: Decimal = Decimal("0.01")

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
