from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from SPLITTER_* environment variables or .env"""
    model_config = SettingsConfigDict(env_prefix="SPLITTER_", env_file=".env", extra="ignore")

    app_name: str = "Expense Splitter"
    # Balances with an absolute value at or below this are treated as settled
    settlement_tolerance: Decimal = Decimal("1e-9")
    # Quantum used when amounts are rendered by the HTTP layer
    display_precision: Decimal = Decimal("0.01")
    allow_unlisted_payers: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
