from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./currency.db"
    SEED_CURRENCIES: bool = True

    # External quote provider
    RATES_API_URL: str = "https://fxds-public-exchange-rates-api.oanda.com/cc-api/currencies"
    RATES_API_TIMEOUT: float = 10.0  # seconds, per request
    RATES_CLIENT: Literal["oanda", "static"] = "oanda"

    # Synchronization
    SYNC_BASE_CURRENCIES: list[str] = ["EUR", "USD", "JPY"]
    SYNC_QUOTE_CURRENCIES: list[str] = ["USD", "EUR", "JPY", "GBP"]
    SYNC_ENABLED: bool = True
    SYNC_INTERVAL_SECONDS: int = 60 * 60 * 24  # once a day

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_HTTP_BODIES: bool = True

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
