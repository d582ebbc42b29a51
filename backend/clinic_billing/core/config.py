from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "clinic-billing"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/clinic_billing.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:9002"

    # Currencies: rates are quoted as SECONDARY units per one PRIMARY unit
    PRIMARY_CURRENCY: str = "USD"
    SECONDARY_CURRENCY: str = "UYU"

    # Money comparisons absorb differences up to this amount
    SETTLEMENT_EPSILON: Decimal = Decimal("0.01")
    # Storage scale of Numeric(12, 4) money columns
    MONEY_QUANTUM: Decimal = Decimal("0.0001")

    # Cash session service
    CASH_SESSION_API_URL: str = ""  # e.g. https://cashier.internal/webhook
    CASH_SESSION_API_TIMEOUT: float = 10.0

    @property
    def cash_session_api_enabled(self) -> bool:
        return bool(self.CASH_SESSION_API_URL)


settings = Settings()
