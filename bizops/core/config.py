
from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables / .env file."""

    app_name: str = "BizOps API"
    app_env: str = "development"
    app_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    # Base URL of the public offer pages (used in share links)
    public_base_url: str = Field(default="http://localhost:3000", alias="PUBLIC_BASE_URL")

    # Dashboard auth. When unset the dashboard API is open (local dev).
    api_token: str | None = Field(default=None, alias="API_TOKEN")

    # Database (Postgres via asyncpg or SQLite for local dev)
    database_url: str = Field(
        default="sqlite+aiosqlite:///./bizops_dev.db",
        alias="DATABASE_URL",
    )
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Short-lived lookup cache for form widgets
    cache_ttl_seconds: int = Field(default=30, alias="CACHE_TTL_SECONDS")

    # Idempotency-Key replay window for POST creates
    idempotency_window_hours: int = Field(default=24, alias="IDEMPOTENCY_WINDOW_HOURS")

    audit_enabled: bool = Field(default=True, alias="AUDIT_ENABLED")

    # Offers
    default_currency: str = Field(default="EUR", alias="DEFAULT_CURRENCY")
    custom_development_default_price: Decimal = Field(
        default=Decimal("10000"), alias="CUSTOM_DEVELOPMENT_DEFAULT_PRICE",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def auth_enabled(self) -> bool:
        """Dashboard routes require a bearer token only when one is configured."""
        return bool(self.api_token)

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

settings = Settings()
