"""Configuration management for the back-office service."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Order Store Configuration
    order_store_backend: Literal["http", "memory"] = Field(
        default="http", description="Where orders are read from and written to"
    )
    order_api_base_url: str = Field(
        default="http://localhost:3000", description="Base URL of the Order Store API"
    )
    order_api_timeout: float = Field(
        default=10.0, description="Order Store request timeout in seconds"
    )
    seed_file: str | None = Field(
        default=None, description="JSON file used to seed the in-memory store"
    )

    # API Configuration
    api_port: int = Field(default=8000, description="API server port")
    api_host: str = Field(default="0.0.0.0", description="API server host")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Locale
    timezone: str = Field(
        default="Africa/Tunis", description="Timezone for month boundaries and dates"
    )
    currency: str = Field(default="TND", description="Currency suffix for amounts")

    # Aggregation Settings
    bulk_fetch_limit: int = Field(
        default=1000, description="Orders fetched for dashboard and customer views"
    )
    page_size: int = Field(default=12, description="Orders per page in the order list")
    dashboard_list_size: int = Field(
        default=5, description="Recent orders and top customers on the dashboard"
    )
    vip_threshold: Decimal = Field(
        default=Decimal("1000"), description="Total spent above which a customer is VIP"
    )
    inactive_after_days: int = Field(
        default=90, description="Days without an order before a customer is inactive"
    )
    normalize_customer_emails: bool = Field(
        default=True, description="Trim and lower-case emails before grouping customers"
    )

    # Lifecycle Settings
    default_actor: str = Field(
        default="admin", description="Actor recorded when no X-Admin-Actor header is sent"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate the timezone name is known."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        """Local timezone used for calendar computations."""
        return ZoneInfo(self.timezone)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
