# backend/salonbook/core/config.py
import logging
import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development", description="Deployment environment"
    )

    database_url: str = Field(
        default="sqlite:///./salonbook.db",
        description="SQLAlchemy database URL (PostgreSQL in production)",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    business_timezone: str = Field(
        default="UTC",
        description="Timezone used to derive weekday/date of a booking",
    )
    cancellation_cutoff_hours: int = Field(
        default=24,
        ge=0,
        description="Minimum hours before start a customer may still cancel",
    )
    slot_interval_minutes: int = Field(
        default=15, ge=1, le=240, description="Grid for generated availability slots"
    )
    default_page_size: int = Field(default=20, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1, le=500)

    log_level: str = Field(default="INFO", description="Root log level")

    # Use ConfigDict instead of Config class (Pydantic V2 style)
    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("business_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = (value or "INFO").strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            logger.warning("Invalid LOG_LEVEL=%s; defaulting to INFO", value)
            return "INFO"
        return normalized

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
