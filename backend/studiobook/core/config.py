# backend/studiobook/core/config.py
import logging
import os
from datetime import time
from pathlib import Path
from typing import Annotated, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .constants import BRAND_NAME, MAX_SLOT_INTERVAL, MIN_SLOT_INTERVAL

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


if os.getenv("CI"):
    _DEFAULT_SECRET_KEY: SecretStr | object = SecretStr("ci-test-secret-key-not-for-production")
else:
    _DEFAULT_SECRET_KEY = ...


def _parse_clock(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


class Settings(BaseSettings):
    environment: str = "development"
    is_testing: bool = False

    # Database
    database_url: str = Field(
        default="sqlite:///./studiobook.db",
        description="SQLAlchemy URL for the booking ledger",
    )
    database_echo: bool = False

    # Identity
    secret_key: SecretStr = Field(
        default=_DEFAULT_SECRET_KEY,
        description="Secret key for JWT tokens",
    )  # type: ignore[assignment]
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 hours

    # Shared secret for the scheduled reminder trigger
    cron_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer secret accepted by /cron/reminders (empty disables the endpoint)",
    )

    # Business calendar
    business_timezone: str = Field(default="Africa/Lagos", description="pytz zone name")
    business_open_time: str = Field(default="09:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    business_close_time: str = Field(default="17:00", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    slot_interval_minutes: int = Field(
        default=60,
        ge=MIN_SLOT_INTERVAL,
        le=MAX_SLOT_INTERVAL,
        description="Fixed granularity of the candidate slot grid",
    )
    closed_weekdays: Annotated[list[int], NoDecode] = Field(
        default_factory=list,
        description="Comma-separated weekday numbers (0=Monday) the studio is closed",
    )
    auto_confirm_bookings: bool = Field(
        default=False,
        description="Create bookings directly in 'confirmed' instead of 'pending'",
    )

    # Reminders
    reminder_kind: str = "day_before"
    reminder_schedule_hour: int = Field(default=9, ge=0, le=23)
    reminder_schedule_minute: int = Field(default=0, ge=0, le=59)

    # Email
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        description="Outbound email transport",
    )
    resend_api_key: Optional[str] = None
    from_email: str = "Modern Beauty Studio <bookings@modernbeautystudio.ng>"
    brand_name: str = BRAND_NAME

    # Celery broker
    redis_url: str = "redis://localhost:6379"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("closed_weekdays", mode="before")
    @classmethod
    def _parse_closed_weekdays(cls, value: object) -> list[int]:
        if value is None:
            return []
        if isinstance(value, int):
            return [value]
        if isinstance(value, str):
            tokens = value.strip().strip("[]").split(",")
            return [int(token.strip()) for token in tokens if token.strip()]
        if isinstance(value, (list, tuple, set)):
            return [int(token) for token in value]
        raise ValueError("closed_weekdays must be a comma-separated string or list")

    @field_validator("closed_weekdays")
    @classmethod
    def _check_weekday_range(cls, value: list[int]) -> list[int]:
        for day in value:
            if day < 0 or day > 6:
                raise ValueError(f"closed_weekdays entries must be within 0..6, got {day}")
        return sorted(set(value))

    @field_validator("business_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        import pytz

        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def _check_business_hours(self) -> "Settings":
        if self.open_time >= self.close_time:
            raise ValueError("business_open_time must be before business_close_time")
        return self

    @property
    def open_time(self) -> time:
        return _parse_clock(self.business_open_time)

    @property
    def close_time(self) -> time:
        return _parse_clock(self.business_close_time)

    def get_database_url(self) -> str:
        return self.database_url


settings = Settings()
