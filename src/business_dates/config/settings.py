"""
Application configuration.

Centralizes environment variables, constants, and settings
using dataclasses for type safety and immutability.
"""

import os
from dataclasses import dataclass, field

from business_dates.core.exceptions import ConfigurationError
from business_dates.core.schedule import WorkSchedule


DEFAULT_HOLIDAY_API_URL = "https://content.capta.co/Recruitment/WorkingDays.json"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(name, f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    """Read a numeric environment variable."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(name, f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class WorkScheduleSettings:
    """Daily work window, in local hours."""

    start_hour: int = field(default_factory=lambda: _env_int("WORK_START_HOUR", 8))
    end_hour: int = field(default_factory=lambda: _env_int("WORK_END_HOUR", 17))
    lunch_start_hour: int = field(default_factory=lambda: _env_int("LUNCH_START_HOUR", 12))
    lunch_end_hour: int = field(default_factory=lambda: _env_int("LUNCH_END_HOUR", 13))

    def __post_init__(self) -> None:
        # Fail at startup rather than on the first request
        self.to_schedule()

    def to_schedule(self) -> WorkSchedule:
        """Build the immutable work schedule."""
        try:
            return WorkSchedule(
                start_hour=self.start_hour,
                end_hour=self.end_hour,
                lunch_start_hour=self.lunch_start_hour,
                lunch_end_hour=self.lunch_end_hour,
            )
        except ValueError as e:
            raise ConfigurationError("work_schedule", f"Invalid work schedule: {e}") from e


@dataclass(frozen=True)
class TimezoneSettings:
    """Regional time zone (fixed offset, no daylight saving)."""

    name: str = field(
        default_factory=lambda: os.environ.get("TIMEZONE", "America/Bogota")
    )
    utc_offset_hours: float = field(
        default_factory=lambda: _env_float("UTC_OFFSET_HOURS", -5)
    )

    def __post_init__(self) -> None:
        if not -14 <= self.utc_offset_hours <= 14:
            raise ConfigurationError(
                "UTC_OFFSET_HOURS",
                f"UTC_OFFSET_HOURS must be between -14 and 14, got {self.utc_offset_hours}",
            )


@dataclass(frozen=True)
class HolidayApiSettings:
    """Holiday source and cache settings."""

    url: str = field(
        default_factory=lambda: os.environ.get("HOLIDAY_API_URL", DEFAULT_HOLIDAY_API_URL).strip()
    )
    timeout_seconds: float = field(
        default_factory=lambda: _env_float("HOLIDAY_API_TIMEOUT_SECONDS", 10)
    )
    cache_ttl_minutes: int = field(
        default_factory=lambda: _env_int("CACHE_TTL_MINUTES", 60)
    )
    user_agent: str = "BusinessDates-API/1.0.0"

    def __post_init__(self) -> None:
        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError(
                "HOLIDAY_API_URL", f"HOLIDAY_API_URL must be an http(s) URL, got {self.url!r}"
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                "HOLIDAY_API_TIMEOUT_SECONDS", "HOLIDAY_API_TIMEOUT_SECONDS must be positive"
            )
        if self.cache_ttl_minutes <= 0:
            raise ConfigurationError(
                "CACHE_TTL_MINUTES", "CACHE_TTL_MINUTES must be a positive integer"
            )


@dataclass(frozen=True)
class Settings:
    """Main application settings."""

    work_schedule: WorkScheduleSettings = field(default_factory=WorkScheduleSettings)
    timezone: TimezoneSettings = field(default_factory=TimezoneSettings)
    holiday_api: HolidayApiSettings = field(default_factory=HolidayApiSettings)
    environment: str = field(
        default_factory=lambda: os.environ.get("ENVIRONMENT", "development")
    )
    port: int = field(default_factory=lambda: _env_int("PORT", 8080))
    debug: bool = field(default_factory=lambda: os.environ.get("DEBUG", "false").lower() == "true")


# Singleton settings instance
settings = Settings()
