"""Configuration package."""

from business_dates.config.settings import (
    HolidayApiSettings,
    Settings,
    TimezoneSettings,
    WorkScheduleSettings,
    settings,
)

__all__ = [
    "HolidayApiSettings",
    "Settings",
    "TimezoneSettings",
    "WorkScheduleSettings",
    "settings",
]
