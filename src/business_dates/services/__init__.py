"""
Services Layer.

Business logic orchestration:
- Holiday caching
- Business date calculation
"""

from business_dates.services.business_date import BusinessDateService, build_calendar
from business_dates.services.holiday_cache import HolidayCache


__all__ = [
    "BusinessDateService",
    "HolidayCache",
    "build_calendar",
]
