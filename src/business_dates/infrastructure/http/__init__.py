"""
HTTP Client Package.

External service clients:
- Holiday source API
"""

from business_dates.infrastructure.http.holiday_client import (
    HolidayApiClient,
    parse_holiday_payload,
)


__all__ = [
    "HolidayApiClient",
    "parse_holiday_payload",
]
