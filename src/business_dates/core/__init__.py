"""Core package - Pure calendar logic and domain models with no I/O."""

from business_dates.core.exceptions import (
    BusinessDatesError,
    BusinessError,
    CalculationError,
    CalculationErrorKind,
    ConfigurationError,
    HolidayErrorKind,
    HolidayNetworkError,
    HolidayParseError,
    HolidayServiceError,
    HolidayTimeoutError,
    HolidayUnknownError,
    InfrastructureError,
    InvalidParametersError,
)
from business_dates.core.models import (
    CacheInfo,
    CalculationFailure,
    CalculationRequest,
    CalculationResult,
    CalculationSuccess,
    HolidayCacheEntry,
    HolidayResult,
    HolidaySet,
)
from business_dates.core.schedule import (
    BusinessDayInfo,
    ScheduleCalendar,
    WorkSchedule,
)
from business_dates.core.timezone import (
    TimeZoneConverter,
    now_utc,
    parse_iso_utc,
    to_iso_utc,
)

__all__ = [
    # Calendar
    "BusinessDayInfo",
    "ScheduleCalendar",
    "WorkSchedule",
    "TimeZoneConverter",
    "now_utc",
    "parse_iso_utc",
    "to_iso_utc",
    # Models
    "CacheInfo",
    "CalculationFailure",
    "CalculationRequest",
    "CalculationResult",
    "CalculationSuccess",
    "HolidayCacheEntry",
    "HolidayResult",
    "HolidaySet",
    # Exceptions
    "BusinessDatesError",
    "BusinessError",
    "CalculationError",
    "CalculationErrorKind",
    "ConfigurationError",
    "HolidayErrorKind",
    "HolidayNetworkError",
    "HolidayParseError",
    "HolidayServiceError",
    "HolidayTimeoutError",
    "HolidayUnknownError",
    "InfrastructureError",
    "InvalidParametersError",
]
