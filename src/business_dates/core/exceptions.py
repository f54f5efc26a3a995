"""
Custom exceptions for the business dates service.

Provides a hierarchy of business and infrastructure exceptions
for proper error handling and HTTP status code mapping.
"""

from enum import Enum
from typing import Optional


class CalculationErrorKind(str, Enum):
    """Failure kinds reported by the business date engine."""
    INVALID_PARAMETERS = "InvalidParameters"
    HOLIDAY_SERVICE_ERROR = "HolidayServiceError"
    CALCULATION_ERROR = "CalculationError"


class HolidayErrorKind(str, Enum):
    """Failure kinds of a holiday source fetch."""
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class BusinessDatesError(Exception):
    """Base exception for all business dates errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# =============================================================================
# Business Errors (4xx)
# =============================================================================

class BusinessError(BusinessDatesError):
    """Base exception for business logic errors (typically 4xx)."""
    pass


class InvalidParametersError(BusinessError):
    """Raised when a calculation request violates its preconditions."""

    def __init__(self, field: str, message: str):
        super().__init__(
            f"Invalid parameter '{field}': {message}",
            {"field": field}
        )
        self.field = field


class CalculationError(BusinessError):
    """Raised when the date arithmetic cannot complete. Served as a 500."""
    pass


# =============================================================================
# Infrastructure Errors (5xx)
# =============================================================================

class InfrastructureError(BusinessDatesError):
    """Base exception for infrastructure errors (typically 5xx)."""
    pass


class ConfigurationError(InfrastructureError):
    """Raised when a configuration value is missing or invalid."""

    def __init__(self, config_name: str, message: Optional[str] = None):
        msg = message or f"Configuration missing: {config_name}"
        super().__init__(msg, {"config_name": config_name})
        self.config_name = config_name


class HolidayServiceError(InfrastructureError):
    """Raised when the holiday source cannot provide a holiday list."""

    kind: HolidayErrorKind = HolidayErrorKind.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(
            message,
            {
                "kind": self.kind.value,
                "status_code": status_code,
                "url": url,
            }
        )
        self.status_code = status_code
        self.url = url


class HolidayTimeoutError(HolidayServiceError):
    """The holiday fetch exceeded its deadline."""
    kind = HolidayErrorKind.TIMEOUT_ERROR


class HolidayNetworkError(HolidayServiceError):
    """Transport failure or non-2xx HTTP status from the holiday source."""
    kind = HolidayErrorKind.NETWORK_ERROR


class HolidayParseError(HolidayServiceError):
    """The holiday source answered with a malformed payload."""
    kind = HolidayErrorKind.PARSE_ERROR


class HolidayUnknownError(HolidayServiceError):
    """Any other failure while fetching holidays."""
    kind = HolidayErrorKind.UNKNOWN_ERROR
