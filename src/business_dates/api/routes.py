"""
Flask API Routes.

Defines all HTTP endpoints for the business dates service.
"""

import time
from typing import Any, Dict, Tuple, Union

from flask import Blueprint, current_app, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from business_dates import __version__
from business_dates.api.validation import BusinessDateQuery, HolidaysQuery
from business_dates.config import settings
from business_dates.core.exceptions import (
    BusinessError,
    CalculationError,
    CalculationErrorKind,
    HolidayErrorKind,
    HolidayServiceError,
    InfrastructureError,
    InvalidParametersError,
)
from business_dates.core.models import CalculationFailure
from business_dates.core.timezone import now_utc, to_iso_utc
from business_dates.infrastructure.logging import get_logger
from business_dates.infrastructure.metrics import metrics_endpoint
from business_dates.services import BusinessDateService, HolidayCache


logger = get_logger(__name__)


api_bp = Blueprint("api", __name__)


_started_at = time.time()


def _error_response(
    error: str,
    message: str,
    status_code: int,
) -> Tuple[Dict[str, Any], int]:
    """Create standardized error response."""
    return {
        "success": False,
        "error": error,
        "message": message,
    }, status_code


def _success_response(
    data: Dict[str, Any],
    status_code: int = 200,
) -> Tuple[Dict[str, Any], int]:
    """Create standardized success response."""
    return {
        "success": True,
        **data,
    }, status_code


def _validation_message(error: PydanticValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    # Report the raised ValueError text without the "Value error, " prefix
    if first.get("type") == "value_error" and "error" in first.get("ctx", {}):
        message = str(first["ctx"]["error"])
    else:
        message = str(first["msg"])
    return f"Invalid parameter '{location}': {message}" if location else message


def _holiday_status_code(kind: Union[HolidayErrorKind, str, None]) -> int:
    """Timeouts map to 504, every other holiday failure to 503."""
    if kind in (HolidayErrorKind.TIMEOUT_ERROR, HolidayErrorKind.TIMEOUT_ERROR.value):
        return 504
    return 503


def _failure_status_code(failure: CalculationFailure) -> int:
    if failure.error_kind == CalculationErrorKind.INVALID_PARAMETERS:
        return 400
    if failure.error_kind == CalculationErrorKind.HOLIDAY_SERVICE_ERROR:
        return _holiday_status_code(failure.details.get("kind"))
    return 500


def get_holiday_cache() -> HolidayCache:
    """The application's single holiday cache."""
    return current_app.extensions["business_dates"]["holiday_cache"]


def get_business_date_service() -> BusinessDateService:
    return current_app.extensions["business_dates"]["business_date_service"]


# ============================================================================
# Health Check
# ============================================================================

@api_bp.route("/health", methods=["GET"])
def health_check() -> Tuple[Dict[str, Any], int]:
    """
    Health check endpoint.

    Returns:
        Health status response.
    """
    return _success_response({
        "status": "healthy",
        "service": "business-dates",
        "version": __version__,
        "environment": settings.environment,
        "timestamp": to_iso_utc(now_utc()),
        "uptime_seconds": int(time.time() - _started_at),
    })


@api_bp.route("/", methods=["GET"])
def root() -> Tuple[Dict[str, Any], int]:
    """
    Root endpoint - same payload as /health.
    """
    return health_check()


@api_bp.route("/metrics", methods=["GET"])
def metrics():
    """
    Prometheus metrics endpoint.
    """
    return metrics_endpoint()


# ============================================================================
# Business Date Calculation
# ============================================================================

@api_bp.route("/business-date", methods=["GET"])
def business_date() -> Tuple[Dict[str, Any], int]:
    """
    Add business days and/or hours to a date.

    Query Parameters:
        days (int, optional): Business days to add.
        hours (int, optional): Business hours to add.
        date (str, optional): UTC anchor ending in Z. Defaults to now.

    Returns:
        The resulting instant as ISO-8601 UTC.
    """
    try:
        query = BusinessDateQuery(**request.args.to_dict())
    except PydanticValidationError as e:
        return _error_response(
            CalculationErrorKind.INVALID_PARAMETERS.value,
            _validation_message(e),
            400,
        )

    logger.info(
        "Calculating business date",
        extra={"extra_fields": {
            "days": query.days,
            "hours": query.hours,
            "date": query.date,
        }}
    )

    result = get_business_date_service().calculate(query.to_request())

    if not result.success:
        return _error_response(
            result.error_kind.value,
            result.message,
            _failure_status_code(result),
        )

    response_date = to_iso_utc(result.result_instant)
    logger.info(
        f"Business date calculated: {response_date}",
        extra={"extra_fields": {"date": response_date}}
    )

    return _success_response({
        "date": response_date,
        "original_date": to_iso_utc(result.original_anchor),
        "added_days": result.added_days,
        "added_hours": result.added_hours,
    })


# ============================================================================
# Holidays
# ============================================================================

@api_bp.route("/holidays", methods=["GET"])
def list_holidays() -> Tuple[Dict[str, Any], int]:
    """
    List the current holiday set.

    Query Parameters:
        year (int, optional): Restrict to one calendar year.
    """
    try:
        query = HolidaysQuery(**request.args.to_dict())
    except PydanticValidationError as e:
        return _error_response(
            CalculationErrorKind.INVALID_PARAMETERS.value,
            _validation_message(e),
            400,
        )

    cache = get_holiday_cache()
    if query.year is not None:
        holidays = cache.holidays_for_year(query.year)
    else:
        result = cache.get_holidays()
        if not result.success:
            raise result.error
        holidays = sorted(result.holidays)

    return _success_response({
        "year": query.year,
        "count": len(holidays),
        "holidays": holidays,
    })


@api_bp.route("/holidays/cache", methods=["GET"])
def holiday_cache_info() -> Tuple[Dict[str, Any], int]:
    """
    Holiday cache diagnostics.
    """
    return _success_response(get_holiday_cache().get_cache_info().to_dict())


@api_bp.route("/holidays/cache/clear", methods=["POST"])
def clear_holiday_cache() -> Tuple[Dict[str, Any], int]:
    """
    Administrative reset: the next calculation refetches the holidays.
    """
    cache = get_holiday_cache()
    cache.clear_cache()
    return _success_response({
        "message": "Holiday cache cleared",
        **cache.get_cache_info().to_dict(),
    })


# ============================================================================
# Error Handlers
# ============================================================================

@api_bp.errorhandler(InvalidParametersError)
def handle_invalid_parameters(
    error: InvalidParametersError,
) -> Tuple[Dict[str, Any], int]:
    """Handle rejected input (400)."""
    logger.warning(
        f"Invalid parameters: {error}",
        extra={"extra_fields": {"field": error.field}}
    )
    return _error_response(
        CalculationErrorKind.INVALID_PARAMETERS.value,
        error.message,
        400,
    )


@api_bp.errorhandler(CalculationError)
def handle_calculation_error(
    error: CalculationError,
) -> Tuple[Dict[str, Any], int]:
    """Handle arithmetic that could not complete (500)."""
    logger.error(
        f"Calculation error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(
        CalculationErrorKind.CALCULATION_ERROR.value,
        error.message,
        500,
    )


@api_bp.errorhandler(BusinessError)
def handle_business_error(error: BusinessError) -> Tuple[Dict[str, Any], int]:
    """Handle other business logic errors (4xx)."""
    logger.warning(
        f"Business error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(type(error).__name__, error.message, 400)


@api_bp.errorhandler(HolidayServiceError)
def handle_holiday_service_error(
    error: HolidayServiceError,
) -> Tuple[Dict[str, Any], int]:
    """Handle holiday source failures (503, 504 on timeout)."""
    logger.error(
        f"Holiday service error: {error}",
        extra={"extra_fields": {
            "error_type": type(error).__name__,
            "kind": error.kind.value,
            "status_code": error.status_code,
        }}
    )
    return _error_response(
        CalculationErrorKind.HOLIDAY_SERVICE_ERROR.value,
        f"Failed to fetch holidays: {error.message}",
        _holiday_status_code(error.kind),
    )


@api_bp.errorhandler(InfrastructureError)
def handle_infrastructure_error(
    error: InfrastructureError,
) -> Tuple[Dict[str, Any], int]:
    """Handle other infrastructure errors (5xx)."""
    logger.error(
        f"Infrastructure error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(type(error).__name__, error.message, 503)


@api_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    """Handle unexpected errors (500)."""
    if isinstance(error, HTTPException):
        return error
    logger.exception(
        f"Unexpected error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response(
        "internal_error",
        "An unexpected error occurred",
        500,
    )
