"""
Business Date Service.

Adds business days and business hours to an anchor instant on the
regional work calendar, skipping weekends, holidays and lunch.
"""

from datetime import datetime, timedelta
from typing import Optional

from business_dates.config import settings
from business_dates.core.exceptions import (
    CalculationError,
    CalculationErrorKind,
    InvalidParametersError,
)
from business_dates.core.models import (
    CalculationFailure,
    CalculationRequest,
    CalculationResult,
    CalculationSuccess,
    HolidaySet,
)
from business_dates.core.schedule import ScheduleCalendar
from business_dates.core.timezone import TimeZoneConverter, now_utc, parse_iso_utc
from business_dates.infrastructure.logging import get_logger, log_duration
from business_dates.infrastructure.metrics import get_metrics
from business_dates.services.holiday_cache import HolidayCache


logger = get_logger(__name__)


# Upper bound on the backward walk over weekends and holidays
MAX_LOOKBACK_DAYS = 366

# A candidate moved to the previous evening is re-normalized at most this often
MAX_NORMALIZATION_STEPS = 8


def build_calendar() -> ScheduleCalendar:
    """Schedule calendar from application settings."""
    return ScheduleCalendar(
        settings.work_schedule.to_schedule(),
        TimeZoneConverter(
            offset_hours=settings.timezone.utc_offset_hours,
            name=settings.timezone.name,
        ),
    )


class BusinessDateService:
    """
    Business date engine.

    Responsible for:
    - Normalizing the anchor onto the work calendar
    - Adding whole business days
    - Adding business hours, excluding lunch
    - Reporting every failure as a result value
    """

    def __init__(
        self,
        holiday_cache: Optional[HolidayCache] = None,
        calendar: Optional[ScheduleCalendar] = None,
    ) -> None:
        self._holiday_cache = holiday_cache or HolidayCache()
        self._calendar = calendar or build_calendar()
        self._converter = self._calendar.converter

    @property
    def calendar(self) -> ScheduleCalendar:
        return self._calendar

    # ------------------------------------------------------------------
    # Boundary
    # ------------------------------------------------------------------

    @log_duration("calculate_business_date")
    def calculate(self, request: CalculationRequest) -> CalculationResult:
        """
        Compute the instant reached after adding business days and hours.

        Days are applied before hours. The holiday set is read once.

        Args:
            request: Anchor and deltas.

        Returns:
            CalculationSuccess, or CalculationFailure describing the error.
        """
        try:
            self._validate(request)
        except InvalidParametersError as e:
            return self._failure(CalculationErrorKind.INVALID_PARAMETERS, e.message, e.details)

        holiday_result = self._holiday_cache.get_holidays()
        if not holiday_result.success:
            error = holiday_result.error
            return self._failure(
                CalculationErrorKind.HOLIDAY_SERVICE_ERROR,
                f"Failed to fetch holidays: {error.message}",
                error.details,
            )

        try:
            anchor = parse_iso_utc(request.anchor) if request.anchor is not None else now_utc()
            result = self.compute(anchor, request.days, request.hours, holiday_result.holidays)
        except Exception as e:
            return self._failure(
                CalculationErrorKind.CALCULATION_ERROR,
                f"Calculation failed: {e}",
                {"anchor": str(request.anchor)},
                error=e,
            )

        get_metrics().calculations_total.inc(outcome="success")
        return CalculationSuccess(
            result_instant=result,
            original_anchor=anchor,
            added_days=request.days,
            added_hours=request.hours,
        )

    @staticmethod
    def _validate(request: CalculationRequest) -> None:
        if request.days_to_add is None and request.hours_to_add is None:
            raise InvalidParametersError(
                "days,hours", "at least one of days or hours must be provided"
            )
        for field, value in (("days", request.days_to_add), ("hours", request.hours_to_add)):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParametersError(field, "must be an integer")
            if value < 0:
                raise InvalidParametersError(field, "must be zero or positive")

    @staticmethod
    def _failure(
        kind: CalculationErrorKind,
        message: str,
        details: Optional[dict] = None,
        error: Optional[Exception] = None,
    ) -> CalculationFailure:
        get_metrics().calculations_total.inc(outcome=kind.value)
        if error is None:
            logger.warning(
                f"Business date calculation rejected: {message}",
                extra={"extra_fields": {"error_kind": kind.value}}
            )
        else:
            logger.error(
                f"Business date calculation failed: {message}",
                exc_info=error,
                extra={"extra_fields": {
                    "error_kind": kind.value,
                    "error_type": type(error).__name__,
                }}
            )
        return CalculationFailure(error_kind=kind, message=message, details=details or {})

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def compute(
        self,
        anchor: datetime,
        days: int,
        hours: int,
        holidays: HolidaySet,
    ) -> datetime:
        """
        Pure arithmetic on a UTC anchor with a fixed holiday set.

        Returns:
            Resulting UTC instant.
        """
        local = self.normalize(self._converter.to_local(anchor), holidays)
        if days > 0:
            local = self.add_days(local, days, holidays)
        if hours > 0:
            local = self.add_hours(local, hours, holidays)
        return self._converter.to_utc(local)

    def _is_holiday(self, local: datetime, holidays: HolidaySet) -> bool:
        return self._calendar.local_date_key(local) in holidays

    def normalize(self, local: datetime, holidays: HolidaySet) -> datetime:
        """
        Move a local instant back onto the work calendar.

        - Weekend or holiday: ``work_end`` of the closest earlier working day.
        - Before ``work_start``: previous evening, normalized again.
        - After ``work_end``: today's ``work_end``.
        - During lunch: today's ``lunch_start``.
        - Otherwise unchanged.
        """
        to_local = self._converter.to_local
        candidate = local

        for _ in range(MAX_NORMALIZATION_STEPS):
            info = self._calendar.day_info(candidate, self._is_holiday(candidate, holidays))

            if info.is_weekend or info.is_holiday:
                return self._previous_working_day_end(candidate, holidays)

            if candidate < info.work_start:
                previous_day = candidate - timedelta(days=1)
                candidate = self._calendar.at_hour(previous_day, self._calendar.schedule.end_hour)
                continue

            if candidate > info.work_end:
                return to_local(info.work_end)

            if self._calendar.is_in_lunch(candidate):
                return to_local(info.lunch_start)

            return candidate

        raise CalculationError(
            f"Could not normalize {local.isoformat()} within {MAX_NORMALIZATION_STEPS} steps"
        )

    def _previous_working_day_end(self, local: datetime, holidays: HolidaySet) -> datetime:
        day = local
        for _ in range(MAX_LOOKBACK_DAYS):
            day = day - timedelta(days=1)
            if self._calendar.is_working_weekday(day) and not self._is_holiday(day, holidays):
                return self._calendar.at_hour(day, self._calendar.schedule.end_hour)

        raise CalculationError(
            f"No working day found within {MAX_LOOKBACK_DAYS} days before {local.date().isoformat()}"
        )

    def add_days(self, local: datetime, days: int, holidays: HolidaySet) -> datetime:
        """
        Advance by whole business days, keeping the time of day.

        Holidays are stepped over without being counted.
        """
        current = local
        days_added = 0
        while days_added < days:
            current = self._calendar.next_working_weekday(current)
            if not self._is_holiday(current, holidays):
                days_added += 1
        return current

    def add_hours(self, local: datetime, hours: int, holidays: HolidaySet) -> datetime:
        """
        Advance by business hours inside the work windows.

        Lunch time is never counted; the remainder carries over to the
        afternoon or to the next working day.
        """
        to_local = self._converter.to_local
        current = local
        remaining = timedelta(hours=hours)

        while remaining > timedelta(0):
            info = self._calendar.day_info(current, self._is_holiday(current, holidays))
            if not info.is_working_day:
                current = self._calendar.next_work_start(current)
                continue

            work_start = to_local(info.work_start)
            lunch_start = to_local(info.lunch_start)
            lunch_end = to_local(info.lunch_end)
            work_end = to_local(info.work_end)

            if current < work_start:
                current = work_start

            if current < lunch_start:
                segment_end = lunch_start
            elif current < lunch_end:
                current = lunch_end
                segment_end = work_end
            else:
                segment_end = work_end

            available = max(segment_end - current, timedelta(0))
            if available >= remaining:
                current = current + remaining
                remaining = timedelta(0)
                continue

            remaining -= available
            if segment_end == lunch_start:
                current = lunch_end
            else:
                current = self._calendar.next_work_start(current)

        return current
