"""
Work schedule calendar.

Classifies local instants against the weekly work pattern
(Monday to Friday, a daily work window with a lunch break) and
computes the boundaries of a local calendar day.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from business_dates.core.timezone import TimeZoneConverter


# Monday=0 ... Friday=4
WORKING_WEEKDAYS = frozenset(range(5))


@dataclass(frozen=True)
class WorkSchedule:
    """Daily work window and lunch break, as whole local hours."""

    start_hour: int = 8
    end_hour: int = 17
    lunch_start_hour: int = 12
    lunch_end_hour: int = 13

    def __post_init__(self) -> None:
        for name in ("start_hour", "end_hour", "lunch_start_hour", "lunch_end_hour"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 23:
                raise ValueError(f"{name} must be an integer between 0 and 23, got {value!r}")
        if self.start_hour >= self.end_hour:
            raise ValueError("start_hour must be earlier than end_hour")
        if self.lunch_start_hour >= self.lunch_end_hour:
            raise ValueError("lunch_start_hour must be earlier than lunch_end_hour")
        if not (self.start_hour <= self.lunch_start_hour and self.lunch_end_hour <= self.end_hour):
            raise ValueError("lunch break must fall inside the work window")
        if self.working_minutes_per_day <= 0:
            raise ValueError("work window must leave working time outside lunch")

    @property
    def working_minutes_per_day(self) -> int:
        work = self.end_hour - self.start_hour
        lunch = self.lunch_end_hour - self.lunch_start_hour
        return (work - lunch) * 60


@dataclass(frozen=True)
class BusinessDayInfo:
    """Classification and UTC boundaries of one local calendar day."""
    is_working_day: bool
    is_holiday: bool
    is_weekend: bool
    work_start: datetime
    work_end: datetime
    lunch_start: datetime
    lunch_end: datetime


class ScheduleCalendar:
    """
    Work calendar for a single fixed region.

    Every method expects a local instant, as produced by
    ``TimeZoneConverter.to_local``.
    """

    def __init__(
        self,
        schedule: WorkSchedule,
        converter: TimeZoneConverter,
    ) -> None:
        self._schedule = schedule
        self._converter = converter

    @property
    def schedule(self) -> WorkSchedule:
        return self._schedule

    @property
    def converter(self) -> TimeZoneConverter:
        return self._converter

    @staticmethod
    def local_date_key(local: Union[datetime, date]) -> str:
        """Holiday lookup key (``YYYY-MM-DD``) of a local day."""
        if isinstance(local, datetime):
            local = local.date()
        return local.isoformat()

    def at_hour(self, local: datetime, hour: int) -> datetime:
        """Same local calendar day at a whole hour."""
        return datetime.combine(local.date(), time(hour=hour), tzinfo=self._converter.tz)

    def is_working_weekday(self, local: Union[datetime, date]) -> bool:
        return local.weekday() in WORKING_WEEKDAYS

    def is_in_lunch(self, local: datetime) -> bool:
        return (
            self.at_hour(local, self._schedule.lunch_start_hour)
            <= local
            < self.at_hour(local, self._schedule.lunch_end_hour)
        )

    def is_in_work_window(self, local: datetime) -> bool:
        in_window = (
            self.at_hour(local, self._schedule.start_hour)
            <= local
            < self.at_hour(local, self._schedule.end_hour)
        )
        return in_window and not self.is_in_lunch(local)

    def day_info(self, local: datetime, is_holiday: bool = False) -> BusinessDayInfo:
        """
        Classify the local calendar day of ``local`` and compute its boundaries.

        Args:
            local: Any local instant within the day.
            is_holiday: Whether the day is in the current holiday set.

        Returns:
            BusinessDayInfo with the four boundaries converted to UTC.
        """
        is_weekend = not self.is_working_weekday(local)
        to_utc = self._converter.to_utc
        return BusinessDayInfo(
            is_working_day=not is_weekend and not is_holiday,
            is_holiday=is_holiday,
            is_weekend=is_weekend,
            work_start=to_utc(self.at_hour(local, self._schedule.start_hour)),
            work_end=to_utc(self.at_hour(local, self._schedule.end_hour)),
            lunch_start=to_utc(self.at_hour(local, self._schedule.lunch_start_hour)),
            lunch_end=to_utc(self.at_hour(local, self._schedule.lunch_end_hour)),
        )

    def next_working_weekday(self, local: datetime) -> datetime:
        """
        Next calendar day that is Monday to Friday, keeping the time of day.

        Holidays are not considered here.
        """
        candidate = local + timedelta(days=1)
        while not self.is_working_weekday(candidate):
            candidate += timedelta(days=1)
        return candidate

    def next_work_start(self, local: datetime) -> datetime:
        """Local ``work_start`` of the next Monday to Friday day."""
        return self.at_hour(self.next_working_weekday(local), self._schedule.start_hour)
