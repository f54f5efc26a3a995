"""
Domain models for business date calculations.

Requests, results and holiday cache values exchanged between
the engine, the holiday cache and the HTTP layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Optional, Union

from business_dates.core.exceptions import (
    CalculationErrorKind,
    HolidayServiceError,
)


HolidaySet = FrozenSet[str]


@dataclass(frozen=True)
class CalculationRequest:
    """
    Input of a business date calculation.

    ``None`` deltas mean "not supplied"; at least one must be given.
    A missing anchor means "now".
    """
    anchor: Optional[Union[datetime, str]] = None
    days_to_add: Optional[int] = None
    hours_to_add: Optional[int] = None

    @property
    def days(self) -> int:
        return self.days_to_add or 0

    @property
    def hours(self) -> int:
        return self.hours_to_add or 0


@dataclass(frozen=True)
class CalculationSuccess:
    """Successful calculation outcome."""
    result_instant: datetime
    original_anchor: datetime
    added_days: int
    added_hours: int

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class CalculationFailure:
    """Failed calculation outcome."""
    error_kind: CalculationErrorKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return False


CalculationResult = Union[CalculationSuccess, CalculationFailure]


@dataclass(frozen=True)
class HolidayCacheEntry:
    """One snapshot of the holiday list. Replaced whole on refresh."""
    holidays: HolidaySet
    fetched_at: datetime
    ttl: timedelta

    def is_valid(self, now: datetime) -> bool:
        return now - self.fetched_at < self.ttl


@dataclass(frozen=True)
class HolidayResult:
    """Outcome of a holiday lookup: a holiday set or the fetch error."""
    holidays: Optional[HolidaySet] = None
    error: Optional[HolidayServiceError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, holidays: HolidaySet) -> "HolidayResult":
        return cls(holidays=holidays)

    @classmethod
    def failed(cls, error: HolidayServiceError) -> "HolidayResult":
        return cls(error=error)


@dataclass(frozen=True)
class CacheInfo:
    """Diagnostic view of the holiday cache."""
    has_cache: bool
    is_valid: bool
    last_updated: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_cache": self.has_cache,
            "is_valid": self.is_valid,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
