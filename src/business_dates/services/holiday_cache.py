"""
Holiday Cache Service.

Keeps the holiday list fresh without hammering the upstream source.
"""

from datetime import timedelta
from typing import Callable, List, Optional

from business_dates.config import settings
from business_dates.core.exceptions import HolidayServiceError
from business_dates.core.models import (
    CacheInfo,
    HolidayCacheEntry,
    HolidayResult,
    HolidaySet,
)
from business_dates.core.timezone import now_utc
from business_dates.infrastructure.http import HolidayApiClient
from business_dates.infrastructure.logging import get_logger
from business_dates.infrastructure.metrics import get_metrics


logger = get_logger(__name__)


class HolidayCache:
    """
    Single-slot TTL cache in front of the holiday source.

    The entry is an immutable snapshot that is swapped whole, so readers
    never observe a partial update and no lock is taken. Concurrent misses
    are not coalesced: each one fetches, and the last write wins.
    """

    def __init__(
        self,
        client: Optional[HolidayApiClient] = None,
        ttl: Optional[timedelta] = None,
        clock: Callable = now_utc,
    ) -> None:
        self._client = client or HolidayApiClient()
        if ttl is None:
            ttl = timedelta(minutes=settings.holiday_api.cache_ttl_minutes)
        if ttl < timedelta(0):
            raise ValueError(f"ttl must not be negative, got {ttl}")
        self._ttl = ttl
        self._clock = clock
        self._entry: Optional[HolidayCacheEntry] = None

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get_holidays(self) -> HolidayResult:
        """
        Return the cached holiday set, refreshing it when expired.

        Returns:
            HolidayResult carrying either the set or the fetch error.
        """
        entry = self._entry
        if entry is not None and entry.is_valid(self._clock()):
            get_metrics().holiday_cache_lookups_total.inc(result="hit")
            return HolidayResult.ok(entry.holidays)

        get_metrics().holiday_cache_lookups_total.inc(result="miss")
        logger.info(
            "Holiday cache miss, fetching from source",
            extra={"extra_fields": {
                "has_cache": entry is not None,
                "url": self._client.url,
            }}
        )

        try:
            holidays = self._client.fetch_holidays()
        except HolidayServiceError as e:
            logger.warning(
                f"Holiday fetch failed: {e.message}",
                extra={"extra_fields": {
                    "kind": e.kind.value,
                    "status_code": e.status_code,
                    "url": e.url,
                }}
            )
            return HolidayResult.failed(e)

        self._entry = HolidayCacheEntry(
            holidays=holidays,
            fetched_at=self._clock(),
            ttl=self._ttl,
        )
        return HolidayResult.ok(holidays)

    def clear_cache(self) -> None:
        """Drop the cached entry; the next lookup refetches."""
        self._entry = None
        logger.info("Holiday cache cleared")

    def get_cache_info(self) -> CacheInfo:
        """Describe the cache state without touching it."""
        entry = self._entry
        if entry is None:
            return CacheInfo(has_cache=False, is_valid=False)
        return CacheInfo(
            has_cache=True,
            is_valid=entry.is_valid(self._clock()),
            last_updated=entry.fetched_at,
        )

    def _require_holidays(self) -> HolidaySet:
        result = self.get_holidays()
        if not result.success:
            raise result.error
        return result.holidays

    def is_holiday(self, date_key: str) -> bool:
        """
        Check whether a ``YYYY-MM-DD`` date is a holiday.

        Raises:
            HolidayServiceError: If the holiday list cannot be obtained.
        """
        return date_key in self._require_holidays()

    def holidays_for_year(self, year: int) -> List[str]:
        """
        Sorted holidays of one calendar year.

        Raises:
            HolidayServiceError: If the holiday list cannot be obtained.
        """
        prefix = f"{year:04d}-"
        return sorted(day for day in self._require_holidays() if day.startswith(prefix))
