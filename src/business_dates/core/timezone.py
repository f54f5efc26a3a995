"""
Regional time zone conversion.

The regional calendar uses a fixed UTC offset with no daylight saving,
so conversions in both directions are exact inverses.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Union


ISO_UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def now_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_utc(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 UTC string (``2025-01-01T10:00:00Z``).

    Aware datetimes are converted to UTC; naive ones are taken as UTC.

    Raises:
        ValueError: If the string is not a valid ISO-8601 instant.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso_utc(value: datetime) -> str:
    """Format an instant as ISO-8601 UTC with a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(ISO_UTC_FORMAT)


class TimeZoneConverter:
    """Converts between UTC instants and the fixed-offset local representation."""

    def __init__(self, offset_hours: float = -5, name: str = "America/Bogota") -> None:
        self._name = name
        self._tz: tzinfo = timezone(timedelta(hours=offset_hours), name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def to_local(self, utc_instant: datetime) -> datetime:
        """Express a UTC instant in local time. Naive input is taken as UTC."""
        if utc_instant.tzinfo is None:
            utc_instant = utc_instant.replace(tzinfo=timezone.utc)
        return utc_instant.astimezone(self._tz)

    def to_utc(self, local_instant: datetime) -> datetime:
        """Express a local instant in UTC. Naive input is taken as local time."""
        if local_instant.tzinfo is None:
            local_instant = local_instant.replace(tzinfo=self._tz)
        return local_instant.astimezone(timezone.utc)
