"""
Tests for Time Zone Conversion.

Tests the fixed-offset UTC <-> local conversion and ISO helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from business_dates.core.timezone import (
    TimeZoneConverter,
    parse_iso_utc,
    to_iso_utc,
)


@pytest.fixture
def converter() -> TimeZoneConverter:
    return TimeZoneConverter(offset_hours=-5)


class TestTimeZoneConverter:
    """Tests for TimeZoneConverter."""

    def test_to_local_applies_fixed_offset(self, converter):
        """22:00 UTC is 17:00 in Bogota."""
        result = converter.to_local(datetime(2025, 1, 3, 22, 0, tzinfo=timezone.utc))

        assert (result.year, result.month, result.day, result.hour) == (2025, 1, 3, 17)
        assert result.utcoffset() == timedelta(hours=-5)

    def test_to_local_crosses_midnight(self, converter):
        """Early UTC hours belong to the previous local day."""
        result = converter.to_local(datetime(2025, 1, 6, 3, 0, tzinfo=timezone.utc))

        assert result.day == 5
        assert result.hour == 22

    def test_to_utc_applies_fixed_offset(self, converter):
        local = datetime(2025, 1, 6, 8, 0, tzinfo=converter.tz)

        assert converter.to_utc(local) == datetime(2025, 1, 6, 13, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("instant", [
        datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc),
        datetime(2025, 3, 9, 7, 30, 15, tzinfo=timezone.utc),
        datetime(2025, 6, 30, 23, 59, 59, 999999, tzinfo=timezone.utc),
        datetime(2024, 2, 29, 4, 59, tzinfo=timezone.utc),
    ])
    def test_round_trip_is_exact(self, converter, instant):
        """to_utc and to_local are inverses in both directions."""
        assert converter.to_utc(converter.to_local(instant)) == instant

        local = converter.to_local(instant)
        assert converter.to_local(converter.to_utc(local)) == local

    def test_naive_input_conventions(self, converter):
        """Naive input is UTC for to_local and local for to_utc."""
        naive = datetime(2025, 1, 6, 13, 0)

        assert converter.to_local(naive).hour == 8
        assert converter.to_utc(naive).hour == 18

    def test_no_daylight_saving_shift(self, converter):
        """The offset is identical in January and July."""
        winter = converter.to_local(datetime(2025, 1, 15, 12, tzinfo=timezone.utc))
        summer = converter.to_local(datetime(2025, 7, 15, 12, tzinfo=timezone.utc))

        assert winter.utcoffset() == summer.utcoffset()


class TestIsoHelpers:
    """Tests for parse_iso_utc and to_iso_utc."""

    def test_parse_zulu_string(self):
        assert parse_iso_utc("2025-04-10T15:00:00Z") == datetime(
            2025, 4, 10, 15, 0, tzinfo=timezone.utc
        )

    def test_parse_fractional_seconds(self):
        parsed = parse_iso_utc("2025-04-10T15:00:00.000Z")

        assert parsed == datetime(2025, 4, 10, 15, 0, tzinfo=timezone.utc)

    def test_parse_offset_string_is_converted_to_utc(self):
        parsed = parse_iso_utc("2025-04-10T10:00:00-05:00")

        assert parsed.hour == 15
        assert parsed.tzinfo == timezone.utc

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_iso_utc("not-a-date")

    def test_format_uses_trailing_z(self):
        value = datetime(2025, 1, 6, 14, 0, 0, 123000, tzinfo=timezone.utc)

        assert to_iso_utc(value) == "2025-01-06T14:00:00Z"

    def test_format_converts_local_instants(self):
        value = datetime(2025, 1, 6, 9, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert to_iso_utc(value) == "2025-01-06T14:00:00Z"
