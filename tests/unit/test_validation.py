"""
Tests for API Request Validation.
"""

import pytest
from pydantic import ValidationError

from business_dates.api.validation import BusinessDateQuery, HolidaysQuery


class TestBusinessDateQuery:
    """Tests for BusinessDateQuery."""

    def test_coerces_query_strings(self):
        query = BusinessDateQuery(days="2", hours="3", date="2025-01-03T22:00:00Z")

        assert query.days == 2
        assert query.hours == 3

    def test_to_request(self):
        request = BusinessDateQuery(hours="4").to_request()

        assert request.anchor is None
        assert request.days_to_add is None
        assert request.days == 0
        assert request.hours == 4

    def test_zero_is_allowed(self):
        assert BusinessDateQuery(days="0").days == 0

    def test_requires_days_or_hours(self):
        with pytest.raises(ValidationError, match="at least one"):
            BusinessDateQuery(date="2025-01-03T22:00:00Z")

    @pytest.mark.parametrize("field,value", [
        ("days", "-1"),
        ("hours", "-3"),
        ("days", "one"),
        ("hours", "1.5"),
    ])
    def test_rejects_bad_numbers(self, field, value):
        with pytest.raises(ValidationError):
            BusinessDateQuery(**{field: value})

    @pytest.mark.parametrize("value", [
        "2025-01-03T22:00:00",
        "2025-01-03T22:00:00-05:00",
        "yesterdayZ",
        "2025-13-03T22:00:00Z",
    ])
    def test_rejects_bad_dates(self, value):
        with pytest.raises(ValidationError):
            BusinessDateQuery(hours="1", date=value)

    def test_accepts_fractional_seconds(self):
        query = BusinessDateQuery(hours="1", date="2025-01-03T22:00:00.000Z")

        assert query.date == "2025-01-03T22:00:00.000Z"


class TestHolidaysQuery:
    """Tests for HolidaysQuery."""

    def test_year_is_optional(self):
        assert HolidaysQuery().year is None

    def test_coerces_year(self):
        assert HolidaysQuery(year="2025").year == 2025

    @pytest.mark.parametrize("year", ["1899", "2101", "twenty"])
    def test_rejects_bad_year(self, year):
        with pytest.raises(ValidationError):
            HolidaysQuery(year=year)
