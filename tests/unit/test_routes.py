"""
Tests for API Routes.

Tests the Flask HTTP endpoints.
"""

from unittest.mock import MagicMock, patch

from freezegun import freeze_time

from business_dates.core.exceptions import (
    CalculationError,
    HolidayNetworkError,
    HolidayParseError,
    HolidayTimeoutError,
    InvalidParametersError,
)


HOLIDAYS = frozenset({"2025-01-01", "2025-04-17", "2025-04-18", "2026-01-01"})


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_returns_healthy(self, client):
        """Health endpoint should return healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["status"] == "healthy"
        assert data["service"] == "business-dates"

    def test_root_matches_health(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"


class TestBusinessDateEndpoint:
    """Tests for the business-date endpoint."""

    def test_returns_calculated_date(self, client):
        """Friday 17:00 local plus one hour is Monday 09:00 local."""
        response = client.get("/business-date?hours=1&date=2025-01-03T22:00:00Z")

        assert response.status_code == 200
        data = response.get_json()
        assert data == {
            "success": True,
            "date": "2025-01-06T14:00:00Z",
            "original_date": "2025-01-03T22:00:00Z",
            "added_days": 0,
            "added_hours": 1,
        }

    def test_days_and_hours_with_holidays(self, client, holiday_client):
        holiday_client.fetch_holidays.return_value = HOLIDAYS

        response = client.get(
            "/business-date?date=2025-04-10T15:00:00Z&days=5&hours=4"
        )

        assert response.status_code == 200
        assert response.get_json()["date"] == "2025-04-21T20:00:00Z"

    @freeze_time("2025-01-07 15:00:00")
    def test_defaults_to_now(self, client):
        """Tuesday 10:00 local plus one hour."""
        response = client.get("/business-date?hours=1")

        assert response.status_code == 200
        data = response.get_json()
        assert data["original_date"] == "2025-01-07T15:00:00Z"
        assert data["date"] == "2025-01-07T16:00:00Z"

    def test_requires_days_or_hours(self, client):
        """Should return 400 when neither days nor hours is given."""
        response = client.get("/business-date?date=2025-01-03T22:00:00Z")

        assert response.status_code == 400
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "InvalidParameters"
        assert "days" in data["message"]

    def test_error_body_carries_kind_and_message(self, client):
        response = client.get("/business-date")

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "error": "InvalidParameters",
            "message": "at least one of 'days' or 'hours' must be provided",
        }

    def test_value_error_prefix_is_not_exposed(self, client):
        response = client.get("/business-date?hours=1&date=2025-01-03T22:00:00")

        message = response.get_json()["message"]
        assert "Value error" not in message
        assert message == (
            "Invalid parameter 'date': "
            "date must be an ISO 8601 UTC instant ending in 'Z'"
        )

    def test_rejects_negative_values(self, client):
        response = client.get("/business-date?days=-1")

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidParameters"

    def test_rejects_non_integer_values(self, client):
        response = client.get("/business-date?hours=abc")

        assert response.status_code == 400
        assert "hours" in response.get_json()["message"]

    def test_rejects_date_without_zulu_suffix(self, client):
        response = client.get("/business-date?hours=1&date=2025-01-03T22:00:00")

        assert response.status_code == 400
        assert "date" in response.get_json()["message"]

    def test_holiday_timeout_returns_504(self, client, holiday_client):
        holiday_client.fetch_holidays.side_effect = HolidayTimeoutError(
            "Holiday source timed out after 10s"
        )

        response = client.get("/business-date?hours=1&date=2025-01-03T22:00:00Z")

        assert response.status_code == 504
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "HolidayServiceError"

    def test_holiday_network_error_returns_503(self, client, holiday_client):
        holiday_client.fetch_holidays.side_effect = HolidayNetworkError(
            "HTTP error 500: Internal Server Error", status_code=500
        )

        response = client.get("/business-date?days=1&date=2025-01-03T22:00:00Z")

        assert response.status_code == 503
        assert response.get_json()["error"] == "HolidayServiceError"

    def test_holiday_parse_error_returns_503(self, client, holiday_client):
        holiday_client.fetch_holidays.side_effect = HolidayParseError("bad payload")

        response = client.get("/business-date?days=1")

        assert response.status_code == 503
        assert response.get_json()["message"] == "Failed to fetch holidays: bad payload"

    @patch("business_dates.api.routes.get_business_date_service")
    def test_escaped_calculation_error_returns_500(self, mock_get_service, client):
        mock_service = MagicMock()
        mock_get_service.return_value = mock_service
        mock_service.calculate.side_effect = CalculationError(
            "No working day found within 366 days before 2025-02-15"
        )

        response = client.get("/business-date?hours=1&date=2025-01-03T22:00:00Z")

        assert response.status_code == 500
        assert response.get_json() == {
            "success": False,
            "error": "CalculationError",
            "message": "No working day found within 366 days before 2025-02-15",
        }

    @patch("business_dates.api.routes.get_business_date_service")
    def test_escaped_invalid_parameters_returns_400(self, mock_get_service, client):
        mock_service = MagicMock()
        mock_get_service.return_value = mock_service
        mock_service.calculate.side_effect = InvalidParametersError("days", "must be an integer")

        response = client.get("/business-date?days=1")

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidParameters"


class TestHolidaysEndpoint:
    """Tests for the holiday listing and cache endpoints."""

    def test_lists_all_holidays_sorted(self, client, holiday_client):
        holiday_client.fetch_holidays.return_value = HOLIDAYS

        response = client.get("/holidays")

        assert response.status_code == 200
        data = response.get_json()
        assert data["count"] == 4
        assert data["holidays"] == sorted(HOLIDAYS)
        assert data["year"] is None

    def test_filters_by_year(self, client, holiday_client):
        holiday_client.fetch_holidays.return_value = HOLIDAYS

        response = client.get("/holidays?year=2026")

        assert response.status_code == 200
        assert response.get_json()["holidays"] == ["2026-01-01"]

    def test_rejects_out_of_range_year(self, client):
        response = client.get("/holidays?year=1800")

        assert response.status_code == 400

    def test_fetch_failure_maps_to_status(self, client, holiday_client):
        holiday_client.fetch_holidays.side_effect = HolidayTimeoutError("timed out")

        assert client.get("/holidays").status_code == 504
        assert client.get("/holidays?year=2025").status_code == 504

    def test_cache_info_before_and_after_fetch(self, client):
        before = client.get("/holidays/cache").get_json()
        client.get("/holidays")
        after = client.get("/holidays/cache").get_json()

        assert before["has_cache"] is False
        assert before["last_updated"] is None
        assert after["has_cache"] is True
        assert after["is_valid"] is True

    def test_clear_cache(self, client, holiday_client):
        client.get("/holidays")

        response = client.post("/holidays/cache/clear")

        assert response.status_code == 200
        assert response.get_json()["has_cache"] is False
        client.get("/holidays")
        assert holiday_client.fetch_holidays.call_count == 2


class TestMetricsEndpoint:
    """Tests for the Prometheus metrics endpoint."""

    def test_exposes_counters(self, client):
        client.get("/business-date?hours=1&date=2025-01-03T22:00:00Z")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.mimetype == "text/plain"
        body = response.get_data(as_text=True)
        assert "business_date_calculations_total" in body
        assert 'outcome="success"' in body
        assert "http_requests_total" in body
