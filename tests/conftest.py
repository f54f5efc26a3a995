"""
Test Configuration and Fixtures.

Provides shared fixtures for all tests.
"""

from datetime import timedelta
from typing import Generator
from unittest.mock import MagicMock

import pytest
from flask import Flask
from flask.testing import FlaskClient

from business_dates.app import create_app
from business_dates.core import ScheduleCalendar, TimeZoneConverter, WorkSchedule
from business_dates.infrastructure.http import HolidayApiClient
from business_dates.infrastructure.metrics import reset_metrics
from business_dates.services import BusinessDateService, HolidayCache


HOLIDAY_API_URL = "https://holidays.test/WorkingDays.json"


@pytest.fixture(autouse=True)
def fresh_metrics() -> Generator[None, None, None]:
    """Isolate metric counters between tests."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def calendar() -> ScheduleCalendar:
    """Default 8-17 calendar with a 12-13 lunch, UTC-5."""
    return ScheduleCalendar(WorkSchedule(), TimeZoneConverter(offset_hours=-5))


@pytest.fixture
def holiday_client() -> MagicMock:
    """Mock holiday source returning no holidays."""
    client = MagicMock(spec=HolidayApiClient)
    client.url = HOLIDAY_API_URL
    client.fetch_holidays.return_value = frozenset()
    return client


@pytest.fixture
def holiday_cache(holiday_client: MagicMock) -> HolidayCache:
    """Real cache in front of the mock holiday source."""
    return HolidayCache(client=holiday_client, ttl=timedelta(minutes=60))


@pytest.fixture
def service(holiday_cache: HolidayCache, calendar: ScheduleCalendar) -> BusinessDateService:
    """Business date engine wired to the mock holiday source."""
    return BusinessDateService(holiday_cache=holiday_cache, calendar=calendar)


@pytest.fixture
def app(holiday_cache: HolidayCache) -> Flask:
    """Create test Flask application."""
    test_config = {
        "TESTING": True,
    }
    return create_app(test_config, holiday_cache=holiday_cache)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create test client."""
    return app.test_client()
