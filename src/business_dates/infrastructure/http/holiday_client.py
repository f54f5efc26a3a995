"""
Holiday Source API Client.

Fetches the flat list of holiday dates (a JSON array of
``YYYY-MM-DD`` strings) and classifies every failure.
"""

import re
import time
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

from business_dates.config import settings
from business_dates.core.exceptions import (
    HolidayNetworkError,
    HolidayParseError,
    HolidayServiceError,
    HolidayTimeoutError,
    HolidayUnknownError,
)
from business_dates.core.models import HolidaySet
from business_dates.infrastructure.logging import get_logger, log_duration
from business_dates.infrastructure.metrics import get_metrics


logger = get_logger(__name__)


DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_holiday_payload(payload: Any, url: Optional[str] = None) -> HolidaySet:
    """
    Validate a holiday source payload.

    Args:
        payload: Decoded JSON body.
        url: Source URL, reported on failure.

    Returns:
        Frozenset of ``YYYY-MM-DD`` strings.

    Raises:
        HolidayParseError: If the payload is not an array of date strings.
    """
    if not isinstance(payload, list):
        raise HolidayParseError(
            f"Holiday payload must be a JSON array, got {type(payload).__name__}",
            url=url,
        )

    invalid = [
        item for item in payload
        if not isinstance(item, str) or not DATE_KEY_PATTERN.match(item)
    ]
    if invalid:
        raise HolidayParseError(
            f"All holiday entries must be YYYY-MM-DD strings, got {invalid[0]!r}",
            url=url,
        )

    return frozenset(payload)


class HolidayApiClient:
    """
    Client for the upstream holiday source.

    Issues a single GET per fetch with a fixed timeout. Retrying is
    left to the caller.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Initialize holiday client.

        Args:
            url: Holiday source URL.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header value.
        """
        self._url = url or settings.holiday_api.url
        self._timeout = settings.holiday_api.timeout_seconds if timeout is None else timeout
        if self._timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self._timeout}")
        self._user_agent = user_agent or settings.holiday_api.user_agent
        self._session: Optional[requests.Session] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session."""
        if self._session is None:
            self._session = requests.Session()

            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=4,
                pool_maxsize=10,
            )

            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

            self._session.headers.update({
                "Accept": "application/json",
                "User-Agent": self._user_agent,
            })

        return self._session

    @log_duration("holiday_fetch")
    def fetch_holidays(self) -> HolidaySet:
        """
        Fetch and validate the holiday list.

        Returns:
            Frozenset of ``YYYY-MM-DD`` strings.

        Raises:
            HolidayTimeoutError: The call exceeded its deadline.
            HolidayNetworkError: Transport failure or HTTP error status.
            HolidayParseError: Malformed payload.
            HolidayUnknownError: Anything else.
        """
        metrics = get_metrics()
        start = time.time()
        try:
            holidays = self._fetch()
        except HolidayServiceError as e:
            metrics.holiday_fetch_total.inc(status=e.kind.value.lower())
            raise
        finally:
            metrics.holiday_fetch_duration_seconds.observe(time.time() - start)

        metrics.holiday_fetch_total.inc(status="success")
        logger.info(
            f"Fetched {len(holidays)} holidays",
            extra={"extra_fields": {"url": self._url, "count": len(holidays)}}
        )
        return holidays

    def _fetch(self) -> HolidaySet:
        try:
            response = self.session.get(self._url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()

        except requests.exceptions.Timeout as e:
            logger.error(
                f"Holiday API timeout after {self._timeout}s",
                extra={"extra_fields": {"url": self._url, "timeout": self._timeout}}
            )
            raise HolidayTimeoutError(
                f"Holiday API timeout after {self._timeout}s", url=self._url
            ) from e

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            reason = e.response.reason if e.response is not None else str(e)
            logger.error(
                f"Holiday API HTTP error: {status_code}",
                extra={"extra_fields": {"url": self._url, "status_code": status_code}}
            )
            raise HolidayNetworkError(
                f"HTTP error {status_code}: {reason}",
                status_code=status_code,
                url=self._url,
            ) from e

        except requests.exceptions.JSONDecodeError as e:
            raise HolidayParseError(
                f"Holiday API returned invalid JSON: {e}", url=self._url
            ) from e

        except requests.exceptions.RequestException as e:
            logger.error(
                f"Holiday API request failed: {e}",
                extra={"extra_fields": {"url": self._url, "error_type": type(e).__name__}}
            )
            raise HolidayNetworkError(
                f"Could not reach the holiday API: {e}", url=self._url
            ) from e

        except Exception as e:
            logger.exception(
                f"Unexpected holiday API failure: {e}",
                extra={"extra_fields": {"url": self._url, "error_type": type(e).__name__}}
            )
            raise HolidayUnknownError(f"Unexpected error: {e}", url=self._url) from e

        return parse_holiday_payload(payload, url=self._url)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HolidayApiClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
