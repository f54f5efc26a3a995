"""
Application Metrics.

Provides Prometheus-compatible metrics for monitoring.
"""

import time
from collections import defaultdict
from threading import Lock
from typing import Dict, List, Optional, Tuple

from flask import Flask, Response, g, request


def _labels_key(labels: Dict[str, str]) -> Tuple[Tuple[str, str], ...]:
    """Hashable, order-independent key for a label set."""
    return tuple(sorted(labels.items()))


def _format_labels(key: Tuple[Tuple[str, str], ...], **more: str) -> str:
    items = list(key) + sorted(more.items())
    if not items:
        return ""
    return "{" + ",".join(f'{k}="{v}"' for k, v in items) + "}"


class Counter:
    """A monotonically increasing counter metric."""

    kind = "counter"

    def __init__(self, name: str, description: str) -> None:
        self.name = name
        self.description = description
        self._values: Dict[Tuple[Tuple[str, str], ...], float] = defaultdict(float)
        self._lock = Lock()

    def inc(self, value: float = 1.0, **labels: str) -> None:
        """Increment the counter."""
        with self._lock:
            self._values[_labels_key(labels)] += value

    def get(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(_labels_key(labels), 0.0)

    def render(self) -> List[str]:
        with self._lock:
            return [
                f"{self.name}{_format_labels(key)} {value}"
                for key, value in self._values.items()
            ]


class Histogram:
    """A histogram metric for tracking distributions."""

    kind = "histogram"

    DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

    def __init__(
        self,
        name: str,
        description: str,
        buckets: tuple = DEFAULT_BUCKETS,
    ) -> None:
        self.name = name
        self.description = description
        self.buckets = buckets
        self._counts: Dict[Tuple, Dict[float, int]] = defaultdict(lambda: defaultdict(int))
        self._sums: Dict[Tuple, float] = defaultdict(float)
        self._totals: Dict[Tuple, int] = defaultdict(int)
        self._lock = Lock()

    def observe(self, value: float, **labels: str) -> None:
        """Record an observation."""
        key = _labels_key(labels)
        with self._lock:
            self._sums[key] += value
            self._totals[key] += 1
            for bucket in self.buckets:
                if value <= bucket:
                    self._counts[key][bucket] += 1

    def count(self, **labels: str) -> int:
        with self._lock:
            return self._totals.get(_labels_key(labels), 0)

    def render(self) -> List[str]:
        lines = []
        with self._lock:
            for key, total in self._totals.items():
                for bucket in self.buckets:
                    lines.append(
                        f"{self.name}_bucket{_format_labels(key, le=str(bucket))} "
                        f"{self._counts[key][bucket]}"
                    )
                lines.append(f"{self.name}_bucket{_format_labels(key, le='+Inf')} {total}")
                lines.append(f"{self.name}_sum{_format_labels(key)} {self._sums[key]}")
                lines.append(f"{self.name}_count{_format_labels(key)} {total}")
        return lines


class MetricsRegistry:
    """Registry for all application metrics."""

    def __init__(self) -> None:
        # HTTP metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency in seconds",
        )

        # Business metrics
        self.calculations_total = Counter(
            "business_date_calculations_total",
            "Total number of business date calculations by outcome",
        )

        # Holiday source metrics
        self.holiday_cache_lookups_total = Counter(
            "holiday_cache_lookups_total",
            "Holiday cache lookups by result (hit/miss)",
        )
        self.holiday_fetch_total = Counter(
            "holiday_fetch_total",
            "Holiday source fetches by status",
        )
        self.holiday_fetch_duration_seconds = Histogram(
            "holiday_fetch_duration_seconds",
            "Holiday source fetch latency in seconds",
        )

    def all(self) -> list:
        return [
            self.http_requests_total,
            self.http_request_duration_seconds,
            self.calculations_total,
            self.holiday_cache_lookups_total,
            self.holiday_fetch_total,
            self.holiday_fetch_duration_seconds,
        ]

    def to_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format."""
        lines = []
        for metric in self.all():
            lines.append(f"# HELP {metric.name} {metric.description}")
            lines.append(f"# TYPE {metric.name} {metric.kind}")
            lines.extend(metric.render())
        return "\n".join(lines) + "\n"


# Global metrics registry
_metrics: Optional[MetricsRegistry] = None


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics


def reset_metrics() -> None:
    """Drop all recorded values (test helper)."""
    global _metrics
    _metrics = None


def setup_metrics_middleware(app: Flask) -> None:
    """
    Setup Flask middleware for automatic HTTP metrics collection.

    Args:
        app: Flask application instance.
    """
    @app.before_request
    def before_request() -> None:
        g.metrics_start_time = time.time()

    @app.after_request
    def after_request(response):
        metrics = get_metrics()
        duration = time.time() - getattr(g, "metrics_start_time", time.time())
        endpoint = request.endpoint or "unknown"

        metrics.http_requests_total.inc(
            method=request.method,
            endpoint=endpoint,
            status=str(response.status_code),
        )
        metrics.http_request_duration_seconds.observe(
            duration,
            method=request.method,
            endpoint=endpoint,
        )
        return response


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint handler."""
    return Response(
        get_metrics().to_prometheus_format(),
        mimetype="text/plain; charset=utf-8",
    )
