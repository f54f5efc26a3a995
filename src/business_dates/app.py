"""
Flask Application Factory.

Creates and configures the Flask application.
"""

import signal
import sys
from typing import Optional

from flask import Flask

from business_dates.api import api_bp
from business_dates.config import settings
from business_dates.infrastructure.logging import log_request_context, logger
from business_dates.infrastructure.metrics import setup_metrics_middleware
from business_dates.services import BusinessDateService, HolidayCache


def _handle_sigterm(signum: int, frame) -> None:
    """Handle SIGTERM for graceful shutdown."""
    logger.info(
        "Received SIGTERM, shutting down gracefully",
        extra={"extra_fields": {"signal": signum}}
    )
    sys.exit(0)


def create_app(
    config: Optional[dict] = None,
    holiday_cache: Optional[HolidayCache] = None,
) -> Flask:
    """
    Create and configure the Flask application.

    The application owns one HolidayCache shared by every request.

    Args:
        config: Optional configuration dictionary.
        holiday_cache: Cache to use instead of one built from settings.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)

    app.json.sort_keys = False

    if config:
        app.config.update(config)

    cache = holiday_cache or HolidayCache()
    app.extensions["business_dates"] = {
        "holiday_cache": cache,
        "business_date_service": BusinessDateService(holiday_cache=cache),
    }

    log_request_context(app)
    setup_metrics_middleware(app)

    app.register_blueprint(api_bp)

    logger.info(
        "Application initialized",
        extra={"extra_fields": {
            "environment": settings.environment,
            "timezone": settings.timezone.name,
            "utc_offset_hours": settings.timezone.utc_offset_hours,
            "work_hours": f"{settings.work_schedule.start_hour}-{settings.work_schedule.end_hour}",
            "lunch_hours": f"{settings.work_schedule.lunch_start_hour}-{settings.work_schedule.lunch_end_hour}",
            "holiday_api_url": settings.holiday_api.url,
            "cache_ttl_minutes": settings.holiday_api.cache_ttl_minutes,
        }}
    )

    return app


def main() -> None:
    """Run the development server."""
    signal.signal(signal.SIGTERM, _handle_sigterm)
    app = create_app()
    app.run(
        host="0.0.0.0",
        port=settings.port,
        debug=settings.debug,
    )


if __name__ == "__main__":
    main()
