"""
API Request Validation.

Uses Pydantic for query string validation.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from business_dates.core.models import CalculationRequest
from business_dates.core.timezone import parse_iso_utc


class BusinessDateQuery(BaseModel):
    """Query parameters of the /business-date endpoint."""

    days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Business days to add",
    )
    hours: Optional[int] = Field(
        default=None,
        ge=0,
        description="Business hours to add",
    )
    date: Optional[str] = Field(
        default=None,
        description="Anchor instant, ISO-8601 UTC with a trailing Z",
    )

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        """Require an ISO-8601 UTC instant such as 2025-01-01T10:00:00Z."""
        if v is None:
            return v
        v = v.strip()
        if not v.endswith("Z"):
            raise ValueError("date must be an ISO 8601 UTC instant ending in 'Z'")
        try:
            parse_iso_utc(v)
        except ValueError:
            raise ValueError(f"date is not a valid ISO 8601 instant: {v}") from None
        return v

    @model_validator(mode="after")
    def require_days_or_hours(self) -> "BusinessDateQuery":
        if self.days is None and self.hours is None:
            raise ValueError("at least one of 'days' or 'hours' must be provided")
        return self

    def to_request(self) -> CalculationRequest:
        return CalculationRequest(
            anchor=self.date,
            days_to_add=self.days,
            hours_to_add=self.hours,
        )


class HolidaysQuery(BaseModel):
    """Query parameters of the /holidays endpoint."""

    year: Optional[int] = Field(
        default=None,
        ge=1900,
        le=2100,
        description="Only return holidays of this year",
    )
