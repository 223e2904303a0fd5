"""Participation reporting configuration models."""

from pydantic import BaseModel, Field


class ReportingConfig(BaseModel):
    """Configuration for participation reports."""

    top_participants_limit: int = Field(
        default=10,
        gt=0,
        description="Number of named participants in tenant-internal reports",
    )
    rate_precision: int = Field(
        default=1,
        ge=0,
        le=4,
        description="Decimal places for attendance and engagement rates",
    )
