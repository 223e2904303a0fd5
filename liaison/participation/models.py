"""Participation record model.

Records carry personal data (name, email, department, free-text feedback).
They are read only by the aggregator and never leave the tenant as-is.
"""

from datetime import date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from liaison.engagement.models import utc_now
from liaison.participation.enums import InterventionType, ParticipationStatus


class ParticipationRecord(BaseModel):
    """One employee's participation in one intervention."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    tenant_id: UUID = Field(..., description="Owning tenant")
    engagement_id: UUID | None = Field(
        default=None, description="Partner engagement, if the intervention came from one"
    )
    intervention_type: InterventionType = Field(
        default=InterventionType.PARTNER_ENGAGEMENT, description="Intervention source"
    )
    intervention_title: str | None = Field(default=None, description="Intervention title")

    # Personal data
    employee_id: int | None = Field(default=None, description="Internal employee reference")
    employee_email: str | None = Field(default=None, description="Employee email")
    employee_name: str | None = Field(default=None, description="Employee name")
    department: str | None = Field(default=None, description="Employee department")

    event_date: date | None = Field(default=None, description="Date of the intervention")
    category: str | None = Field(default=None, description="Intervention category")
    status: ParticipationStatus = Field(
        default=ParticipationStatus.REGISTERED, description="Attendance status"
    )

    rating: int | None = Field(default=None, ge=1, le=5, description="Rating from 1 to 5")
    feedback_comment: str | None = Field(default=None, description="Free-text feedback")
    special_requirements: list[str] = Field(
        default_factory=list, description="Dietary and other requirements"
    )

    created_at: datetime = Field(default_factory=utc_now, description="Creation time")

    @property
    def participant_key(self) -> str | None:
        """Identity used to count unique participants."""
        if self.employee_email:
            return self.employee_email.strip().lower()
        if self.employee_id is not None:
            return f"employee:{self.employee_id}"
        return None
