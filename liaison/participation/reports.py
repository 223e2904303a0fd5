"""Report models produced from participation records.

``PartnerParticipationStats`` is the only shape in which participation
data may be handed to a provider. Everything else in this module is
tenant-internal.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from liaison.engagement.models import utc_now
from liaison.engagement.results import OperationResult


class PartnerParticipationStats(BaseModel):
    """Anonymous attendance statistics for one engagement.

    Counts and rates only. The field set is closed: no names, emails,
    department breakdowns or feedback text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    registered_count: int = Field(..., ge=0, description="Still registered, not yet attended")
    attended_count: int = Field(..., ge=0)
    no_show_count: int = Field(..., ge=0)
    cancelled_count: int = Field(..., ge=0)
    attendance_rate: float = Field(..., ge=0, description="Attended share of all records, in %")
    average_rating: float | None = Field(default=None, description="Mean rating, 1 decimal")
    rating_count: int = Field(..., ge=0)
    dietary_requirements: dict[str, int] = Field(
        default_factory=dict, description="Participants per requirement"
    )
    aggregated_at: datetime = Field(default_factory=utc_now)


class PartnerStatsResult(OperationResult):
    """Partner statistics, or why they could not be produced."""

    stats: PartnerParticipationStats | None = None


class CategoryStats(BaseModel):
    category: str
    category_label: str
    participations: int
    unique_participants: int


class DepartmentStats(BaseModel):
    department: str
    participations: int
    unique_participants: int


class MonthlyTrendEntry(BaseModel):
    month: int = Field(..., ge=1, le=12)
    month_name: str
    participations: int = 0
    unique_participants: int = 0


class TopParticipant(BaseModel):
    employee_email: str | None
    employee_name: str | None
    department: str | None
    participation_count: int


class ReportSummary(BaseModel):
    unique_participants: int
    total_participations: int


class InternalReport(BaseModel):
    """Yearly participation report for the tenant's own documentation.

    Contains personal data.
    """

    year: int
    summary: ReportSummary
    by_category: list[CategoryStats]
    by_department: list[DepartmentStats]
    monthly_trend: list[MonthlyTrendEntry]
    top_participants: list[TopParticipant]
    generated_at: datetime = Field(default_factory=utc_now)


class InsuranceReport(BaseModel):
    """Aggregate yearly report for health insurance documentation."""

    report_type: str = "insurance_documentation"
    year: int
    tenant_name: str | None = None
    summary: ReportSummary
    by_category: dict[str, CategoryStats]
    generated_at: datetime = Field(default_factory=utc_now)
    disclaimer: str = (
        "Dieser Bericht enthält aggregierte, anonymisierte Daten für die "
        "Dokumentation gegenüber der Krankenkasse."
    )


class KpiTrend(BaseModel):
    """Monthly participation trend for the KPI dashboard; always 12 entries."""

    year: int
    trend: list[MonthlyTrendEntry]
    total_unique_participants: int


class EngagementRate(BaseModel):
    """Share of employees that attended at least one intervention."""

    year: int
    unique_participants: int
    total_employees: int
    engagement_rate: float

    @property
    def engagement_rate_formatted(self) -> str:
        return f"{self.engagement_rate}%"
