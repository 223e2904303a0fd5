"""Participation reporting service.

The partner statistics are the only participation data that may cross to
a provider. Tenant-internal reports refuse a provider audience outright.
"""

from uuid import UUID

from liaison.config.models.reporting import ReportingConfig
from liaison.engagement.enums import Audience
from liaison.engagement.store import EngagementStore
from liaison.errors import BoundaryViolationError, ErrorCode
from liaison.observability.logging import get_logger
from liaison.observability.metrics import OPERATION_ERRORS, PARTNER_REPORT_PARTICIPATIONS
from liaison.participation.aggregator import ParticipationAggregator
from liaison.participation.reports import (
    EngagementRate,
    InsuranceReport,
    InternalReport,
    KpiTrend,
    PartnerStatsResult,
)
from liaison.participation.store import ParticipationStore

logger = get_logger(__name__)


class ParticipationReportingService:
    """Builds participation reports for one tenant at a time."""

    def __init__(
        self,
        participation_store: ParticipationStore,
        engagement_store: EngagementStore,
        config: ReportingConfig | None = None,
    ) -> None:
        self._participations = participation_store
        self._engagements = engagement_store
        self._aggregator = ParticipationAggregator(config)

    async def get_aggregated_stats_for_partner(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> PartnerStatsResult:
        """Anonymous statistics the engagement's provider may see."""
        engagement = await self._engagements.get(tenant_id, engagement_id)
        if engagement is None:
            OPERATION_ERRORS.labels(
                operation="get_aggregated_stats_for_partner",
                error_code=ErrorCode.NOT_FOUND.value,
            ).inc()
            return PartnerStatsResult.fail(
                ErrorCode.NOT_FOUND, f"Engagement not found: {engagement_id}"
            )

        records = await self._participations.list_by_engagement(tenant_id, engagement_id)
        stats = self._aggregator.partner_stats(records)
        PARTNER_REPORT_PARTICIPATIONS.observe(len(records))

        logger.info(
            "partner_stats_aggregated",
            tenant_id=str(tenant_id),
            engagement_id=str(engagement_id),
            record_count=len(records),
        )
        return PartnerStatsResult(success=True, stats=stats)

    async def get_dietary_requirements_summary(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> dict[str, int]:
        """Requirement counts for catering; empty for unknown engagements."""
        if await self._engagements.get(tenant_id, engagement_id) is None:
            return {}
        records = await self._participations.list_by_engagement(tenant_id, engagement_id)
        return self._aggregator.dietary_requirements(records)

    async def generate_internal_report(
        self, tenant_id: UUID, year: int, *, audience: Audience
    ) -> InternalReport:
        """Yearly report with named participants. Tenant only."""
        _guard(audience, "internal participation report")
        records = await self._participations.list_by_tenant(tenant_id, year=year)
        logger.info("internal_report_generated", tenant_id=str(tenant_id), year=year)
        return self._aggregator.internal_report(records, year)

    async def generate_insurance_report(
        self,
        tenant_id: UUID,
        year: int,
        *,
        audience: Audience,
        tenant_name: str | None = None,
    ) -> InsuranceReport:
        _guard(audience, "insurance report")
        records = await self._participations.list_by_tenant(tenant_id, year=year)
        logger.info("insurance_report_generated", tenant_id=str(tenant_id), year=year)
        return self._aggregator.insurance_report(records, year, tenant_name=tenant_name)

    async def get_kpi_trend_data(
        self, tenant_id: UUID, year: int, *, audience: Audience
    ) -> KpiTrend:
        _guard(audience, "KPI trend")
        records = await self._participations.list_by_tenant(tenant_id, year=year)
        return self._aggregator.kpi_trend(records, year)

    async def get_engagement_rate(
        self,
        tenant_id: UUID,
        year: int,
        total_employees: int,
        *,
        audience: Audience,
    ) -> EngagementRate:
        _guard(audience, "engagement rate")
        records = await self._participations.list_by_tenant(tenant_id, year=year)
        return self._aggregator.engagement_rate(records, year, total_employees)


def _guard(audience: Audience, report: str) -> None:
    if audience is not Audience.TENANT:
        logger.warning("boundary_violation_blocked", report=report, audience=str(audience))
        raise BoundaryViolationError(report)
