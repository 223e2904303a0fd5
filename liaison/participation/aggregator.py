"""Privacy-safe aggregation of participation records.

Pure functions over record lists. Yearly tenant statistics count attended
participations only; engagement statistics count every record.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from liaison.config.models.reporting import ReportingConfig
from liaison.participation.enums import (
    ParticipationStatus,
    category_label,
    dietary_key,
    month_name,
)
from liaison.participation.models import ParticipationRecord
from liaison.participation.reports import (
    CategoryStats,
    DepartmentStats,
    EngagementRate,
    InsuranceReport,
    InternalReport,
    KpiTrend,
    MonthlyTrendEntry,
    PartnerParticipationStats,
    ReportSummary,
    TopParticipant,
)

UNCATEGORIZED = "unknown"


def _rate(part: int, whole: int, precision: int) -> float:
    """Percentage rounded to ``precision`` places; 0 for an empty whole."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, precision)


def _attended_in_year(
    records: Iterable[ParticipationRecord], year: int
) -> list[ParticipationRecord]:
    return [
        r
        for r in records
        if r.status == ParticipationStatus.ATTENDED
        and r.event_date is not None
        and r.event_date.year == year
    ]


def _unique(records: Iterable[ParticipationRecord]) -> int:
    return len({r.participant_key for r in records if r.participant_key is not None})


class ParticipationAggregator:
    """Computes partner-safe and tenant-internal participation statistics."""

    def __init__(self, config: ReportingConfig | None = None) -> None:
        self._config = config or ReportingConfig()

    # Partner-safe

    def partner_stats(self, records: Sequence[ParticipationRecord]) -> PartnerParticipationStats:
        """Anonymous counts, rates and dietary totals for one engagement."""
        statuses = Counter(r.status for r in records)
        ratings = [r.rating for r in records if r.rating is not None]
        attended = statuses[ParticipationStatus.ATTENDED]

        return PartnerParticipationStats(
            registered_count=statuses[ParticipationStatus.REGISTERED],
            attended_count=attended,
            no_show_count=statuses[ParticipationStatus.NO_SHOW],
            cancelled_count=statuses[ParticipationStatus.CANCELLED],
            attendance_rate=_rate(attended, len(records), self._config.rate_precision),
            average_rating=round(sum(ratings) / len(ratings), 1) if ratings else None,
            rating_count=len(ratings),
            dietary_requirements=self.dietary_requirements(records),
        )

    def dietary_requirements(self, records: Iterable[ParticipationRecord]) -> dict[str, int]:
        """Number of records per known dietary requirement.

        Requirements outside the known vocabulary are counted under "other";
        the raw text never reaches the provider.
        """
        counts: Counter[str] = Counter()
        for record in records:
            counts.update({dietary_key(r) for r in record.special_requirements})
        return dict(counts)

    # Tenant-internal

    def by_category(
        self, records: Iterable[ParticipationRecord], year: int
    ) -> list[CategoryStats]:
        grouped: dict[str, list[ParticipationRecord]] = {}
        for record in _attended_in_year(records, year):
            grouped.setdefault(record.category or UNCATEGORIZED, []).append(record)

        return [
            CategoryStats(
                category=category,
                category_label=category_label(category),
                participations=len(items),
                unique_participants=_unique(items),
            )
            for category, items in sorted(grouped.items())
        ]

    def by_department(
        self, records: Iterable[ParticipationRecord], year: int
    ) -> list[DepartmentStats]:
        grouped: dict[str, list[ParticipationRecord]] = {}
        for record in _attended_in_year(records, year):
            if record.department:
                grouped.setdefault(record.department, []).append(record)

        return [
            DepartmentStats(
                department=department,
                participations=len(items),
                unique_participants=_unique(items),
            )
            for department, items in sorted(grouped.items())
        ]

    def monthly_trend(
        self, records: Iterable[ParticipationRecord], year: int
    ) -> list[MonthlyTrendEntry]:
        """Exactly twelve entries; months without data are zero."""
        grouped: dict[int, list[ParticipationRecord]] = {month: [] for month in range(1, 13)}
        for record in _attended_in_year(records, year):
            # event_date is set for every attended-in-year record
            grouped[record.event_date.month].append(record)  # type: ignore[union-attr]

        return [
            MonthlyTrendEntry(
                month=month,
                month_name=month_name(month),
                participations=len(items),
                unique_participants=_unique(items),
            )
            for month, items in grouped.items()
        ]

    def unique_participants(self, records: Iterable[ParticipationRecord], year: int) -> int:
        return _unique(_attended_in_year(records, year))

    def top_participants(
        self,
        records: Iterable[ParticipationRecord],
        year: int,
        limit: int | None = None,
    ) -> list[TopParticipant]:
        """Employees with the most attended participations."""
        limit = limit or self._config.top_participants_limit
        counts: Counter[str] = Counter()
        first_seen: dict[str, ParticipationRecord] = {}
        for record in _attended_in_year(records, year):
            key = record.participant_key
            if key is None:
                continue
            counts[key] += 1
            first_seen.setdefault(key, record)

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            TopParticipant(
                employee_email=first_seen[key].employee_email,
                employee_name=first_seen[key].employee_name,
                department=first_seen[key].department,
                participation_count=count,
            )
            for key, count in ranked[:limit]
        ]

    def internal_report(
        self, records: Sequence[ParticipationRecord], year: int
    ) -> InternalReport:
        categories = self.by_category(records, year)
        return InternalReport(
            year=year,
            summary=ReportSummary(
                unique_participants=self.unique_participants(records, year),
                total_participations=sum(c.participations for c in categories),
            ),
            by_category=categories,
            by_department=self.by_department(records, year),
            monthly_trend=self.monthly_trend(records, year),
            top_participants=self.top_participants(records, year),
        )

    def insurance_report(
        self,
        records: Sequence[ParticipationRecord],
        year: int,
        tenant_name: str | None = None,
    ) -> InsuranceReport:
        categories = self.by_category(records, year)
        return InsuranceReport(
            year=year,
            tenant_name=tenant_name,
            summary=ReportSummary(
                unique_participants=self.unique_participants(records, year),
                total_participations=sum(c.participations for c in categories),
            ),
            by_category={c.category: c for c in categories},
        )

    def kpi_trend(self, records: Sequence[ParticipationRecord], year: int) -> KpiTrend:
        return KpiTrend(
            year=year,
            trend=self.monthly_trend(records, year),
            total_unique_participants=self.unique_participants(records, year),
        )

    def engagement_rate(
        self,
        records: Sequence[ParticipationRecord],
        year: int,
        total_employees: int,
    ) -> EngagementRate:
        unique = self.unique_participants(records, year)
        return EngagementRate(
            year=year,
            unique_participants=unique,
            total_employees=total_employees,
            engagement_rate=_rate(unique, total_employees, self._config.rate_precision),
        )
