"""Classification handlers for delivered results.

Each handler reshapes a delivery into the envelope expected at one area of
the customer's process. Handlers do no I/O; filing the envelope is up to
the caller.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType

from liaison.config.models.routing import RoutingConfig
from liaison.engagement.models import DeliveryRecord, Engagement, utc_now
from liaison.engagement.results import IntegrationEnvelope

# Output types whose legal requirement has a different name
LEGAL_REQUIREMENT_TYPES: Mapping[str, str] = MappingProxyType(
    {"gefaehrdungsbeurteilung": "psychische_gefaehrdungsbeurteilung"}
)

KPI_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "copsoq_analysis": "COPSOQ Gesamtbewertung",
        "participation_stats": "Maßnahmen-Teilnahmequote",
        "health_report": "Gesundheitsindex",
    }
)


@dataclass(frozen=True)
class HandlerContext:
    """Everything a handler may read."""

    engagement: Engagement
    output_type: str
    integration_point: str
    delivery: DeliveryRecord
    provider_name: str | None
    routing: RoutingConfig


Handler = Callable[[HandlerContext], IntegrationEnvelope]


def handle_analysis(ctx: HandlerContext) -> IntegrationEnvelope:
    """Phase 2: analysis results such as COPSOQ or health checks."""
    return IntegrationEnvelope(
        kind="analysis",
        message=f"Phase 2 analysis data integrated: {ctx.output_type}",
        data={
            "type": ctx.output_type,
            "source": "partner_engagement",
            "engagement_id": str(ctx.engagement.id),
            "provider_id": str(ctx.engagement.provider_id),
            "provider_name": ctx.provider_name,
            "delivered_at": ctx.delivery.delivered_at.isoformat(),
            "data": ctx.delivery.data,
            "file_url": ctx.delivery.file_url,
            "summary": ctx.delivery.summary,
        },
    )


def handle_concept(ctx: HandlerContext) -> IntegrationEnvelope:
    """Phase 3: intervention plans and recommendations."""
    return IntegrationEnvelope(
        kind="concept",
        message=f"Phase 3 concept data integrated: {ctx.output_type}",
        data=ctx.delivery.data,
    )


def handle_intervention(ctx: HandlerContext) -> IntegrationEnvelope:
    """Phase 4: reports from running interventions."""
    return IntegrationEnvelope(
        kind="intervention",
        message=f"Phase 4 intervention data integrated: {ctx.output_type}",
        data=ctx.delivery.data,
    )


def handle_kpi(ctx: HandlerContext) -> IntegrationEnvelope:
    """KPI dashboard: turns the delivery into a custom KPI entry."""
    data = ctx.delivery.data
    value = data.get("value")
    if value is None:
        value = data.get("score")

    return IntegrationEnvelope(
        kind="custom_kpi",
        message=f"Custom KPI integrated: {ctx.output_type}",
        data={
            "type": "partner_kpi",
            "source": ctx.output_type,
            "engagement_id": str(ctx.engagement.id),
            "provider_name": ctx.provider_name,
            "label": kpi_label(ctx.output_type, data),
            "value": value,
            "unit": data.get("unit", "%"),
            "trend": data.get("trend"),
            "details": data,
        },
    )


def handle_legal(ctx: HandlerContext) -> IntegrationEnvelope:
    """Legal requirements: records the requirement as fulfilled."""
    requirement_type = LEGAL_REQUIREMENT_TYPES.get(ctx.output_type, ctx.output_type)
    fulfilled_at = utc_now()
    valid_until = add_years(
        fulfilled_at, ctx.routing.validity_years_for(requirement_type)
    )

    return IntegrationEnvelope(
        kind="legal_requirement",
        message=f"Legal requirement fulfilled: {requirement_type}",
        data={
            "requirement_type": requirement_type,
            "fulfilled_by": "partner_engagement",
            "engagement_id": str(ctx.engagement.id),
            "provider_name": ctx.provider_name,
            "fulfilled_at": fulfilled_at.isoformat(),
            "document_url": ctx.delivery.file_url,
            "valid_until": valid_until.isoformat(),
        },
    )


def handle_health_day(ctx: HandlerContext) -> IntegrationEnvelope:
    """Health day planning and execution."""
    return IntegrationEnvelope(
        kind="health_day",
        message=f"Health day data integrated: {ctx.output_type}",
        data=ctx.delivery.data,
    )


# Integration point prefix -> handler
HANDLERS: Mapping[str, Handler] = MappingProxyType(
    {
        "phase_2": handle_analysis,
        "phase_3": handle_concept,
        "phase_4": handle_intervention,
        "kpi": handle_kpi,
        "legal": handle_legal,
        "health_day": handle_health_day,
    }
)


def handler_for(integration_point: str) -> Handler | None:
    """Select a handler by the integration point's prefix."""
    prefix = integration_point.split(".", 1)[0]
    return HANDLERS.get(prefix)


def kpi_label(output_type: str, data: Mapping[str, object]) -> str:
    if output_type in KPI_LABELS:
        return KPI_LABELS[output_type]
    label = data.get("label")
    if isinstance(label, str) and label:
        return label
    return output_type.replace("_", " ").capitalize()


def add_years(moment: datetime, years: int) -> datetime:
    """Shift by whole years; Feb 29 falls back to Feb 28 in common years."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)
