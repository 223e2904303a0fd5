"""Prometheus metrics for Liaison.

Counts lifecycle transitions, consent grants, deliveries and integrations.
Labels never carry tenant-identifying or personal data.
"""

from prometheus_client import Counter, Histogram

ENGAGEMENT_TRANSITIONS = Counter(
    "liaison_engagement_transitions_total",
    "Engagement status transitions applied",
    labelnames=["from_status", "to_status"],
)

OPERATION_ERRORS = Counter(
    "liaison_operation_errors_total",
    "Business-rule rejections returned to callers",
    labelnames=["operation", "error_code"],
)

SCOPE_GRANTS = Counter(
    "liaison_scope_grants_total",
    "Data scopes newly granted to providers",
    labelnames=["sensitivity"],
)

DELIVERIES = Counter(
    "liaison_deliveries_total",
    "Provider deliverables recorded",
    labelnames=["output_type"],
)

INTEGRATIONS = Counter(
    "liaison_integrations_total",
    "Delivered outputs routed into the customer process",
    labelnames=["integration_point", "outcome"],
)

PARTNER_REPORT_PARTICIPATIONS = Histogram(
    "liaison_partner_report_participations",
    "Number of participation records behind each partner report",
    buckets=(0, 5, 10, 25, 50, 100, 250, 500, 1000),
)
