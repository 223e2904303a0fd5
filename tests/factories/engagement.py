"""Test factories for engagement models."""

from typing import Any
from uuid import UUID, uuid4

from liaison.engagement.enums import EngagementStatus
from liaison.engagement.models import DeliveryRecord, Engagement


class EngagementFactory:
    """Factory for creating Engagement instances for testing."""

    @staticmethod
    def create(
        *,
        id: UUID | None = None,
        tenant_id: UUID | None = None,
        provider_id: UUID | None = None,
        offering_id: UUID | None = None,
        status: EngagementStatus = EngagementStatus.DRAFT,
        granted_scopes: set[str] | None = None,
        delivered: dict[str, dict[str, Any]] | None = None,
        customer_notes: str | None = None,
    ) -> Engagement:
        """Create an Engagement with sensible defaults.

        Args:
            delivered: Output type -> payload, recorded as deliveries
        """
        return Engagement(
            id=id or uuid4(),
            tenant_id=tenant_id or uuid4(),
            provider_id=provider_id or uuid4(),
            offering_id=offering_id or uuid4(),
            status=status,
            granted_scopes=granted_scopes or set(),
            delivered_outputs={
                output_type: DeliveryRecord.from_payload(output_type, payload)
                for output_type, payload in (delivered or {}).items()
            },
            customer_notes=customer_notes,
        )
