"""ParticipationStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from liaison.participation.models import ParticipationRecord


class ParticipationStore(ABC):
    """Abstract interface for participation record storage.

    All queries are tenant-scoped.
    """

    @abstractmethod
    async def save(self, record: ParticipationRecord) -> UUID:
        """Save a participation record."""
        pass

    @abstractmethod
    async def get(self, tenant_id: UUID, record_id: UUID) -> ParticipationRecord | None:
        """Get a participation record by ID."""
        pass

    @abstractmethod
    async def list_by_engagement(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> list[ParticipationRecord]:
        """List records tied to one engagement."""
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: UUID,
        *,
        year: int | None = None,
    ) -> list[ParticipationRecord]:
        """List records for a tenant, optionally limited to one event year."""
        pass
