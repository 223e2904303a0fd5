"""EngagementStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from liaison.engagement.enums import EngagementStatus
from liaison.engagement.models import Engagement


class EngagementStore(ABC):
    """Abstract interface for engagement storage.

    All reads are tenant-scoped: an engagement owned by another tenant is
    reported as missing. Writes go through an optimistic version check so
    two read-modify-write cycles on the same engagement cannot both win.
    """

    @abstractmethod
    async def get(self, tenant_id: UUID, engagement_id: UUID) -> Engagement | None:
        """Get an engagement by ID."""
        pass

    @abstractmethod
    async def save(self, engagement: Engagement) -> Engagement:
        """Save an engagement and return the stored copy.

        Raises:
            ConflictError: If the engagement was changed since it was read
        """
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: UUID,
        *,
        status: EngagementStatus | None = None,
        limit: int = 100,
    ) -> list[Engagement]:
        """List engagements for a tenant, newest first."""
        pass

    @abstractmethod
    async def list_active(self, tenant_id: UUID) -> list[Engagement]:
        """List non-terminal engagements for a tenant."""
        pass

    @abstractmethod
    async def count_active(self, tenant_id: UUID) -> int:
        """Count non-terminal engagements for a tenant."""
        pass
