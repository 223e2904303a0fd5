"""In-memory implementation of EngagementStore."""

from uuid import UUID

from liaison.db.errors import ConflictError, NotFoundError, ValidationError
from liaison.engagement.enums import EngagementStatus
from liaison.engagement.models import Engagement
from liaison.engagement.store import EngagementStore


class InMemoryEngagementStore(EngagementStore):
    """In-memory implementation of EngagementStore for testing and development.

    Stores deep copies so callers never share state with the store, and
    checks ``version`` on every save the way a row-versioned table would.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._engagements: dict[UUID, Engagement] = {}

    async def get(self, tenant_id: UUID, engagement_id: UUID) -> Engagement | None:
        """Get an engagement by ID."""
        engagement = self._engagements.get(engagement_id)
        if engagement is None or engagement.tenant_id != tenant_id:
            return None
        return engagement.model_copy(deep=True)

    async def save(self, engagement: Engagement) -> Engagement:
        """Save an engagement, bumping its version."""
        current = self._engagements.get(engagement.id)

        if current is None:
            if engagement.version != 0:
                raise NotFoundError(f"Engagement {engagement.id} does not exist")
        else:
            if current.tenant_id != engagement.tenant_id:
                raise ValidationError(f"Engagement {engagement.id} cannot change tenant")
            if current.version != engagement.version:
                raise ConflictError(
                    f"Engagement {engagement.id} was modified concurrently",
                    expected_version=engagement.version,
                    actual_version=current.version,
                )

        stored = engagement.model_copy(deep=True, update={"version": engagement.version + 1})
        self._engagements[stored.id] = stored
        return stored.model_copy(deep=True)

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        *,
        status: EngagementStatus | None = None,
        limit: int = 100,
    ) -> list[Engagement]:
        """List engagements for a tenant, newest first."""
        results = []
        for engagement in self._engagements.values():
            if engagement.tenant_id != tenant_id:
                continue
            if status is not None and engagement.status != status:
                continue
            results.append(engagement.model_copy(deep=True))
        results.sort(key=lambda x: x.created_at, reverse=True)
        return results[:limit]

    async def list_active(self, tenant_id: UUID) -> list[Engagement]:
        """List non-terminal engagements for a tenant."""
        results = [
            engagement.model_copy(deep=True)
            for engagement in self._engagements.values()
            if engagement.tenant_id == tenant_id and not engagement.is_terminal
        ]
        results.sort(key=lambda x: x.created_at, reverse=True)
        return results

    async def count_active(self, tenant_id: UUID) -> int:
        """Count non-terminal engagements for a tenant."""
        return sum(
            1
            for engagement in self._engagements.values()
            if engagement.tenant_id == tenant_id and not engagement.is_terminal
        )
