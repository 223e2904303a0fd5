"""In-memory implementation of ParticipationStore."""

from uuid import UUID

from liaison.participation.models import ParticipationRecord
from liaison.participation.store import ParticipationStore


class InMemoryParticipationStore(ParticipationStore):
    """In-memory implementation of ParticipationStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: dict[UUID, ParticipationRecord] = {}

    async def save(self, record: ParticipationRecord) -> UUID:
        """Save a participation record."""
        self._records[record.id] = record
        return record.id

    async def get(self, tenant_id: UUID, record_id: UUID) -> ParticipationRecord | None:
        """Get a participation record by ID."""
        record = self._records.get(record_id)
        if record is None or record.tenant_id != tenant_id:
            return None
        return record

    async def list_by_engagement(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> list[ParticipationRecord]:
        """List records tied to one engagement."""
        results = [
            record
            for record in self._records.values()
            if record.tenant_id == tenant_id and record.engagement_id == engagement_id
        ]
        results.sort(key=lambda x: x.created_at)
        return results

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        *,
        year: int | None = None,
    ) -> list[ParticipationRecord]:
        """List records for a tenant, optionally limited to one event year."""
        results = []
        for record in self._records.values():
            if record.tenant_id != tenant_id:
                continue
            if year is not None and (record.event_date is None or record.event_date.year != year):
                continue
            results.append(record)
        results.sort(key=lambda x: x.created_at)
        return results
