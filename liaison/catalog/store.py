"""CatalogReader abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from liaison.catalog.models import Offering, Provider


class CatalogReader(ABC):
    """Read-only access to offerings and providers."""

    @abstractmethod
    async def get_offering(self, offering_id: UUID) -> Offering | None:
        """Get an offering by ID."""
        pass

    @abstractmethod
    async def get_provider(self, provider_id: UUID) -> Provider | None:
        """Get a provider by ID."""
        pass
