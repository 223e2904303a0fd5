"""In-memory implementation of CatalogReader."""

from uuid import UUID

from liaison.catalog.models import Offering, Provider
from liaison.catalog.store import CatalogReader


class InMemoryCatalog(CatalogReader):
    """In-memory catalog for testing and development."""

    def __init__(self) -> None:
        self._offerings: dict[UUID, Offering] = {}
        self._providers: dict[UUID, Provider] = {}

    def add_provider(self, provider: Provider) -> Provider:
        self._providers[provider.id] = provider
        return provider

    def add_offering(self, offering: Offering) -> Offering:
        self._offerings[offering.id] = offering
        return offering

    async def get_offering(self, offering_id: UUID) -> Offering | None:
        return self._offerings.get(offering_id)

    async def get_provider(self, provider_id: UUID) -> Provider | None:
        return self._providers.get(provider_id)
