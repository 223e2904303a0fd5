"""Bootstrap module for Liaison setup.

Wires settings, logging, stores and services in one call, for notebooks,
scripts and tests. Handles:
- Loading configuration from TOML files
- Creating stores for the configured backends
- Creating the engagement and participation reporting services

Example usage:

    from liaison.bootstrap import bootstrap

    ctx = bootstrap()

    result = await ctx.engagements.create(
        tenant_id=tenant_id,
        provider_id=provider.id,
        offering_id=offering.id,
    )
"""

from dataclasses import dataclass

from liaison.catalog.store import CatalogReader
from liaison.catalog.stores.inmemory import InMemoryCatalog
from liaison.config import get_settings
from liaison.config.models.storage import StorageConfig
from liaison.config.settings import Settings
from liaison.engagement.service import EngagementService
from liaison.engagement.store import EngagementStore
from liaison.engagement.stores.inmemory import InMemoryEngagementStore
from liaison.observability.logging import get_logger, setup_logging
from liaison.participation.service import ParticipationReportingService
from liaison.participation.store import ParticipationStore
from liaison.participation.stores.inmemory import InMemoryParticipationStore
from liaison.registry.loader import get_data_scope_registry, get_output_type_registry

logger = get_logger(__name__)


@dataclass
class LiaisonContext:
    """Services and stores returned from bootstrap."""

    settings: Settings
    engagement_store: EngagementStore
    participation_store: ParticipationStore
    catalog: CatalogReader
    engagements: EngagementService
    reporting: ParticipationReportingService


def create_engagement_store(config: StorageConfig) -> EngagementStore:
    """Create an EngagementStore for the configured backend.

    Raises:
        ValueError: If backend type is not supported
    """
    if config.engagement_backend == "inmemory":
        logger.info("creating_engagement_store", backend="inmemory")
        return InMemoryEngagementStore()
    raise ValueError(f"Unsupported engagement backend: {config.engagement_backend}")


def create_participation_store(config: StorageConfig) -> ParticipationStore:
    """Create a ParticipationStore for the configured backend.

    Raises:
        ValueError: If backend type is not supported
    """
    if config.participation_backend == "inmemory":
        logger.info("creating_participation_store", backend="inmemory")
        return InMemoryParticipationStore()
    raise ValueError(f"Unsupported participation backend: {config.participation_backend}")


def create_catalog(config: StorageConfig) -> CatalogReader:
    """Create a CatalogReader for the configured backend.

    Raises:
        ValueError: If backend type is not supported
    """
    if config.catalog_backend == "inmemory":
        logger.info("creating_catalog", backend="inmemory")
        return InMemoryCatalog()
    raise ValueError(f"Unsupported catalog backend: {config.catalog_backend}")


def bootstrap(
    settings: Settings | None = None,
    *,
    catalog: CatalogReader | None = None,
    configure_logging: bool = True,
) -> LiaisonContext:
    """Build stores and services from settings.

    Args:
        settings: Settings to use (default: ``get_settings()``)
        catalog: Catalog to read offerings from (default: one built from settings)
        configure_logging: Whether to call ``setup_logging`` from settings

    Returns:
        LiaisonContext with stores and services
    """
    settings = settings or get_settings()

    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_pii=log_config.redact_pii,
        )

    engagement_store = create_engagement_store(settings.storage)
    participation_store = create_participation_store(settings.storage)
    catalog = catalog or create_catalog(settings.storage)

    engagements = EngagementService(
        store=engagement_store,
        catalog=catalog,
        scope_registry=get_data_scope_registry(),
        output_registry=get_output_type_registry(),
        routing_config=settings.routing,
    )
    reporting = ParticipationReportingService(
        participation_store=participation_store,
        engagement_store=engagement_store,
        config=settings.reporting,
    )

    logger.info("liaison_bootstrapped", app_name=settings.app_name)

    return LiaisonContext(
        settings=settings,
        engagement_store=engagement_store,
        participation_store=participation_store,
        catalog=catalog,
        engagements=engagements,
        reporting=reporting,
    )
