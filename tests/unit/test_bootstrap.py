"""Tests for bootstrap wiring."""

import pytest

from liaison.bootstrap import LiaisonContext, bootstrap, create_engagement_store
from liaison.catalog.stores.inmemory import InMemoryCatalog
from liaison.config.models.reporting import ReportingConfig
from liaison.config.models.storage import StorageConfig
from liaison.config.settings import Settings
from liaison.engagement.enums import Audience, EngagementStatus
from liaison.engagement.stores import InMemoryEngagementStore
from liaison.participation.enums import ParticipationStatus
from tests.factories import OfferingFactory, ParticipationFactory, ProviderFactory


@pytest.fixture
def settings() -> Settings:
    return Settings(reporting=ReportingConfig(top_participants_limit=3))


class TestBootstrap:
    """Tests for bootstrap()."""

    def test_builds_inmemory_context(self, settings):
        ctx = bootstrap(settings, configure_logging=False)

        assert isinstance(ctx, LiaisonContext)
        assert isinstance(ctx.engagement_store, InMemoryEngagementStore)
        assert isinstance(ctx.catalog, InMemoryCatalog)
        assert ctx.settings.reporting.top_participants_limit == 3

    def test_unsupported_backend(self):
        config = StorageConfig.model_construct(engagement_backend="postgres")

        with pytest.raises(ValueError, match="Unsupported engagement backend"):
            create_engagement_store(config)

    @pytest.mark.asyncio
    async def test_services_share_stores(self, settings, tenant_id):
        """An engagement created through one service is visible to reporting."""
        catalog = InMemoryCatalog()
        provider = catalog.add_provider(ProviderFactory.create())
        offering = catalog.add_offering(
            OfferingFactory.create(provider_id=provider.id, required_data_scopes=["goals"])
        )
        ctx = bootstrap(settings, catalog=catalog, configure_logging=False)

        created = await ctx.engagements.create(tenant_id, provider.id, offering.id)
        engagement_id = created.engagement.id
        await ctx.engagements.activate(tenant_id, engagement_id)
        grant = await ctx.engagements.grant_data_scopes(tenant_id, engagement_id, ["goals"])
        assert grant.data_shared

        for record in ParticipationFactory.create_many(
            tenant_id=tenant_id,
            engagement_id=engagement_id,
            statuses={ParticipationStatus.ATTENDED: 4, ParticipationStatus.NO_SHOW: 1},
        ):
            await ctx.participation_store.save(record)

        stats = await ctx.reporting.get_aggregated_stats_for_partner(tenant_id, engagement_id)
        report = await ctx.reporting.generate_internal_report(
            tenant_id, 2025, audience=Audience.TENANT
        )

        assert stats.stats.attendance_rate == 80.0
        assert len(report.top_participants) == 3
        engagement = await ctx.engagements.get_engagement(tenant_id, engagement_id)
        assert engagement.status == EngagementStatus.DATA_SHARED
