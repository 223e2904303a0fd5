"""Tests for EngagementService."""

from uuid import uuid4

import pytest
import pytest_asyncio

from liaison.engagement.enums import EngagementStatus
from liaison.engagement.service import EngagementService
from liaison.errors import ErrorCode, InvariantViolationError
from tests.factories import EngagementFactory, OfferingFactory, ProviderFactory


@pytest_asyncio.fixture
async def draft(service: EngagementService, tenant_id, provider, offering):
    result = await service.create(tenant_id, provider.id, offering.id)
    return result.engagement


async def share_data(service, tenant_id, engagement_id, offering):
    await service.activate(tenant_id, engagement_id)
    await service.grant_data_scopes(
        tenant_id, engagement_id, sorted(offering.required_data_scopes)
    )


class TestCreate:
    """Tests for creating engagements."""

    @pytest.mark.asyncio
    async def test_creates_draft_with_contact(self, service, tenant_id, provider, offering):
        result = await service.create(
            tenant_id, provider.id, offering.id, agreed_pricing={"total": 4800}
        )

        assert result.success
        engagement = result.engagement
        assert engagement.status == EngagementStatus.DRAFT
        assert engagement.partner_contact_email == provider.contact_email
        assert engagement.agreed_pricing == {"total": 4800}
        assert engagement.version == 1

    @pytest.mark.asyncio
    async def test_unknown_offering(self, service, tenant_id, provider):
        result = await service.create(tenant_id, provider.id, uuid4())
        assert result.error_code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_provider(self, service, tenant_id, offering):
        result = await service.create(tenant_id, uuid4(), offering.id)
        assert result.error_code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_offering_of_other_provider(self, service, catalog, tenant_id, offering):
        other = catalog.add_provider(ProviderFactory.create(company_name="Andere AG"))

        result = await service.create(tenant_id, other.id, offering.id)

        assert result.error_code == ErrorCode.VALIDATION_ERROR


class TestTenantIsolation:
    """Another tenant's engagement behaves as if it did not exist."""

    @pytest.mark.asyncio
    async def test_operations_from_other_tenant(self, service, draft):
        stranger = uuid4()

        assert await service.get_engagement(stranger, draft.id) is None
        assert (await service.activate(stranger, draft.id)).error_code == ErrorCode.NOT_FOUND
        grant = await service.grant_data_scopes(stranger, draft.id, ["goals"])
        assert grant.error_code == ErrorCode.NOT_FOUND
        delivery = await service.record_delivery(stranger, draft.id, "copsoq_analysis", {})
        assert delivery.error_code == ErrorCode.NOT_FOUND
        notes = await service.update_customer_notes(stranger, draft.id, "x")
        assert notes.error_code == ErrorCode.NOT_FOUND


class TestLifecycle:
    """End-to-end lifecycle through the service."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, service, tenant_id, draft, offering):
        await service.activate(tenant_id, draft.id)

        partial = await service.grant_data_scopes(tenant_id, draft.id, ["employee_count"])
        assert not partial.all_required_granted
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.ACTIVE

        rest = await service.grant_data_scopes(tenant_id, draft.id, ["goals", "survey_results"])
        assert rest.all_required_granted
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.DATA_SHARED

        delivery = await service.record_delivery(
            tenant_id, draft.id, "copsoq_analysis", {"data": {"score": 58}}
        )
        assert delivery.integration_point == "phase_2.analysis"
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.DELIVERED

        completed = await service.complete(tenant_id, draft.id)
        assert completed.success
        assert completed.engagement.status == EngagementStatus.COMPLETED
        assert completed.engagement.completed_at is not None

    @pytest.mark.asyncio
    async def test_scopes_granted_in_draft_share_on_activation(
        self, service, tenant_id, draft, offering
    ):
        granted = await service.grant_data_scopes(
            tenant_id, draft.id, sorted(offering.required_data_scopes)
        )
        assert granted.all_required_granted
        assert not granted.data_shared

        activated = await service.activate(tenant_id, draft.id)

        assert activated.success
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.DATA_SHARED

    @pytest.mark.asyncio
    async def test_cancel_completed_leaves_store_unchanged(
        self, service, engagement_store, tenant_id, draft
    ):
        completed = EngagementFactory.create(
            tenant_id=tenant_id,
            provider_id=draft.provider_id,
            offering_id=draft.offering_id,
            status=EngagementStatus.COMPLETED,
        )
        await engagement_store.save(completed)

        result = await service.cancel(tenant_id, completed.id)

        assert result.error_code == ErrorCode.INVALID_STATE
        stored = await service.get_engagement(tenant_id, completed.id)
        assert stored.status == EngagementStatus.COMPLETED
        assert stored.version == 1

    @pytest.mark.asyncio
    async def test_rejected_grant_not_saved(self, service, tenant_id, draft):
        await service.activate(tenant_id, draft.id)
        before = await service.get_engagement(tenant_id, draft.id)

        result = await service.grant_data_scopes(tenant_id, draft.id, ["goals", "nope"])

        assert result.error_code == ErrorCode.INVALID_SCOPE
        after = await service.get_engagement(tenant_id, draft.id)
        assert after == before

    @pytest.mark.asyncio
    async def test_revoke_and_access_status(self, service, tenant_id, draft, offering):
        await share_data(service, tenant_id, draft.id, offering)

        revoked = await service.revoke_data_scope(tenant_id, draft.id, "goals")
        status = await service.get_data_access_status(tenant_id, draft.id)

        assert revoked.success
        assert not status.all_granted
        assert not status.required_scopes["goals"].granted
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.DATA_SHARED

    @pytest.mark.asyncio
    async def test_counts_active(self, service, tenant_id, draft):
        assert await service.count_active_engagements(tenant_id) == 1
        await service.cancel(tenant_id, draft.id)
        assert await service.count_active_engagements(tenant_id) == 0
        assert await service.list_active_engagements(tenant_id) == []
        assert len(await service.list_engagements(tenant_id)) == 1


class TestIntegration:
    """Tests for integration through the service."""

    @pytest.mark.asyncio
    async def test_mark_output_integrated_uses_provider_name(
        self, service, tenant_id, draft, offering, provider
    ):
        await share_data(service, tenant_id, draft.id, offering)
        await service.record_delivery(tenant_id, draft.id, "copsoq_analysis", {"data": {}})

        result = await service.mark_output_integrated(tenant_id, draft.id, "copsoq_analysis")

        assert result.success
        assert result.envelope.data["provider_name"] == provider.company_name
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.is_integrated("copsoq_analysis")

    @pytest.mark.asyncio
    async def test_pending_integrations(self, service, tenant_id, draft, offering, provider):
        await share_data(service, tenant_id, draft.id, offering)
        await service.record_delivery(tenant_id, draft.id, "copsoq_analysis", {})

        pending = await service.get_pending_integrations(tenant_id)

        assert len(pending) == 1
        assert pending[0].engagement_id == draft.id
        assert pending[0].provider_name == provider.company_name
        assert pending[0].offering_title == offering.title

    @pytest.mark.asyncio
    async def test_auto_integrate_all_is_rerunnable(self, service, tenant_id, draft, offering):
        await share_data(service, tenant_id, draft.id, offering)
        for output_type in ("copsoq_analysis", "participation_stats", "event_feedback"):
            await service.record_delivery(tenant_id, draft.id, output_type, {"value": 1})

        first = await service.auto_integrate_all(tenant_id)

        assert first.processed == 3
        assert first.successful == 2
        assert first.failed == 1
        failed = [r for r in first.results if not r.success]
        assert failed[0].error_code == ErrorCode.NO_HANDLER

        second = await service.auto_integrate_all(tenant_id)

        # Only the output without a handler is still pending
        assert second.processed == 1
        assert second.successful == 0

    @pytest.mark.asyncio
    async def test_auto_integrate_nothing_pending(self, service, tenant_id):
        result = await service.auto_integrate_all(tenant_id)
        assert result.processed == 0
        assert result.results == []

    @pytest.mark.asyncio
    async def test_already_integrated_not_resaved(self, service, tenant_id, draft, offering):
        await share_data(service, tenant_id, draft.id, offering)
        await service.record_delivery(tenant_id, draft.id, "schedule", {})
        await service.mark_output_integrated(tenant_id, draft.id, "schedule")
        version = (await service.get_engagement(tenant_id, draft.id)).version

        result = await service.mark_output_integrated(tenant_id, draft.id, "schedule")

        assert result.already_integrated
        assert (await service.get_engagement(tenant_id, draft.id)).version == version


class TestUpdates:
    """Tests for contact and note updates."""

    @pytest.mark.asyncio
    async def test_partial_contact_update(self, service, tenant_id, draft, provider):
        result = await service.update_partner_contact(
            tenant_id, draft.id, phone="+49 89 7654321"
        )

        assert result.success
        assert result.engagement.partner_contact_phone == "+49 89 7654321"
        assert result.engagement.partner_contact_name == provider.contact_person

    @pytest.mark.asyncio
    async def test_notes(self, service, tenant_id, draft):
        await service.update_customer_notes(tenant_id, draft.id, "intern")
        result = await service.update_partner_notes(tenant_id, draft.id, "Termin bestätigt")

        assert result.engagement.customer_notes == "intern"
        assert result.engagement.partner_notes == "Termin bestätigt"


class TestInvariants:
    @pytest.mark.asyncio
    async def test_stray_scope_raises(self, service, engagement_store, tenant_id, offering):
        engagement = EngagementFactory.create(
            tenant_id=tenant_id,
            offering_id=offering.id,
            status=EngagementStatus.ACTIVE,
            granted_scopes={"employee_list"},
        )
        await engagement_store.save(engagement)

        with pytest.raises(InvariantViolationError):
            await service.grant_data_scopes(tenant_id, engagement.id, ["goals"])

    @pytest.mark.asyncio
    async def test_stray_output_raises(self, service, engagement_store, catalog, tenant_id):
        offering = catalog.add_offering(
            OfferingFactory.create(output_data_types=["copsoq_analysis"])
        )
        engagement = EngagementFactory.create(
            tenant_id=tenant_id,
            offering_id=offering.id,
            status=EngagementStatus.DELIVERED,
            delivered={"health_report": {}},
        )
        await engagement_store.save(engagement)

        with pytest.raises(InvariantViolationError):
            await service.record_delivery(tenant_id, engagement.id, "copsoq_analysis", {})

    @pytest.mark.asyncio
    async def test_wind_down_after_offering_narrowed(
        self, service, catalog, tenant_id, provider, draft, offering
    ):
        """Revoke and cancel stay available once the offering drops a granted scope."""
        await service.activate(tenant_id, draft.id)
        await service.grant_data_scopes(tenant_id, draft.id, ["goals", "employee_count"])
        catalog.add_offering(
            OfferingFactory.create(
                id=offering.id,
                provider_id=provider.id,
                required_data_scopes=["employee_count"],
            )
        )

        revoked = await service.revoke_data_scope(tenant_id, draft.id, "goals")
        cancelled = await service.cancel(tenant_id, draft.id)

        assert revoked.success
        assert cancelled.success
        engagement = await service.get_engagement(tenant_id, draft.id)
        assert engagement.status == EngagementStatus.CANCELLED
        assert engagement.granted_scopes == {"employee_count"}
