"""Engagement service.

Tenant-scoped facade over the engagement core. Every mutating operation
loads the engagement, applies one component operation and saves only when
that operation succeeded; rejected operations are returned as results and
leave the stored engagement unchanged.
"""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, TypeVar
from uuid import UUID

from liaison.catalog.models import Offering
from liaison.catalog.store import CatalogReader
from liaison.config.models.routing import RoutingConfig
from liaison.engagement.consent import ConsentLedger
from liaison.engagement.enums import EngagementStatus, Transition
from liaison.engagement.models import Engagement
from liaison.engagement.results import (
    BatchIntegrationResult,
    DataAccessStatus,
    DeliveryResult,
    EngagementResult,
    GrantResult,
    IntegrationResult,
    OperationResult,
    PendingIntegration,
    RevokeResult,
    TransitionResult,
)
from liaison.engagement.routing import ResultRouter
from liaison.engagement.state_machine import EngagementStateMachine
from liaison.engagement.store import EngagementStore
from liaison.errors import ErrorCode, InvariantViolationError, OperationError
from liaison.observability.logging import get_logger
from liaison.observability.metrics import OPERATION_ERRORS
from liaison.registry.data_scopes import DataScopeRegistry
from liaison.registry.output_types import OutputTypeRegistry

logger = get_logger(__name__)

R = TypeVar("R", bound=OperationResult)


class EngagementService:
    """Lifecycle, consent and delivery operations on engagements."""

    def __init__(
        self,
        store: EngagementStore,
        catalog: CatalogReader,
        scope_registry: DataScopeRegistry,
        output_registry: OutputTypeRegistry,
        routing_config: RoutingConfig | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._state_machine = EngagementStateMachine()
        self._ledger = ConsentLedger(scope_registry, self._state_machine)
        self._router = ResultRouter(output_registry, self._state_machine, routing_config)

    # Creation and queries

    async def create(
        self,
        tenant_id: UUID,
        provider_id: UUID,
        offering_id: UUID,
        agreed_pricing: dict[str, Any] | None = None,
        scheduled_date: date | None = None,
    ) -> EngagementResult:
        """Create a draft engagement for a provider offering.

        Partner contact details are copied from the provider.
        """
        provider = await self._catalog.get_provider(provider_id)
        if provider is None:
            return self._reject(
                EngagementResult,
                "create",
                ErrorCode.NOT_FOUND,
                f"Provider not found: {provider_id}",
            )

        offering = await self._catalog.get_offering(offering_id)
        if offering is None:
            return self._reject(
                EngagementResult,
                "create",
                ErrorCode.NOT_FOUND,
                f"Offering not found: {offering_id}",
            )

        if offering.provider_id != provider.id:
            return self._reject(
                EngagementResult,
                "create",
                ErrorCode.VALIDATION_ERROR,
                "Offering does not belong to the provider",
            )

        engagement = Engagement(
            tenant_id=tenant_id,
            provider_id=provider.id,
            offering_id=offering.id,
            agreed_pricing=agreed_pricing,
            scheduled_date=scheduled_date,
            partner_contact_name=provider.contact_person,
            partner_contact_email=provider.contact_email,
            partner_contact_phone=provider.contact_phone,
        )
        stored = await self._store.save(engagement)

        logger.info(
            "engagement_created",
            tenant_id=str(tenant_id),
            engagement_id=str(stored.id),
            provider_id=str(provider.id),
            offering_id=str(offering.id),
        )
        return EngagementResult(success=True, engagement=stored)

    async def get_engagement(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> Engagement | None:
        """Get an engagement owned by the tenant."""
        return await self._store.get(tenant_id, engagement_id)

    async def list_engagements(
        self,
        tenant_id: UUID,
        *,
        status: EngagementStatus | None = None,
        limit: int = 100,
    ) -> list[Engagement]:
        return await self._store.list_by_tenant(tenant_id, status=status, limit=limit)

    async def list_active_engagements(self, tenant_id: UUID) -> list[Engagement]:
        return await self._store.list_active(tenant_id)

    async def count_active_engagements(self, tenant_id: UUID) -> int:
        return await self._store.count_active(tenant_id)

    # Lifecycle

    async def activate(self, tenant_id: UUID, engagement_id: UUID) -> TransitionResult:
        return await self._transition(tenant_id, engagement_id, Transition.ACTIVATE)

    async def mark_processing(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> TransitionResult:
        return await self._transition(tenant_id, engagement_id, Transition.MARK_PROCESSING)

    async def complete(self, tenant_id: UUID, engagement_id: UUID) -> TransitionResult:
        return await self._transition(tenant_id, engagement_id, Transition.COMPLETE)

    async def cancel(self, tenant_id: UUID, engagement_id: UUID) -> TransitionResult:
        return await self._transition(tenant_id, engagement_id, Transition.CANCEL)

    async def _transition(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        transition: Transition,
    ) -> TransitionResult:
        operation = transition.value
        loaded = await self._load(tenant_id, engagement_id)
        if isinstance(loaded, OperationError):
            return self._reject_with(TransitionResult, operation, loaded)
        engagement, offering = loaded

        result = self._state_machine.apply(engagement, transition)
        if not result.success:
            return self._returned(operation, result)

        # Scopes granted while still in draft take effect on activation
        if transition == Transition.ACTIVATE:
            self._ledger.sync_status(engagement, offering)

        stored = await self._store.save(engagement)
        return result.model_copy(update={"engagement": stored})

    # Consent

    async def grant_data_scopes(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        scopes: Sequence[str],
    ) -> GrantResult:
        """Grant data scopes; all-or-nothing per call."""
        loaded = await self._load(tenant_id, engagement_id, check_invariants=True)
        if isinstance(loaded, OperationError):
            return self._reject_with(GrantResult, "grant_data_scopes", loaded)
        engagement, offering = loaded

        result = self._ledger.grant(engagement, offering, scopes)
        if not result.success:
            return self._returned("grant_data_scopes", result)

        if result.newly_granted or result.data_shared:
            await self._store.save(engagement)
        return result

    async def revoke_data_scope(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        scope: str,
    ) -> RevokeResult:
        loaded = await self._load(tenant_id, engagement_id)
        if isinstance(loaded, OperationError):
            return self._reject_with(RevokeResult, "revoke_data_scope", loaded)
        engagement, _ = loaded

        result = self._ledger.revoke(engagement, scope)
        if not result.success:
            return self._returned("revoke_data_scope", result)

        await self._store.save(engagement)
        return result

    async def get_data_access_status(
        self, tenant_id: UUID, engagement_id: UUID
    ) -> DataAccessStatus:
        loaded = await self._load(tenant_id, engagement_id)
        if isinstance(loaded, OperationError):
            return self._reject_with(DataAccessStatus, "get_data_access_status", loaded)
        engagement, offering = loaded
        return self._ledger.status(engagement, offering)

    # Deliveries

    async def record_delivery(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        output_type: str,
        payload: Mapping[str, Any],
    ) -> DeliveryResult:
        loaded = await self._load(tenant_id, engagement_id, check_invariants=True)
        if isinstance(loaded, OperationError):
            return self._reject_with(DeliveryResult, "record_delivery", loaded)
        engagement, offering = loaded

        result = self._router.record_delivery(engagement, offering, output_type, payload)
        if not result.success:
            return self._returned("record_delivery", result)

        await self._store.save(engagement)
        return result

    async def mark_output_integrated(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        output_type: str,
    ) -> IntegrationResult:
        """Route a delivered output into the customer's process."""
        loaded = await self._load(tenant_id, engagement_id)
        if isinstance(loaded, OperationError):
            return self._reject_with(IntegrationResult, "mark_output_integrated", loaded)
        engagement, _ = loaded

        provider = await self._catalog.get_provider(engagement.provider_id)
        result = self._router.mark_integrated(
            engagement,
            output_type,
            provider_name=provider.company_name if provider else None,
        )
        if not result.success:
            return self._returned("mark_output_integrated", result)

        if not result.already_integrated:
            await self._store.save(engagement)
        return result

    async def get_pending_integrations(self, tenant_id: UUID) -> list[PendingIntegration]:
        """Delivered outputs of the tenant's open engagements not yet integrated."""
        pending: list[PendingIntegration] = []
        for engagement in await self._store.list_active(tenant_id):
            if not engagement.pending_outputs():
                continue
            provider = await self._catalog.get_provider(engagement.provider_id)
            offering = await self._catalog.get_offering(engagement.offering_id)
            pending.extend(
                self._router.pending_for(
                    engagement,
                    provider_name=provider.company_name if provider else None,
                    offering_title=offering.title if offering else None,
                )
            )
        return pending

    async def auto_integrate_all(self, tenant_id: UUID) -> BatchIntegrationResult:
        """Integrate every pending output of the tenant.

        Safe to re-run: integrated outputs are no longer pending.
        """
        results: list[IntegrationResult] = []
        for item in await self.get_pending_integrations(tenant_id):
            results.append(
                await self.mark_output_integrated(
                    tenant_id, item.engagement_id, item.output_type
                )
            )

        successful = sum(1 for r in results if r.success)
        batch = BatchIntegrationResult(
            processed=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )
        logger.info(
            "auto_integration_finished",
            tenant_id=str(tenant_id),
            processed=batch.processed,
            successful=batch.successful,
            failed=batch.failed,
        )
        return batch

    # Contact and notes

    async def update_partner_contact(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        *,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> EngagementResult:
        """Update the provider contact; None leaves a field unchanged."""
        changes = {
            "partner_contact_name": name,
            "partner_contact_email": email,
            "partner_contact_phone": phone,
        }
        return await self._update_fields(
            tenant_id,
            engagement_id,
            "update_partner_contact",
            {key: value for key, value in changes.items() if value is not None},
        )

    async def update_customer_notes(
        self, tenant_id: UUID, engagement_id: UUID, notes: str
    ) -> EngagementResult:
        """Update tenant-internal notes. Never visible to the provider."""
        return await self._update_fields(
            tenant_id, engagement_id, "update_customer_notes", {"customer_notes": notes}
        )

    async def update_partner_notes(
        self, tenant_id: UUID, engagement_id: UUID, notes: str
    ) -> EngagementResult:
        return await self._update_fields(
            tenant_id, engagement_id, "update_partner_notes", {"partner_notes": notes}
        )

    async def _update_fields(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        operation: str,
        changes: dict[str, Any],
    ) -> EngagementResult:
        engagement = await self._store.get(tenant_id, engagement_id)
        if engagement is None:
            return self._reject(
                EngagementResult,
                operation,
                ErrorCode.NOT_FOUND,
                f"Engagement not found: {engagement_id}",
            )

        if not changes:
            return EngagementResult(success=True, engagement=engagement)

        for field, value in changes.items():
            setattr(engagement, field, value)
        engagement.touch()

        stored = await self._store.save(engagement)
        logger.info(
            "engagement_updated",
            tenant_id=str(tenant_id),
            engagement_id=str(engagement_id),
            fields=sorted(changes),
        )
        return EngagementResult(success=True, engagement=stored)

    # Helpers

    async def _load(
        self,
        tenant_id: UUID,
        engagement_id: UUID,
        *,
        check_invariants: bool = False,
    ) -> tuple[Engagement, Offering] | OperationError:
        """Load an engagement with its offering.

        Operations that add scopes or deliveries pass ``check_invariants`` and
        raise on an aggregate that contradicts its offering. Revocation,
        cancellation and the rest stay available so such an engagement can
        still be wound down after the offering changed.
        """
        engagement = await self._store.get(tenant_id, engagement_id)
        if engagement is None:
            return OperationError(
                code=ErrorCode.NOT_FOUND,
                message=f"Engagement not found: {engagement_id}",
            )

        offering = await self._catalog.get_offering(engagement.offering_id)
        if offering is None:
            return OperationError(
                code=ErrorCode.NOT_FOUND,
                message=f"Offering not found: {engagement.offering_id}",
            )

        if check_invariants:
            _check_invariants(engagement, offering)
        return engagement, offering

    def _reject(
        self,
        result_cls: type[R],
        operation: str,
        code: ErrorCode,
        message: str,
    ) -> R:
        return self._reject_with(result_cls, operation, OperationError(code=code, message=message))

    def _reject_with(self, result_cls: type[R], operation: str, error: OperationError) -> R:
        return self._returned(operation, result_cls(success=False, error=error))

    def _returned(self, operation: str, result: R) -> R:
        """Count and log a rejected operation, then hand it back."""
        if result.error is not None:
            OPERATION_ERRORS.labels(operation=operation, error_code=result.error.code.value).inc()
            logger.info(
                "operation_rejected",
                operation=operation,
                error_code=result.error.code.value,
                error_message=result.error.message,
            )
        return result


def _check_invariants(engagement: Engagement, offering: Offering) -> None:
    """Raise if the stored aggregate contradicts its offering."""
    stray_scopes = engagement.granted_scopes - offering.required_data_scopes
    if stray_scopes:
        raise InvariantViolationError(
            f"Engagement {engagement.id} has scopes not required by its offering: "
            + ", ".join(sorted(stray_scopes))
        )

    if offering.output_data_types:
        stray_outputs = set(engagement.delivered_outputs) - offering.output_data_types
        if stray_outputs:
            raise InvariantViolationError(
                f"Engagement {engagement.id} has outputs not delivered by its offering: "
                + ", ".join(sorted(stray_outputs))
            )
