"""Result router.

Records provider deliverables against the output type registry and the
offering, and routes delivered results into the customer's process by
integration point.
"""

from collections.abc import Mapping
from typing import Any

from liaison.catalog.models import Offering
from liaison.config.models.routing import RoutingConfig
from liaison.engagement.enums import Transition
from liaison.engagement.handlers import HandlerContext, handler_for
from liaison.engagement.models import DeliveryRecord, Engagement, IntegrationRecord
from liaison.engagement.results import DeliveryResult, IntegrationResult, PendingIntegration
from liaison.engagement.state_machine import EngagementStateMachine
from liaison.errors import ErrorCode
from liaison.observability.logging import get_logger
from liaison.observability.metrics import DELIVERIES, INTEGRATIONS
from liaison.registry.output_types import OutputTypeRegistry

logger = get_logger(__name__)


class ResultRouter:
    """Validates, records and integrates provider deliverables."""

    def __init__(
        self,
        output_registry: OutputTypeRegistry,
        state_machine: EngagementStateMachine,
        routing_config: RoutingConfig | None = None,
    ) -> None:
        self._outputs = output_registry
        self._state_machine = state_machine
        self._routing = routing_config or RoutingConfig()

    def record_delivery(
        self,
        engagement: Engagement,
        offering: Offering,
        output_type: str,
        payload: Mapping[str, Any],
    ) -> DeliveryResult:
        """Record a deliverable.

        A later delivery of the same output type replaces the earlier one and
        makes it pending integration again. The first delivery after data was
        shared moves the engagement to delivered.
        """
        if not self._outputs.exists(output_type):
            return DeliveryResult.fail(
                ErrorCode.INVALID_OUTPUT_TYPE,
                f"Unknown output type: {output_type}",
                output_type=output_type,
            )

        if not offering.delivers_output_type(output_type):
            return DeliveryResult.fail(
                ErrorCode.INVALID_OUTPUT_TYPE,
                f"Output type not expected from this offering: {output_type}",
                output_type=output_type,
            )

        if engagement.is_terminal:
            return DeliveryResult.fail(
                ErrorCode.INVALID_STATE,
                f"Cannot record deliveries on {engagement.status.value} engagements",
                output_type=output_type,
            )

        if not isinstance(payload, Mapping):
            return DeliveryResult.fail(
                ErrorCode.VALIDATION_ERROR,
                "Delivery payload must be a mapping",
                output_type=output_type,
            )

        record = DeliveryRecord.from_payload(output_type, dict(payload))
        engagement.delivered_outputs = {**engagement.delivered_outputs, output_type: record}
        if output_type in engagement.integration_status:
            engagement.integration_status = {
                key: value
                for key, value in engagement.integration_status.items()
                if key != output_type
            }
        engagement.touch()

        status_advanced = False
        if self._state_machine.can_apply(engagement, Transition.MARK_DELIVERED):
            status_advanced = self._state_machine.mark_delivered(engagement).success

        integration_point = self._outputs.integration_point_for(output_type)
        DELIVERIES.labels(output_type=output_type).inc()
        logger.info(
            "delivery_recorded",
            tenant_id=str(engagement.tenant_id),
            engagement_id=str(engagement.id),
            output_type=output_type,
            integration_point=integration_point,
        )

        return DeliveryResult(
            success=True,
            output_type=output_type,
            integration_point=integration_point,
            delivered_outputs=engagement.delivered_output_keys(),
            status_advanced=status_advanced,
        )

    def mark_integrated(
        self,
        engagement: Engagement,
        output_type: str,
        provider_name: str | None = None,
    ) -> IntegrationResult:
        """Route a delivered result to its integration point.

        The handler runs first; the integration record is written only when
        a handler accepted the result. Marking an already integrated output
        again succeeds without running the handler.
        """
        delivery = engagement.delivered_outputs.get(output_type)
        if delivery is None:
            return IntegrationResult.fail(
                ErrorCode.NOT_DELIVERED,
                f"Output not delivered: {output_type}",
                engagement_id=engagement.id,
                output_type=output_type,
            )

        existing = engagement.integration_status.get(output_type)
        if existing is not None:
            return IntegrationResult(
                success=True,
                engagement_id=engagement.id,
                output_type=output_type,
                integration_point=existing.integration_point,
                already_integrated=True,
            )

        integration_point = self._outputs.integration_point_for(output_type)
        if integration_point is None:
            return IntegrationResult.fail(
                ErrorCode.NO_HANDLER,
                f"No integration point defined for: {output_type}",
                engagement_id=engagement.id,
                output_type=output_type,
            )

        handler = handler_for(integration_point)
        if handler is None:
            INTEGRATIONS.labels(integration_point=integration_point, outcome="no_handler").inc()
            logger.warning(
                "integration_handler_missing",
                tenant_id=str(engagement.tenant_id),
                engagement_id=str(engagement.id),
                output_type=output_type,
                integration_point=integration_point,
            )
            return IntegrationResult.fail(
                ErrorCode.NO_HANDLER,
                f"No handler for integration point: {integration_point}",
                engagement_id=engagement.id,
                output_type=output_type,
                integration_point=integration_point,
            )

        envelope = handler(
            HandlerContext(
                engagement=engagement,
                output_type=output_type,
                integration_point=integration_point,
                delivery=delivery,
                provider_name=provider_name,
                routing=self._routing,
            )
        )

        engagement.integration_status = {
            **engagement.integration_status,
            output_type: IntegrationRecord(integration_point=integration_point),
        }
        engagement.touch()

        INTEGRATIONS.labels(integration_point=integration_point, outcome="integrated").inc()
        logger.info(
            "output_integrated",
            tenant_id=str(engagement.tenant_id),
            engagement_id=str(engagement.id),
            output_type=output_type,
            integration_point=integration_point,
        )

        return IntegrationResult(
            success=True,
            engagement_id=engagement.id,
            output_type=output_type,
            integration_point=integration_point,
            envelope=envelope,
        )

    def pending_for(
        self,
        engagement: Engagement,
        provider_name: str | None = None,
        offering_title: str | None = None,
    ) -> list[PendingIntegration]:
        """Delivered outputs of one engagement that are not integrated yet."""
        if engagement.is_terminal:
            return []

        return [
            PendingIntegration(
                engagement_id=engagement.id,
                output_type=output_type,
                delivered_at=engagement.delivered_outputs[output_type].delivered_at,
                integration_point=self._outputs.integration_point_for(output_type),
                provider_name=provider_name,
                offering_title=offering_title,
            )
            for output_type in engagement.pending_outputs()
        ]
