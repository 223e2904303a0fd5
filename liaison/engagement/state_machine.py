"""Engagement lifecycle state machine.

Owns the legal transition graph. A guarded transition that does not apply
leaves the engagement untouched and returns an INVALID_STATE result.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from liaison.engagement.enums import EngagementStatus, Transition
from liaison.engagement.models import Engagement, utc_now
from liaison.engagement.results import TransitionResult
from liaison.errors import ErrorCode
from liaison.observability.logging import get_logger
from liaison.observability.metrics import ENGAGEMENT_TRANSITIONS

logger = get_logger(__name__)


class TransitionRule(NamedTuple):
    """Allowed source states, target state and rejection message."""

    sources: frozenset[EngagementStatus]
    target: EngagementStatus
    rejection: str


_NON_TERMINAL = frozenset(s for s in EngagementStatus if not s.is_terminal)

TRANSITIONS: Mapping[Transition, TransitionRule] = MappingProxyType(
    {
        Transition.ACTIVATE: TransitionRule(
            frozenset({EngagementStatus.DRAFT}),
            EngagementStatus.ACTIVE,
            "Can only activate draft engagements",
        ),
        Transition.MARK_DATA_SHARED: TransitionRule(
            frozenset({EngagementStatus.ACTIVE}),
            EngagementStatus.DATA_SHARED,
            "Can only mark data as shared on active engagements",
        ),
        Transition.MARK_PROCESSING: TransitionRule(
            frozenset({EngagementStatus.ACTIVE, EngagementStatus.DATA_SHARED}),
            EngagementStatus.PROCESSING,
            "Can only mark as processing after data is shared or engagement is active",
        ),
        Transition.MARK_DELIVERED: TransitionRule(
            frozenset({EngagementStatus.DATA_SHARED, EngagementStatus.PROCESSING}),
            EngagementStatus.DELIVERED,
            "Can only mark as delivered after data is shared or while processing",
        ),
        Transition.COMPLETE: TransitionRule(
            frozenset({EngagementStatus.DELIVERED}),
            EngagementStatus.COMPLETED,
            "Can only complete delivered engagements",
        ),
        Transition.CANCEL: TransitionRule(
            _NON_TERMINAL,
            EngagementStatus.CANCELLED,
            "Cannot cancel completed or already cancelled engagement",
        ),
    }
)


class EngagementStateMachine:
    """Applies named transitions to engagements.

    Example:
        machine = EngagementStateMachine()
        result = machine.activate(engagement)
        if not result.success:
            ...  # result.error.code == ErrorCode.INVALID_STATE
    """

    def can_apply(self, engagement: Engagement, transition: Transition) -> bool:
        return engagement.status in TRANSITIONS[transition].sources

    def allowed_transitions(self, engagement: Engagement) -> list[Transition]:
        """Transitions legal from the engagement's current status."""
        return [t for t in Transition if self.can_apply(engagement, t)]

    def apply(self, engagement: Engagement, transition: Transition) -> TransitionResult:
        """Apply a transition if its guard holds."""
        rule = TRANSITIONS[transition]
        from_status = engagement.status

        if from_status not in rule.sources:
            logger.debug(
                "transition_rejected",
                engagement_id=str(engagement.id),
                transition=transition.value,
                status=from_status.value,
            )
            return TransitionResult.fail(
                ErrorCode.INVALID_STATE,
                rule.rejection,
                from_status=from_status,
                transition=transition.value,
            )

        now = utc_now()
        engagement.status = rule.target
        if transition == Transition.ACTIVATE:
            engagement.activated_at = now
        elif transition == Transition.COMPLETE:
            engagement.completed_at = now
        elif transition == Transition.CANCEL:
            engagement.cancelled_at = now
        engagement.updated_at = now

        ENGAGEMENT_TRANSITIONS.labels(
            from_status=from_status.value,
            to_status=rule.target.value,
        ).inc()
        logger.info(
            "engagement_transitioned",
            tenant_id=str(engagement.tenant_id),
            engagement_id=str(engagement.id),
            from_status=from_status.value,
            to_status=rule.target.value,
        )

        return TransitionResult(
            success=True,
            engagement=engagement,
            from_status=from_status,
            to_status=rule.target,
        )

    def activate(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.ACTIVATE)

    def mark_data_shared(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.MARK_DATA_SHARED)

    def mark_processing(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.MARK_PROCESSING)

    def mark_delivered(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.MARK_DELIVERED)

    def complete(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.COMPLETE)

    def cancel(self, engagement: Engagement) -> TransitionResult:
        return self.apply(engagement, Transition.CANCEL)
