"""Engagement lifecycle and controlled data exchange.

An engagement moves through a fixed status graph, collects data scope
consent from the tenant and receives deliverables from the provider.
"""

from liaison.engagement.consent import ConsentLedger
from liaison.engagement.enums import Audience, ConsentAction, EngagementStatus, Transition
from liaison.engagement.models import ConsentEvent, DeliveryRecord, Engagement, IntegrationRecord
from liaison.engagement.routing import ResultRouter
from liaison.engagement.service import EngagementService
from liaison.engagement.state_machine import EngagementStateMachine
from liaison.engagement.store import EngagementStore

__all__ = [
    "Audience",
    "ConsentAction",
    "ConsentEvent",
    "ConsentLedger",
    "DeliveryRecord",
    "Engagement",
    "EngagementService",
    "EngagementStateMachine",
    "EngagementStatus",
    "EngagementStore",
    "IntegrationRecord",
    "ResultRouter",
    "Transition",
]
