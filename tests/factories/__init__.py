"""Test factories for creating test data."""

from tests.factories.catalog import OfferingFactory, ProviderFactory
from tests.factories.engagement import EngagementFactory
from tests.factories.participation import ParticipationFactory

__all__ = [
    "EngagementFactory",
    "OfferingFactory",
    "ParticipationFactory",
    "ProviderFactory",
]
