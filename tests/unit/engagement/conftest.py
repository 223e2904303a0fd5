"""Shared fixtures for engagement tests."""

import pytest

from liaison.catalog.models import Offering, Provider
from liaison.catalog.stores.inmemory import InMemoryCatalog
from liaison.engagement.consent import ConsentLedger
from liaison.engagement.routing import ResultRouter
from liaison.engagement.service import EngagementService
from liaison.engagement.state_machine import EngagementStateMachine
from liaison.engagement.stores.inmemory import InMemoryEngagementStore
from liaison.registry import (
    DataScopeRegistry,
    OutputTypeRegistry,
    get_data_scope_registry,
    get_output_type_registry,
)
from tests.factories import OfferingFactory, ProviderFactory


@pytest.fixture
def scope_registry() -> DataScopeRegistry:
    return get_data_scope_registry()


@pytest.fixture
def output_registry() -> OutputTypeRegistry:
    return get_output_type_registry()


@pytest.fixture
def state_machine() -> EngagementStateMachine:
    return EngagementStateMachine()


@pytest.fixture
def ledger(scope_registry, state_machine) -> ConsentLedger:
    return ConsentLedger(scope_registry, state_machine)


@pytest.fixture
def router(output_registry, state_machine) -> ResultRouter:
    return ResultRouter(output_registry, state_machine)


@pytest.fixture
def provider() -> Provider:
    return ProviderFactory.create()


@pytest.fixture
def offering(provider) -> Offering:
    """Offering requiring three scopes and accepting any output type."""
    return OfferingFactory.create(provider_id=provider.id)


@pytest.fixture
def catalog(provider, offering) -> InMemoryCatalog:
    catalog = InMemoryCatalog()
    catalog.add_provider(provider)
    catalog.add_offering(offering)
    return catalog


@pytest.fixture
def engagement_store() -> InMemoryEngagementStore:
    return InMemoryEngagementStore()


@pytest.fixture
def service(engagement_store, catalog, scope_registry, output_registry) -> EngagementService:
    return EngagementService(
        store=engagement_store,
        catalog=catalog,
        scope_registry=scope_registry,
        output_registry=output_registry,
    )
