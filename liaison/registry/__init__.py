"""Closed vocabularies for data scopes, output types and integration points."""

from liaison.registry.data_scopes import DataScopeRegistry
from liaison.registry.loader import get_data_scope_registry, get_output_type_registry
from liaison.registry.models import DataScope, IntegrationPoint, OutputType, Sensitivity
from liaison.registry.output_types import OutputTypeRegistry

__all__ = [
    "DataScope",
    "DataScopeRegistry",
    "IntegrationPoint",
    "OutputType",
    "OutputTypeRegistry",
    "Sensitivity",
    "get_data_scope_registry",
    "get_output_type_registry",
]
