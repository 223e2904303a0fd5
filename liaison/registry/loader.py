"""Load the registry tables shipped with the package.

The TOML tables are read once per process; every caller shares the same
immutable registry instances.
"""

import tomllib
from functools import lru_cache
from importlib import resources
from typing import Any

from liaison.observability.logging import get_logger
from liaison.registry.data_scopes import DataScopeRegistry
from liaison.registry.models import DataScope, IntegrationPoint, OutputType
from liaison.registry.output_types import OutputTypeRegistry

logger = get_logger(__name__)

DATA_PACKAGE = "liaison.registry.data"


def load_table(filename: str) -> dict[str, dict[str, Any]]:
    """Read one TOML table from the registry data package."""
    with resources.files(DATA_PACKAGE).joinpath(filename).open("rb") as f:
        return tomllib.load(f)


@lru_cache(maxsize=1)
def get_data_scope_registry() -> DataScopeRegistry:
    """Get the process-wide data scope registry."""
    table = load_table("data_scopes.toml")
    registry = DataScopeRegistry(
        DataScope.model_validate({"key": key, **entry}) for key, entry in table.items()
    )
    logger.debug("data_scope_registry_loaded", scope_count=len(registry))
    return registry


@lru_cache(maxsize=1)
def get_output_type_registry() -> OutputTypeRegistry:
    """Get the process-wide output type registry."""
    types_table = load_table("output_types.toml")
    points_table = load_table("integration_points.toml")
    registry = OutputTypeRegistry(
        output_types=(
            OutputType.model_validate({"key": key, **entry})
            for key, entry in types_table.items()
        ),
        integration_points=(
            IntegrationPoint.model_validate({"key": key, **entry})
            for key, entry in points_table.items()
        ),
    )
    logger.debug("output_type_registry_loaded", type_count=len(registry))
    return registry
