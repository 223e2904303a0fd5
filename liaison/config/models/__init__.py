"""Configuration section models."""

from liaison.config.models.observability import LoggingConfig, ObservabilityConfig
from liaison.config.models.reporting import ReportingConfig
from liaison.config.models.routing import RoutingConfig
from liaison.config.models.storage import StorageConfig

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "ReportingConfig",
    "RoutingConfig",
    "StorageConfig",
]
