"""Configuration loading for Liaison.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from liaison.config import get_settings

    settings = get_settings()
    limit = settings.reporting.top_participants_limit
"""

from functools import lru_cache

from liaison.config.loader import load_config
from liaison.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    config_dict = load_config()
    set_toml_config(config_dict)

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
