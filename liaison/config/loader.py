"""TOML configuration loading.

Settings come from ``default.toml`` overlaid with ``{LIAISON_ENV}.toml``.
The directory is ``LIAISON_CONFIG_DIR`` when set, otherwise the ``config/``
directory of the source checkout.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

# <checkout>/config, next to the liaison package
PROJECT_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

DEFAULT_ENVIRONMENT = "development"


def get_config_dir() -> Path:
    """Resolve the configuration directory.

    Raises:
        FileNotFoundError: If LIAISON_CONFIG_DIR points at a missing directory
    """
    override = os.environ.get("LIAISON_CONFIG_DIR")
    if not override:
        return PROJECT_CONFIG_DIR

    path = Path(override)
    if not path.is_dir():
        raise FileNotFoundError(f"Config directory not found: {override}")
    return path


def get_environment() -> str:
    return os.environ.get("LIAISON_ENV", DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    return tomllib.loads(file_path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; tables merge, scalars replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Load ``default.toml`` and overlay the environment file if there is one.

    Args:
        config_dir: Directory to read (default: ``get_config_dir()``)
        env: Environment name (default: ``get_environment()``)
    """
    config_dir = config_dir or get_config_dir()
    env = env or get_environment()

    default_path = config_dir / "default.toml"
    if not default_path.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Set LIAISON_CONFIG_DIR to a directory containing default.toml."
        )

    config = load_toml(default_path)
    env_path = config_dir / f"{env}.toml"
    if env_path.is_file():
        config = deep_merge(config, load_toml(env_path))
    return config
