"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from liaison.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_flat_dicts(self) -> None:
        """Flat dictionaries are merged correctly."""
        result = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
        assert result == {"a": 1, "b": 3, "c": 4}

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"routing": {"legal_validity_years": {"x": 1}, "default_legal_validity_years": 1}}
        override = {"routing": {"legal_validity_years": {"y": 3}}}
        result = deep_merge(base, override)
        assert result == {
            "routing": {
                "legal_validity_years": {"x": 1, "y": 3},
                "default_legal_validity_years": 1,
            }
        }

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        """Valid TOML file is loaded correctly."""
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[reporting]\ntop_participants_limit = 5\nlabel = "x"')

        assert load_toml(toml_file) == {"reporting": {"top_participants_limit": 5, "label": "x"}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        """Missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path) -> None:
        """Invalid TOML syntax raises error."""
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("invalid = [unclosed")

        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(invalid_file)


class TestGetEnvironment:
    """Tests for get_environment function."""

    def test_returns_env_var_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Returns LIAISON_ENV value when set."""
        monkeypatch.setenv("LIAISON_ENV", "production")
        assert get_environment() == "production"

    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults to 'development' when LIAISON_ENV not set."""
        monkeypatch.delenv("LIAISON_ENV", raising=False)
        assert get_environment() == "development"


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_uses_env_var_when_set(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Uses LIAISON_CONFIG_DIR when set."""
        config_dir = tmp_path / "custom_config"
        config_dir.mkdir()
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(config_dir))

        assert get_config_dir() == config_dir

    def test_raises_for_missing_env_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Raises error when LIAISON_CONFIG_DIR doesn't exist."""
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_defaults_to_checkout_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without LIAISON_CONFIG_DIR the config/ directory next to the package is used."""
        monkeypatch.delenv("LIAISON_CONFIG_DIR", raising=False)

        config_dir = get_config_dir()

        assert config_dir == Path(__file__).resolve().parents[3] / "config"
        assert (config_dir / "default.toml").is_file()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_config(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Loads default.toml configuration."""
        mock_toml_files({"default.toml": "app_name = 'test'\ndebug = false"})
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("LIAISON_ENV", "nonexistent")

        assert load_config() == {"app_name": "test", "debug": False}

    def test_merges_environment_config(
        self,
        test_config_dir: Path,
        mock_toml_files,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Environment config overrides default config."""
        mock_toml_files(
            {
                "default.toml": "[reporting]\ntop_participants_limit = 10\nrate_precision = 1",
                "staging.toml": "[reporting]\ntop_participants_limit = 3",
            }
        )
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("LIAISON_ENV", "staging")

        assert load_config() == {
            "reporting": {"top_participants_limit": 3, "rate_precision": 1}
        }

    def test_missing_default_raises(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Missing default.toml raises error."""
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(test_config_dir))

        with pytest.raises(FileNotFoundError, match="default.toml"):
            load_config()

    def test_explicit_arguments_skip_environment(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Explicit directory and environment win over the env vars."""
        mock_toml_files({"default.toml": "debug = false", "qa.toml": "debug = true"})
        monkeypatch.setenv("LIAISON_CONFIG_DIR", "/does/not/exist")

        assert load_config(test_config_dir, env="qa") == {"debug": True}

    def test_shipped_default_config_loads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The repository's config/default.toml parses and has every section."""
        config_dir = Path(__file__).resolve().parents[3] / "config"
        monkeypatch.setenv("LIAISON_CONFIG_DIR", str(config_dir))
        monkeypatch.setenv("LIAISON_ENV", "nonexistent")

        config = load_config()
        assert {"storage", "routing", "reporting", "observability"} <= set(config)
        assert config["routing"]["legal_validity_years"] == {
            "psychische_gefaehrdungsbeurteilung": 2
        }
