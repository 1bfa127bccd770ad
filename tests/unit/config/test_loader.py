"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from chronicle.config.loader import (
    config_layers,
    deep_merge,
    find_config_dir,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"storage": {"backend": "inmemory", "postgres": {"min_pool_size": 5}}}
        override = {"storage": {"postgres": {"min_pool_size": 1}}}
        result = deep_merge(base, override)
        assert result == {"storage": {"backend": "inmemory", "postgres": {"min_pool_size": 1}}}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        result = deep_merge({"a": {"x": 1}}, {"a": "replaced"})
        assert result == {"a": "replaced"}

    def test_inputs_unmodified(self) -> None:
        """Neither input dictionary is modified."""
        base = {"a": {"x": 1}}
        override = {"a": {"y": 2}}
        deep_merge(base, override)
        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}}

    def test_empty_override(self) -> None:
        """Empty override returns copy of base."""
        base = {"a": 1}
        assert deep_merge(base, {}) == base


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_toml(self, tmp_path: Path) -> None:
        """Valid TOML file is loaded correctly."""
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[versioning]\nrecord_empty_updates = true\nactivity_page_size = 20')

        result = load_toml(toml_file)
        assert result == {"versioning": {"record_empty_updates": True, "activity_page_size": 20}}

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
        """Returns CHRONICLE_ENV value when set."""
        monkeypatch.setenv("CHRONICLE_ENV", "production")
        assert get_environment() == "production"

    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Defaults to 'development' when CHRONICLE_ENV not set."""
        monkeypatch.delenv("CHRONICLE_ENV", raising=False)
        assert get_environment() == "development"


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_uses_env_var_when_set(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Uses CHRONICLE_CONFIG_DIR when set."""
        monkeypatch.setenv("CHRONICLE_CONFIG_DIR", str(test_config_dir))
        assert get_config_dir() == test_config_dir

    def test_raises_for_missing_env_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Raises error when CHRONICLE_CONFIG_DIR doesn't exist."""
        monkeypatch.setenv("CHRONICLE_CONFIG_DIR", str(tmp_path / "missing"))

        with pytest.raises(FileNotFoundError):
            get_config_dir()

    def test_walks_up_from_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Finds config/ in a parent of the working directory."""
        (tmp_path / "config").mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.delenv("CHRONICLE_CONFIG_DIR", raising=False)
        monkeypatch.chdir(nested)

        assert get_config_dir() == tmp_path / "config"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_merges_environment_config(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Environment config overrides default config."""
        mock_toml_files({
            "default.toml": "debug = false\n[storage]\nbackend = 'inmemory'",
            "staging.toml": "[storage]\nbackend = 'postgres'",
        })
        monkeypatch.setenv("CHRONICLE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("CHRONICLE_ENV", "staging")

        assert load_config() == {"debug": False, "storage": {"backend": "postgres"}}

    def test_missing_files_give_empty_config(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Missing TOML files leave everything to model defaults."""
        monkeypatch.setenv("CHRONICLE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("CHRONICLE_ENV", "nonexistent")

        assert load_config() == {}

    def test_explicit_dir_and_env(self, tmp_path: Path) -> None:
        """Explicit arguments take precedence over the environment."""
        (tmp_path / "default.toml").write_text("[versioning]\nactivity_page_size = 10")
        (tmp_path / "test.toml").write_text("[versioning]\nactivity_page_size = 5")

        assert load_config(tmp_path, "test") == {"versioning": {"activity_page_size": 5}}


class TestConfigLayers:
    """Tests for config_layers function."""

    def test_default_then_environment(self, tmp_path: Path) -> None:
        """Layers are ordered lowest precedence first."""
        (tmp_path / "default.toml").write_text("")
        (tmp_path / "production.toml").write_text("")

        assert config_layers(tmp_path, "production") == [
            tmp_path / "default.toml",
            tmp_path / "production.toml",
        ]

    def test_missing_layers_are_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "production.toml").write_text("")
        assert config_layers(tmp_path, "production") == [tmp_path / "production.toml"]

    def test_default_environment_is_not_read_twice(self, tmp_path: Path) -> None:
        """An environment named 'default' yields a single layer."""
        (tmp_path / "default.toml").write_text("")
        assert config_layers(tmp_path, "default") == [tmp_path / "default.toml"]


class TestFindConfigDir:
    """Tests for find_config_dir function."""

    def test_returns_none_beyond_search_depth(self, tmp_path: Path) -> None:
        """Directories more than five levels up are not searched."""
        (tmp_path / "config").mkdir()
        deep = tmp_path / "a" / "b" / "c" / "d" / "e"
        deep.mkdir(parents=True)

        assert find_config_dir(deep) is None
        assert find_config_dir(deep.parent) == tmp_path / "config"

    def test_ignores_plain_file_named_config(self, tmp_path: Path) -> None:
        (tmp_path / "config").write_text("")
        nested = tmp_path / "a"
        nested.mkdir()
        assert find_config_dir(nested) != tmp_path / "config"
