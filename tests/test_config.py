"""Tests for settings and config file loading."""

import pytest
from promusage.config.loader import get_config_path, load_config, read_config_file
from promusage.config.settings import Settings
from promusage.core.errors import ConfigurationError
from promusage.usage.processor import DEFAULT_IGNORED_PANEL_TYPES


def write_config(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestSettings:
    """Tests for environment-based settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.ignored_panel_types == list(DEFAULT_IGNORED_PANEL_TYPES)
        assert settings.workers == 1
        assert settings.dashboard_location == "dashboards/{id}"

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PROMUSAGE_WORKERS", "4")
        monkeypatch.setenv("PROMUSAGE_IGNORED_PANEL_TYPES", '["text"]')

        settings = Settings()

        assert settings.workers == 4
        assert settings.ignored_panel_types == ["text"]


class TestGetConfigPath:
    """Tests for config file discovery."""

    def test_none_found(self):
        assert get_config_path() is None

    def test_project_before_home(self, tmp_path):
        project = write_config(tmp_path / ".promusage" / "config.yaml", "workers: 2\n")
        write_config(tmp_path / "home" / ".promusage" / "config.yaml", "workers: 3\n")

        assert get_config_path() == project

    def test_home(self, tmp_path):
        home = write_config(tmp_path / "home" / ".promusage" / "config.yaml", "workers: 3\n")

        assert get_config_path() == home

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(ConfigurationError):
            get_config_path(tmp_path / "missing.yaml")


class TestReadConfigFile:
    """Tests for YAML parsing and validation."""

    def test_empty_file(self, tmp_path):
        assert read_config_file(write_config(tmp_path / "c.yaml", "")) == {}

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_config_file(write_config(tmp_path / "c.yaml", "workers: [1"))

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_config_file(write_config(tmp_path / "c.yaml", "- text\n- logs\n"))

    def test_unknown_keys(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            read_config_file(write_config(tmp_path / "c.yaml", "worker: 2\n"))

        assert exc_info.value.details["keys"] == "worker"


class TestLoadConfig:
    """Tests for merging file, environment and overrides."""

    def test_file_values(self, tmp_path):
        path = write_config(
            tmp_path / "c.yaml",
            "ignored_panel_types: [text, graph]\nmonitor_location: 'https://mon/{id}'\n",
        )

        settings = load_config(path)

        assert settings.ignored_panel_types == ["text", "graph"]
        assert settings.monitor_location == "https://mon/{id}"

    def test_file_overrides_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PROMUSAGE_WORKERS", "4")
        path = write_config(tmp_path / "c.yaml", "workers: 2\n")

        assert load_config(path).workers == 2

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        path = write_config(tmp_path / "c.yaml", "workers: 2\nlog_level: DEBUG\n")

        settings = load_config(path, workers=8, ignored_panel_types=None)

        assert settings.workers == 8
        assert settings.log_level == "DEBUG"
        assert settings.ignored_panel_types == list(DEFAULT_IGNORED_PANEL_TYPES)

    def test_invalid_value(self, tmp_path):
        path = write_config(tmp_path / "c.yaml", "workers: many\n")

        with pytest.raises(ConfigurationError):
            load_config(path)
