"""Unit tests for Settings and get_settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from probebot.config import get_settings, reload_settings
from probebot.config.models.dispatcher import DEFAULT_APOLOGY, DispatcherConfig
from probebot.config.settings import Settings, set_toml_config


@pytest.fixture(autouse=True)
def reset_toml_config():
    """Leave no TOML values behind for other tests."""
    set_toml_config({})
    yield
    set_toml_config({})


class TestSettingsDefaults:
    """Tests for code defaults."""

    def test_defaults(self) -> None:
        """Settings build from model defaults alone."""
        settings = Settings()
        assert settings.app_name == "probebot"
        assert settings.storage.messages.backend == "inmemory"
        assert settings.storage.state.backend == "inmemory"
        assert settings.dispatcher.recent_limit == 5
        assert settings.dispatcher.max_delay_ms == 5000
        assert settings.dispatcher.apology_message == DEFAULT_APOLOGY
        assert settings.observability.telemetry.sinks == ["logging", "opentelemetry"]

    def test_invalid_backend_rejected(self) -> None:
        """Unknown backend names fail validation."""
        set_toml_config({"storage": {"messages": {"backend": "sqlite"}}})
        with pytest.raises(ValidationError):
            Settings()

    def test_recent_limit_must_be_positive(self) -> None:
        """A zero recent limit is rejected."""
        with pytest.raises(ValidationError):
            DispatcherConfig(recent_limit=0)


class TestSettingsSources:
    """Tests for source precedence."""

    def test_toml_values_applied(self) -> None:
        """TOML configuration overrides defaults."""
        set_toml_config({"dispatcher": {"recent_limit": 3}})
        assert Settings().dispatcher.recent_limit == 3

    def test_env_overrides_toml(self, env_override) -> None:
        """PROBEBOT_* variables override TOML values."""
        set_toml_config({"storage": {"messages": {"backend": "inmemory"}}})
        with env_override({"PROBEBOT_STORAGE__MESSAGES__BACKEND": "postgres"}):
            assert Settings().storage.messages.backend == "postgres"


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_loads_from_config_dir(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        """get_settings reads default.toml from PROBEBOT_CONFIG_DIR."""
        mock_toml_files({"default.toml": '[dispatcher]\napology_message = "oops"\n'})
        with env_override({"PROBEBOT_CONFIG_DIR": str(test_config_dir)}):
            assert get_settings().dispatcher.apology_message == "oops"

    def test_cached_until_reload(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        """The same instance is returned until reload_settings is called."""
        mock_toml_files({"default.toml": "debug = false\n"})
        with env_override({"PROBEBOT_CONFIG_DIR": str(test_config_dir)}):
            first = get_settings()
            assert get_settings() is first

            mock_toml_files({"default.toml": "debug = true\n"})
            reloaded = reload_settings()

        assert reloaded is not first
        assert reloaded.debug is True
