"""Shared test fixtures for the probebot test suite."""

import os
import random
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from probebot.config.models.dispatcher import DispatcherConfig
from probebot.conversation.stores.inmemory import InMemoryConversationStateStore
from probebot.dispatcher.dispatcher import TurnDispatcher
from probebot.dispatcher.models import Turn
from probebot.messages.stores.inmemory import InMemoryMessageStore
from probebot.observability.telemetry import InMemoryTelemetrySink


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Temporarily set environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"PROBEBOT_DEBUG": "true"}):
                ...
    """
    return EnvOverrideContext


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings caches before and after each test."""
    from probebot.api.dependencies import get_settings as get_api_settings
    from probebot.config import get_settings

    get_settings.cache_clear()
    get_api_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_api_settings.cache_clear()


@pytest.fixture
def message_store() -> InMemoryMessageStore:
    """Fresh in-memory message store."""
    return InMemoryMessageStore()


@pytest.fixture
def state_store() -> InMemoryConversationStateStore:
    """Fresh in-memory conversation state store."""
    return InMemoryConversationStateStore()


@pytest.fixture
def telemetry() -> InMemoryTelemetrySink:
    """Telemetry sink that records everything it receives."""
    return InMemoryTelemetrySink()


@pytest.fixture
def dispatcher_config() -> DispatcherConfig:
    """Dispatcher config with a short delay bound to keep tests fast."""
    return DispatcherConfig(max_delay_ms=20)


@pytest.fixture
def dispatcher(
    message_store: InMemoryMessageStore,
    state_store: InMemoryConversationStateStore,
    telemetry: InMemoryTelemetrySink,
    dispatcher_config: DispatcherConfig,
) -> TurnDispatcher:
    """Dispatcher wired to in-memory collaborators."""
    return TurnDispatcher(
        message_store=message_store,
        state_store=state_store,
        telemetry=telemetry,
        config=dispatcher_config,
        rng=random.Random(42),
    )


@pytest.fixture
def make_turn() -> Callable[..., Turn]:
    """Factory for message turns with sensible defaults."""

    def _make_turn(text: str | None = "hi", **overrides: Any) -> Turn:
        fields: dict[str, Any] = {
            "text": text,
            "conversation_id": "conv-1",
            "sender_name": "Ada",
            "channel_id": "test",
        }
        fields.update(overrides)
        return Turn(**fields)

    return _make_turn
