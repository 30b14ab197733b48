"""Unit tests for API dependency wiring."""

import asyncio

import pytest

from probebot.api import dependencies
from probebot.api.exceptions import StoreUnavailableError
from probebot.config.settings import Settings, set_toml_config
from probebot.conversation.stores.inmemory import InMemoryConversationStateStore
from probebot.conversation.stores.redis import RedisConversationStateStore
from probebot.db.errors import ConnectionError
from probebot.db.pool import PostgresPool
from probebot.dispatcher.models import Turn
from probebot.messages.stores.inmemory import InMemoryMessageStore
from probebot.observability.telemetry import CompositeTelemetrySink, InMemoryTelemetrySink


@pytest.fixture(autouse=True)
async def fresh_dependencies():
    set_toml_config({})
    await dependencies.reset_dependencies()
    yield
    await dependencies.reset_dependencies()


def _settings(**storage) -> Settings:
    return Settings(storage=storage)


class TestStoreSelection:
    """Tests for backend selection from settings."""

    async def test_inmemory_backends_by_default(self) -> None:
        settings = Settings()

        assert isinstance(await dependencies.get_message_store(settings), InMemoryMessageStore)
        assert isinstance(dependencies.get_state_store(settings), InMemoryConversationStateStore)

    async def test_store_created_once(self) -> None:
        settings = Settings()
        first = await dependencies.get_message_store(settings)
        assert await dependencies.get_message_store(settings) is first

    def test_redis_state_backend(self) -> None:
        settings = _settings(state={"backend": "redis", "key_prefix": "t"})
        assert isinstance(dependencies.get_state_store(settings), RedisConversationStateStore)

    async def test_unreachable_postgres_is_store_unavailable(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def refuse(self: PostgresPool) -> None:
            raise ConnectionError("refused")

        monkeypatch.setattr(PostgresPool, "connect", refuse)
        monkeypatch.setenv("PROBEBOT_DATABASE_URL", "postgresql://nowhere/probebot")

        with pytest.raises(StoreUnavailableError):
            await dependencies.get_message_store(_settings(messages={"backend": "postgres"}))

    async def test_missing_dsn_is_store_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PROBEBOT_DATABASE_URL", raising=False)
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(StoreUnavailableError):
            await dependencies.get_message_store(_settings(messages={"backend": "postgres"}))

    async def test_concurrent_first_requests_share_one_pool(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Requests racing on startup connect exactly one pool."""
        connected: list[PostgresPool] = []

        async def slow_connect(self: PostgresPool) -> None:
            connected.append(self)
            await asyncio.sleep(0.01)

        monkeypatch.setattr(PostgresPool, "connect", slow_connect)
        monkeypatch.setenv("PROBEBOT_DATABASE_URL", "postgresql://nowhere/probebot")
        settings = _settings(messages={"backend": "postgres"})

        pools = await asyncio.gather(
            *(dependencies.get_postgres_pool(settings) for _ in range(5))
        )

        assert len(connected) == 1
        assert all(pool is connected[0] for pool in pools)

    async def test_concurrent_first_requests_share_one_message_store(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        connected: list[PostgresPool] = []

        async def slow_connect(self: PostgresPool) -> None:
            connected.append(self)
            await asyncio.sleep(0.01)

        monkeypatch.setattr(PostgresPool, "connect", slow_connect)
        monkeypatch.setenv("PROBEBOT_DATABASE_URL", "postgresql://nowhere/probebot")
        settings = _settings(messages={"backend": "postgres"})

        stores = await asyncio.gather(
            *(dependencies.get_message_store(settings) for _ in range(5))
        )

        assert len(connected) == 1
        assert all(store is stores[0] for store in stores)


class TestTurnHostWiring:
    """Tests for telemetry, dispatcher and host construction."""

    def test_telemetry_from_configured_sinks(self) -> None:
        settings = Settings()
        assert isinstance(dependencies.get_telemetry_sink(settings), CompositeTelemetrySink)

    async def test_host_uses_configured_apology(self) -> None:
        settings = Settings(dispatcher={"apology_message": "nope"})
        telemetry = InMemoryTelemetrySink()
        dispatcher = dependencies.get_dispatcher(
            await dependencies.get_message_store(settings),
            dependencies.get_state_store(settings),
            telemetry,
            settings,
        )
        host = dependencies.get_turn_host(dispatcher, telemetry, settings)

        reply = await host.run_turn(Turn(text="error", conversation_id="c1", channel_id="test"))

        assert reply.reply == "nope"
        assert reply.failed is True
        assert dependencies.get_turn_host(dispatcher, telemetry, settings) is host
