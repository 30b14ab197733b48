"""Unit tests for RedisConversationStateStore error mapping."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from probebot.conversation.stores.redis import RedisConversationStateStore
from probebot.db.errors import ConnectionError, ValidationError


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store(client: AsyncMock) -> RedisConversationStateStore:
    return RedisConversationStateStore(client, key_prefix="test")


class TestRedisConversationStateStore:
    """Tests with a mocked Redis client."""

    async def test_values_stored_as_json_in_conversation_hash(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        await store.set("c1", "prefs", {"color": "blue"})
        client.hset.assert_awaited_once_with("test:c1", "prefs", json.dumps({"color": "blue"}))

    async def test_get_decodes_json(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        client.hget.return_value = "3"
        assert await store.get("c1", "turn_count") == 3

    async def test_increment_uses_hincrby(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        client.hincrby.return_value = 4
        assert await store.increment("c1", "turn_count") == 4
        client.hincrby.assert_awaited_once_with("test:c1", "turn_count", 1)

    async def test_connection_failure_wrapped(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        cause = redis.ConnectionError("refused")
        client.hincrby.side_effect = cause

        with pytest.raises(ConnectionError) as exc_info:
            await store.increment("c1", "turn_count")

        assert exc_info.value.cause is cause

    async def test_non_integer_increment_is_validation_error(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        client.hincrby.side_effect = redis.ResponseError("hash value is not an integer")

        with pytest.raises(ValidationError):
            await store.increment("c1", "color")

    async def test_non_json_value_is_validation_error(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        """A field written by another client as plain text cannot be read back."""
        client.hget.return_value = "not json"

        with pytest.raises(ValidationError) as exc_info:
            await store.get("c1", "color")

        assert isinstance(exc_info.value.cause, json.JSONDecodeError)

    async def test_health_check_false_when_unreachable(
        self, store: RedisConversationStateStore, client: AsyncMock
    ) -> None:
        client.ping.side_effect = redis.ConnectionError("refused")
        assert await store.health_check() is False
