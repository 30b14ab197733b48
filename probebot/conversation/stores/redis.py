"""Redis implementation of ConversationStateStore.

Each conversation is one hash at ``{prefix}:{conversation_id}``.
Values are JSON encoded; counters use HINCRBY, whose integer encoding
is also valid JSON.
"""

import json
from typing import Any

import redis.asyncio as redis

from probebot.conversation.store import ConversationStateStore
from probebot.db.errors import ConnectionError, ValidationError
from probebot.observability.logging import get_logger

logger = get_logger(__name__)


class RedisConversationStateStore(ConversationStateStore):
    """Redis implementation of ConversationStateStore.

    Single-field hash commands are atomic on the server, so concurrent
    writers to one conversation never corrupt its entry.
    """

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "probebot:conversation",
    ) -> None:
        """Initialize Redis conversation state store.

        Args:
            client: Redis client instance (decode_responses=True)
            key_prefix: Prefix for conversation hash keys
        """
        self._client = client
        self._prefix = key_prefix

    def _key(self, conversation_id: str) -> str:
        return f"{self._prefix}:{conversation_id}"

    async def get(self, conversation_id: str, name: str) -> Any | None:
        """Get a property value, or None if it was never set."""
        try:
            raw = await self._client.hget(self._key(conversation_id), name)
        except redis.RedisError as e:
            logger.error(
                "redis_get_state_error",
                conversation_id=conversation_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to get conversation state: {e}", cause=e) from e

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Conversation state value for {name!r} is not valid JSON",
                cause=e,
            ) from e

    async def set(self, conversation_id: str, name: str, value: Any) -> None:
        """Set a property, creating the conversation's hash if needed."""
        try:
            encoded = json.dumps(value)
        except TypeError as e:
            raise ValidationError(
                f"Conversation state value for {name!r} is not JSON serializable",
                cause=e,
            ) from e

        try:
            await self._client.hset(self._key(conversation_id), name, encoded)
        except redis.RedisError as e:
            logger.error(
                "redis_set_state_error",
                conversation_id=conversation_id,
                error=str(e),
            )
            raise ConnectionError(f"Failed to set conversation state: {e}", cause=e) from e

    async def increment(self, conversation_id: str, name: str, amount: int = 1) -> int:
        """Atomically add ``amount`` with HINCRBY and return the new value."""
        try:
            return int(
                await self._client.hincrby(self._key(conversation_id), name, amount)
            )
        except redis.ResponseError as e:
            raise ValidationError(
                f"Conversation state property {name!r} is not an integer",
                cause=e,
            ) from e
        except redis.RedisError as e:
            logger.error(
                "redis_increment_state_error",
                conversation_id=conversation_id,
                error=str(e),
            )
            raise ConnectionError(
                f"Failed to increment conversation state: {e}", cause=e
            ) from e

    async def health_check(self) -> bool:
        """Return whether Redis answers PING."""
        try:
            return bool(await self._client.ping())
        except redis.RedisError as e:
            logger.warning("redis_health_check_failed", error=str(e))
            return False
