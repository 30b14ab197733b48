"""Conversation state store backends."""

from probebot.conversation.stores.inmemory import InMemoryConversationStateStore
from probebot.conversation.stores.redis import RedisConversationStateStore

__all__ = [
    "InMemoryConversationStateStore",
    "RedisConversationStateStore",
]
