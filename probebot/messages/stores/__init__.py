"""Message store backends."""

from probebot.messages.stores.inmemory import InMemoryMessageStore
from probebot.messages.stores.postgres import PostgresMessageStore

__all__ = [
    "InMemoryMessageStore",
    "PostgresMessageStore",
]
