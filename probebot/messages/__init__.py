"""Append-only message persistence."""

from probebot.messages.models import MessageRecord
from probebot.messages.store import MessageStore

__all__ = [
    "MessageRecord",
    "MessageStore",
]
