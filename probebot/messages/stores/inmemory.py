"""In-memory implementation of MessageStore."""

from datetime import UTC, datetime

from probebot.messages.models import MessageRecord
from probebot.messages.store import MessageStore


class InMemoryMessageStore(MessageStore):
    """In-memory implementation of MessageStore for testing and development.

    Records live for the lifetime of the instance.
    """

    def __init__(self) -> None:
        self._records: list[MessageRecord] = []
        self._next_id = 1

    async def append(self, content: str) -> MessageRecord:
        """Persist ``content`` and return the stored record."""
        # No await between id assignment and append, so the event loop
        # serializes concurrent appends.
        record = MessageRecord(
            id=self._next_id,
            time=datetime.now(UTC),
            content=content,
        )
        self._next_id += 1
        self._records.append(record)
        return record

    async def query_recent(self, limit: int) -> list[MessageRecord]:
        """Return up to ``limit`` records, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._records[-limit:]))
