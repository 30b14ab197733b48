"""MessageStore abstract interface."""

from abc import ABC, abstractmethod

from probebot.messages.models import MessageRecord


class MessageStore(ABC):
    """Abstract interface for append-only message persistence.

    Implementations must never hand out the same ``id`` twice, even
    under concurrent ``append`` calls, and ``id`` order must match
    write order. Backend failures are raised as ``StoreError``
    subclasses.
    """

    @abstractmethod
    async def append(self, content: str) -> MessageRecord:
        """Persist ``content`` and return the stored record."""
        pass

    @abstractmethod
    async def query_recent(self, limit: int) -> list[MessageRecord]:
        """Return up to ``limit`` records, newest (highest id) first."""
        pass

    async def health_check(self) -> bool:
        """Return whether the backend is reachable."""
        return True
