"""ConversationStateStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Any


class ConversationStateStore(ABC):
    """Abstract interface for per-conversation property storage.

    Properties of one conversation are never visible under another.
    Writes to the same conversation must not corrupt each other, and
    ``increment`` must be atomic. Backend failures are raised as
    ``StoreError`` subclasses.
    """

    @abstractmethod
    async def get(self, conversation_id: str, name: str) -> Any | None:
        """Get a property value, or None if it was never set."""
        pass

    @abstractmethod
    async def set(self, conversation_id: str, name: str, value: Any) -> None:
        """Set a property, creating the conversation's entry if needed."""
        pass

    @abstractmethod
    async def increment(self, conversation_id: str, name: str, amount: int = 1) -> int:
        """Atomically add ``amount`` to an integer property and return the new value.

        A property that was never set counts as 0.
        """
        pass

    async def health_check(self) -> bool:
        """Return whether the backend is reachable."""
        return True
