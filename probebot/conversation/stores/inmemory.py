"""In-memory implementation of ConversationStateStore."""

from typing import Any

from probebot.conversation.models import ConversationState, utc_now
from probebot.conversation.store import ConversationStateStore
from probebot.db.errors import ValidationError


class InMemoryConversationStateStore(ConversationStateStore):
    """In-memory implementation of ConversationStateStore for testing and development.

    Entries live as long as the instance; nothing expires. Every
    operation completes without awaiting, so updates to one entry
    cannot interleave.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ConversationState] = {}

    def _entry(self, conversation_id: str) -> ConversationState:
        entry = self._entries.get(conversation_id)
        if entry is None:
            entry = ConversationState(conversation_id=conversation_id)
            self._entries[conversation_id] = entry
        return entry

    async def get(self, conversation_id: str, name: str) -> Any | None:
        """Get a property value, or None if it was never set."""
        entry = self._entries.get(conversation_id)
        if entry is None:
            return None
        return entry.properties.get(name)

    async def set(self, conversation_id: str, name: str, value: Any) -> None:
        """Set a property, creating the conversation's entry if needed."""
        entry = self._entry(conversation_id)
        entry.properties[name] = value
        entry.updated_at = utc_now()

    async def increment(self, conversation_id: str, name: str, amount: int = 1) -> int:
        """Add ``amount`` to an integer property and return the new value.

        Raises:
            ValidationError: If the property holds a non-integer value
        """
        existing = self._entries.get(conversation_id)
        current = existing.properties.get(name, 0) if existing is not None else 0
        # bool is an int subclass but not a counter
        if not isinstance(current, int) or isinstance(current, bool):
            raise ValidationError(f"Conversation state property {name!r} is not an integer")

        entry = self._entry(conversation_id)
        value = current + amount
        entry.properties[name] = value
        entry.updated_at = utc_now()
        return value

    async def get_state(self, conversation_id: str) -> ConversationState | None:
        """Get the whole entry for a conversation, if it exists."""
        return self._entries.get(conversation_id)
