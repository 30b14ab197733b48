"""Per-conversation scoped state."""

from probebot.conversation.models import TURN_COUNT_PROPERTY, ConversationState
from probebot.conversation.store import ConversationStateStore

__all__ = [
    "TURN_COUNT_PROPERTY",
    "ConversationState",
    "ConversationStateStore",
]
