"""Conversation state models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TURN_COUNT_PROPERTY = "turn_count"


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class ConversationState(BaseModel):
    """Named properties scoped to one conversation.

    Created lazily on the first write for a conversation and kept for
    the lifetime of the store.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    conversation_id: str = Field(..., description="Owning conversation")
    properties: dict[str, Any] = Field(
        default_factory=dict, description="property name -> value"
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last write")
