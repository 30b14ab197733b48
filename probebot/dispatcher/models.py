"""Turn and command models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MESSAGE_KIND = "message"


class Turn(BaseModel):
    """One inbound conversational unit requiring exactly one reply.

    ``kind`` is the activity type reported by the transport. Anything
    other than ``message`` is an event turn and gets no command.
    """

    model_config = ConfigDict(frozen=True)

    kind: str = Field(default=MESSAGE_KIND, min_length=1, description="Activity type")
    text: str | None = Field(default=None, description="Message text")
    conversation_id: str = Field(..., description="Opaque conversation identity")
    sender_name: str | None = Field(default=None, description="Display name of sender")
    channel_id: str = Field(..., description="Opaque channel identifier")

    @property
    def is_message(self) -> bool:
        return self.kind == MESSAGE_KIND


class Command(str, Enum):
    """Commands a message turn can trigger."""

    ECHO = "echo"
    FAULT = "fault"
    SLOW = "slow"
    SAVE = "save"
    LOAD = "load"


class CommandMatch(BaseModel):
    """Result of classifying a message text."""

    model_config = ConfigDict(frozen=True)

    command: Command
    payload: str = Field(default="", description="Command argument, if any")


class TurnReply(BaseModel):
    """What the turn host sends back for one turn."""

    model_config = ConfigDict(frozen=True)

    conversation_id: str
    reply: str
    failed: bool = False
