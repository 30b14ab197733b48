"""Request and response models for the turns endpoint."""

from pydantic import BaseModel, Field

from probebot.dispatcher.models import MESSAGE_KIND, Turn, TurnReply


class TurnRequest(BaseModel):
    """Inbound turn as posted by a transport adapter."""

    kind: str = Field(default=MESSAGE_KIND, min_length=1, description="Activity type")
    text: str | None = Field(default=None, description="Message text")
    conversation_id: str = Field(..., min_length=1, description="Conversation identity")
    sender_name: str | None = Field(default=None, description="Display name of sender")
    channel_id: str = Field(..., min_length=1, description="Channel identifier")

    def to_turn(self) -> Turn:
        return Turn(
            kind=self.kind,
            text=self.text,
            conversation_id=self.conversation_id,
            sender_name=self.sender_name,
            channel_id=self.channel_id,
        )


class TurnResponse(BaseModel):
    """Reply for one turn. ``failed`` is set when the apology was sent."""

    conversation_id: str
    reply: str
    failed: bool = False

    @classmethod
    def from_reply(cls, reply: TurnReply) -> "TurnResponse":
        return cls(
            conversation_id=reply.conversation_id,
            reply=reply.reply,
            failed=reply.failed,
        )
