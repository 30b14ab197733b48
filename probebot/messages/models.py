"""Message record model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageRecord(BaseModel):
    """One persisted message.

    ``id`` and ``time`` are assigned by the store at write time.
    Records are immutable and never updated or deleted.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Store-wide, strictly increasing identifier")
    time: datetime = Field(..., description="Write time assigned by the store")
    content: str = Field(..., description="Caller-supplied text")
