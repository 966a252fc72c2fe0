"""Message-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from pulse_chat.db.time import as_utc

from .common import CamelModel, SuccessResponse
from .user import UserRead


class MessageCreate(CamelModel):
    """Schema for sending a message."""

    receiver_id: str = Field(..., min_length=1, description="Id of the receiving user")
    text: str | None = Field(None, max_length=4000, description="Message text")
    media_url: str | None = Field(None, description="URL returned by the upload endpoint")
    media_type: Literal["image", "video"] | None = Field(None, description="Kind of media")


class MessageRead(CamelModel):
    """Message with denormalized sender and receiver."""

    id: int
    text: str | None
    sender_id: str
    receiver_id: str | None
    media_url: str | None
    media_type: str | None
    created_at: datetime
    sender: UserRead
    receiver: UserRead | None

    @field_validator("created_at")
    @classmethod
    def _created_at_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class MessageEnvelope(CamelModel):
    """Single message wrapped under ``message``."""

    message: MessageRead


class MessageList(CamelModel):
    """Conversation page, oldest first."""

    messages: list[MessageRead]


class ChatDeleteResponse(SuccessResponse):
    """Result of deleting a conversation."""

    deleted_count: int
