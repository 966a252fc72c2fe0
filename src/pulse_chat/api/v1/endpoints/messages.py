"""Message endpoints for the Pulse Chat API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from pulse_chat.api.v1.dependencies import CurrentUserDep, SessionDep
from pulse_chat.schemas.message import (
    MessageCreate,
    MessageEnvelope,
    MessageList,
    MessageRead,
)
from pulse_chat.services.messaging import list_conversation, send_message

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=MessageList)
async def get_conversation(
    current_user: CurrentUserDep,
    db: SessionDep,
    receiver_id: Annotated[str, Query(alias="receiverId", min_length=1)],
) -> MessageList:
    """Return the latest messages exchanged with ``receiverId``, oldest first."""
    messages = list_conversation(db, current_user, receiver_id)
    return MessageList(messages=[MessageRead.model_validate(message) for message in messages])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=MessageEnvelope)
async def create_message(
    payload: MessageCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageEnvelope:
    """Send a text and/or media message to another user."""
    message = send_message(
        db,
        current_user,
        payload.receiver_id,
        text=payload.text,
        media_url=payload.media_url,
        media_type=payload.media_type,
    )
    return MessageEnvelope(message=MessageRead.model_validate(message))
