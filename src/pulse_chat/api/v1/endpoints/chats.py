"""Conversation management endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from pulse_chat.api.v1.dependencies import CurrentUserDep, SessionDep
from pulse_chat.schemas.message import ChatDeleteResponse
from pulse_chat.services.messaging import delete_conversation

router = APIRouter(prefix="/chats", tags=["chats"])


@router.delete("/delete", response_model=ChatDeleteResponse)
async def delete_chat(
    current_user: CurrentUserDep,
    db: SessionDep,
    user_id: Annotated[str, Query(alias="userId", min_length=1)],
) -> ChatDeleteResponse:
    """Delete every message exchanged with ``userId``. This cannot be undone."""
    deleted = delete_conversation(db, current_user, user_id)
    return ChatDeleteResponse(deleted_count=deleted)
