"""User directory endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from pulse_chat.api.v1.dependencies import CurrentUserDep, SessionDep
from pulse_chat.schemas.user import UserEnvelope, UserList, UserRead, UserUpdate
from pulse_chat.services.messaging import list_partners
from pulse_chat.services.users import update_name

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserList)
async def list_users(
    current_user: CurrentUserDep,
    db: SessionDep,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> UserList:
    """Search users, or list conversation partners when no search is given."""
    users = list_partners(db, current_user, search)
    return UserList(users=[UserRead.model_validate(user) for user in users])


@router.patch("/me", response_model=UserEnvelope)
async def update_me(
    payload: UserUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserEnvelope:
    """Change or clear the signed-in user's display name."""
    user = update_name(db, current_user, payload.name)
    return UserEnvelope(user=UserRead.model_validate(user))
