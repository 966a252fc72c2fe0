"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session, sessionmaker

from pulse_chat.core.settings import settings
from pulse_chat.db.session import SessionLocal, get_db
from pulse_chat.models import User
from pulse_chat.services.auth import resolve_session
from pulse_chat.services.realtime import ConversationHub, get_conversation_hub
from pulse_chat.services.sms import SmsSender, get_sms_sender
from pulse_chat.services.storage import MediaStorage, get_media_storage

# Session cookie scheme; absence is handled by the dependencies below
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user(
    token: Annotated[str | None, Depends(session_cookie)],
    db: SessionDep,
) -> User | None:
    """Return the signed-in user, or None for anonymous requests."""
    return resolve_session(db, token)


def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Get the current authenticated user from the session cookie.

    Raises:
        HTTPException: If the cookie is missing, invalid, expired, or the
            user no longer exists
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def get_sms_sender_dep() -> SmsSender:
    """Return the configured SMS sender."""
    return get_sms_sender()


def get_media_storage_dep() -> MediaStorage:
    """Return the configured upload backend."""
    return get_media_storage()


def get_session_factory() -> sessionmaker[Session]:
    """Return the factory for sessions opened and closed inside one handler.

    Long-lived connections such as websockets use it so that no pooled
    connection is held while they idle.
    """
    return SessionLocal


def get_conversation_hub_dep() -> ConversationHub:
    """Return the shared conversation hub."""
    return get_conversation_hub()


# Type aliases for injected collaborators
CurrentUserDep = Annotated[User, Depends(get_current_user)]
SmsSenderDep = Annotated[SmsSender, Depends(get_sms_sender_dep)]
MediaStorageDep = Annotated[MediaStorage, Depends(get_media_storage_dep)]
ConversationHubDep = Annotated[ConversationHub, Depends(get_conversation_hub_dep)]
SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]
