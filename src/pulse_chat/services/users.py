"""Profile updates for the signed-in user."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pulse_chat.models import User
from pulse_chat.services.errors import ValidationError

__all__ = ["MAX_NAME_LENGTH", "update_name"]

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50


def update_name(db: Session, user: User, name: str | None) -> User:
    """Set or clear the display name of ``user``.

    A None name clears the field; otherwise the trimmed name must hold
    between 1 and 50 characters.
    """
    if name is not None:
        name = name.strip()
        if not name or len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must be 1-{MAX_NAME_LENGTH} characters")

    user.name = name
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User %s changed display name", user.id)
    return user
