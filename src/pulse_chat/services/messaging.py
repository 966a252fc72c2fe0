"""Conversation-scoped message storage and queries.

A conversation is the unordered pair of two user ids. Every read and delete
here is restricted to rows whose (sender, receiver) is exactly that pair in
one direction or the other.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from threading import Lock

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from pulse_chat.core.settings import settings
from pulse_chat.models import Message, User
from pulse_chat.services.errors import (
    EmptyMessage,
    ReceiverNotFound,
    SelfDeleteRejected,
    SelfMessageRejected,
    ValidationError,
)

__all__ = [
    "MEDIA_TYPES",
    "MessageListener",
    "add_message_listener",
    "remove_message_listener",
    "conversation_filter",
    "send_message",
    "list_conversation",
    "delete_conversation",
    "list_partners",
]

logger = logging.getLogger(__name__)

MEDIA_TYPES = frozenset({"image", "video"})

MessageListener = Callable[[Message], None]

_listeners: list[MessageListener] = []
_listeners_lock = Lock()


def add_message_listener(listener: MessageListener) -> None:
    """Register a callback invoked after each message is committed."""
    with _listeners_lock:
        if listener not in _listeners:
            _listeners.append(listener)


def remove_message_listener(listener: MessageListener) -> None:
    """Unregister a callback added with :func:`add_message_listener`."""
    with _listeners_lock:
        if listener in _listeners:
            _listeners.remove(listener)


def _notify_created(message: Message) -> None:
    with _listeners_lock:
        listeners = list(_listeners)
    for listener in listeners:
        try:
            listener(message)
        except Exception:
            # The message is already committed; listeners only observe it.
            logger.exception("Message listener failed for message %s", message.id)


def conversation_filter(user_a: str, user_b: str):
    """Return the SQL predicate matching messages between two users."""
    return or_(
        and_(Message.sender_id == user_a, Message.receiver_id == user_b),
        and_(Message.sender_id == user_b, Message.receiver_id == user_a),
    )


def send_message(
    db: Session,
    sender: User,
    receiver_id: str | None,
    text: str | None = None,
    media_url: str | None = None,
    media_type: str | None = None,
) -> Message:
    """Persist a message from ``sender`` to ``receiver_id``.

    Raises:
        EmptyMessage: If there is neither text nor media.
        ValidationError: If the receiver is missing or the media type is unknown.
        SelfMessageRejected: If the receiver is the sender.
        ReceiverNotFound: If the receiver does not exist.
    """
    body = (text or "").strip() or None
    media_url = (media_url or "").strip() or None
    if body is None and media_url is None:
        raise EmptyMessage()

    if media_type is not None:
        if media_url is None:
            raise ValidationError("mediaType requires mediaUrl")
        if media_type not in MEDIA_TYPES:
            raise ValidationError("mediaType must be 'image' or 'video'")

    if not receiver_id:
        raise ValidationError("receiverId is required")
    if receiver_id == sender.id:
        raise SelfMessageRejected()
    receiver = db.get(User, receiver_id)
    if receiver is None:
        raise ReceiverNotFound()

    message = Message(
        text=body,
        sender_id=sender.id,
        receiver_id=receiver.id,
        media_url=media_url,
        media_type=media_type,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message %s sent from %s to %s", message.id, sender.id, receiver.id)

    _notify_created(message)
    return message


def list_conversation(
    db: Session,
    requester: User,
    target_id: str,
    limit: int | None = None,
) -> list[Message]:
    """Return the latest messages between ``requester`` and ``target_id``.

    At most ``limit`` rows (default ``CONVERSATION_PAGE_SIZE``) are returned,
    ordered oldest first by creation time with the id as tie-breaker.
    """
    page_size = limit or settings.conversation_page_size
    newest_first = (
        db.query(Message)
        .filter(conversation_filter(requester.id, target_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(page_size)
        .all()
    )
    newest_first.reverse()
    return newest_first


def delete_conversation(db: Session, requester: User, target_id: str) -> int:
    """Delete every message between ``requester`` and ``target_id``.

    A send racing this delete may survive or be removed depending on
    statement order; no per-conversation lock is taken.

    Returns:
        The number of deleted messages.

    Raises:
        SelfDeleteRejected: If ``target_id`` is the requester.
    """
    if not target_id:
        raise ValidationError("userId is required")
    if target_id == requester.id:
        raise SelfDeleteRejected()

    deleted = (
        db.query(Message)
        .filter(conversation_filter(requester.id, target_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Deleted chat between %s and %s: %d messages", requester.id, target_id, deleted)
    return int(deleted)


def _search_users(db: Session, requester: User, search: str) -> list[User]:
    return (
        db.query(User)
        .filter(
            User.id != requester.id,
            or_(User.phone.contains(search, autoescape=True), User.name.contains(search, autoescape=True)),
        )
        .order_by(User.name, User.phone)
        .limit(settings.user_search_limit)
        .all()
    )


def list_partners(db: Session, requester: User, search: str | None = None) -> list[User]:
    """Return users to show in the requester's chat list.

    With a search string, up to ``USER_SEARCH_LIMIT`` users whose phone or
    name contains it. Otherwise the users the requester has exchanged
    messages with, most recent conversation first. The latter scans every
    message involving the requester.
    """
    term = (search or "").strip()
    if term:
        return _search_users(db, requester, term)

    rows = (
        db.query(Message.sender_id, Message.receiver_id, Message.created_at)
        .filter(or_(Message.sender_id == requester.id, Message.receiver_id == requester.id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )

    # First sighting per counterpart is its latest message.
    last_seen: dict[str, datetime] = {}
    for sender_id, receiver_id, created_at in rows:
        other = receiver_id if sender_id == requester.id else sender_id
        if other and other != requester.id and other not in last_seen:
            last_seen[other] = created_at

    if not last_seen:
        return []

    users = {user.id: user for user in db.query(User).filter(User.id.in_(list(last_seen))).all()}
    return [users[user_id] for user_id in last_seen if user_id in users]
