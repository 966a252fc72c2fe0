# src/pulse_chat/models/message.py
"""Models describing messages exchanged between two users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse_chat.db.session import Base
from pulse_chat.db.time import utcnow

from .user import User


class Message(Base):
    """Immutable chat message owned by the conversation of its two users.

    ``receiver_id`` stays nullable for rows written by the retired global
    channel; every new message carries a receiver.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_pair", "sender_id", "receiver_id"),
        # Ids are pushed to clients; SQLite must not reuse deleted rowids.
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str | None] = mapped_column(Text, nullable=True)

    sender_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user_account.id"), nullable=False
    )
    receiver_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("user_account.id"), nullable=True, index=True
    )

    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[str | None] = mapped_column(String(16), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    sender: Mapped[User] = relationship("User", foreign_keys=[sender_id])
    receiver: Mapped[User | None] = relationship(
        "User", foreign_keys=[receiver_id]
    )
