# src/pulse_chat/models/verification_code.py
"""One-time phone verification codes."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pulse_chat.db.session import Base
from pulse_chat.db.time import utcnow


class VerificationCode(Base):
    """Short-lived, single-use numeric code proving control of a phone.

    A code moves from created to used exactly once; expiry is evaluated at
    query time against ``expires_at`` and never written back.
    """

    __tablename__ = "verification_code"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(6), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
