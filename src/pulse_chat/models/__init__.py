"""SQLAlchemy models for the Pulse Chat application."""

from .message import Message
from .user import User
from .verification_code import VerificationCode

__all__ = [
    "Message",
    "User",
    "VerificationCode",
]
