"""Business logic services for the Pulse Chat application."""

from .realtime import ConversationHub, get_conversation_hub
from .sms import HttpSmsSender, LoggingSmsSender, SmsSender, get_sms_sender
from .storage import LocalMediaStorage, MediaStorage, get_media_storage

__all__ = [
    "ConversationHub",
    "get_conversation_hub",
    "HttpSmsSender",
    "LoggingSmsSender",
    "SmsSender",
    "get_sms_sender",
    "LocalMediaStorage",
    "MediaStorage",
    "get_media_storage",
]
