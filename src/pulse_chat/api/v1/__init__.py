# src/pulse_chat/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    chats_router,
    messages_router,
    realtime_router,
    upload_router,
    users_router,
)

__all__ = [
    "auth_router",
    "chats_router",
    "messages_router",
    "realtime_router",
    "upload_router",
    "users_router",
]
