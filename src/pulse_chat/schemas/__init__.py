"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import SendCodeRequest, SendCodeResponse, VerifyCodeRequest, VerifyCodeResponse
from .common import CamelModel, SuccessResponse
from .message import (
    ChatDeleteResponse,
    MessageCreate,
    MessageEnvelope,
    MessageList,
    MessageRead,
)
from .upload import UploadResponse
from .user import UserEnvelope, UserList, UserRead, UserUpdate

__all__ = [
    "CamelModel", "SuccessResponse",
    "SendCodeRequest", "SendCodeResponse", "VerifyCodeRequest", "VerifyCodeResponse",
    "ChatDeleteResponse", "MessageCreate", "MessageEnvelope", "MessageList", "MessageRead",
    "UploadResponse",
    "UserEnvelope", "UserList", "UserRead", "UserUpdate",
]
