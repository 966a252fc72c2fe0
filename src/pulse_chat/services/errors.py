"""Domain errors raised by the services and mapped to HTTP responses."""

from __future__ import annotations

from fastapi import status


class ChatError(Exception):
    """Base class for failures that are reported to API clients.

    Subclasses fix the HTTP status and a default user-facing message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidOrExpiredCode(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired code"


class EmptyMessage(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Message must contain text or media"


class SelfMessageRejected(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot send a message to yourself"


class SelfDeleteRejected(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot delete a chat with yourself"


class UnsupportedMediaType(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only images and videos are supported"


class FileTooLarge(ChatError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File is too large"


class ReceiverNotFound(ChatError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Receiver not found"


class DispatchError(ChatError):
    """Raised when the SMS gateway does not accept a verification code."""

    default_message = "Failed to send verification code"


class StorageError(ChatError):
    """Raised when an uploaded file cannot be stored."""

    default_message = "Failed to store file"
