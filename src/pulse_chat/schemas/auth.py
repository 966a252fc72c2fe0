"""Schemas for phone verification and session endpoints."""

from pydantic import Field

from .common import CamelModel, SuccessResponse
from .user import UserRead


class SendCodeRequest(CamelModel):
    """Request a verification code for a phone number."""

    phone: str = Field(..., min_length=1, max_length=40, description="Phone number in any format")


class SendCodeResponse(SuccessResponse):
    """Acknowledgement that a code was dispatched."""

    message: str


class VerifyCodeRequest(CamelModel):
    """Redeem a verification code."""

    phone: str = Field(..., min_length=1, max_length=40)
    code: str = Field(..., min_length=6, max_length=6, description="Six-digit code")


class VerifyCodeResponse(SuccessResponse):
    """Verified user; the session cookie is set on the response."""

    user: UserRead
