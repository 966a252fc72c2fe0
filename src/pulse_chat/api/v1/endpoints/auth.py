"""Authentication endpoints for the Pulse Chat API."""

from __future__ import annotations

from fastapi import APIRouter, Response

from pulse_chat.api.v1.dependencies import CurrentUserDep, SessionDep, SmsSenderDep
from pulse_chat.core.security import create_session_token
from pulse_chat.core.settings import settings
from pulse_chat.schemas.auth import (
    SendCodeRequest,
    SendCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from pulse_chat.schemas.common import SuccessResponse
from pulse_chat.schemas.user import UserEnvelope, UserRead
from pulse_chat.services.auth import issue_code, verify_code

router = APIRouter(prefix="/auth", tags=["authentication"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


@router.post(
    "/send-code",
    summary="Send a verification code to a phone number",
    response_model=SendCodeResponse,
)
async def send_code(
    payload: SendCodeRequest,
    db: SessionDep,
    sender: SmsSenderDep,
) -> SendCodeResponse:
    """Issue a six-digit code valid for ten minutes and dispatch it by SMS."""
    issue_code(db, payload.phone, sender)
    return SendCodeResponse(message="Verification code sent to your phone number")


@router.post(
    "/verify-code",
    summary="Redeem a verification code and start a session",
    response_model=VerifyCodeResponse,
)
async def verify(
    payload: VerifyCodeRequest,
    response: Response,
    db: SessionDep,
) -> VerifyCodeResponse:
    """Verify the code, create the user on first login and set the session cookie."""
    user = verify_code(db, payload.phone, payload.code)
    _set_session_cookie(response, create_session_token(user.id, user.phone))
    return VerifyCodeResponse(user=UserRead.model_validate(user))


@router.get("/me", response_model=UserEnvelope)
async def read_me(current_user: CurrentUserDep) -> UserEnvelope:
    """Return the signed-in user."""
    return UserEnvelope(user=UserRead.model_validate(current_user))


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """Clear the session cookie."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return SuccessResponse()
