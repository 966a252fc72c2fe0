"""Session token helpers built on signed JWTs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from pulse_chat.core.settings import settings


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried inside a session token."""

    user_id: str
    phone: str


def create_session_token(user_id: str, phone: str, *, now: datetime | None = None) -> str:
    """Create a signed session token binding ``user_id`` and ``phone``."""
    issued = now or datetime.now(UTC)
    to_encode: dict[str, object] = {
        "sub": user_id,
        "phone": phone,
        "iat": issued,
        "exp": issued + timedelta(days=settings.session_ttl_days),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_session_token(token: str) -> SessionClaims | None:
    """Verify signature and expiry of ``token``.

    Returns:
        The decoded claims, or None when the token is malformed, badly
        signed, expired or missing its subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return SessionClaims(user_id=subject, phone=str(payload.get("phone", "")))
