"""Phone verification and session resolution."""

from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timedelta

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from pulse_chat.core.security import decode_session_token
from pulse_chat.core.settings import settings
from pulse_chat.db.time import utcnow
from pulse_chat.models import User, VerificationCode
from pulse_chat.services.errors import InvalidOrExpiredCode, ValidationError
from pulse_chat.services.sms import SmsSender, get_sms_sender
from pulse_chat.utils.phone import default_display_name, normalize_phone

__all__ = [
    "generate_code",
    "issue_code",
    "verify_code",
    "resolve_session",
]

logger = logging.getLogger(__name__)

_CODE_PATTERN = re.compile(r"^\d{6}$")


def generate_code() -> str:
    """Return a uniformly random six-digit code in 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


def _require_phone(phone: str) -> str:
    normalized = normalize_phone(phone)
    if len(normalized) < settings.min_phone_digits:
        raise ValidationError("Invalid phone number format")
    return normalized


def issue_code(
    db: Session,
    phone: str,
    sender: SmsSender | None = None,
    *,
    now: datetime | None = None,
) -> VerificationCode:
    """Store a fresh verification code for ``phone`` and dispatch it.

    Used and expired codes for the same phone are removed first. The new
    code is committed before dispatch, so a gateway failure leaves a valid
    but undelivered code behind.

    Raises:
        ValidationError: If fewer than the minimum number of digits remain
            after normalization.
        DispatchError: If the SMS sender fails.
    """
    normalized = _require_phone(phone)
    current = now or utcnow()

    removed = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.phone == normalized,
            or_(
                VerificationCode.used.is_(True),
                VerificationCode.expires_at <= current,
            ),
        )
        .delete(synchronize_session=False)
    )

    record = VerificationCode(
        phone=normalized,
        code=generate_code(),
        expires_at=current + timedelta(minutes=settings.code_ttl_minutes),
        used=False,
        created_at=current,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Issued verification code for %s (removed %d stale)", normalized, removed)

    (sender or get_sms_sender()).send_code(normalized, record.code)
    return record


def _consume(db: Session, code_id: int) -> bool:
    """Flip ``used`` on a code only if it is still unused."""
    result = db.execute(
        update(VerificationCode)
        .where(VerificationCode.id == code_id, VerificationCode.used.is_(False))
        .values(used=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def verify_code(
    db: Session,
    phone: str,
    code: str,
    *,
    now: datetime | None = None,
) -> User:
    """Redeem ``code`` for ``phone`` and return the matching user.

    The newest unused, unexpired code matching phone and value is consumed
    with a conditional update; of two concurrent attempts on the same code
    exactly one succeeds. The user is created on first verification.

    Raises:
        ValidationError: If the phone or code is malformed.
        InvalidOrExpiredCode: If no redeemable code exists.
    """
    normalized = _require_phone(phone)
    if not _CODE_PATTERN.match(code or ""):
        raise ValidationError("Code must consist of 6 digits")
    current = now or utcnow()

    candidate = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.phone == normalized,
            VerificationCode.code == code,
            VerificationCode.used.is_(False),
            VerificationCode.expires_at > current,
        )
        .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
        .first()
    )
    if candidate is None or not _consume(db, candidate.id):
        logger.info("Rejected verification attempt for %s", normalized)
        raise InvalidOrExpiredCode()

    user = db.query(User).filter(User.phone == normalized).first()
    if user is None:
        user = User(phone=normalized, name=default_display_name(normalized))
        db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Verified phone %s for user %s", normalized, user.id)
    return user


def resolve_session(db: Session, token: str | None) -> User | None:
    """Return the live user behind ``token``, or None for anonymous callers.

    The user row is loaded on every call so that changes made after the
    token was issued are visible immediately.
    """
    if not token:
        return None
    claims = decode_session_token(token)
    if claims is None:
        return None
    return db.get(User, claims.user_id)
