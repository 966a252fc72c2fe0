# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from __future__ import annotations

from datetime import timedelta

from fastapi import status

from pulse_chat.core.security import decode_session_token
from pulse_chat.core.settings import settings
from pulse_chat.db.time import utcnow
from pulse_chat.models import User, VerificationCode
from pulse_chat.services.auth import issue_code

PHONE_INPUT = "+7 999 123 45 67"
PHONE = "79991234567"


def _send_code(client, phone: str = PHONE_INPUT):
    return client.post("/api/auth/send-code", json={"phone": phone})


def _verify(client, code: str, phone: str = PHONE_INPUT):
    return client.post("/api/auth/verify-code", json={"phone": phone, "code": code})


def test_send_code_normalizes_phone_and_stores_one_code(client, sms_sender, db_session) -> None:
    """A formatted phone yields one unused code for its digits, valid ten minutes."""
    before = utcnow()
    response = _send_code(client)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["message"]

    codes = db_session.query(VerificationCode).filter(VerificationCode.phone == PHONE).all()
    assert len(codes) == 1
    code = codes[0]
    assert code.used is False
    assert len(code.code) == 6 and code.code.isdigit()
    assert 100000 <= int(code.code) <= 999999

    expires_at = code.expires_at.replace(tzinfo=None)
    expected = (before + timedelta(minutes=10)).replace(tzinfo=None)
    assert abs((expires_at - expected).total_seconds()) < 5

    assert sms_sender.sent == [(PHONE, code.code)]


def test_send_code_rejects_short_phone(client, sms_sender, db_session) -> None:
    """Fewer than ten digits after normalization is a 400 and nothing is stored."""
    response = _send_code(client, "12-34-56")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid phone number format"
    assert db_session.query(VerificationCode).count() == 0
    assert sms_sender.sent == []


def test_send_code_requires_phone(client) -> None:
    """A request body without phone fails validation."""
    response = client.post("/api/auth/send-code", json={})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["field"] == "phone"


def test_verify_code_creates_user_and_sets_cookie(client, sms_sender, db_session) -> None:
    """First verification creates the user with a default name and starts a session."""
    _send_code(client)
    code = sms_sender.last_code_for(PHONE)

    response = _verify(client, code)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    assert data["user"]["phone"] == PHONE
    assert data["user"]["name"] == "User 4567"

    token = response.cookies.get(settings.session_cookie_name)
    assert token
    claims = decode_session_token(token)
    assert claims is not None
    assert claims.user_id == data["user"]["id"]
    assert claims.phone == PHONE

    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie

    assert db_session.query(User).filter(User.phone == PHONE).count() == 1


def test_verify_code_twice_fails_second_time(client, sms_sender) -> None:
    """A code can be redeemed exactly once."""
    _send_code(client)
    code = sms_sender.last_code_for(PHONE)

    assert _verify(client, code).status_code == status.HTTP_200_OK

    second = _verify(client, code)
    assert second.status_code == status.HTTP_400_BAD_REQUEST
    assert second.json()["detail"] == "Invalid or expired code"


def test_verify_code_reuses_existing_user(client, sms_sender, make_user) -> None:
    """Verifying a known phone returns the existing account unchanged."""
    existing = make_user("Existing", PHONE)
    _send_code(client)

    response = _verify(client, sms_sender.last_code_for(PHONE))
    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user["id"] == existing.id
    assert user["name"] == "Existing"


def test_verify_code_wrong_code(client, sms_sender) -> None:
    """A code that was never issued is rejected."""
    _send_code(client)
    issued = sms_sender.last_code_for(PHONE)
    wrong = "100000" if issued != "100000" else "100001"

    response = _verify(client, wrong)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid or expired code"


def test_verify_code_expired(client, sms_sender, db_session) -> None:
    """A code older than its lifetime cannot be redeemed."""
    record = issue_code(db_session, PHONE, sms_sender, now=utcnow() - timedelta(minutes=11))

    response = _verify(client, record.code)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid or expired code"


def test_verify_code_rejects_non_numeric_code(client) -> None:
    """Codes must be six digits."""
    response = _verify(client, "abcdef")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_verify_code_rejects_short_code(client) -> None:
    """A five-digit code fails request validation."""
    response = _verify(client, "12345")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["field"] == "code"


def test_me_requires_session(client) -> None:
    """Anonymous callers get 401 from /auth/me."""
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"


def test_me_returns_current_user(client, alice, alice_auth) -> None:
    """A valid session cookie resolves to the live user row."""
    response = client.get("/api/auth/me", headers=alice_auth)
    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user == {"id": alice.id, "phone": alice.phone, "name": "Alice", "avatar": None}


def test_login_flow_keeps_session_cookie(client, sms_sender) -> None:
    """The cookie set by verify-code authenticates subsequent requests."""
    _send_code(client)
    _verify(client, sms_sender.last_code_for(PHONE))

    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["phone"] == PHONE


def test_logout_clears_cookie(client, sms_sender) -> None:
    """Logging out removes the session cookie from the client."""
    _send_code(client)
    _verify(client, sms_sender.last_code_for(PHONE))

    response = client.post("/api/auth/logout")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert settings.session_cookie_name not in client.cookies

    assert client.get("/api/auth/me").status_code == status.HTTP_401_UNAUTHORIZED
