# tests/v1/test_jwt_validation.py
"""Tests for session token validation edge cases."""

from datetime import UTC, datetime, timedelta

from fastapi import status
from jose import jwt

from pulse_chat.core.security import create_session_token, decode_session_token
from pulse_chat.core.settings import settings


def _cookie(token: str) -> dict[str, str]:
    return {"Cookie": f"{settings.session_cookie_name}={token}"}


class TestSessionTokenValidation:
    """Session cookies that must not authenticate."""

    def test_malformed_token(self, client):
        """Garbage in the cookie is treated as anonymous."""
        response = client.get("/api/auth/me", headers=_cookie("not.a.valid.jwt"))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_wrong_secret(self, client, alice):
        """Tokens signed with another key are rejected."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": alice.id, "phone": alice.phone, "iat": now, "exp": now + timedelta(days=1)},
            "wrong_secret_key",
            algorithm=settings.jwt_algorithm,
        )
        response = client.get("/api/auth/me", headers=_cookie(token))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self, client, alice):
        """A token past its thirty-day lifetime is rejected."""
        issued = datetime.now(UTC) - timedelta(days=settings.session_ttl_days, minutes=1)
        token = create_session_token(alice.id, alice.phone, now=issued)
        response = client.get("/api/auth/me", headers=_cookie(token))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_without_subject(self, client):
        """A correctly signed token with no subject does not authenticate."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {"phone": "79990000001", "iat": now, "exp": now + timedelta(days=1)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        response = client.get("/api/auth/me", headers=_cookie(token))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_for_deleted_user(self, client, alice, db_session):
        """The user row is looked up on every request."""
        token = create_session_token(alice.id, alice.phone)
        db_session.delete(alice)
        db_session.commit()

        response = client.get("/api/auth/me", headers=_cookie(token))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_profile_changes_visible_without_new_token(self, client, alice, db_session):
        """Renaming a user is reflected for an already issued token."""
        token = create_session_token(alice.id, alice.phone)
        alice.name = "Renamed"
        db_session.commit()

        response = client.get("/api/auth/me", headers=_cookie(token))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["name"] == "Renamed"


def test_session_token_claims_round_trip():
    """Decoding a fresh token yields the user id and phone it was built from."""
    claims = decode_session_token(create_session_token("user-1", "79990000001"))
    assert claims is not None
    assert claims.user_id == "user-1"
    assert claims.phone == "79990000001"


def test_session_token_lifetime():
    """Tokens expire thirty days after issue."""
    issued = datetime(2024, 1, 1, tzinfo=UTC)
    token = create_session_token("user-1", "79990000001", now=issued)
    payload = jwt.get_unverified_claims(token)
    assert payload["exp"] - payload["iat"] == 30 * 24 * 60 * 60
