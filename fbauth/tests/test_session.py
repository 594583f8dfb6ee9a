"""
Session JWT Tests

Tests creation and verification of the session JWT issued after login.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from fbauth.auth.session import (
    JWTSessionError,
    create_session_jwt,
    create_session_jwt_from_profile,
    verify_session_jwt,
)
from fbauth.config import Settings
from fbauth.models import FacebookProfile


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        FACEBOOK_CLIENT_ID="test-app-id",
        FACEBOOK_CLIENT_SECRET="test-app-secret",
        FACEBOOK_REDIRECT_URI="http://localhost:8080/auth/callback/facebook",
        SESSION_JWT_SECRET="test-session-secret-0123456789abcdef",
    )


class TestSessionCreation:
    """Test suite for session JWT creation"""

    def test_standard_claims_added(self, settings):
        token = create_session_jwt({"sub": "10157"}, settings)

        claims = verify_session_jwt(token, settings)
        assert claims["sub"] == "10157"
        assert claims["iss"] == "fbauth"
        assert claims["exp"] - claims["iat"] == settings.SESSION_JWT_EXPIRY_MINUTES * 60

    def test_missing_subject_rejected(self, settings):
        with pytest.raises(JWTSessionError):
            create_session_jwt({"name": "Jane"}, settings)

    def test_input_claims_not_mutated(self, settings):
        claims = {"sub": "10157"}
        create_session_jwt(claims, settings)

        assert claims == {"sub": "10157"}

    def test_from_profile_copies_shared_fields(self, settings):
        profile = FacebookProfile(id="10157", name="Jane Doe", email="jane@example.com")

        claims = verify_session_jwt(create_session_jwt_from_profile(profile, settings), settings)

        assert claims["sub"] == "10157"
        assert claims["name"] == "Jane Doe"
        assert claims["email"] == "jane@example.com"

    def test_from_profile_without_email(self, settings):
        profile = FacebookProfile(id="10157")

        claims = verify_session_jwt(create_session_jwt_from_profile(profile, settings), settings)

        assert "email" not in claims
        assert "name" not in claims


class TestSessionVerification:
    """Test suite for session JWT verification"""

    def test_empty_token_rejected(self, settings):
        with pytest.raises(HTTPException) as exc_info:
            verify_session_jwt("", settings)

        assert exc_info.value.status_code == 401

    def test_expired_token_rejected(self, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "10157", "iss": "fbauth", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
            settings.SESSION_JWT_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(HTTPException) as exc_info:
            verify_session_jwt(token, settings)

        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    def test_wrong_secret_rejected(self, settings):
        token = create_session_jwt({"sub": "10157"}, settings)
        other = settings.model_copy(update={"SESSION_JWT_SECRET": "another-secret-0123456789abcdefghij"})

        with pytest.raises(HTTPException) as exc_info:
            verify_session_jwt(token, other)

        assert exc_info.value.status_code == 401

    def test_wrong_issuer_rejected(self, settings):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "10157", "iss": "someone-else", "iat": now, "exp": now + timedelta(minutes=5)},
            settings.SESSION_JWT_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(HTTPException) as exc_info:
            verify_session_jwt(token, settings)

        assert exc_info.value.status_code == 401
