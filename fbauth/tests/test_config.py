"""
Configuration and Model Tests

Tests settings validation, the OAuthConfig built from settings and the
behaviour of the result models.
"""

import pytest
from pydantic import ValidationError

from fbauth.config import Settings, validate_configuration
from fbauth.errors import ProfileFetchError
from fbauth.models import (
    FACEBOOK_AUTH_URL,
    FACEBOOK_TOKEN_URL,
    AuthResult,
    FacebookProfile,
    OAuthConfig,
)


def make_settings(**overrides):
    values = {
        "FACEBOOK_CLIENT_ID": "test-app-id",
        "FACEBOOK_CLIENT_SECRET": "test-app-secret",
        "FACEBOOK_REDIRECT_URI": "http://localhost:8080/auth/callback/facebook",
        "SESSION_JWT_SECRET": "test-session-secret-0123456789abcdef",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Test suite for Settings validation"""

    def test_defaults(self):
        settings = make_settings()

        assert settings.facebook_scopes_list == ["email", "public_profile"]
        assert settings.SESSION_JWT_ALGORITHM == "HS256"
        assert settings.SESSION_COOKIE_NAME == "session"
        assert settings.allowed_origins_list == []

    def test_scopes_and_origins_parsed(self):
        settings = make_settings(
            FACEBOOK_SCOPES=" email , user_birthday ,",
            ALLOWED_ORIGINS="http://localhost:3000, https://app.example.com",
        )

        assert settings.facebook_scopes_list == ["email", "user_birthday"]
        assert settings.allowed_origins_list == ["http://localhost:3000", "https://app.example.com"]

    @pytest.mark.parametrize(
        "redirect_uri",
        [
            "localhost:8080/auth/callback/facebook",
            "ftp://example.com/auth/callback/facebook",
            "https://example.com",
            "https://example.com/",
            "http://[::1/auth/callback/facebook",
        ],
    )
    def test_invalid_redirect_uri_rejected(self, redirect_uri):
        with pytest.raises(ValidationError):
            make_settings(FACEBOOK_REDIRECT_URI=redirect_uri)

    def test_short_session_secret_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(SESSION_JWT_SECRET="too-short")

    def test_unsupported_algorithm_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(SESSION_JWT_ALGORITHM="RS256")

    def test_log_level_normalised(self):
        assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_oauth_config(self):
        config = make_settings(FACEBOOK_SCOPES="email").oauth_config()

        assert config.client_id == "test-app-id"
        assert config.client_secret == "test-app-secret"
        assert config.redirect_url == "http://localhost:8080/auth/callback/facebook"
        assert config.auth_url == FACEBOOK_AUTH_URL
        assert config.token_url == FACEBOOK_TOKEN_URL
        assert config.scopes == ("email",)


class TestValidateConfiguration:
    """Test suite for the startup configuration report"""

    def test_local_development_is_valid(self):
        report = validate_configuration(make_settings())

        assert report["valid"]
        assert report["errors"] == []
        assert report["callback_path"] == "/auth/callback/facebook"

    def test_plain_http_outside_localhost_is_an_error(self):
        report = validate_configuration(
            make_settings(FACEBOOK_REDIRECT_URI="http://example.com/auth/callback/facebook")
        )

        assert not report["valid"]
        assert any("https" in error for error in report["errors"])

    def test_missing_email_scope_warns(self):
        report = validate_configuration(make_settings(FACEBOOK_SCOPES="public_profile"))

        assert report["valid"]
        assert any("email" in warning for warning in report["warnings"])


class TestModels:
    """Test suite for the data models"""

    def test_oauth_config_is_immutable(self):
        config = OAuthConfig(client_id="id", client_secret="secret", redirect_url="http://localhost/cb")

        with pytest.raises(ValidationError):
            config.client_id = "other"

    def test_profile_is_immutable(self):
        profile = FacebookProfile(id="1")

        with pytest.raises(ValidationError):
            profile.id = "2"

    def test_auth_result_starts_empty(self):
        first = AuthResult()
        second = AuthResult()
        first.errors.append(ProfileFetchError("boom"))

        assert second.errors == []
        assert second.token is None
        assert second.profile is None
        assert second.ok
        assert not first.ok
