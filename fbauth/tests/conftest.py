"""
Shared fixtures for fbauth tests.
"""

import pytest

from fbauth.auth.facebook import FacebookAuth
from fbauth.auth.routes import get_facebook_auth
from fbauth.config import get_settings
from fbauth.models import OAuthConfig
from fbauth.tests.fakes import REDIRECT_URL, FakeFacebook


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def oauth_config():
    return OAuthConfig(
        client_id="test-app-id",
        client_secret="test-app-secret",
        redirect_url=REDIRECT_URL,
        scopes=("email", "public_profile"),
    )


@pytest.fixture
def fake_facebook():
    return FakeFacebook()


@pytest.fixture
def handler(oauth_config, fake_facebook):
    return FacebookAuth(oauth_config, transport=fake_facebook.transport)


@pytest.fixture
def settings_env(monkeypatch):
    """Populate the environment for Settings and reset cached singletons."""
    monkeypatch.setenv("FACEBOOK_CLIENT_ID", "test-app-id")
    monkeypatch.setenv("FACEBOOK_CLIENT_SECRET", "test-app-secret")
    monkeypatch.setenv("FACEBOOK_REDIRECT_URI", REDIRECT_URL)
    monkeypatch.setenv("SESSION_JWT_SECRET", "test-session-secret-0123456789abcdef")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    get_facebook_auth.cache_clear()

    yield get_settings()

    get_settings.cache_clear()
    get_facebook_auth.cache_clear()
