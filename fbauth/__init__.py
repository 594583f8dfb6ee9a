"""
fbauth
======

Facebook OAuth 2.0 login for FastAPI applications.

Use ``auth_facebook`` to build a dependency for the login and callback
routes. The callback route receives an ``AuthResult`` holding the tokens and
the user's Facebook profile, or the error that stopped the flow.
"""

from fbauth.auth.facebook import FacebookAuth, auth_facebook
from fbauth.errors import (
    AuthError,
    ProfileDecodeError,
    ProfileFetchError,
    ProfileReadError,
    TokenExchangeError,
)
from fbauth.models import AuthResult, FacebookProfile, OAuthConfig, TokenResult

__all__ = [
    "AuthError",
    "AuthResult",
    "FacebookAuth",
    "FacebookProfile",
    "OAuthConfig",
    "ProfileDecodeError",
    "ProfileFetchError",
    "ProfileReadError",
    "TokenExchangeError",
    "TokenResult",
    "auth_facebook",
]
