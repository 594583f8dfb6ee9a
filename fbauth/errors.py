"""
Authentication error types.

Failures in the Facebook callback flow are not raised to the web framework.
They are recorded on the request's ``AuthResult.errors`` so the route handler
can decide how to answer. Each error names the step that failed and chains the
library exception that caused it.
"""


class AuthError(Exception):
    """Base exception for Facebook login failures"""
    step = "auth"


class TokenExchangeError(AuthError):
    """The authorization code could not be exchanged for an access token."""
    step = "exchange"


class ProfileFetchError(AuthError):
    """The Graph API profile request failed or returned an error status."""
    step = "fetch"


class ProfileReadError(AuthError):
    """The profile response body could not be read."""
    step = "read"


class ProfileDecodeError(AuthError):
    """The profile response body is not a valid profile document."""
    step = "decode"


__all__ = [
    "AuthError",
    "TokenExchangeError",
    "ProfileFetchError",
    "ProfileReadError",
    "ProfileDecodeError",
]
