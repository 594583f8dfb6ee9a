"""
Data Models Module

This module defines Pydantic models for the Facebook login flow and the
responses of the demo application.

Models are organized by functional area:
- OAuth models (client configuration, token exchange result)
- Profile models (Facebook Graph API user profile)
- Result models (per-request authentication outcome)
- Response models (health check, error payloads)
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from fbauth.errors import AuthError


FACEBOOK_AUTH_URL = "https://www.facebook.com/dialog/oauth"
FACEBOOK_TOKEN_URL = "https://graph.facebook.com/oauth/access_token"


# ============================================================================
# OAuth Models
# ============================================================================

class OAuthConfig(BaseModel):
    """OAuth 2.0 client configuration shared by every request."""
    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., description="Facebook App ID")
    client_secret: str = Field(..., description="Facebook App Secret")
    redirect_url: str = Field(..., description="Callback URL registered with the Facebook app")
    auth_url: str = Field(default=FACEBOOK_AUTH_URL, description="Authorization (login dialog) endpoint")
    token_url: str = Field(default=FACEBOOK_TOKEN_URL, description="Token exchange endpoint")
    scopes: Tuple[str, ...] = Field(default=(), description="Permissions requested from the user")


class TokenResult(BaseModel):
    """Tokens returned by the code-for-token exchange."""
    model_config = ConfigDict(frozen=True)

    access_token: str = Field(..., description="Bearer token for the Graph API")
    refresh_token: Optional[str] = Field(None, description="Refresh token, if the provider issued one")
    token_type: Optional[str] = Field(None, description="Token type (usually bearer)")
    expires_in: Optional[int] = Field(None, description="Token lifetime in seconds")


# ============================================================================
# Profile Models
# ============================================================================

class FacebookProfile(BaseModel):
    """User profile returned by https://graph.facebook.com/me."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    gender: Optional[str] = None
    link: Optional[str] = None
    email: Optional[str] = None


# ============================================================================
# Result Models
# ============================================================================

class AuthResult(BaseModel):
    """
    Outcome of one callback request.

    When ``errors`` is not empty the flow did not complete and ``token`` and
    ``profile`` must not be trusted, even if one of them is set.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    errors: List[AuthError] = Field(default_factory=list, description="Failures recorded during the flow")
    token: Optional[TokenResult] = Field(None, description="Exchanged tokens")
    profile: Optional[FacebookProfile] = Field(None, description="Decoded Facebook profile")

    @property
    def ok(self) -> bool:
        return not self.errors


# ============================================================================
# Response Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp")


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="Error type or code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Error timestamp")
