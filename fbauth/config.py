"""
Configuration module for the Facebook login demo application.

This module uses Pydantic Settings to load and validate environment variables
for the Facebook app credentials, session JWT management, CORS and logging.

Environment variables are loaded from .env file or system environment. The
login handler itself never reads the environment; it receives an immutable
``OAuthConfig`` built by ``Settings.oauth_config()``.
"""

from functools import lru_cache
from typing import List, Optional
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fbauth.models import OAuthConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # =========================================================================
    # Facebook App Configuration
    # =========================================================================

    FACEBOOK_CLIENT_ID: str = Field(
        ...,
        description="Facebook App ID",
        min_length=1,
    )

    FACEBOOK_CLIENT_SECRET: str = Field(
        ...,
        description="Facebook App Secret",
        min_length=1,
    )

    FACEBOOK_REDIRECT_URI: str = Field(
        ...,
        description="OAuth redirect URI registered with the Facebook app (e.g., https://example.com/auth/callback/facebook)",
        min_length=1,
    )

    FACEBOOK_SCOPES: str = Field(
        default="email,public_profile",
        description="Comma-separated list of permissions to request",
    )

    # =========================================================================
    # Session JWT Configuration
    # =========================================================================

    SESSION_JWT_SECRET: str = Field(
        ...,
        description="Secret key for signing session JWTs (must be cryptographically secure)",
        min_length=32,
    )

    SESSION_JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, or HS512)",
    )

    SESSION_JWT_EXPIRY_MINUTES: int = Field(
        default=60,
        description="Session JWT expiry time in minutes",
        ge=5,
        le=1440,  # Max 24 hours
    )

    SESSION_JWT_ISSUER: str = Field(
        default="fbauth",
        description="Issuer claim written to and required on session JWTs",
    )

    SESSION_COOKIE_NAME: str = Field(
        default="session",
        description="Name of the cookie holding the session JWT",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (leave empty for no CORS)",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def facebook_scopes_list(self) -> List[str]:
        """
        Parse FACEBOOK_SCOPES into a list of permission names.
        """
        return [
            scope.strip()
            for scope in self.FACEBOOK_SCOPES.split(",")
            if scope.strip()
        ]

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        if not self.ALLOWED_ORIGINS:
            return []

        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    def oauth_config(self) -> OAuthConfig:
        """
        Build the OAuth client configuration used by the login handler.
        """
        return OAuthConfig(
            client_id=self.FACEBOOK_CLIENT_ID,
            client_secret=self.FACEBOOK_CLIENT_SECRET,
            redirect_url=self.FACEBOOK_REDIRECT_URI,
            scopes=tuple(self.facebook_scopes_list),
        )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("FACEBOOK_REDIRECT_URI")
    @classmethod
    def validate_redirect_uri(cls, v: str) -> str:
        """
        Validate that the redirect URI is an absolute http(s) URL with a path.

        Raises:
            ValueError: If the URI cannot be used as an OAuth callback
        """
        try:
            parts = urlsplit(v)
        except ValueError as e:
            raise ValueError(f"Invalid redirect URI: {v}") from e

        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(
                f"Invalid redirect URI: '{v}'. "
                "Expected an absolute URL such as 'https://example.com/auth/callback/facebook'"
            )

        if not parts.path or parts.path == "/":
            raise ValueError(
                f"Redirect URI '{v}' must include a callback path"
            )

        return v

    @field_validator("SESSION_JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """
        Validate JWT algorithm is one of the supported HMAC algorithms.
        """
        allowed_algorithms = ["HS256", "HS384", "HS512"]

        if v not in allowed_algorithms:
            raise ValueError(
                f"JWT algorithm must be one of {allowed_algorithms}, got: {v}"
            )

        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def validate_configuration(settings: Settings) -> dict:
    """
    Validate critical configuration settings and return a status report.

    This is called during application startup so that problems show up in
    the logs before the first login attempt.

    Returns:
        Dictionary with validation status and any warnings.

    Example:
        >>> status = validate_configuration(get_settings())
        >>> if not status["valid"]:
        ...     print(status["errors"])
    """
    errors = []
    warnings = []

    if not settings.facebook_scopes_list:
        warnings.append("FACEBOOK_SCOPES is empty (only the public profile will be available)")
    elif "email" not in settings.facebook_scopes_list:
        warnings.append("FACEBOOK_SCOPES does not request 'email' (profiles will have no email)")

    redirect = urlsplit(settings.FACEBOOK_REDIRECT_URI)
    if redirect.scheme != "https" and redirect.hostname not in ("localhost", "127.0.0.1"):
        errors.append("FACEBOOK_REDIRECT_URI must use https outside of local development")

    if settings.FACEBOOK_CLIENT_SECRET == settings.SESSION_JWT_SECRET:
        errors.append("SESSION_JWT_SECRET must not reuse FACEBOOK_CLIENT_SECRET")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
        "callback_path": redirect.path,
        "scopes": settings.facebook_scopes_list,
    }
