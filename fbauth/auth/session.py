"""
JWT Session Management Module
==============================

Handles creation and verification of the session JWT that the demo
application stores in a cookie after a successful Facebook login.

The login handler itself keeps no session state; this module belongs to the
embedding application and shows how a host app would remember the user.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from fbauth.config import Settings, get_settings
from fbauth.models import FacebookProfile

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class JWTSessionError(Exception):
    """Base exception for JWT session errors"""
    pass


# =============================================================================
# Token Creation
# =============================================================================

def create_session_jwt(claims: Dict[str, Any], settings: Settings) -> str:
    """
    Create a session JWT with the provided claims.

    Args:
        claims: Dictionary of claims to include in the JWT.
                Must contain 'sub' (the Facebook user ID).
        settings: Application settings (secret, algorithm, expiry)

    Returns:
        Encoded JWT string

    Raises:
        JWTSessionError: If JWT creation fails

    Example:
        >>> token = create_session_jwt({'sub': '10157', 'name': 'Jane Doe'}, settings)
    """
    payload = claims.copy()

    if not payload.get('sub'):
        raise JWTSessionError("Missing required claim: 'sub' (subject/user ID)")

    now = datetime.now(timezone.utc)
    payload.update({
        'iat': now,
        'exp': now + timedelta(minutes=settings.SESSION_JWT_EXPIRY_MINUTES),
        'iss': settings.SESSION_JWT_ISSUER,
    })

    try:
        token = jwt.encode(
            payload,
            settings.SESSION_JWT_SECRET,
            algorithm=settings.SESSION_JWT_ALGORITHM,
        )
    except (TypeError, ValueError, jwt.PyJWTError) as e:
        logger.error(f"Failed to create session JWT: {e}", exc_info=True)
        raise JWTSessionError(f"Failed to create session JWT: {str(e)}") from e

    logger.debug(
        "Created session JWT",
        extra={
            "user_id": payload['sub'],
            "expires_in_minutes": settings.SESSION_JWT_EXPIRY_MINUTES,
        }
    )

    return token


def create_session_jwt_from_profile(profile: FacebookProfile, settings: Settings) -> str:
    """
    Create session JWT from a Facebook profile.

    Used in the callback route after a successful login. Only the fields the
    user actually shared are copied into the token.

    Args:
        profile: Decoded Facebook profile
        settings: Application settings

    Returns:
        Session JWT string
    """
    session_claims = {'sub': profile.id}
    if profile.name:
        session_claims['name'] = profile.name
    if profile.email:
        session_claims['email'] = profile.email

    return create_session_jwt(session_claims, settings)


# =============================================================================
# Token Verification
# =============================================================================

def verify_session_jwt(token: Optional[str], settings: Settings) -> Dict[str, Any]:
    """
    Verify and decode a session JWT.

    Args:
        token: JWT string to verify
        settings: Application settings

    Returns:
        Dictionary containing the decoded claims

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No session token provided",
        )

    try:
        decoded = jwt.decode(
            token,
            settings.SESSION_JWT_SECRET,
            algorithms=[settings.SESSION_JWT_ALGORITHM],
            issuer=settings.SESSION_JWT_ISSUER,
            options={'require': ['exp', 'iat', 'iss', 'sub']},
        )
    except ExpiredSignatureError:
        logger.warning("Session JWT expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has expired",
        )
    except InvalidTokenError as e:
        logger.warning(f"Invalid session JWT: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid session: {str(e)}",
        )

    logger.debug("Session JWT verified", extra={"user_id": decoded.get('sub')})
    return decoded


# =============================================================================
# FastAPI Dependencies
# =============================================================================

async def get_optional_user(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Optional[Dict[str, Any]]:
    """
    FastAPI dependency returning the session user's claims, or None.

    Usage:
        @app.get("/")
        async def index(user: Optional[dict] = Depends(get_optional_user)):
            if user:
                return {"message": f"hi {user['sub']}"}
            return {"message": "hi anonymous"}
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    try:
        return verify_session_jwt(token, settings)
    except HTTPException:
        return None


__all__ = [
    "create_session_jwt",
    "create_session_jwt_from_profile",
    "verify_session_jwt",
    "get_optional_user",
    "JWTSessionError",
]
