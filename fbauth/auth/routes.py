"""
Authentication routes for the Facebook login flow.

Both routes use the same ``FacebookAuth`` dependency: on ``/auth/facebook``
it redirects the browser to Facebook, on ``/auth/callback/facebook`` it
resolves to the ``AuthResult`` of the code exchange and profile fetch.
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from fbauth.auth.facebook import FacebookAuth, auth_facebook
from fbauth.auth.session import JWTSessionError, create_session_jwt_from_profile
from fbauth.config import Settings, get_settings
from fbauth.models import AuthResult, ErrorResponse

logger = logging.getLogger(__name__)

# Path of FACEBOOK_REDIRECT_URI must match this route.
CALLBACK_PATH = "/auth/callback/facebook"


# =============================================================================
# Router Setup
# =============================================================================

auth_router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
)


# =============================================================================
# Dependencies
# =============================================================================

@lru_cache()
def get_facebook_auth() -> FacebookAuth:
    """
    Build the Facebook login handler once from application settings.
    """
    return auth_facebook(get_settings().oauth_config())


async def facebook_login(
    request: Request,
    facebook: FacebookAuth = Depends(get_facebook_auth),
) -> AuthResult:
    return await facebook(request)


# =============================================================================
# Endpoints
# =============================================================================

@auth_router.get("/facebook")
async def login(result: AuthResult = Depends(facebook_login)):
    """
    Redirect the user to the Facebook login dialog.

    The dependency answers with 302 Found before this body runs.
    """


@auth_router.api_route("/callback/facebook", methods=["GET", "POST"])
async def callback(
    result: AuthResult = Depends(facebook_login),
    settings: Settings = Depends(get_settings),
):
    """
    Handle the OAuth callback from Facebook.

    On success a session cookie is issued and the user is redirected to the
    home page. On failure a 500 error is returned.
    """
    return _finish_login(result, settings)


def _finish_login(result: AuthResult, settings: Settings):
    if not result.ok:
        error = result.errors[0]
        return _error_response(
            message="OAuth failure",
            details={"step": error.step},
        )

    try:
        token = create_session_jwt_from_profile(result.profile, settings)
    except JWTSessionError as e:
        logger.error(f"Unable to start session after Facebook login: {e}")
        return _error_response(
            message="Unable to start session",
            details={"step": "session"},
        )

    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_JWT_EXPIRY_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.FACEBOOK_REDIRECT_URI.startswith("https://"),
    )
    return response


def _error_response(message: str, details: dict) -> JSONResponse:
    body = ErrorResponse(error="oauth_failure", message=message, details=details)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json"),
    )
