"""
Facebook login handler.

This module implements the OAuth 2.0 authorization code flow with Facebook
as a FastAPI dependency. The same dependency is used on two routes:

1. On the login route it redirects the browser to the Facebook login dialog.
2. On the callback route (the path of the configured redirect URL) it
   exchanges the ``code`` parameter for tokens, fetches the user's profile
   from the Graph API and returns an ``AuthResult`` to the route function.

Example:

    facebook = auth_facebook(OAuthConfig(
        client_id="app-id",
        client_secret="app-secret",
        redirect_url="http://localhost:8080/auth/callback/facebook",
    ))

    @app.get("/auth/facebook")
    async def login(result: AuthResult = Depends(facebook)):
        ...  # never reached, the dependency redirects

    @app.get("/auth/callback/facebook")
    async def callback(result: AuthResult = Depends(facebook)):
        if not result.ok:
            raise HTTPException(status_code=500, detail="OAuth failure")
        user = find_or_create_by_facebook_id(result.profile.id)
        ...
"""

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from fastapi import HTTPException, Request, status
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from fbauth.errors import (
    AuthError,
    ProfileDecodeError,
    ProfileFetchError,
    ProfileReadError,
    TokenExchangeError,
)
from fbauth.models import AuthResult, FacebookProfile, OAuthConfig, TokenResult

logger = logging.getLogger(__name__)


FACEBOOK_PROFILE_URL = "https://graph.facebook.com/me"

# Graph API v2.0+ rejects requests for the deprecated ``username`` field.
PROFILE_FIELDS = "id,name,first_name,middle_name,last_name,gender,link,email"


# =============================================================================
# URL Helpers
# =============================================================================

def callback_path(redirect_url: str) -> str:
    """
    Return the path component of the configured redirect URL.

    Args:
        redirect_url: Callback URL registered with the Facebook app

    Returns:
        The URL path, or an empty string if the URL cannot be parsed
    """
    try:
        return urlsplit(redirect_url).path
    except ValueError:
        return ""


def build_authorization_url(config: OAuthConfig) -> str:
    """
    Build the Facebook login dialog URL for the given client configuration.

    No ``state`` parameter is included, so the URL is the same for every
    request.
    """
    scope = " ".join(config.scopes) or None
    return prepare_grant_uri(
        config.auth_url,
        client_id=config.client_id,
        response_type="code",
        redirect_uri=config.redirect_url,
        scope=scope,
    )


# =============================================================================
# Handler
# =============================================================================

class FacebookAuth:
    """
    Authenticates users with Facebook and OAuth 2.0.

    Instances are FastAPI dependencies. Requests to any path other than the
    callback path are redirected to Facebook; callback requests resolve to an
    ``AuthResult``. Failures are recorded in ``AuthResult.errors`` rather than
    raised.

    Attributes:
        config: OAuth client configuration (read-only, shared by all requests)
        callback_path: Path of ``config.redirect_url``
        authorization_url: Facebook login dialog URL
    """

    def __init__(self, config: OAuthConfig, **client_kwargs: Any):
        self.config = config
        self.callback_path = callback_path(config.redirect_url)
        self.authorization_url = build_authorization_url(config)
        self._client_kwargs = client_kwargs

        if not self.callback_path:
            logger.warning(
                "Redirect URL has no usable path; every request will be redirected to Facebook",
                extra={"redirect_url": config.redirect_url},
            )

    async def __call__(self, request: Request) -> AuthResult:
        if not self.is_callback(request):
            logger.debug(
                "Redirecting to Facebook login",
                extra={"path": request.url.path},
            )
            raise HTTPException(
                status_code=status.HTTP_302_FOUND,
                detail="Redirecting to Facebook login",
                headers={"Location": self.authorization_url},
            )
        return await self.authenticate(request)

    def is_callback(self, request: Request) -> bool:
        return request.url.path == self.callback_path

    async def authenticate(self, request: Request) -> AuthResult:
        """
        Complete the login flow for a callback request.

        The returned result always belongs to this request only. At most one
        error is recorded, since the flow stops at the first failure.

        Args:
            request: Incoming callback request carrying the ``code`` parameter

        Returns:
            AuthResult with tokens and profile, or with the recorded error
        """
        result = AuthResult()
        try:
            code = await _read_code(request)
            async with self._client() as client:
                result.token = await self._exchange_code(client, code)
                result.profile = await self._fetch_profile(client)
        except AuthError as e:
            logger.warning(
                f"Facebook login failed: {e}",
                extra={"step": e.step, "path": request.url.path},
            )
            result.errors.append(e)
        else:
            logger.info(
                "Facebook login completed",
                extra={"facebook_id": result.profile.id},
            )
        return result

    def _client(self) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            redirect_uri=self.config.redirect_url,
            token_endpoint_auth_method="client_secret_post",
            **self._client_kwargs,
        )

    async def _exchange_code(self, client: AsyncOAuth2Client, code: str) -> TokenResult:
        try:
            token = await client.fetch_token(self.config.token_url, code=code)
        except (AuthlibBaseError, httpx.HTTPError, ValueError) as e:
            raise TokenExchangeError(f"Token exchange failed: {e}") from e

        if not token.get("access_token"):
            raise TokenExchangeError("Token response missing access_token")

        try:
            return TokenResult(
                access_token=token["access_token"],
                refresh_token=token.get("refresh_token"),
                token_type=token.get("token_type"),
                expires_in=token.get("expires_in"),
            )
        except ValidationError as e:
            raise TokenExchangeError(f"Invalid token response: {e}") from e

    async def _fetch_profile(self, client: AsyncOAuth2Client) -> FacebookProfile:
        try:
            async with client.stream(
                "GET",
                FACEBOOK_PROFILE_URL,
                params={"fields": PROFILE_FIELDS},
            ) as response:
                if not response.is_success:
                    raise ProfileFetchError(
                        f"Profile request returned HTTP {response.status_code}"
                    )
                try:
                    body = await response.aread()
                except httpx.HTTPError as e:
                    raise ProfileReadError(f"Failed to read profile response: {e}") from e
        except (AuthlibBaseError, httpx.HTTPError) as e:
            raise ProfileFetchError(f"Profile request failed: {e}") from e

        try:
            return FacebookProfile.model_validate_json(body)
        except ValidationError as e:
            raise ProfileDecodeError(f"Invalid profile response: {e}") from e


async def _read_code(request: Request) -> str:
    """
    Read the authorization code from the form body or the query string.

    For POST callbacks a ``code`` in the form body takes precedence over one
    in the query string.

    Raises:
        TokenExchangeError: If Facebook reported an error, the form body could
            not be parsed or no code was sent
    """
    error = request.query_params.get("error")
    if error:
        description = request.query_params.get("error_description") or error
        raise TokenExchangeError(f"Facebook authorization failed: {description}")

    code: Optional[str] = None
    if request.method == "POST":
        try:
            form = await request.form()
        except (MultiPartException, StarletteHTTPException) as e:
            raise TokenExchangeError(f"Unable to parse callback form body: {e}") from e
        code = form.get("code")
    if not code:
        code = request.query_params.get("code")

    if not code:
        raise TokenExchangeError("Callback request is missing the 'code' parameter")
    return code


def auth_facebook(config: OAuthConfig, **client_kwargs: Any) -> FacebookAuth:
    """
    Create the Facebook login dependency.

    Use the returned object on both the login route and the callback route.

    Args:
        config: OAuth client configuration
        **client_kwargs: Extra arguments for the underlying httpx client
            (for example ``transport`` or ``timeout``)

    Returns:
        FacebookAuth dependency
    """
    return FacebookAuth(config, **client_kwargs)


__all__ = [
    "FACEBOOK_PROFILE_URL",
    "PROFILE_FIELDS",
    "FacebookAuth",
    "auth_facebook",
    "build_authorization_url",
    "callback_path",
]
