"""
FastAPI Application Factory
============================

Demo application embedding the Facebook login handler.

Routers:
    - /auth/*       : Facebook login redirect and OAuth callback
    - /             : Greets the logged-in user (from the session cookie)
    - /health       : Health check endpoint

Environment Variables Required:
    - FACEBOOK_CLIENT_ID: Facebook App ID
    - FACEBOOK_CLIENT_SECRET: Facebook App Secret
    - FACEBOOK_REDIRECT_URI: e.g. "http://localhost:8080/auth/callback/facebook"
    - SESSION_JWT_SECRET: Secret for signing session JWTs
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn fbauth.main:create_app --factory --reload --port 8080

    Or directly:
        python -m fbauth.main
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fbauth.auth.routes import CALLBACK_PATH, auth_router
from fbauth.auth.session import get_optional_user
from fbauth.config import get_settings, validate_configuration
from fbauth.models import ErrorResponse, HealthResponse


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Validate configuration and report problems
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("fbauth.main")

    report = validate_configuration(settings)
    for warning in report["warnings"]:
        logger.warning(warning)
    for error in report["errors"]:
        logger.error(error)
    if report["callback_path"] != CALLBACK_PATH:
        logger.error(
            f"FACEBOOK_REDIRECT_URI path must be {CALLBACK_PATH}",
            extra={"callback_path": report["callback_path"]},
        )

    logger.info(
        "Starting fbauth service",
        extra={
            "callback_path": report["callback_path"],
            "scopes": report["scopes"],
            "log_level": settings.LOG_LEVEL,
        }
    )

    yield

    logger.info("fbauth service shutdown complete")


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Route handlers
        - Exception handlers

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="fbauth",
        description="Facebook OAuth 2.0 login demo",
        version="1.0.0",
        lifespan=lifespan,
    )

    if settings.allowed_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins_list,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.include_router(auth_router)

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", service="fbauth")

    @app.get("/", tags=["System"])
    async def index(
        user: Optional[Dict[str, Any]] = Depends(get_optional_user),
    ) -> Dict[str, str]:
        """
        Greet the logged-in user, or point anonymous users at the login route.
        """
        if user:
            return {"message": f"hi {user.get('name') or user['sub']}", "user_id": user["sub"]}
        return {"message": "hi anonymous", "login": "/auth/facebook"}

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Log unhandled errors and return a standardized error response.
        """
        logger = logging.getLogger("fbauth.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        body = ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred",
            details={"detail": str(exc)} if settings.LOG_LEVEL == "DEBUG" else None,
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    return app


if __name__ == "__main__":
    settings = get_settings()
    port = urlsplit(settings.FACEBOOK_REDIRECT_URI).port or 8080

    uvicorn.run(
        "fbauth.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level=settings.LOG_LEVEL.lower()
    )
