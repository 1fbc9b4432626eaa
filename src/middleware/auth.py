"""Authentication middleware and token helpers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from jose import JWTError, jwt
from starlette.middleware.base import BaseHTTPMiddleware

from src.core.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _unauthorized(code: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "errors": [{
                "status": "401",
                "code": code,
                "title": "Unauthorized",
                "detail": detail,
            }]
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to verify bearer JWTs on write requests.

    The ``sub`` claim is the calling artist's id and is stored on
    ``request.state.artist_id``. Reads are public. Can be disabled for
    development/testing.
    """

    EXEMPT_PATHS = {
        "/",
        "/health",
        "/version",
        "/openapi.json",
        "/docs",
        "/redoc",
        "/favicon.ico",
    }

    # Profile creation is how an artist joins the platform
    PUBLIC_WRITES = {
        ("POST", f"{settings.api_v1_prefix}/artists"),
    }

    async def dispatch(self, request: Request, call_next):
        """Process request and validate authentication."""
        path = request.url.path.rstrip("/") or "/"

        if (
            path in self.EXEMPT_PATHS
            or request.method in ("GET", "HEAD", "OPTIONS")
            or (request.method, path) in self.PUBLIC_WRITES
        ):
            return await call_next(request)

        # Skip authentication if disabled (development/testing)
        if settings.disable_auth:
            request.state.artist_id = settings.dev_artist_id
            return await call_next(request)

        authorization = request.headers.get("Authorization")
        if not authorization:
            logger.warning(f"Missing Authorization header for {path}")
            return _unauthorized("AUTHORIZATION_REQUIRED", "Authorization header is required")

        if not authorization.startswith("Bearer "):
            logger.warning(f"Invalid authorization format for {path}")
            return _unauthorized(
                "INVALID_AUTHORIZATION_FORMAT",
                "Authorization must be in 'Bearer <token>' format",
            )

        token = authorization.split(" ", 1)[1]

        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm]
            )
        except JWTError as e:
            logger.warning(f"JWT validation failed for {path}: {e}")
            return _unauthorized("INVALID_JWT_TOKEN", "Invalid or expired JWT token")

        subject = payload.get("sub")
        try:
            artist_id = int(subject)
        except (TypeError, ValueError):
            return _unauthorized("INVALID_TOKEN_PAYLOAD", "Token 'sub' claim must be an artist id")

        request.state.artist_id = artist_id
        request.state.token_exp = payload.get("exp", 0)

        logger.debug(f"Authenticated artist {artist_id} for {path}")

        return await call_next(request)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])

    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm
    )
