"""Signed session tokens (JWT) and the auth cookie.

Tokens carry the claims ``sub`` (account id), ``email`` and ``role`` and are
accepted from an ``Authorization: Bearer`` header or, failing that, from the
``auth_token`` cookie. Creating a token without a configured secret is a
configuration error; every verification failure degrades to ``None``.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import Request, Response
from pydantic import BaseModel, ValidationError

from app.core.config import Settings, get_settings
from app.models.enums import Role

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"
AUTH_HEADER = "authorization"
BEARER_PREFIX = "Bearer "
DEFAULT_TOKEN_TTL = timedelta(days=7)
AUTH_COOKIE_MAX_AGE = 60 * 60 * 24 * 7  # 7 days, in seconds
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class AuthConfigurationError(RuntimeError):
    """Raised when token signing is attempted without AUTH_SECRET."""

    def __init__(self, message: str = "AUTH_SECRET environment variable is not set") -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(Exception):
    """Raised by the require_* helpers when no valid identity is present."""

    def __init__(self, message: str = "Unauthorized") -> None:
        self.message = message
        super().__init__(message)


class AuthClaims(BaseModel):
    """Identity claims embedded in a session token."""

    model_config = {"extra": "ignore", "frozen": True}

    sub: str
    email: str
    role: Role


def _resolve_settings(settings: Settings | None) -> Settings:
    return settings if settings is not None else get_settings()


def _get_auth_secret(settings: Settings) -> str:
    if settings.AUTH_SECRET is None:
        raise AuthConfigurationError()
    return settings.AUTH_SECRET.get_secret_value()


def require_auth_secret(settings: Settings | None = None) -> None:
    """Fail fast at startup when tokens cannot be signed."""
    _get_auth_secret(_resolve_settings(settings))


def create_auth_token(
    claims: AuthClaims,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Sign claims into a JWT. Expires after 7 days unless expires_delta is given."""
    settings = _resolve_settings(settings)
    secret = _get_auth_secret(settings)
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.AUTH_TOKEN_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "sub": claims.sub,
        "email": claims.email,
        "role": claims.role.value,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def verify_auth_token(token: str, settings: Settings | None = None) -> AuthClaims | None:
    """
    Decode and validate a token. Returns None on a bad signature, malformed or
    expired token, unexpected claims, or when no secret is configured.
    """
    if not token or not isinstance(token, str):
        return None
    settings = _resolve_settings(settings)
    try:
        secret = _get_auth_secret(settings)
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
        return AuthClaims.model_validate(payload)
    except AuthConfigurationError:
        logger.warning("Token verification skipped: AUTH_SECRET is not configured")
        return None
    except (jwt.PyJWTError, ValidationError):
        return None


def get_token_from_request(request: Request) -> str | None:
    """Return the bearer token if present, otherwise the auth cookie value."""
    header = request.headers.get(AUTH_HEADER)
    if header and header.startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        if token:
            return token
    return get_token_from_cookies(request.cookies)


def get_token_from_cookies(cookies: Mapping[str, str]) -> str | None:
    return cookies.get(AUTH_COOKIE_NAME) or None


def get_auth_claims(request: Request, settings: Settings | None = None) -> AuthClaims | None:
    token = get_token_from_request(request)
    if not token:
        return None
    return verify_auth_token(token, settings)


def require_auth_claims(request: Request, settings: Settings | None = None) -> AuthClaims:
    """Like get_auth_claims but raises UnauthorizedError when nothing verifies."""
    claims = get_auth_claims(request, settings)
    if claims is None:
        raise UnauthorizedError()
    return claims


def set_auth_cookie(response: Response, token: str, settings: Settings | None = None) -> None:
    settings = _resolve_settings(settings)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=AUTH_COOKIE_MAX_AGE,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_auth_cookie(response: Response, settings: Settings | None = None) -> None:
    settings = _resolve_settings(settings)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value="",
        expires=_EPOCH,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )
