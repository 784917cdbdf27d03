"""Resolve the calling account from a request or a cookie mapping."""

from collections.abc import Mapping

from fastapi import Request
from sqlalchemy.orm import Session

from app.core.session import (
    UnauthorizedError,
    get_auth_claims,
    get_token_from_cookies,
    verify_auth_token,
)
from app.schemas.auth import AuthenticatedUser
from app.services.accounts import get_active_account_by_id


def _resolve_authenticated_user(db: Session, account_id: str) -> AuthenticatedUser | None:
    # A valid signature does not mean the account still exists or can log in.
    account = get_active_account_by_id(db, account_id)
    if account is None:
        return None
    return AuthenticatedUser(
        id=account.id,
        email=account.email,
        role=account.role,
        person_record_id=account.person_record_id,
    )


def get_current_user(request: Request, db: Session) -> AuthenticatedUser | None:
    claims = get_auth_claims(request)
    if claims is None:
        return None
    return _resolve_authenticated_user(db, claims.sub)


def require_current_user(request: Request, db: Session) -> AuthenticatedUser:
    """Like get_current_user but raises UnauthorizedError instead of returning None."""
    user = get_current_user(request, db)
    if user is None:
        raise UnauthorizedError()
    return user


def get_current_user_from_cookies(cookies: Mapping[str, str], db: Session) -> AuthenticatedUser | None:
    """Cookie-only variant for callers that have a cookie store but no request headers."""
    token = get_token_from_cookies(cookies)
    if not token:
        return None
    claims = verify_auth_token(token)
    if claims is None:
        return None
    return _resolve_authenticated_user(db, claims.sub)
