"""Auth dependencies shared by the v1 routers."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.enums import Role
from app.schemas.auth import AuthenticatedUser
from app.services import current_user as current_user_service


def get_optional_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AuthenticatedUser | None:
    """Dependency: the calling account, or None when the request is anonymous or the token is invalid."""
    return current_user_service.get_current_user(request, db)


def get_current_user(
    user: Annotated[AuthenticatedUser | None, Depends(get_optional_user)],
) -> AuthenticatedUser:
    """Dependency: require a live account behind a valid token. Raises 401 otherwise."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_staff(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AuthenticatedUser:
    """Dependency: editor, admin or superadmin. Raises 403 for plain users."""
    if user.role is Role.USER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return user


def forbidden(detail: str = "Forbidden") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def not_found(detail: str = "Record not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]
StaffUser = Annotated[AuthenticatedUser, Depends(require_staff)]
DbSession = Annotated[Session, Depends(get_db)]
