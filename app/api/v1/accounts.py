"""Account administration: list, create, update and soft-delete login accounts."""

import logging

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import CurrentUser, DbSession, StaffUser, bad_request, forbidden
from app.core.config import get_settings
from app.core.security import normalize_email
from app.schemas.auth import (
    AccountCreateRequest,
    AccountResponse,
    AccountsListResponse,
    AccountUpdateRequest,
)
from app.services.accounts import (
    AccountConflictError,
    NotFoundError,
    create_account,
    delete_account,
    get_account_by_id,
    list_accounts,
    update_account,
)
from app.services.permissions import can_act_on_account, can_assign_role, can_create_role

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_password_length(password: str) -> None:
    min_len = get_settings().PASSWORD_MIN_LEN
    if len(password) < min_len:
        raise bad_request(f"Password must be at least {min_len} characters")


@router.get("", response_model=AccountsListResponse)
def get_accounts(_staff: StaffUser, db: DbSession) -> AccountsListResponse:
    """List login-capable accounts (editor and above)."""
    accounts = list_accounts(db)
    logger.info("Accounts listed", extra={"account_count": len(accounts)})
    return AccountsListResponse(data=accounts)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def post_account(
    body: AccountCreateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> AccountResponse:
    """
    Create an account with any role the caller may create. Without
    person_record_id a placeholder profile is created.
    """
    email = normalize_email(body.email or "")
    if not email or not body.password:
        raise bad_request("email and password are required")
    _check_password_length(body.password)

    if not can_create_role(current_user.role, body.role):
        raise forbidden()

    try:
        account = create_account(
            db,
            email=email,
            password=body.password,
            role=body.role,
            person_record_id=body.person_record_id,
        )
    except AccountConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Create account failed")
        raise HTTPException(status_code=500, detail="Unable to create account") from e
    return AccountResponse(data=account)


@router.patch("/{account_id}", response_model=AccountResponse)
def patch_account(
    account_id: str,
    body: AccountUpdateRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> AccountResponse:
    """
    Update email, password and/or role. Anyone may edit their own account
    (except its role); other accounts go through the permission matrix.
    """
    target = get_account_by_id(db, account_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")

    is_self = current_user.id == target.id
    if not can_act_on_account(current_user, target.id, target.role, "update"):
        raise forbidden()
    if body.role is not None and not can_assign_role(current_user, target.id, target.role, body.role):
        if is_self:
            raise forbidden("You cannot change your own role")
        raise forbidden()

    email = normalize_email(body.email) if body.email else None
    if email == target.email:
        email = None
    if body.password is not None:
        _check_password_length(body.password)
    role = body.role if body.role is not None and body.role is not target.role else None

    try:
        updated = update_account(db, target.id, email=email, password=body.password, role=role)
    except AccountConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Update account failed", extra={"account_id": target.id})
        raise HTTPException(status_code=500, detail="Unable to update account") from e
    return AccountResponse(data=updated)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account_by_id(
    account_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> Response:
    """Soft-delete: the login is disabled and the profile record is kept."""
    target = get_account_by_id(db, account_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    if current_user.id == target.id:
        raise bad_request("You cannot delete your own account")
    if not can_act_on_account(current_user, target.id, target.role, "delete"):
        raise forbidden()

    try:
        delete_account(db, target.id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        logger.exception("Delete account failed", extra={"account_id": target.id})
        raise HTTPException(status_code=500, detail="Unable to delete account") from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
