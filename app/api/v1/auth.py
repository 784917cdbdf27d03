"""Login, logout, self-service registration and session probes."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import CurrentUser, bad_request
from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import normalize_email
from app.core.session import AuthClaims, clear_auth_cookie, create_auth_token, set_auth_cookie
from app.models.enums import Role
from app.schemas.auth import (
    AccountResponse,
    AuthenticatedUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PublicAccount,
)
from app.schemas.person import (
    PublicAccountSummary,
    RegisterData,
    RegisterRequest,
    RegisterResponse,
    to_person_response,
)
from app.services import record_store
from app.services.accounts import (
    EmailAlreadyRegisteredError,
    create_account,
    ensure_super_admin_account,
    find_account_by_email,
    find_account_with_secret_by_email,
    to_public_account,
    verify_password,
)
from app.services.current_user import get_current_user_from_cookies
from app.services.person_fields import parse_record_type, with_derived_metrics

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_CREDENTIALS = "Invalid credentials"

REGISTER_REQUIRED_FIELDS = (
    "full_name",
    "preferred_name",
    "gender",
    "birth_date",
    "email",
    "phone",
    "country",
    "city",
    "occupation",
    "record_type",
)
SUPPORTED_COUNTRIES = ("Thailand", "United State", "China")
SUPPORTED_GENDERS = ("Male", "Female", "Other")
SUPPORTED_LANGUAGES = frozenset({"TH", "EN", "CN"})


def _capitalize_words(value: str) -> str:
    return " ".join(part[:1].upper() + part[1:].lower() for part in value.split())


def _supported_languages(raw: str | None) -> list[str]:
    if not raw:
        return []
    entries = (entry.strip().upper() for entry in raw.split(","))
    return [entry for entry in entries if entry in SUPPORTED_LANGUAGES]


def _issue_session(response: Response, account: PublicAccount) -> str:
    token = create_auth_token(AuthClaims(sub=account.id, email=account.email, role=account.role))
    set_auth_cookie(response, token)
    return token


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password; sets the auth_token cookie and also
    returns the token for Authorization: Bearer use. The configured superadmin
    is reconciled before credentials are checked.
    """
    email = normalize_email(body.email or "")
    password = body.password or ""
    if not email or not password:
        raise bad_request("email and password are required")

    try:
        ensure_super_admin_account(db)
        account = find_account_with_secret_by_email(db, email)
        valid = account is not None and verify_password(password, account.password_hash)
    except SQLAlchemyError as e:
        logger.exception("Login failed: storage error")
        raise HTTPException(status_code=500, detail="Unable to login") from e

    # Same answer for unknown email and wrong password.
    if not valid:
        logger.info("Login rejected", extra={"reason": "invalid_credentials"})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    public = to_public_account(account)
    token = _issue_session(response, public)
    logger.info("Login succeeded", extra={"account_id": public.id, "role": public.role.value})
    return LoginResponse(data=public, access_token=token)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the auth cookie. Bearer tokens stay valid until they expire."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out")


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> RegisterResponse:
    """
    Self-service signup: creates the person record and a login with role 'user',
    then starts a session. Influencer metrics are derived from follower counts
    when not supplied.
    """
    for field in REGISTER_REQUIRED_FIELDS:
        if not getattr(body, field):
            raise bad_request(f"{field} is required")

    record_type = parse_record_type(body.record_type)
    if record_type is None:
        raise bad_request('record_type must be either "individual" or "influencer"')

    if not body.password or not body.confirm_password:
        raise bad_request("password and confirm_password are required")
    min_len = get_settings().PASSWORD_MIN_LEN
    if len(body.password) < min_len:
        raise bad_request(f"Password must be at least {min_len} characters")
    if body.password != body.confirm_password:
        raise bad_request("Passwords do not match")

    gender = _capitalize_words(body.gender)
    if gender not in SUPPORTED_GENDERS:
        raise bad_request("Unsupported gender")
    country = _capitalize_words(body.country)
    if country not in SUPPORTED_COUNTRIES:
        raise bad_request("Unsupported country")
    languages = _supported_languages(body.languages)
    if not languages:
        raise bad_request("languages is required")

    email = normalize_email(body.email)
    if find_account_by_email(db, email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    profile = body.model_dump(exclude={"record_type", "password", "confirm_password"})
    profile.update(
        email=email,
        gender=gender,
        country=country,
        languages=", ".join(languages),
        last_contact_date=date.today(),
    )
    profile = with_derived_metrics(profile, prefer_computed=False)

    try:
        record = record_store.create_record(db, record_type, profile, commit=False)
        account = create_account(
            db,
            email=email,
            password=body.password,
            role=Role.USER,
            person_record_id=record.record_id,
        )
    except EmailAlreadyRegisteredError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Register failed: storage error")
        raise HTTPException(status_code=500, detail="Unable to register") from e

    _issue_session(response, account)
    logger.info("Account registered", extra={"account_id": account.id})
    return RegisterResponse(
        data=RegisterData(
            account=PublicAccountSummary(id=account.id, email=account.email, role=account.role),
            profile=to_person_response(record),
        )
    )


@router.get("/me", response_model=AccountResponse)
def me(current_user: CurrentUser) -> AccountResponse:
    """The calling account (bearer header or auth cookie)."""
    return AccountResponse(data=current_user)


@router.get("/session", response_model=AccountResponse | None)
def session_from_cookie(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> AccountResponse | None:
    """Cookie-only session probe for server-rendered pages; null when signed out."""
    user: AuthenticatedUser | None = get_current_user_from_cookies(request.cookies, db)
    return AccountResponse(data=user) if user is not None else None
