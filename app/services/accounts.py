"""Account service: login identities stored on person records.

An account is a person row with email, password_hash and role populated. Lookups
(find_*, get_*, list_*) return None or an empty list when nothing matches;
mutations raise an AccountServiceError subclass.
"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.security import hash_password, normalize_email, verify_password
from app.models import PersonRecord
from app.models.enums import RecordType, Role
from app.schemas.auth import PublicAccount
from app.services import record_store

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

__all__ = [
    "AccountConflictError",
    "AccountEmailRequiredError",
    "AccountNotFoundError",
    "AccountServiceError",
    "EmailAlreadyInUseError",
    "EmailAlreadyRegisteredError",
    "NotFoundError",
    "PersonRecordNotFoundError",
    "create_account",
    "delete_account",
    "ensure_super_admin_account",
    "find_account_by_email",
    "find_account_with_secret_by_email",
    "get_account_by_id",
    "get_active_account_by_id",
    "hash_password",
    "list_accounts",
    "to_public_account",
    "update_account",
    "update_person_record",
    "verify_password",
]

# Profile defaults for accounts created without an existing person record.
DEFAULT_COUNTRY = "Thailand"
DEFAULT_CITY = "Bangkok"
SUPERADMIN_FULL_NAME = "Super Admin"
SUPERADMIN_OCCUPATION = "Administrator"


class AccountServiceError(Exception):
    """Base class for account mutation failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccountConflictError(AccountServiceError):
    """Another login-capable account already holds the email."""


class EmailAlreadyRegisteredError(AccountConflictError):
    def __init__(self, message: str = "Email already registered") -> None:
        super().__init__(message)


class EmailAlreadyInUseError(AccountConflictError):
    def __init__(self, message: str = "Email already in use") -> None:
        super().__init__(message)


class AccountEmailRequiredError(AccountServiceError):
    def __init__(self, message: str = "email cannot be removed from an account") -> None:
        super().__init__(message)


class NotFoundError(AccountServiceError):
    """The account or person record to act on does not exist."""


class AccountNotFoundError(NotFoundError):
    def __init__(self, message: str = "Account not found") -> None:
        super().__init__(message)


class PersonRecordNotFoundError(NotFoundError):
    def __init__(self, message: str = "person_record_id not found") -> None:
        super().__init__(message)


def to_public_account(row: PersonRecord) -> PublicAccount:
    return PublicAccount(
        id=row.record_id,
        email=row.email or "",
        role=Role.parse(row.role) or Role.USER,
        person_record_id=row.record_id,
    )


def _query_by_email(db: Session, email: str):
    return db.query(PersonRecord).filter(func.lower(PersonRecord.email) == normalize_email(email))


def _find_login_row_by_email(db: Session, email: str) -> PersonRecord | None:
    return (
        _query_by_email(db, email)
        .filter(PersonRecord.password_hash.isnot(None))
        .order_by(PersonRecord.record_id.asc())
        .first()
    )


def _find_any_row_by_email(db: Session, email: str) -> PersonRecord | None:
    """Login-capable rows first, then profile-only rows."""
    return (
        _query_by_email(db, email)
        .order_by(PersonRecord.password_hash.is_(None), PersonRecord.record_id.asc())
        .first()
    )


def _commit_account_change(db: Session, conflict: type[AccountConflictError]) -> None:
    # The partial unique index is the source of truth for email uniqueness.
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise conflict() from e


def ensure_super_admin_account(db: Session, settings: "Settings | None" = None) -> bool:
    """
    Make sure the configured break-glass superadmin exists and can log in.

    No-op when SUPERADMIN_EMAIL or SUPERADMIN_PASSWORD is unset. Creates the
    profile and login when no row holds the email; otherwise upgrades the
    role and re-hashes the password only when the stored hash does not verify.
    Returns True when anything was written.
    """
    settings = settings if settings is not None else get_settings()
    if not settings.SUPERADMIN_EMAIL or settings.SUPERADMIN_PASSWORD is None:
        return False

    email = normalize_email(settings.SUPERADMIN_EMAIL)
    password = settings.SUPERADMIN_PASSWORD.get_secret_value()

    existing = _find_any_row_by_email(db, email)
    if existing is None:
        row = record_store.create_record(
            db,
            RecordType.INDIVIDUAL,
            {
                "full_name": SUPERADMIN_FULL_NAME,
                "email": email,
                "country": DEFAULT_COUNTRY,
                "city": DEFAULT_CITY,
                "occupation": SUPERADMIN_OCCUPATION,
            },
            commit=False,
        )
        row.email = email
        row.password_hash = hash_password(password)
        row.role = Role.SUPERADMIN.value
        _commit_account_change(db, EmailAlreadyRegisteredError)
        logger.info("Superadmin account created", extra={"account_id": row.record_id})
        return True

    changed: list[str] = []
    if existing.role != Role.SUPERADMIN.value:
        existing.role = Role.SUPERADMIN.value
        changed.append("role")
    if not verify_password(password, existing.password_hash):
        existing.password_hash = hash_password(password)
        changed.append("password")
    if existing.email != email:
        existing.email = email
        changed.append("email")

    if not changed:
        return False
    _commit_account_change(db, EmailAlreadyRegisteredError)
    logger.info(
        "Superadmin account reconciled",
        extra={"account_id": existing.record_id, "changed": ",".join(changed)},
    )
    return True


def find_account_by_email(db: Session, email: str) -> PublicAccount | None:
    """Case-insensitive lookup of a login-capable account."""
    if not email or not email.strip():
        return None
    row = _find_login_row_by_email(db, email)
    return to_public_account(row) if row is not None else None


def find_account_with_secret_by_email(db: Session, email: str) -> PersonRecord | None:
    """Full row including password_hash. For credential checks in the login flow only."""
    if not email or not email.strip():
        return None
    return _find_login_row_by_email(db, email)


def get_account_by_id(db: Session, account_id: str) -> PublicAccount | None:
    """Any row by id, including soft-deleted accounts and plain profiles."""
    row = record_store.get_record_any_type(db, account_id)
    return to_public_account(row) if row is not None else None


def get_active_account_by_id(db: Session, account_id: str) -> PublicAccount | None:
    """Only login-capable accounts (password hash set)."""
    row = record_store.get_record_any_type(db, account_id)
    if row is None or not row.password_hash:
        return None
    return to_public_account(row)


def list_accounts(db: Session) -> list[PublicAccount]:
    """Login-capable accounts (password hash and email set), ordered by id."""
    rows = (
        db.query(PersonRecord)
        .filter(PersonRecord.password_hash.isnot(None), PersonRecord.email.isnot(None))
        .order_by(PersonRecord.record_id.asc())
        .all()
    )
    return [to_public_account(row) for row in rows]


def create_account(
    db: Session,
    email: str,
    password: str,
    role: Role,
    person_record_id: str | None = None,
) -> PublicAccount:
    """
    Attach a login to a person record.

    Without person_record_id a placeholder individual profile is created
    (display name from the email local part). Raises EmailAlreadyRegisteredError
    when another account holds the email and PersonRecordNotFoundError when the
    given person record does not exist. A placeholder is committed together
    with the login, so a conflict leaves no profile behind.
    """
    normalized_email = normalize_email(email)
    existing = _find_login_row_by_email(db, normalized_email)
    if existing is not None and existing.record_id != person_record_id:
        raise EmailAlreadyRegisteredError()

    if person_record_id:
        row = record_store.get_record_any_type(db, person_record_id)
        if row is None:
            raise PersonRecordNotFoundError()
    else:
        row = _create_profile_placeholder(db, role, normalized_email)

    row.email = normalized_email
    row.password_hash = hash_password(password)
    row.role = role.value
    _commit_account_change(db, EmailAlreadyRegisteredError)
    db.refresh(row)
    logger.info("Account created", extra={"account_id": row.record_id, "role": role.value})
    return to_public_account(row)


def update_account(
    db: Session,
    account_id: str,
    email: str | None = None,
    password: str | None = None,
    role: Role | None = None,
) -> PublicAccount:
    """
    Change only the supplied fields. Permission checks are the caller's job.

    Raises AccountNotFoundError or EmailAlreadyInUseError.
    """
    row = record_store.get_record_any_type(db, account_id)
    if row is None:
        raise AccountNotFoundError()

    changed: list[str] = []
    if email is not None:
        normalized_email = normalize_email(email)
        holder = _find_login_row_by_email(db, normalized_email)
        if holder is not None and holder.record_id != account_id:
            raise EmailAlreadyInUseError()
        row.email = normalized_email
        changed.append("email")
    if password is not None:
        row.password_hash = hash_password(password)
        changed.append("password")
    if role is not None:
        row.role = role.value
        changed.append("role")

    if changed:
        _commit_account_change(db, EmailAlreadyInUseError)
        db.refresh(row)
        logger.info(
            "Account updated",
            extra={"account_id": account_id, "changed": ",".join(changed)},
        )
    return to_public_account(row)


def update_person_record(
    db: Session,
    record_type: RecordType,
    record_id: str,
    updates: dict,
    role: Role | None = None,
) -> PersonRecord | None:
    """
    Profile update coming from the record endpoints.

    On a login-capable row the email is also the login identity: it is
    normalized and must not belong to another account. Returns None when the
    record is missing; raises EmailAlreadyInUseError or AccountEmailRequiredError.
    """
    row = record_store.get_record(db, record_type, record_id)
    if row is None:
        return None

    login_email_change = "email" in updates and bool(row.password_hash)
    if login_email_change:
        raw = updates["email"]
        email = normalize_email(raw) if isinstance(raw, str) else ""
        if not email:
            raise AccountEmailRequiredError()
        holder = _find_login_row_by_email(db, email)
        if holder is not None and holder.record_id != record_id:
            raise EmailAlreadyInUseError()

    try:
        updated = record_store.update_record(db, record_type, record_id, updates, role=role)
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyInUseError() from e

    if login_email_change:
        logger.info("Account email changed via profile", extra={"account_id": record_id})
    return updated


def delete_account(db: Session, account_id: str) -> None:
    """Soft delete: clear the password hash and reset the role. The profile row stays."""
    row = record_store.get_record_any_type(db, account_id)
    if row is None:
        raise AccountNotFoundError()
    row.password_hash = None
    row.role = Role.USER.value
    db.commit()
    logger.info("Account deleted", extra={"account_id": account_id})


def _create_profile_placeholder(db: Session, role: Role, email: str) -> PersonRecord:
    display_name = email.split("@")[0] or "User"
    return record_store.create_record(
        db,
        RecordType.INDIVIDUAL,
        {
            "full_name": display_name,
            "email": email,
            "country": DEFAULT_COUNTRY,
            "city": DEFAULT_CITY,
            "occupation": role.value.capitalize(),
        },
        commit=False,
    )
