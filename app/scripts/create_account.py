"""
Create a login account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_account EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_account admin@example.com your-secure-password admin

Seed or repair the configured superadmin (SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD):
  python -m app.scripts.create_account --ensure-superadmin
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import session_scope
from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, normalize_email
from app.models.enums import ROLE_VALUES, Role
from app.services.accounts import AccountServiceError, create_account, ensure_super_admin_account

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a People Directory login account.")
    parser.add_argument("email", nargs="?", help=f"Email (1-{EMAIL_MAX_LEN} chars)")
    parser.add_argument("password", nargs="?", help="Password")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=ROLE_VALUES)
    parser.add_argument(
        "--person-record-id",
        default=None,
        help="Attach the login to an existing person record instead of creating a profile",
    )
    parser.add_argument(
        "--ensure-superadmin",
        action="store_true",
        help="Create or repair the superadmin from SUPERADMIN_EMAIL/SUPERADMIN_PASSWORD",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.ensure_superadmin:
        if not settings.SUPERADMIN_EMAIL or settings.SUPERADMIN_PASSWORD is None:
            print("SUPERADMIN_EMAIL and SUPERADMIN_PASSWORD must be set.", file=sys.stderr)
            return 1
        try:
            with session_scope() as db:
                changed = ensure_super_admin_account(db, settings)
        except (AccountServiceError, SQLAlchemyError) as e:
            logger.exception("Superadmin bootstrap failed: %s", e)
            return 1
        print("Superadmin updated." if changed else "Superadmin already up to date.")
        return 0

    email = normalize_email(args.email or "")
    if not email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email length.", file=sys.stderr)
        return 1
    password = args.password or ""
    if len(password) < settings.PASSWORD_MIN_LEN or len(password) > PASSWORD_MAX_LEN:
        print(f"Password must be {settings.PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    role = Role(args.role)
    try:
        with session_scope() as db:
            account = create_account(
                db,
                email=email,
                password=password,
                role=role,
                person_record_id=args.person_record_id,
            )
    except AccountServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        logger.exception("Create account failed: %s", e)
        return 1

    print(f"Created account '{account.email}' ({account.id}) with role '{account.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
