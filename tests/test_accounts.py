"""Tests for the account service against an in-memory database."""

from unittest.mock import MagicMock, patch

from pydantic import SecretStr

from app.models import PersonRecord
from app.models.enums import RecordType, Role
from app.services import record_store
from app.services.accounts import (
    AccountEmailRequiredError,
    AccountNotFoundError,
    EmailAlreadyInUseError,
    EmailAlreadyRegisteredError,
    PersonRecordNotFoundError,
    create_account,
    delete_account,
    ensure_super_admin_account,
    find_account_by_email,
    find_account_with_secret_by_email,
    get_account_by_id,
    get_active_account_by_id,
    list_accounts,
    update_account,
    update_person_record,
    verify_password,
)
from tests.support import DatabaseTestCase


def superadmin_settings(email: str | None = "root@example.com", password: str | None = "rootpassword1"):
    settings = MagicMock()
    settings.SUPERADMIN_EMAIL = email
    settings.SUPERADMIN_PASSWORD = SecretStr(password) if password is not None else None
    return settings


class TestCreateAccount(DatabaseTestCase):
    def test_email_is_normalized_and_profile_created(self) -> None:
        account = create_account(self.db, email="  Alice@Example.COM ", password="password123", role=Role.EDITOR)
        self.assertEqual(account.email, "alice@example.com")
        self.assertEqual(account.role, Role.EDITOR)
        self.assertEqual(account.id, "IND-001")
        self.assertEqual(account.person_record_id, account.id)
        row = record_store.get_record_any_type(self.db, account.id)
        self.assertEqual(row.full_name, "alice")
        self.assertEqual(row.occupation, "Editor")
        self.assertTrue(verify_password("password123", row.password_hash))

    def test_duplicate_email_rejected(self) -> None:
        self.make_account("bob@example.com")
        with self.assertRaises(EmailAlreadyRegisteredError) as ctx:
            create_account(self.db, email="BOB@example.com", password="password123", role=Role.USER)
        self.assertEqual(ctx.exception.message, "Email already registered")

    def test_same_record_may_keep_its_email(self) -> None:
        first = self.make_account("carol@example.com")
        again = create_account(
            self.db,
            email="carol@example.com",
            password="newpassword1",
            role=Role.USER,
            person_record_id=first.id,
        )
        self.assertEqual(again.id, first.id)

    def test_attach_to_existing_record(self) -> None:
        record = record_store.create_record(self.db, RecordType.INFLUENCER, {"full_name": "Dana"})
        account = create_account(
            self.db,
            email="dana@example.com",
            password="password123",
            role=Role.USER,
            person_record_id=record.record_id,
        )
        self.assertEqual(account.id, "INF-001")

    def test_missing_person_record(self) -> None:
        with self.assertRaises(PersonRecordNotFoundError):
            create_account(
                self.db,
                email="erin@example.com",
                password="password123",
                role=Role.USER,
                person_record_id="IND-404",
            )


class TestLookups(DatabaseTestCase):
    def test_find_by_email_is_case_insensitive(self) -> None:
        created = self.make_account("frank@example.com")
        self.assertEqual(find_account_by_email(self.db, " FRANK@example.com "), created)

    def test_blank_email_returns_none(self) -> None:
        self.assertIsNone(find_account_by_email(self.db, "  "))
        self.assertIsNone(find_account_with_secret_by_email(self.db, ""))

    def test_profile_only_rows_are_not_accounts(self) -> None:
        record_store.create_record(self.db, RecordType.INDIVIDUAL, {"full_name": "Gina", "email": "gina@example.com"})
        self.assertIsNone(find_account_by_email(self.db, "gina@example.com"))
        self.assertEqual(list_accounts(self.db), [])

    def test_secret_lookup_returns_row_with_hash(self) -> None:
        self.make_account("hank@example.com")
        row = find_account_with_secret_by_email(self.db, "hank@example.com")
        self.assertIsInstance(row, PersonRecord)
        self.assertTrue(row.password_hash)

    def test_list_accounts_ordered_by_id(self) -> None:
        self.make_account("a@example.com")
        self.make_account("b@example.com", Role.ADMIN)
        self.assertEqual([a.id for a in list_accounts(self.db)], ["IND-001", "IND-002"])


class TestUpdateAccount(DatabaseTestCase):
    def test_missing_account(self) -> None:
        with self.assertRaises(AccountNotFoundError):
            update_account(self.db, "IND-999", role=Role.ADMIN)

    def test_email_taken_by_other_account(self) -> None:
        self.make_account("ivy@example.com")
        other = self.make_account("jack@example.com")
        with self.assertRaises(EmailAlreadyInUseError) as ctx:
            update_account(self.db, other.id, email="IVY@example.com")
        self.assertEqual(ctx.exception.message, "Email already in use")

    def test_updates_only_supplied_fields(self) -> None:
        account = self.make_account("kim@example.com")
        updated = update_account(self.db, account.id, password="changedpass1", role=Role.EDITOR)
        self.assertEqual(updated.email, "kim@example.com")
        self.assertEqual(updated.role, Role.EDITOR)
        row = find_account_with_secret_by_email(self.db, "kim@example.com")
        self.assertTrue(verify_password("changedpass1", row.password_hash))


class TestDeleteAccount(DatabaseTestCase):
    def test_soft_delete_keeps_profile(self) -> None:
        account = self.make_account("lee@example.com", Role.EDITOR)
        delete_account(self.db, account.id)

        self.assertIsNone(find_account_by_email(self.db, "lee@example.com"))
        self.assertIsNone(get_active_account_by_id(self.db, account.id))
        kept = get_account_by_id(self.db, account.id)
        self.assertIsNotNone(kept)
        self.assertEqual(kept.role, Role.USER)
        self.assertEqual(list_accounts(self.db), [])

    def test_email_reusable_after_soft_delete(self) -> None:
        account = self.make_account("max@example.com")
        delete_account(self.db, account.id)
        fresh = self.make_account("max@example.com")
        self.assertNotEqual(fresh.id, account.id)

    def test_missing_account(self) -> None:
        with self.assertRaises(AccountNotFoundError):
            delete_account(self.db, "IND-999")


class TestEnsureSuperAdmin(DatabaseTestCase):
    def test_noop_when_not_configured(self) -> None:
        self.assertFalse(ensure_super_admin_account(self.db, superadmin_settings(email=None)))
        self.assertFalse(ensure_super_admin_account(self.db, superadmin_settings(password=None)))
        self.assertEqual(list_accounts(self.db), [])

    def test_creates_then_is_idempotent(self) -> None:
        settings = superadmin_settings()
        self.assertTrue(ensure_super_admin_account(self.db, settings))
        account = find_account_by_email(self.db, "root@example.com")
        self.assertEqual(account.role, Role.SUPERADMIN)

        with patch("app.services.accounts.hash_password") as hash_password:
            self.assertFalse(ensure_super_admin_account(self.db, settings))
            hash_password.assert_not_called()

    def test_reconciles_role_and_password(self) -> None:
        account = self.make_account("root@example.com", Role.USER, password="oldpassword1")
        self.assertTrue(ensure_super_admin_account(self.db, superadmin_settings()))

        row = find_account_with_secret_by_email(self.db, "root@example.com")
        self.assertEqual(row.record_id, account.id)
        self.assertEqual(row.role, Role.SUPERADMIN.value)
        self.assertTrue(verify_password("rootpassword1", row.password_hash))

    def test_reactivates_soft_deleted_superadmin(self) -> None:
        settings = superadmin_settings()
        ensure_super_admin_account(self.db, settings)
        account = find_account_by_email(self.db, "root@example.com")
        delete_account(self.db, account.id)

        self.assertTrue(ensure_super_admin_account(self.db, settings))
        restored = get_active_account_by_id(self.db, account.id)
        self.assertEqual(restored.role, Role.SUPERADMIN)


class TestCreateAccountIndexConflict(DatabaseTestCase):
    """The unique index catches duplicates the lookup missed (concurrent signups)."""

    def test_conflict_leaves_no_placeholder_profile(self) -> None:
        self.make_account("race@example.com")
        with patch("app.services.accounts._find_login_row_by_email", return_value=None):
            with self.assertRaises(EmailAlreadyRegisteredError):
                create_account(self.db, email="RACE@example.com", password="password123", role=Role.USER)
        self.assertEqual(self.db.query(PersonRecord).count(), 1)


class TestUpdatePersonRecord(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.make_account("owner@example.com")
        self.other = self.make_account("other@example.com")

    def test_login_email_is_normalized(self) -> None:
        row = update_person_record(self.db, RecordType.INDIVIDUAL, self.other.id, {"email": " New@Example.COM "})
        self.assertEqual(row.email, "new@example.com")
        self.assertEqual(find_account_by_email(self.db, "new@example.com").id, self.other.id)

    def test_login_email_taken_by_other_account(self) -> None:
        with self.assertRaises(EmailAlreadyInUseError):
            update_person_record(self.db, RecordType.INDIVIDUAL, self.other.id, {"email": "OWNER@example.com"})
        self.assertEqual(find_account_by_email(self.db, "owner@example.com").id, self.owner.id)
        self.assertEqual(get_account_by_id(self.db, self.other.id).email, "other@example.com")

    def test_index_conflict_maps_to_email_in_use(self) -> None:
        with patch("app.services.accounts._find_login_row_by_email", return_value=None):
            with self.assertRaises(EmailAlreadyInUseError):
                update_person_record(self.db, RecordType.INDIVIDUAL, self.other.id, {"email": "owner@example.com"})
        self.assertEqual(get_account_by_id(self.db, self.other.id).email, "other@example.com")

    def test_login_email_cannot_be_cleared(self) -> None:
        with self.assertRaises(AccountEmailRequiredError):
            update_person_record(self.db, RecordType.INDIVIDUAL, self.other.id, {"email": None})

    def test_profile_only_row_may_share_an_account_email(self) -> None:
        profile = record_store.create_record(self.db, RecordType.INFLUENCER, {"full_name": "Fan"})
        row = update_person_record(self.db, RecordType.INFLUENCER, profile.record_id, {"email": "Owner@example.com"})
        self.assertEqual(row.email, "owner@example.com")
        self.assertEqual(find_account_by_email(self.db, "owner@example.com").id, self.owner.id)

    def test_role_and_missing_record(self) -> None:
        row = update_person_record(self.db, RecordType.INDIVIDUAL, self.other.id, {}, role=Role.EDITOR)
        self.assertEqual(row.role, "editor")
        self.assertIsNone(update_person_record(self.db, RecordType.INDIVIDUAL, "IND-404", {"city": "X"}))
