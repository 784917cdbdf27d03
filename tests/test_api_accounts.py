"""End-to-end tests for the account administration endpoints."""

from app.models.enums import Role
from tests.support import ApiTestCase

PREFIX = "/api/v1/auth/users"


class AccountsApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.superadmin = self.make_account("super@example.com", Role.SUPERADMIN)
        self.admin = self.make_account("admin@example.com", Role.ADMIN)
        self.editor = self.make_account("editor@example.com", Role.EDITOR)
        self.user = self.make_account("user@example.com", Role.USER)


class TestListAccounts(AccountsApiTestCase):
    def test_requires_login(self) -> None:
        self.assertEqual(self.client.get(PREFIX).status_code, 401)

    def test_plain_user_forbidden(self) -> None:
        response = self.client.get(PREFIX, headers=self.auth_headers(self.user))
        self.assertEqual(response.status_code, 403)

    def test_editor_lists_accounts(self) -> None:
        response = self.client.get(PREFIX, headers=self.auth_headers(self.editor))
        self.assertEqual(response.status_code, 200)
        emails = [a["email"] for a in response.json()["data"]]
        self.assertEqual(len(emails), 4)
        self.assertNotIn("password_hash", response.json()["data"][0])


class TestCreateAccount(AccountsApiTestCase):
    def test_admin_creates_editor(self) -> None:
        response = self.client.post(
            PREFIX,
            json={"email": "New.Editor@example.com", "password": "password123", "role": "editor"},
            headers=self.auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()["data"]["email"], "new.editor@example.com")
        self.assertEqual(response.json()["data"]["role"], "editor")

    def test_admin_cannot_create_admin(self) -> None:
        response = self.client.post(
            PREFIX,
            json={"email": "a2@example.com", "password": "password123", "role": "admin"},
            headers=self.auth_headers(self.admin),
        )
        self.assertEqual(response.status_code, 403)

    def test_duplicate_email(self) -> None:
        response = self.client.post(
            PREFIX,
            json={"email": "USER@example.com", "password": "password123"},
            headers=self.auth_headers(self.superadmin),
        )
        self.assertEqual(response.status_code, 409)

    def test_short_password(self) -> None:
        response = self.client.post(
            PREFIX,
            json={"email": "short@example.com", "password": "abc"},
            headers=self.auth_headers(self.superadmin),
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_person_record(self) -> None:
        response = self.client.post(
            PREFIX,
            json={"email": "p@example.com", "password": "password123", "personRecordId": "IND-999"},
            headers=self.auth_headers(self.superadmin),
        )
        self.assertEqual(response.status_code, 404)


class TestUpdateAccount(AccountsApiTestCase):
    def test_cannot_change_own_role(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/{self.admin.id}", json={"role": "superadmin"}, headers=self.auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "You cannot change your own role")

    def test_user_changes_own_email(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/{self.user.id}", json={"email": "Me@Example.com"}, headers=self.auth_headers(self.user)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], "me@example.com")

    def test_admin_demotes_editor(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/{self.editor.id}", json={"role": "user"}, headers=self.auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["role"], "user")

    def test_editor_cannot_update_admin(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/{self.admin.id}", json={"password": "password999"}, headers=self.auth_headers(self.editor)
        )
        self.assertEqual(response.status_code, 403)

    def test_email_in_use(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/{self.editor.id}", json={"email": "user@example.com"}, headers=self.auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["detail"], "Email already in use")

    def test_missing_account(self) -> None:
        response = self.client.patch(
            f"{PREFIX}/IND-999", json={"role": "user"}, headers=self.auth_headers(self.superadmin)
        )
        self.assertEqual(response.status_code, 404)


class TestDeleteAccount(AccountsApiTestCase):
    def test_cannot_delete_self(self) -> None:
        response = self.client.delete(f"{PREFIX}/{self.admin.id}", headers=self.auth_headers(self.admin))
        self.assertEqual(response.status_code, 400)

    def test_admin_deletes_editor_and_token_stops_working(self) -> None:
        editor_headers = self.auth_headers(self.editor)
        response = self.client.delete(f"{PREFIX}/{self.editor.id}", headers=self.auth_headers(self.admin))
        self.assertEqual(response.status_code, 204)

        listed = self.client.get(PREFIX, headers=self.auth_headers(self.admin)).json()["data"]
        self.assertNotIn(self.editor.id, [a["id"] for a in listed])
        self.assertEqual(self.client.get("/api/v1/auth/me", headers=editor_headers).status_code, 401)

    def test_editor_cannot_delete_user(self) -> None:
        response = self.client.delete(f"{PREFIX}/{self.user.id}", headers=self.auth_headers(self.editor))
        self.assertEqual(response.status_code, 403)

    def test_admin_cannot_delete_superadmin(self) -> None:
        response = self.client.delete(f"{PREFIX}/{self.superadmin.id}", headers=self.auth_headers(self.admin))
        self.assertEqual(response.status_code, 403)

    def test_missing_account(self) -> None:
        response = self.client.delete(f"{PREFIX}/IND-999", headers=self.auth_headers(self.superadmin))
        self.assertEqual(response.status_code, 404)
