"""Shared test bases: in-memory SQLite sessions and a TestClient wired to them."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.session import AuthClaims, create_auth_token
from app.models import Base
from app.models.enums import Role
from app.schemas.auth import PublicAccount
from app.services.accounts import create_account

DEFAULT_PASSWORD = "password123"


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database per test."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def make_account(self, email: str, role: Role = Role.USER, password: str = DEFAULT_PASSWORD) -> PublicAccount:
        return create_account(self.db, email=email, password=password, role=role)


class ApiTestCase(DatabaseTestCase):
    """TestClient whose get_db dependency yields sessions on the test database."""

    def setUp(self) -> None:
        super().setUp()
        from app.main import app

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.app = app
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        self.app.dependency_overrides.clear()
        super().tearDown()

    @staticmethod
    def auth_headers(account: PublicAccount) -> dict[str, str]:
        token = create_auth_token(AuthClaims(sub=account.id, email=account.email, role=account.role))
        return {"Authorization": f"Bearer {token}"}
