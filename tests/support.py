"""Shared fixtures: an in-memory SQLite store and a TestClient wired to it."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models import Base


def make_engine() -> Engine:
    """One shared in-memory connection with foreign keys enforced, schema created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    return engine


class DatabaseTestCase(unittest.TestCase):
    """Gives each test a fresh schema and a session factory bound to it."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db = self.SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db dependency uses the test store."""

    def setUp(self) -> None:
        super().setUp()

        def _get_test_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _get_test_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.pop(get_db, None)
        super().tearDown()

    def register(self, username: str = "alice", password: str = "hunter22"):
        return self.client.post("/api/register", json={"username": username, "password": password})

    def login(self, username: str = "alice", password: str = "hunter22"):
        return self.client.post("/api/login", json={"username": username, "password": password})

    def register_and_login(self, username: str = "alice", password: str = "hunter22") -> dict:
        """Register then log in; returns the login body plus the new user's id."""
        user_id = self.register(username, password).json()["id"]
        body = self.login(username, password).json()
        body["id"] = user_id
        return body

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
