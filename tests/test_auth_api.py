"""HTTP tests for /api/register, /api/login, /api/refresh-token, /api/logout and the bearer gate."""

import unittest
from datetime import datetime, timedelta, timezone

import jwt
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import RefreshToken, User
from tests.support import ApiTestCase


class TestRegisterEndpoint(ApiTestCase):
    def test_register_returns_201_with_id_and_username(self) -> None:
        response = self.register("alice", "hunter22")
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body, {"id": body["id"], "username": "alice"})
        self.assertIsInstance(body["id"], int)

    def test_register_never_echoes_password(self) -> None:
        response = self.register("alice", "hunter22")
        self.assertNotIn("hunter22", response.text)
        self.assertNotIn("password", response.text)

    def test_duplicate_username_returns_409(self) -> None:
        self.register("alice", "hunter22")
        response = self.register("alice", "password123")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"error": "Username already exists"})
        with self.SessionLocal() as db:
            self.assertEqual(db.query(User).count(), 1)

    def test_invalid_input_returns_400(self) -> None:
        response = self.register("ab", "123")
        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_username_charset_is_validated(self) -> None:
        response = self.register("bad name!", "hunter22")
        self.assertEqual(response.status_code, 400)

    def test_missing_body_returns_400(self) -> None:
        response = self.client.post("/api/register")
        self.assertEqual(response.status_code, 400)


class TestLoginEndpoint(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.register("alice", "hunter22")

    def test_login_returns_token_pair(self) -> None:
        response = self.login("alice", "hunter22")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), {"token", "refreshToken", "expiresIn"})
        self.assertEqual(body["expiresIn"], 3600)

    def test_wrong_password_returns_401(self) -> None:
        response = self.login("alice", "wrongpass")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_unknown_user_gets_identical_error(self) -> None:
        wrong_password = self.login("alice", "wrongpass")
        unknown_user = self.login("nosuchuser", "whatever")
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(unknown_user.json(), wrong_password.json())

    def test_second_login_invalidates_first_refresh_token(self) -> None:
        first = self.login().json()
        self.login()
        response = self.client.post("/api/refresh-token", json={"refreshToken": first["refreshToken"]})
        self.assertEqual(response.status_code, 401)


class TestRefreshEndpoint(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tokens = self.register_and_login()

    def refresh(self, token: str):
        return self.client.post("/api/refresh-token", json={"refreshToken": token})

    def test_refresh_returns_new_access_and_rotated_refresh_token(self) -> None:
        response = self.refresh(self.tokens["refreshToken"])
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertIn("token", body)
        self.assertEqual(body["expiresIn"], 3600)
        self.assertNotEqual(body["refreshToken"], self.tokens["refreshToken"])

    def test_same_refresh_token_twice_returns_401(self) -> None:
        self.assertEqual(self.refresh(self.tokens["refreshToken"]).status_code, 200)
        response = self.refresh(self.tokens["refreshToken"])
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired refresh token"})

    def test_rotated_refresh_token_keeps_session_alive(self) -> None:
        rotated = self.refresh(self.tokens["refreshToken"]).json()["refreshToken"]
        self.assertEqual(self.refresh(rotated).status_code, 200)

    def test_unknown_refresh_token_returns_401(self) -> None:
        response = self.refresh("invalid_token")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Invalid or expired refresh token")

    def test_missing_refresh_token_returns_400(self) -> None:
        response = self.client.post("/api/refresh-token", json={})
        self.assertEqual(response.status_code, 400)

    def test_new_access_token_is_accepted(self) -> None:
        token = self.refresh(self.tokens["refreshToken"]).json()["token"]
        response = self.client.get("/api/users", headers=self.bearer(token))
        self.assertEqual(response.status_code, 200)


class TestLogoutAndGate(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tokens = self.register_and_login()

    def test_session_walkthrough(self) -> None:
        """register -> login -> protected call -> logout -> refresh with login token fails."""
        headers = self.bearer(self.tokens["token"])
        self.assertEqual(self.client.get("/api/feed", headers=headers).status_code, 200)

        response = self.client.post("/api/logout", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Logged out successfully"})

        response = self.client.post(
            "/api/refresh-token", json={"refreshToken": self.tokens["refreshToken"]}
        )
        self.assertEqual(response.status_code, 401)
        with self.SessionLocal() as db:
            self.assertEqual(
                db.query(RefreshToken).filter(RefreshToken.is_revoked.is_(False)).count(), 0
            )

    def test_access_token_still_valid_after_logout(self) -> None:
        headers = self.bearer(self.tokens["token"])
        self.client.post("/api/logout", headers=headers)
        self.assertEqual(self.client.get("/api/users", headers=headers).status_code, 200)

    def test_logout_without_token_returns_401(self) -> None:
        response = self.client.post("/api/logout")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Access token required"})
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_non_bearer_scheme_is_treated_as_missing(self) -> None:
        response = self.client.post("/api/logout", headers={"Authorization": "Basic abc"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Access token required"})

    def test_garbage_token_returns_401(self) -> None:
        response = self.client.post("/api/logout", headers=self.bearer("not.a.token"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired token"})

    def test_expired_token_returns_401(self) -> None:
        expired = create_access_token(
            self.tokens["id"], "alice", expires_delta=timedelta(seconds=-1)
        )
        response = self.client.get("/api/feed", headers=self.bearer(expired))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired token"})

    def test_refresh_token_is_not_an_access_token(self) -> None:
        response = self.client.get("/api/feed", headers=self.bearer(self.tokens["refreshToken"]))
        self.assertEqual(response.status_code, 401)

    def _signed(self, payload: dict, secret: str | None = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {"iat": now, "exp": now + timedelta(minutes=5), **payload}
        key = secret or settings.JWT_SECRET.get_secret_value()
        return jwt.encode(claims, key, algorithm=settings.JWT_ALGORITHM)

    def test_token_without_username_returns_401(self) -> None:
        token = self._signed({"sub": str(self.tokens["id"])})
        response = self.client.get("/api/feed", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired token"})

    def test_token_signed_with_another_secret_returns_401(self) -> None:
        token = self._signed(
            {"sub": str(self.tokens["id"]), "username": "alice"}, secret="some-other-secret"
        )
        response = self.client.get("/api/feed", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired token"})


class TestErrorRendering(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.token = self.register_and_login()["token"]

    def test_unknown_route_uses_error_envelope(self) -> None:
        response = self.client.get("/api/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Route not found"})

    def test_unexpected_error_returns_generic_500(self) -> None:
        def _broken_db():
            raise RuntimeError("connection to secret-host:5432 refused")
            yield

        app.dependency_overrides[get_db] = _broken_db
        client = TestClient(app, raise_server_exceptions=False)
        with self.assertLogs("app.main", level="ERROR"):
            response = client.get("/api/users", headers=self.bearer(self.token))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Internal server error"})
        self.assertNotIn("secret-host", response.text)


if __name__ == "__main__":
    unittest.main()
