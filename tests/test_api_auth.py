"""HTTP tests for auth, profile, health and error mapping through the real ASGI stack."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from meetsync.main import create_app
from tests.support import FakeStreamAPI, make_settings


def _build(api: FakeStreamAPI | None = None, **settings_overrides: object):
    api = api or FakeStreamAPI()
    app = create_app(make_settings(**settings_overrides), provider=api.provider())
    return app, api


class TestSignupSigninScenario(unittest.TestCase):
    """signup -> duplicate -> bad password -> signin -> profile -> signout -> 401."""

    def test_full_flow(self) -> None:
        app, _api = _build()
        client = TestClient(app)

        r = client.post("/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json(), {"success": True, "message": "User registered successfully"})
        self.assertNotIn("token", client.cookies)

        r = client.post("/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "User already exists")

        r = client.post("/api/auth/signin", json={"email": "ana@x.com", "password": "wrongpw"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Invalid credentials")

        r = client.post("/api/auth/signin", json={"email": "ana@x.com", "password": "pw123"})
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["token"])
        self.assertTrue(body["streamToken"])
        self.assertEqual(body["user"]["role"], "member")
        self.assertEqual(body["user"]["email"], "ana@x.com")
        self.assertNotIn("password_hash", body["user"])
        set_cookie = r.headers["set-cookie"].lower()
        self.assertIn("httponly", set_cookie)
        self.assertIn("samesite=strict", set_cookie)
        self.assertIn("max-age=86400", set_cookie)
        self.assertNotIn("secure", set_cookie)

        r = client.get("/api/user/profile")
        self.assertEqual(r.status_code, 200)
        user = r.json()["user"]
        self.assertEqual(user["name"], "Ana")
        self.assertIn("createdAt", user)
        self.assertNotIn("password_hash", user)

        r = client.post("/api/auth/signout")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"message": "Signed out successfully"})
        self.assertNotIn("token", client.cookies)

        r = client.get("/api/user/profile")
        self.assertEqual(r.status_code, 401)
        self.assertFalse(r.json()["success"])


class TestSignin(unittest.TestCase):
    def setUp(self) -> None:
        self.app, self.api = _build()
        self.client = TestClient(self.app)
        self.client.post("/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"})

    def test_unknown_account_same_error_as_wrong_password(self) -> None:
        wrong = self.client.post("/api/auth/signin", json={"email": "ana@x.com", "password": "nope"})
        unknown = self.client.post("/api/auth/signin", json={"email": "zoe@x.com", "password": "pw123"})
        self.assertEqual(wrong.status_code, unknown.status_code)
        self.assertEqual(wrong.json(), unknown.json())

    def test_missing_fields(self) -> None:
        for body in ({}, {"email": "ana@x.com"}, {"email": "", "password": "pw123"}, {"email": None, "password": "x"}):
            r = self.client.post("/api/auth/signin", json=body)
            self.assertEqual(r.status_code, 400, body)
            self.assertEqual(r.json(), {"success": False, "message": "All fields are required"})

    def test_signup_missing_fields(self) -> None:
        r = self.client.post("/api/auth/signup", json={"name": "Ana", "password": "pw123"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "All fields are required")

    def test_missing_body(self) -> None:
        r = self.client.post("/api/auth/signin")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json(), {"success": False, "message": "All fields are required"})

    def test_whitespace_password_is_a_password(self) -> None:
        r = self.client.post("/api/auth/signup", json={"name": "Zoe", "email": "zoe@x.com", "password": "   "})
        self.assertEqual(r.status_code, 201)
        r = self.client.post("/api/auth/signin", json={"email": "zoe@x.com", "password": "   "})
        self.assertEqual(r.status_code, 200)
        r = self.client.post("/api/auth/signin", json={"email": "zoe@x.com", "password": ""})
        self.assertEqual(r.json(), {"success": False, "message": "All fields are required"})

    def test_bearer_header_accepted(self) -> None:
        token = self.client.post(
            "/api/auth/signin", json={"email": "ana@x.com", "password": "pw123"}
        ).json()["token"]
        fresh = TestClient(self.app)
        r = fresh.get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["email"], "ana@x.com")

    def test_expired_token_rejected(self) -> None:
        identity = self.app.state.store.find_by_account_id("ana@x.com")
        token = self.app.state.tokens.issue(identity.id, now=datetime.now(UTC) - timedelta(days=2))
        r = TestClient(self.app).get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 401)

    def test_garbage_token_rejected(self) -> None:
        r = TestClient(self.app).get("/api/user/profile", headers={"Authorization": "Bearer abc.def.ghi"})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["message"], "Authentication failed")

    def test_no_token(self) -> None:
        r = TestClient(self.app).get("/api/user/profile")
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["message"], "Not authenticated")

    def test_token_stays_valid_after_signout(self) -> None:
        token = self.client.post(
            "/api/auth/signin", json={"email": "ana@x.com", "password": "pw123"}
        ).json()["token"]
        self.client.post("/api/auth/signout")
        r = TestClient(self.app).get("/api/user/profile", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(r.status_code, 200)


class TestSigninProviderFailure(unittest.TestCase):
    def test_no_tokens_and_no_cookie(self) -> None:
        app, _api = _build(FakeStreamAPI(status_code=500))
        client = TestClient(app)
        client.post("/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"})
        r = client.post("/api/auth/signin", json={"email": "ana@x.com", "password": "pw123"})
        self.assertEqual(r.status_code, 500)
        body = r.json()
        self.assertFalse(body["success"])
        self.assertNotIn("token", body)
        self.assertNotIn("streamToken", body)
        self.assertNotIn("set-cookie", r.headers)
        self.assertNotIn("token", client.cookies)


class TestUnexpectedError(unittest.TestCase):
    def test_generic_500(self) -> None:
        app, _api = _build()
        app.state.auth_service.signup = AsyncMock(side_effect=RuntimeError("db exploded"))
        client = TestClient(app, raise_server_exceptions=False)
        r = client.post("/api/auth/signup", json={"name": "Ana", "email": "ana@x.com", "password": "pw123"})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"success": False, "message": "Server error"})


class TestHealth(unittest.TestCase):
    def test_health(self) -> None:
        app, _api = _build()
        r = TestClient(app).get("/health")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["status"], "OK")
        self.assertEqual(body["message"], "Server is running")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["environment"], "dev")

    def test_unknown_route_uses_error_envelope(self) -> None:
        app, _api = _build()
        r = TestClient(app).get("/nope")
        self.assertEqual(r.status_code, 404)
        self.assertFalse(r.json()["success"])


if __name__ == "__main__":
    unittest.main()
