"""Tests for sign-up, sign-in and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi.testclient import TestClient

    from brandlens.config import Settings
    from brandlens.models import User


class TestSignup:
    def test_signup_sets_session_cookie(self, client: TestClient, settings: Settings):
        resp = client.post(
            "/api/v1/auth/signup",
            json={"email": "new@example.com", "password": "long-enough-pw", "name": "New"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["user"]["email"] == "new@example.com"
        assert resp.cookies[settings.session_cookie_name] == data["token"]

        session = client.get("/api/v1/auth/session").json()
        assert session["authenticated"] is True
        assert session["user"]["name"] == "New"

    def test_duplicate_email_rejected(self, client: TestClient, user: User):
        resp = client.post(
            "/api/v1/auth/signup",
            json={"email": user.email, "password": "long-enough-pw"},
        )
        assert resp.status_code == 400
        assert "already exists" in resp.json()["detail"]

    def test_short_password_is_422(self, client: TestClient):
        resp = client.post(
            "/api/v1/auth/signup", json={"email": "a@example.com", "password": "short"}
        )
        assert resp.status_code == 422


class TestSignin:
    def test_wrong_password(self, client: TestClient, user: User):
        resp = client.post(
            "/api/v1/auth/signin", json={"email": user.email, "password": "wrong-password"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "unauthenticated"

    def test_bearer_token_authenticates(self, client: TestClient, user: User, password: str):
        token = client.post(
            "/api/v1/auth/signin", json={"email": user.email, "password": password}
        ).json()["token"]
        client.cookies.clear()

        resp = client.get("/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"})
        assert resp.json()["authenticated"] is True
        assert resp.json()["user"]["email"] == user.email


class TestSession:
    def test_anonymous(self, client: TestClient):
        resp = client.get("/api/v1/auth/session")
        assert resp.status_code == 200
        assert resp.json() == {"authenticated": False, "user": None}

    def test_signout_ends_session(self, auth_client: TestClient):
        assert auth_client.get("/api/v1/auth/session").json()["authenticated"] is True

        resp = auth_client.post("/api/v1/auth/signout")
        assert resp.status_code == 204

        assert auth_client.get("/api/v1/auth/session").json()["authenticated"] is False
