"""Tests for password hashing and session-backed authentication."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from brandlens.auth import AuthService, hash_password, verify_password
from brandlens.errors import AuthenticationError

if TYPE_CHECKING:
    from brandlens.config import Settings
    from brandlens.db import Database
    from brandlens.models import User


class TestPasswordHashing:
    def test_roundtrip(self):
        stored = hash_password("s3cret-pass", iterations=1_000)
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert verify_password("s3cret-pass", stored)
        assert not verify_password("wrong-pass", stored)

    def test_salted(self):
        assert hash_password("same", iterations=1_000) != hash_password("same", iterations=1_000)

    def test_malformed_hash_rejected(self):
        assert not verify_password("x", "garbage")
        assert not verify_password("x", "md5$1$aa$bb")
        assert not verify_password("x", "pbkdf2_sha256$notanint$aa$bb")


class TestAuthService:
    def test_signup_creates_user_and_session(self, db: Database, settings: Settings):
        svc = AuthService(db, settings)
        user, session = svc.signup("new@example.com", "long-password", "New")
        assert user.email == "new@example.com"
        assert session.user_id == user.id
        assert session.expires_at > datetime.now(UTC) + timedelta(days=6)
        assert svc.resolve(session.token) == user

    def test_signup_duplicate_email(self, db: Database, settings: Settings, user: User):
        svc = AuthService(db, settings)
        with pytest.raises(ValueError, match="already exists"):
            svc.signup(user.email, "long-password")

    def test_signin(self, db: Database, settings: Settings, user: User, password: str):
        svc = AuthService(db, settings)
        signed_in, session = svc.signin("OWNER@example.com", password, ip_address="10.0.0.1")
        assert signed_in.id == user.id
        assert session.ip_address == "10.0.0.1"

    def test_signin_wrong_password(self, db: Database, settings: Settings, user: User):
        svc = AuthService(db, settings)
        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            svc.signin(user.email, "nope")

    def test_signin_unknown_email(self, db: Database, settings: Settings):
        svc = AuthService(db, settings)
        with pytest.raises(AuthenticationError):
            svc.signin("ghost@example.com", "whatever")

    def test_signout(self, db: Database, settings: Settings):
        svc = AuthService(db, settings)
        _, session = svc.signup("new@example.com", "long-password")
        assert svc.signout(session.token) is True
        assert svc.resolve(session.token) is None

    def test_resolve_missing_token(self, db: Database, settings: Settings):
        svc = AuthService(db, settings)
        assert svc.resolve(None) is None
        assert svc.resolve("unknown") is None

    def test_resolve_expired_session_deletes_it(
        self, db: Database, settings: Settings, user: User
    ):
        db.create_session(user.id, "stale", datetime.now(UTC) - timedelta(seconds=1))
        svc = AuthService(db, settings)
        assert svc.resolve("stale") is None
        assert db.get_session_by_token("stale") is None
