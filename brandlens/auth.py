"""Email/password authentication backed by the sessions table."""

from __future__ import annotations

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError

from brandlens.errors import AuthenticationError

if TYPE_CHECKING:
    from brandlens.config import Settings
    from brandlens.db import Database
    from brandlens.models import AuthSession, User

logger = structlog.get_logger()

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 600_000
SESSION_TOKEN_BYTES = 32


def hash_password(password: str, iterations: int | None = None) -> str:
    """Hash with PBKDF2-HMAC-SHA256 and a per-user salt.

    Format: ``pbkdf2_sha256$<iterations>$<salt_hex>$<hash_hex>``.
    """
    rounds = iterations or PBKDF2_ITERATIONS
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, rounds).hex()
    return f"{PBKDF2_ALGORITHM}${rounds}${salt.hex()}${digest}"


def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, rounds, salt_hex, expected = stored.split("$", 3)
        if algorithm != PBKDF2_ALGORITHM:
            return False
        computed = hashlib.pbkdf2_hmac(
            "sha256", password.encode(), bytes.fromhex(salt_hex), int(rounds)
        ).hex()
    except (ValueError, TypeError):
        return False
    return secrets.compare_digest(computed, expected)


class AuthService:
    """Sign-up, sign-in and session resolution."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings

    def signup(
        self,
        email: str,
        password: str,
        name: str = "",
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[User, AuthSession]:
        """Create an account and log it in. Duplicate emails raise ValueError."""
        try:
            password_hash = hash_password(password)
            user = self.db.create_user(email=email, name=name, password_hash=password_hash)
        except IntegrityError as exc:
            raise ValueError("A user with this email already exists") from exc
        logger.info("User signed up", user_id=user.id)
        return user, self._open_session(user, ip_address, user_agent)

    def signin(
        self,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[User, AuthSession]:
        user = self.db.get_user_by_email(email)
        stored = self.db.get_password_hash(user.id) if user else None
        if user is None or stored is None or not verify_password(password, stored):
            logger.info("Sign-in rejected", email=email)
            raise AuthenticationError("Invalid email or password")
        return user, self._open_session(user, ip_address, user_agent)

    def signout(self, token: str) -> bool:
        return self.db.delete_session(token)

    def resolve(self, token: str | None) -> User | None:
        """Return the user behind a session token, or None.

        Expired sessions are deleted on sight.
        """
        if not token:
            return None
        session = self.db.get_session_by_token(token)
        if session is None:
            return None
        if session.is_expired():
            self.db.delete_session(token)
            logger.debug("Expired session removed", session_id=session.id)
            return None
        return self.db.get_user(session.user_id)

    def _open_session(
        self, user: User, ip_address: str | None, user_agent: str | None
    ) -> AuthSession:
        expires_at = datetime.now(UTC) + timedelta(days=self.settings.session_ttl_days)
        return self.db.create_session(
            user_id=user.id,
            token=secrets.token_urlsafe(SESSION_TOKEN_BYTES),
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
