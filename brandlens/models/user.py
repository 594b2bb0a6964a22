"""Users and login sessions."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from brandlens.models.base import DomainModel, utcnow


class User(DomainModel):
    id: str
    email: str
    name: str = ""
    email_verified: bool = True
    image: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class AuthSession(DomainModel):
    """A logged-in session. The token is the bearer credential."""

    id: str
    user_id: str
    token: str
    expires_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self.expires_at
