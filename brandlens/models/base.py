"""Shared helpers for domain models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    return datetime.now(UTC)


class DomainModel(BaseModel):
    """Immutable aggregate returned by the repository."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())
