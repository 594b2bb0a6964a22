"""Project (tenant root) and membership models."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import Field

from brandlens.models.base import DomainModel, utcnow


class MembershipRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


class Project(DomainModel):
    """An organization being researched. Owns topics, queries and results."""

    id: str
    name: str
    slug: str
    description: str | None = None
    url: str | None = None
    status: bool = True
    region: str | None = None
    sector: str | None = None
    language: str | None = None
    last_analysis: date | None = None
    logo: str | None = None
    user_id: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Membership(DomainModel):
    id: str
    project_id: str
    user_id: str
    role: MembershipRole = MembershipRole.MEMBER
    created_at: datetime = Field(default_factory=utcnow)


class TopicSummary(DomainModel):
    """Topic row on the project page, with its query count."""

    id: str
    name: str
    description: str | None = None
    query_count: int = 0


class ProjectDetail(DomainModel):
    project: Project
    topics: list[TopicSummary] = Field(default_factory=list)
