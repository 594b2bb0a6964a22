"""Topics and research queries."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from brandlens.models.base import DomainModel, utcnow
from brandlens.models.project import Project


class QueryType(StrEnum):
    """Market/sector-level question (no brand) vs. brand/product-specific."""

    SECTOR = "sector"
    PRODUCT = "product"


class Query(DomainModel):
    id: str
    topic_id: str
    project_id: str
    text: str
    country: str | None = None
    active: bool = True
    query_type: QueryType = QueryType.SECTOR
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Topic(DomainModel):
    id: str
    project_id: str
    name: str
    description: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TopicDetail(DomainModel):
    """A topic with its parent project and queries ordered by text."""

    topic: Topic
    project: Project
    queries: list[Query] = Field(default_factory=list)


class QueryDetail(DomainModel):
    query: Query
    topic: Topic
    project: Project


class NewQuery(DomainModel):
    """Input for bulk query inserts."""

    text: str
    query_type: QueryType = QueryType.SECTOR
    active: bool = True


class NewTopic(DomainModel):
    """Input for the onboarding wizard: a topic with its initial queries."""

    name: str
    description: str | None = None
    queries: list[NewQuery] = Field(default_factory=list)
