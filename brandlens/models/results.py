"""Research run results written by the external analysis automation."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from brandlens.models.base import DomainModel
from brandlens.models.topic import QueryType


class AIModel(DomainModel):
    """An LLM/vendor identity a query was executed against."""

    id: str
    name: str
    model: str | None = None
    color: str | None = None


class QueryExecution(DomainModel):
    id: str
    execution_id: str
    query_id: str | None = None
    model_id: str | None = None
    response: str | None = None
    error_message: str | None = None
    query_text: str | None = None
    query_type: QueryType | None = None
    model_name: str | None = None


class Execution(DomainModel):
    id: str
    project_id: str
    executed_at: datetime | None = None
    query_executions: list[QueryExecution] = Field(default_factory=list)


class Domain(DomainModel):
    id: str
    project_id: str | None = None
    name: str
    category: str | None = None


class Source(DomainModel):
    id: str
    project_id: str | None = None
    url: str
    title: str | None = None
    domain_id: str | None = None
    domain_name: str | None = None
    domain_category: str | None = None
    model_id: str | None = None
    query_execution_id: str | None = None
    query_text: str | None = None
    query_type: QueryType | None = QueryType.SECTOR


class Competitor(DomainModel):
    id: str
    project_id: str | None = None
    name: str
    alternative_names: list[str] = Field(default_factory=list)
    mention_count: int = 0
    last_mention_date: datetime | None = None

    @property
    def has_mentions(self) -> bool:
        return self.mention_count > 0


class Mention(DomainModel):
    id: str
    source_id: str
    competitor_id: str
    mentioned_at: datetime | None = None
