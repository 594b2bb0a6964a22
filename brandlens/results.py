"""Results read model: what the external analysis run wrote for a project."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, computed_field

from brandlens.errors import ProjectNotFoundError
from brandlens.models import Competitor, Domain, Execution, Project, Source
from brandlens.models.base import DomainModel

if TYPE_CHECKING:
    from brandlens.db import Database

EXECUTION_LIMIT = 10
SOURCE_LIMIT = 20
COMPETITOR_LIMIT = 15
DOMAIN_LIMIT = 10


class ResultsSummary(DomainModel):
    total_executions: int = 0
    queries_processed: int = 0
    total_sources: int = 0
    total_competitors: int = 0
    competitors_with_mentions: int = 0


class DomainCount(DomainModel):
    name: str
    sources: int


class ResultsView(DomainModel):
    """Everything the results page shows, optionally narrowed to one execution."""

    project: Project
    selected_execution_id: str | None = None
    summary: ResultsSummary
    executions: list[Execution] = Field(default_factory=list)
    sources: list[Source] = Field(default_factory=list)
    competitors: list[Competitor] = Field(default_factory=list)
    domains: list[Domain] = Field(default_factory=list)
    executions_by_model: dict[str, int] = Field(default_factory=dict)
    top_domains: list[DomainCount] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_filtered(self) -> bool:
        return self.selected_execution_id is not None


def build_results_view(db: Database, slug: str, execution_id: str | None = None) -> ResultsView:
    """Assemble the results view for a project slug.

    An ``execution_id`` that is not among the project's recent executions is
    ignored, the same as no filter.
    """
    project = db.get_project_by_slug(slug)
    if project is None:
        raise ProjectNotFoundError(slug)

    executions = db.list_executions(project.id, limit=EXECUTION_LIMIT)
    selected = next((e for e in executions if e.id == execution_id), None)
    selected_id = selected.id if selected else None

    sources = db.list_sources(project.id, limit=SOURCE_LIMIT, execution_id=selected_id)
    competitors = db.list_competitors(project.id, limit=COMPETITOR_LIMIT)
    domains = db.list_domains(project.id, limit=DOMAIN_LIMIT)

    if selected is not None:
        queries_processed = len(selected.query_executions)
    elif executions:
        queries_processed = len(executions[0].query_executions)
    else:
        queries_processed = 0

    summary = ResultsSummary(
        total_executions=len(executions),
        queries_processed=queries_processed,
        total_sources=db.count_sources(project.id, execution_id=selected_id),
        total_competitors=db.count_competitors(project.id),
        competitors_with_mentions=db.count_competitors(project.id, with_mentions=True),
    )
    return ResultsView(
        project=project,
        selected_execution_id=selected_id,
        summary=summary,
        executions=executions,
        sources=sources,
        competitors=competitors,
        domains=domains,
        executions_by_model=db.query_execution_counts_by_model(
            project.id, execution_id=selected_id
        ),
        top_domains=[
            DomainCount(name=name, sources=count)
            for name, count in db.domain_source_counts(project.id, execution_id=selected_id)
        ],
    )


def competitors_with_mentions(competitors: list[Competitor]) -> list[Competitor]:
    """Competitors mentioned at least once."""
    return [c for c in competitors if c.has_mentions]
