"""Project, topic and query reads plus analysis/generation triggers."""

from __future__ import annotations

from fastapi import APIRouter

from brandlens.actions import start_analysis
from brandlens.api.deps import (
    AnalysisClientDep,
    CurrentUserDep,
    DbDep,
    TaskQueueDep,
    member_project,
)
from brandlens.api.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    ProjectListResponse,
    TriggerResponse,
)
from brandlens.db import Database
from brandlens.errors import ProjectNotFoundError, QueryNotFoundError, TopicNotFoundError
from brandlens.models import Project, ProjectDetail, QueryDetail, TopicDetail
from brandlens.text import is_valid_uuid

router = APIRouter(prefix="/projects", tags=["projects"])


def _topic_detail(db: Database, project: Project, topic_id: str) -> TopicDetail:
    detail = db.get_topic_detail(topic_id) if is_valid_uuid(topic_id) else None
    if detail is None or detail.project.id != project.id:
        raise TopicNotFoundError(topic_id)
    return detail


@router.get("", response_model=ProjectListResponse)
def list_projects(db: DbDep, user: CurrentUserDep) -> ProjectListResponse:
    projects = db.list_projects_for_user(user.id)
    return ProjectListResponse(projects=projects, total=len(projects))


@router.get("/{slug}", response_model=ProjectDetail)
def get_project(slug: str, db: DbDep, user: CurrentUserDep) -> ProjectDetail:
    member_project(db, slug, user)
    detail = db.get_project_detail(slug)
    if detail is None:
        raise ProjectNotFoundError(slug)
    return detail


@router.get("/{slug}/topics/{topic_id}", response_model=TopicDetail)
def get_topic(slug: str, topic_id: str, db: DbDep, user: CurrentUserDep) -> TopicDetail:
    project = member_project(db, slug, user)
    return _topic_detail(db, project, topic_id)


@router.get("/{slug}/topics/{topic_id}/queries/{query_id}", response_model=QueryDetail)
def get_query(
    slug: str, topic_id: str, query_id: str, db: DbDep, user: CurrentUserDep
) -> QueryDetail:
    project = member_project(db, slug, user)
    detail = db.get_query_detail(query_id) if is_valid_uuid(query_id) else None
    if detail is None or detail.topic.id != topic_id or detail.project.id != project.id:
        raise QueryNotFoundError(query_id)
    return detail


@router.post("/{slug}/analysis", response_model=AnalysisResponse)
def trigger_analysis(
    slug: str,
    db: DbDep,
    user: CurrentUserDep,
    client: AnalysisClientDep,
    body: AnalysisRequest | None = None,
) -> AnalysisResponse:
    """Start an external analysis run for the project."""
    project = member_project(db, slug, user)
    result = start_analysis(db, client, project, body.models if body else None)
    return AnalysisResponse(
        project_id=result["project_id"],
        models=result["models"],
        status_code=result["status_code"],
    )


@router.post("/{slug}/topics/{topic_id}/generate", response_model=TriggerResponse)
def trigger_generation(
    slug: str, topic_id: str, db: DbDep, user: CurrentUserDep, task_queue: TaskQueueDep
) -> TriggerResponse:
    project = member_project(db, slug, user)
    detail = _topic_detail(db, project, topic_id)
    task_id = task_queue.enqueue_topic(detail.topic.id)
    return TriggerResponse(
        message=f"Query generation enqueued for topic {detail.topic.name}",
        task_id=task_id,
    )
