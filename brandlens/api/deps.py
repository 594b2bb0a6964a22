"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, Request
from huey.exceptions import TaskException

from brandlens.auth import AuthService
from brandlens.clients import AnalysisWebhookClient
from brandlens.config import Settings
from brandlens.db import Database
from brandlens.errors import AuthenticationError, ProjectNotFoundError
from brandlens.generation import QueryGenerator
from brandlens.llm import LLMClient
from brandlens.models import Project, User


class HueyTaskQueue:
    """Enqueues generation tasks and reads their results from huey."""

    def enqueue_initial(self, project_id: str) -> str:
        from brandlens.tasks import generate_initial_queries_task

        return str(generate_initial_queries_task(project_id).id)

    def enqueue_topic(self, topic_id: str) -> str:
        from brandlens.tasks import generate_queries_for_topic_task

        return str(generate_queries_for_topic_task(topic_id).id)

    def status(self, task_id: str) -> dict[str, Any]:
        from brandlens.tasks import huey

        try:
            result = huey.result(task_id, preserve=True)
        except TaskException as exc:
            return {"task_id": task_id, "status": "failed", "error": str(exc.metadata.get("error"))}
        if result is None:
            return {"task_id": task_id, "status": "pending"}
        return {"task_id": task_id, "status": "complete", "result": result}


def _get_db(request: Request) -> Database:
    """Get the database instance from app state."""
    return request.app.state.db  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    """Get the settings instance from app state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def _get_llm(request: Request) -> LLMClient:
    llm = getattr(request.app.state, "llm", None)
    if llm is None:
        llm = LLMClient(_get_settings(request))
        request.app.state.llm = llm
    return llm  # type: ignore[no-any-return]


def _get_analysis_client(request: Request) -> AnalysisWebhookClient:
    client = getattr(request.app.state, "analysis_client", None)
    if client is None:
        settings = _get_settings(request)
        client = AnalysisWebhookClient(settings.analysis_webhook_url, settings.analysis_timeout)
    return client  # type: ignore[no-any-return]


def _get_task_queue(request: Request) -> HueyTaskQueue:
    queue = getattr(request.app.state, "task_queue", None)
    return queue if queue is not None else HueyTaskQueue()  # type: ignore[no-any-return]


def _get_auth(request: Request) -> AuthService:
    return AuthService(_get_db(request), _get_settings(request))


def _get_generator(request: Request) -> QueryGenerator:
    return QueryGenerator(_get_db(request), _get_llm(request), _get_settings(request))


def session_token(request: Request) -> str | None:
    """Session token from the cookie, else from ``Authorization: Bearer``."""
    settings = _get_settings(request)
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def _get_optional_user(request: Request) -> User | None:
    return _get_auth(request).resolve(session_token(request))


def _get_current_user(request: Request) -> User:
    user = _get_optional_user(request)
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


def member_project(db: Database, slug: str, user: User) -> Project:
    """Resolve a slug to a project the user belongs to.

    Non-members get the same not-found error as an unknown slug.
    """
    project = db.get_project_by_slug(slug)
    if project is None or db.get_membership(project.id, user.id) is None:
        raise ProjectNotFoundError(slug)
    return project


DbDep = Annotated[Database, Depends(_get_db)]
SettingsDep = Annotated[Settings, Depends(_get_settings)]
LLMDep = Annotated[LLMClient, Depends(_get_llm)]
AnalysisClientDep = Annotated[AnalysisWebhookClient, Depends(_get_analysis_client)]
TaskQueueDep = Annotated[HueyTaskQueue, Depends(_get_task_queue)]
AuthDep = Annotated[AuthService, Depends(_get_auth)]
GeneratorDep = Annotated[QueryGenerator, Depends(_get_generator)]
OptionalUserDep = Annotated[User | None, Depends(_get_optional_user)]
CurrentUserDep = Annotated[User, Depends(_get_current_user)]
