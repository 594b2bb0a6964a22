"""Huey task queue definitions for background generation."""

from __future__ import annotations

from typing import Any

import structlog
from huey import SqliteHuey
from huey.exceptions import CancelExecution

from brandlens.config import Settings
from brandlens.db import Database
from brandlens.errors import NotFoundError, ProjectNotFoundError
from brandlens.generation import QueryGenerator, TopicGenerationSummary
from brandlens.llm import LLMClient
from brandlens.metrics import task_runs_total

logger = structlog.get_logger()

# Initialize Huey with settings
_settings = Settings()
_settings.ensure_data_dir()

huey = SqliteHuey(
    name="brandlens",
    filename=str(_settings.huey_db_path),
    immediate=_settings.huey_immediate,
)

_RETRIES = _settings.task_retries
_RETRY_DELAY = _settings.task_retry_delay


def _open_db(settings: Settings) -> Database:
    settings.ensure_data_dir()
    db = Database(settings.db_url)
    db.init_schema()
    return db


def _generate_for_topic(topic_id: str) -> TopicGenerationSummary:
    """Inner logic for supplemental generation (not wrapped by Huey)."""
    settings = Settings()
    db = _open_db(settings)
    try:
        generator = QueryGenerator(db=db, llm=LLMClient(settings), settings=settings)
        return generator.generate_for_topic(topic_id)
    finally:
        db.close()


def _fan_out(project_id: str) -> dict[str, Any]:
    settings = Settings()
    db = _open_db(settings)
    try:
        project = db.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        topics = db.list_topics(project_id)
    finally:
        db.close()

    task_ids = [generate_queries_for_topic_task(topic.id).id for topic in topics]
    logger.info("Supplemental generation enqueued", project_id=project_id, topics=len(task_ids))
    return {"task_ids": task_ids, "additional_queries_generated": len(topics)}


def _bootstrap(project_id: str) -> dict[str, Any]:
    settings = Settings()
    db = _open_db(settings)
    try:
        generator = QueryGenerator(db=db, llm=LLMClient(settings), settings=settings)
        return generator.bootstrap_topics(project_id)
    finally:
        db.close()


def _run(task_name: str, fn: Any, *args: Any) -> Any:
    """Run task logic; a missing entity cancels without retrying."""
    try:
        result = fn(*args)
    except NotFoundError as exc:
        task_runs_total.labels(task=task_name, outcome="cancelled").inc()
        logger.warning("Task cancelled", task=task_name, args=args, reason=str(exc))
        raise CancelExecution(retry=False) from exc
    except Exception:
        task_runs_total.labels(task=task_name, outcome="error").inc()
        logger.exception("Task failed", task=task_name, args=args)
        raise
    task_runs_total.labels(task=task_name, outcome="success").inc()
    return result


@huey.task(retries=_RETRIES, retry_delay=_RETRY_DELAY)  # type: ignore[untyped-decorator]
def generate_queries_for_topic_task(topic_id: str) -> TopicGenerationSummary:
    """Generate supplemental queries for one topic.

    Returns ``{topic_id, topic_name, queries_generated, queries}``.
    """
    result = _run("generate_queries_for_topic", _generate_for_topic, topic_id)
    return result  # type: ignore[no-any-return]


@huey.task(retries=_RETRIES, retry_delay=_RETRY_DELAY)  # type: ignore[untyped-decorator]
def generate_initial_queries_task(project_id: str) -> dict[str, Any]:
    """Fan out one supplemental generation task per topic of a new project."""
    return _run("generate_initial_queries", _fan_out, project_id)  # type: ignore[no-any-return]


@huey.task(retries=_RETRIES, retry_delay=_RETRY_DELAY)  # type: ignore[untyped-decorator]
def create_topics_and_queries_task(project_id: str) -> dict[str, Any]:
    """Create a starter set of topics and queries for a project."""
    return _run("create_topics_and_queries", _bootstrap, project_id)  # type: ignore[no-any-return]
