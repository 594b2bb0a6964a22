"""Project actions: onboarding wizard submission, edit, delete, analysis trigger."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import (
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from sqlalchemy.exc import IntegrityError

from brandlens.actions.base import (
    ActionFailure,
    ActionForm,
    ActionResult,
    ActionSuccess,
    form_to_dict,
    format_validation_errors,
    record,
    require_membership,
    revalidate_path,
    run_action,
)
from brandlens.errors import ProjectNotFoundError
from brandlens.models import GeneratedQuery, NewTopic
from brandlens.text import normalize_website_url, random_suffix, slugify

if TYPE_CHECKING:
    from brandlens.clients import AnalysisTriggerResult, AnalysisWebhookClient
    from brandlens.db import Database
    from brandlens.models import Project, User

logger = structlog.get_logger()

NOT_AUTHENTICATED = "You must be authenticated to create a project"
SLUG_TAKEN = "A project with this slug already exists"
CREATE_FAILED = "Failed to create project"

_http_url = TypeAdapter(HttpUrl)

_LABELS = {
    "name": "Name",
    "sector": "Sector",
    "country": "Country",
    "language": "Language",
    "description": "Description",
}

Enqueue = Callable[[str], str | None]


def _valid_url(value: str) -> str:
    url = normalize_website_url(value)
    try:
        _http_url.validate_python(url)
    except ValidationError as exc:
        raise ValueError("Valid website URL is required") from exc
    return url


class WizardTopic(ActionForm):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    queries: list[GeneratedQuery] = Field(default_factory=list)

    def to_new_topic(self) -> NewTopic:
        return NewTopic(
            name=self.name,
            description=self.description,
            queries=[q.to_new_query() for q in self.queries],
        )


class CreateProjectForm(ActionForm):
    model_config = ConfigDict(validate_default=True)

    name: str = ""
    websiteUrl: str = ""  # noqa: N815
    sector: str = ""
    country: str = ""
    language: str = ""
    description: str = ""
    topics: list[WizardTopic] = Field(default_factory=list)

    @field_validator("name", "sector", "country", "language", "description")
    @classmethod
    def _required(cls, value: str, info: ValidationInfo) -> str:
        if not value:
            raise ValueError(f"{_LABELS[info.field_name]} is required")
        return value

    @field_validator("websiteUrl")
    @classmethod
    def _website(cls, value: str) -> str:
        return _valid_url(value)

    @field_validator("topics", mode="before")
    @classmethod
    def _topics_json(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError("Topics must be a JSON list") from exc
        return value


class UpdateProjectForm(ActionForm):
    projectId: str = Field(min_length=1)  # noqa: N815
    name: str | None = None
    description: str | None = None
    sector: str | None = None
    country: str | None = None
    language: str | None = None
    websiteUrl: str | None = None  # noqa: N815

    @field_validator("websiteUrl")
    @classmethod
    def _website(cls, value: str | None) -> str | None:
        return _valid_url(value) if value else value

    def changes(self) -> dict[str, Any]:
        fields = {
            "name": self.name,
            "description": self.description,
            "sector": self.sector,
            "region": self.country,
            "language": self.language,
            "url": self.websiteUrl,
        }
        return {k: v for k, v in fields.items() if v is not None}


class DeleteProjectForm(ActionForm):
    projectId: str = Field(min_length=1)  # noqa: N815


def _default_enqueue(project_id: str) -> str | None:
    from brandlens.tasks import generate_initial_queries_task

    return str(generate_initial_queries_task(project_id).id)


def _unique_slug(db: Database, name: str) -> str:
    slug = slugify(name) or "project"
    if db.slug_exists(slug):
        slug = f"{slug}-{random_suffix(4)}"
    return slug


def create_project(
    db: Database,
    form: Mapping[str, Any],
    user: User | None,
    enqueue: Enqueue | None = None,
) -> ActionResult:
    """Persist a wizard submission: project, admin membership, topics, queries.

    Enqueues supplemental generation for every topic afterwards.
    """
    try:
        parsed = CreateProjectForm.model_validate(form_to_dict(form))
    except ValidationError as exc:
        return record("create_project", ActionFailure(error=format_validation_errors(exc)))

    if user is None:
        return record("create_project", ActionFailure(error=NOT_AUTHENTICATED))

    try:
        project = db.create_project(
            name=parsed.name,
            slug=_unique_slug(db, parsed.name),
            user_id=user.id,
            url=parsed.websiteUrl,
            description=parsed.description,
            region=parsed.country,
            sector=parsed.sector,
            language=parsed.language,
            topics=[t.to_new_topic() for t in parsed.topics],
        )
    except IntegrityError as exc:
        logger.warning("Project insert rejected", error=str(exc.orig))
        error = SLUG_TAKEN if "slug" in str(exc).lower() else CREATE_FAILED
        return record("create_project", ActionFailure(error=error))
    except Exception:
        logger.exception("Project creation failed")
        return record("create_project", ActionFailure(error=CREATE_FAILED))

    task_id: str | None = None
    try:
        task_id = (enqueue or _default_enqueue)(project.id)
    except Exception:
        # project is committed; generation can be re-run per topic
        logger.exception("Failed to enqueue initial generation", project_id=project.id)

    logger.info("Project created", project_id=project.id, slug=project.slug, task_id=task_id)
    return record(
        "create_project",
        ActionSuccess(
            data={"slug": project.slug, "project_id": project.id, "task_id": task_id},
            revalidate=revalidate_path(project),
        ),
    )


def update_project(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = UpdateProjectForm.model_validate(form_to_dict(form))
        require_membership(db, parsed.projectId, user)
        project = db.update_project(parsed.projectId, **parsed.changes())
        if project is None:
            raise ProjectNotFoundError()
        return ActionSuccess(
            data={"id": project.id, "slug": project.slug, "name": project.name},
            revalidate=revalidate_path(project),
        )

    return run_action("update_project", _body, "Failed to update project")


def delete_project(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = DeleteProjectForm.model_validate(form_to_dict(form))
        project = require_membership(db, parsed.projectId, user)
        db.delete_project(project.id)
        return ActionSuccess(data={"id": project.id}, revalidate="/")

    return run_action("delete_project", _body, "Failed to delete project")


def start_analysis(
    db: Database, client: AnalysisWebhookClient, project: Project, models: list[str] | None = None
) -> AnalysisTriggerResult:
    """Trigger the external analysis run and stamp ``last_analysis``.

    Without explicit models, the project's attached models are sent.
    """
    names = models if models is not None else [m.name for m in db.list_project_models(project.id)]
    result = client.trigger(project.id, names)
    db.set_last_analysis(project.id, datetime.now(UTC).date())
    return result
