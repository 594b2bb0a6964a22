"""Shared plumbing for form actions: result types, auth checks, error reduction."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from brandlens.errors import AuthenticationError, AuthorizationError, NotFoundError
from brandlens.metrics import actions_total

if TYPE_CHECKING:
    from brandlens.db import Database
    from brandlens.models import Project, User

logger = structlog.get_logger()

UNAUTHORIZED = "Unauthorized"
INVALID_INPUT = "Invalid input data"


class ActionSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    data: dict[str, Any] = Field(default_factory=dict)
    revalidate: str | None = None


class ActionFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: str


ActionResult = ActionSuccess | ActionFailure


class ActionForm(BaseModel):
    """Base for form schemas. Blank form fields count as missing."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")


def form_to_dict(form: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a form mapping, dropping empty strings so defaults apply."""
    return {k: v for k, v in dict(form).items() if not (isinstance(v, str) and v.strip() == "")}


def format_validation_errors(exc: ValidationError) -> str:
    """One ``path: message`` line per error."""
    lines = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        message = str(error["msg"]).removeprefix("Value error, ")
        lines.append(f"{path}: {message}")
    return "\n".join(lines)


def require_user(user: User | None) -> User:
    if user is None:
        raise AuthenticationError(UNAUTHORIZED)
    return user


def require_membership(db: Database, project_id: str, user: User | None) -> Project:
    """Return the project when ``user`` is a member of it.

    A missing project and a missing membership look the same to the caller.
    """
    member = require_user(user)
    if db.get_membership(project_id, member.id) is None:
        raise AuthorizationError(UNAUTHORIZED)
    project = db.get_project(project_id)
    if project is None:
        raise AuthorizationError(UNAUTHORIZED)
    return project


def revalidate_path(project: Project) -> str:
    return f"/{project.slug}"


def record(name: str, result: ActionResult) -> ActionResult:
    """Count the outcome of an action and pass the result through."""
    outcome = "success" if result.success else "failure"
    actions_total.labels(action=name, outcome=outcome).inc()
    if isinstance(result, ActionFailure):
        logger.info("Action rejected", action=name, error=result.error)
    return result


def run_action(name: str, fn: Callable[[], ActionResult], fallback: str) -> ActionResult:
    """Call an action body and reduce any error to an ActionFailure.

    Validation errors map to "Invalid input data" and auth errors to
    "Unauthorized". Not-found errors keep their own message.
    """
    try:
        result = fn()
    except ValidationError:
        result = ActionFailure(error=INVALID_INPUT)
    except (AuthenticationError, AuthorizationError):
        result = ActionFailure(error=UNAUTHORIZED)
    except NotFoundError as exc:
        result = ActionFailure(error=str(exc))
    except Exception as exc:
        logger.exception("Action failed", action=name)
        result = ActionFailure(error=str(exc) or fallback)
    return record(name, result)
