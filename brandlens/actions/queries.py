"""Query actions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import Field

from brandlens.actions.base import (
    ActionForm,
    ActionResult,
    ActionSuccess,
    form_to_dict,
    require_membership,
    require_user,
    revalidate_path,
    run_action,
)
from brandlens.errors import QueryNotFoundError, TopicNotFoundError
from brandlens.models import QueryType

if TYPE_CHECKING:
    from brandlens.db import Database
    from brandlens.models import User


class CreateQueryForm(ActionForm):
    topicId: str = Field(min_length=1)  # noqa: N815
    projectId: str = Field(min_length=1)  # noqa: N815
    text: str = Field(min_length=1)
    queryType: QueryType = QueryType.SECTOR  # noqa: N815


class UpdateQueryForm(ActionForm):
    queryId: str = Field(min_length=1)  # noqa: N815
    text: str = Field(min_length=1)
    queryType: QueryType | None = None  # noqa: N815
    active: bool | None = None


class DeleteQueryForm(ActionForm):
    queryId: str = Field(min_length=1)  # noqa: N815


def create_query(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    """Add a query to a topic. The topic must belong to the given project."""

    def _body() -> ActionResult:
        parsed = CreateQueryForm.model_validate(form_to_dict(form))
        project = require_membership(db, parsed.projectId, user)
        topic = db.get_topic(parsed.topicId)
        if topic is None or topic.project_id != project.id:
            raise TopicNotFoundError()
        query = db.create_query(
            topic_id=topic.id,
            project_id=project.id,
            text=parsed.text,
            query_type=parsed.queryType,
            country=project.region,
        )
        return ActionSuccess(
            data={"id": query.id, "text": query.text, "queryType": query.query_type.value},
            revalidate=revalidate_path(project),
        )

    return run_action("create_query", _body, "Failed to create query")


def update_query(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = UpdateQueryForm.model_validate(form_to_dict(form))
        require_user(user)
        query = db.get_query(parsed.queryId)
        if query is None:
            raise QueryNotFoundError()
        project = require_membership(db, query.project_id, user)
        updated = db.update_query(
            query.id, text=parsed.text, query_type=parsed.queryType, active=parsed.active
        )
        if updated is None:
            raise QueryNotFoundError()
        return ActionSuccess(
            data={
                "id": updated.id,
                "text": updated.text,
                "queryType": updated.query_type.value,
                "active": updated.active,
            },
            revalidate=revalidate_path(project),
        )

    return run_action("update_query", _body, "Failed to update query")


def delete_query(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = DeleteQueryForm.model_validate(form_to_dict(form))
        require_user(user)
        query = db.get_query(parsed.queryId)
        if query is None:
            raise QueryNotFoundError()
        project = require_membership(db, query.project_id, user)
        db.delete_query(query.id)
        return ActionSuccess(data={"id": query.id}, revalidate=revalidate_path(project))

    return run_action("delete_query", _body, "Failed to delete query")
