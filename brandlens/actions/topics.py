"""Topic actions."""

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
from brandlens.errors import TopicNotFoundError

if TYPE_CHECKING:
    from brandlens.db import Database
    from brandlens.models import Project, Topic, User


class CreateTopicForm(ActionForm):
    projectId: str = Field(min_length=1)  # noqa: N815
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)


class UpdateTopicForm(ActionForm):
    topicId: str = Field(min_length=1)  # noqa: N815
    name: str = Field(min_length=1)
    description: str | None = None


class DeleteTopicForm(ActionForm):
    topicId: str = Field(min_length=1)  # noqa: N815


def _member_topic(db: Database, topic_id: str, user: User | None) -> tuple[Topic, Project]:
    require_user(user)
    topic = db.get_topic(topic_id)
    if topic is None:
        raise TopicNotFoundError()
    project = require_membership(db, topic.project_id, user)
    return topic, project


def create_topic(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = CreateTopicForm.model_validate(form_to_dict(form))
        project = require_membership(db, parsed.projectId, user)
        topic = db.create_topic(project.id, parsed.name, parsed.description)
        return ActionSuccess(
            data={"id": topic.id, "name": topic.name},
            revalidate=revalidate_path(project),
        )

    return run_action("create_topic", _body, "Failed to create topic")


def update_topic(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = UpdateTopicForm.model_validate(form_to_dict(form))
        topic, project = _member_topic(db, parsed.topicId, user)
        description = parsed.description if parsed.description is not None else topic.description
        updated = db.update_topic(topic.id, parsed.name, description)
        if updated is None:
            raise TopicNotFoundError()
        return ActionSuccess(
            data={"id": updated.id, "name": updated.name},
            revalidate=revalidate_path(project),
        )

    return run_action("update_topic", _body, "Failed to update topic")


def delete_topic(db: Database, form: Mapping[str, Any], user: User | None) -> ActionResult:
    def _body() -> ActionResult:
        parsed = DeleteTopicForm.model_validate(form_to_dict(form))
        topic, project = _member_topic(db, parsed.topicId, user)
        db.delete_topic(topic.id)
        return ActionSuccess(data={"id": topic.id}, revalidate=revalidate_path(project))

    return run_action("delete_topic", _body, "Failed to delete topic")
