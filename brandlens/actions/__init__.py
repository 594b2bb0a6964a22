"""Form actions: validated mutations with membership checks."""

from brandlens.actions.base import ActionFailure, ActionResult, ActionSuccess
from brandlens.actions.projects import (
    create_project,
    delete_project,
    start_analysis,
    update_project,
)
from brandlens.actions.queries import create_query, delete_query, update_query
from brandlens.actions.topics import create_topic, delete_topic, update_topic

__all__ = [
    "ActionFailure",
    "ActionResult",
    "ActionSuccess",
    "create_project",
    "create_query",
    "create_topic",
    "delete_project",
    "delete_query",
    "delete_topic",
    "start_analysis",
    "update_project",
    "update_query",
    "update_topic",
]
