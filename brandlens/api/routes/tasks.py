"""Background task status endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from brandlens.api.deps import CurrentUserDep, TaskQueueDep
from brandlens.api.schemas import TaskStatusResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/{task_id}", response_model=TaskStatusResponse)
def get_task_status(
    task_id: str, task_queue: TaskQueueDep, _user: CurrentUserDep
) -> TaskStatusResponse:
    return TaskStatusResponse(**task_queue.status(task_id))
