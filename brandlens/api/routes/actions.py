"""Form-post action endpoints.

Every endpoint answers 200 with an ``ActionResult`` body; callers branch on
``success``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from brandlens import actions
from brandlens.actions import ActionResult
from brandlens.api.deps import DbDep, OptionalUserDep, TaskQueueDep

if TYPE_CHECKING:
    from brandlens.db import Database
    from brandlens.models import User

router = APIRouter(prefix="/actions", tags=["actions"])


async def _submit(
    request: Request,
    action: Callable[..., ActionResult],
    db: Database,
    user: User | None,
    *extra: Any,
) -> ActionResult:
    form = await request.form()
    return await run_in_threadpool(action, db, dict(form), user, *extra)


@router.post("/projects", response_model=ActionResult)
async def create_project(
    request: Request, db: DbDep, user: OptionalUserDep, task_queue: TaskQueueDep
) -> ActionResult:
    return await _submit(request, actions.create_project, db, user, task_queue.enqueue_initial)


@router.post("/projects/update", response_model=ActionResult)
async def update_project(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.update_project, db, user)


@router.post("/projects/delete", response_model=ActionResult)
async def delete_project(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.delete_project, db, user)


@router.post("/topics", response_model=ActionResult)
async def create_topic(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.create_topic, db, user)


@router.post("/topics/update", response_model=ActionResult)
async def update_topic(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.update_topic, db, user)


@router.post("/topics/delete", response_model=ActionResult)
async def delete_topic(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.delete_topic, db, user)


@router.post("/queries", response_model=ActionResult)
async def create_query(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.create_query, db, user)


@router.post("/queries/update", response_model=ActionResult)
async def update_query(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.update_query, db, user)


@router.post("/queries/delete", response_model=ActionResult)
async def delete_query(request: Request, db: DbDep, user: OptionalUserDep) -> ActionResult:
    return await _submit(request, actions.delete_query, db, user)
