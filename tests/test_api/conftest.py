"""FastAPI test client fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from brandlens.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from brandlens.api.routes import actions, ai, auth, projects, results, system, tasks
from brandlens.auth import AuthService
from brandlens.clients import AnalysisWebhookClient

if TYPE_CHECKING:
    from brandlens.config import Settings
    from brandlens.db import Database
    from brandlens.llm import LLMClient
    from brandlens.models import User

WEBHOOK_URL = "https://hooks.example.com/analysis"


class FakeTaskQueue:
    """Records enqueued work instead of running huey."""

    def __init__(self) -> None:
        self.initial: list[str] = []
        self.topics: list[str] = []
        self.results: dict[str, dict[str, Any]] = {}

    def enqueue_initial(self, project_id: str) -> str:
        self.initial.append(project_id)
        return f"task-initial-{len(self.initial)}"

    def enqueue_topic(self, topic_id: str) -> str:
        self.topics.append(topic_id)
        return f"task-topic-{len(self.topics)}"

    def status(self, task_id: str) -> dict[str, Any]:
        return self.results.get(task_id, {"task_id": task_id, "status": "pending"})


def _create_test_app(
    db: Database, settings: Settings, llm: LLMClient, task_queue: FakeTaskQueue
) -> FastAPI:
    """Create a FastAPI app with injected test state (no lifespan)."""
    app = FastAPI(title="Brandlens Test")

    app.state.db = db
    app.state.settings = settings
    app.state.llm = llm
    app.state.analysis_client = AnalysisWebhookClient(WEBHOOK_URL, timeout=5.0)
    app.state.task_queue = task_queue

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)

    prefix = "/api/v1"
    app.include_router(system.router, prefix=prefix)
    app.include_router(auth.router, prefix=prefix)
    app.include_router(ai.router, prefix=prefix)
    app.include_router(actions.router, prefix=prefix)
    app.include_router(projects.router, prefix=prefix)
    app.include_router(results.router, prefix=prefix)
    app.include_router(tasks.router, prefix=prefix)

    return app


@pytest.fixture()
def task_queue() -> FakeTaskQueue:
    return FakeTaskQueue()


@pytest.fixture()
def client(
    db: Database, settings: Settings, make_llm, task_queue: FakeTaskQueue
) -> TestClient:
    app = _create_test_app(db, settings, make_llm(text="ok"), task_queue)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def auth_client(client: TestClient, user: User, password: str) -> TestClient:
    """Client carrying the owner's session cookie."""
    resp = client.post("/api/v1/auth/signin", json={"email": user.email, "password": password})
    assert resp.status_code == 200
    return client


@pytest.fixture()
def outsider_headers(db: Database, settings: Settings, other_user: User, password: str):
    """Bearer header for a user with no project memberships."""
    _, session = AuthService(db, settings).signin(other_user.email, password)
    return {"Authorization": f"Bearer {session.token}"}
