"""Shared test fixtures."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable

# brandlens.tasks builds its huey instance from Settings at import time.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="brandlens-test-"))
os.environ.setdefault("HUEY_IMMEDIATE", "true")

import pytest  # noqa: E402
from pydantic_ai import models  # noqa: E402
from pydantic_ai.models.test import TestModel  # noqa: E402

from brandlens import auth  # noqa: E402
from brandlens.config import Settings  # noqa: E402
from brandlens.db import Database  # noqa: E402
from brandlens.llm import LLMClient  # noqa: E402
from brandlens.models import NewQuery, NewTopic, Project, QueryType, Topic, User  # noqa: E402

# Safety net: block all real LLM API calls during tests.
# TestModel and FunctionModel are exempt from this check.
models.ALLOW_MODEL_REQUESTS = False

PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(auth, "PBKDF2_ITERATIONS", 1_000)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="test-key",
        anthropic_api_key="test-key",
        analysis_webhook_url="",
        llm_web_search=False,
        data_dir=tmp_path,
        log_level="DEBUG",
        log_format="console",
        huey_immediate=True,
        _env_file=None,
    )


@pytest.fixture()
def db(tmp_path) -> Database:
    db = Database(tmp_path / "test.db")
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def password() -> str:
    return PASSWORD


@pytest.fixture()
def user(db: Database) -> User:
    return db.create_user("owner@example.com", "Owner", auth.hash_password(PASSWORD))


@pytest.fixture()
def other_user(db: Database) -> User:
    return db.create_user("outsider@example.com", "Outsider", auth.hash_password(PASSWORD))


@pytest.fixture()
def project(db: Database, user: User) -> Project:
    return db.create_project(
        name="Acme Bank",
        slug="acme-bank",
        user_id=user.id,
        url="https://acme-bank.example",
        description="Retail bank for freelancers",
        region="Spain",
        sector="banking",
        language="Spanish",
        topics=[
            NewTopic(
                name="Fees",
                description="What accounts cost",
                queries=[
                    NewQuery(text="Which bank has the lowest transfer fees?"),
                    NewQuery(
                        text="What are the Acme Bank account fees?",
                        query_type=QueryType.PRODUCT,
                    ),
                ],
            ),
            NewTopic(name="Mobile", description="Banking app", queries=[]),
        ],
    )


@pytest.fixture()
def topic(db: Database, project: Project) -> Topic:
    return next(t for t in db.list_topics(project.id) if t.name == "Fees")


@pytest.fixture()
def make_llm(settings: Settings) -> Callable[..., LLMClient]:
    """Build an LLMClient whose vendors answer from TestModel.

    ``text`` is returned for plain-text calls; ``output`` for structured ones.
    """

    def _make(text: str | None = None, output: dict | None = None) -> LLMClient:
        client = LLMClient(settings)
        for vendor in ("openai", "anthropic"):
            client._models[vendor] = TestModel(  # type: ignore[assignment]
                custom_output_text=text,
                custom_output_args=output,
            )
        return client

    return _make
