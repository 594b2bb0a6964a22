"""Tests for the Huey generation tasks (immediate mode)."""

from __future__ import annotations

import json

import pytest
from huey.exceptions import CancelExecution

from brandlens import auth, tasks
from brandlens.config import Settings
from brandlens.db import Database
from brandlens.errors import TopicNotFoundError
from brandlens.models import NewQuery, NewTopic, Project

GENERATED = json.dumps(
    {
        "queries": [
            {"text": "Which bank has the lowest transfer fees?", "queryType": "sector"},
            {"text": "Is Acme Bank good for freelancers?", "queryType": "product"},
        ]
    }
)


@pytest.fixture()
def task_db(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Database:
    """Database at the location the tasks resolve from the environment."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", "")
    db = Database(Settings(_env_file=None).db_url)
    db.init_schema()
    yield db
    db.close()


@pytest.fixture()
def task_project(task_db: Database) -> Project:
    owner = task_db.create_user("owner@example.com", "Owner", auth.hash_password("pw-123456"))
    return task_db.create_project(
        name="Acme Bank",
        slug="acme-bank",
        user_id=owner.id,
        region="Spain",
        topics=[
            NewTopic(
                name="Fees",
                queries=[NewQuery(text="Which bank has the lowest transfer fees?")],
            ),
            NewTopic(name="Mobile"),
        ],
    )


@pytest.fixture()
def fake_llm(monkeypatch: pytest.MonkeyPatch, make_llm):
    llm = make_llm(text=GENERATED)
    monkeypatch.setattr(tasks, "LLMClient", lambda settings=None: llm)
    return llm


class TestRun:
    def test_success_passes_result_through(self):
        assert tasks._run("noop", lambda x: x * 2, 21) == 42

    def test_missing_entity_cancels_without_retry(self):
        def _missing(topic_id: str) -> None:
            raise TopicNotFoundError(topic_id)

        with pytest.raises(CancelExecution) as exc_info:
            tasks._run("generate_queries_for_topic", _missing, "gone")
        assert exc_info.value.retry is False

    def test_other_errors_propagate(self):
        def _boom() -> None:
            raise RuntimeError("LLM down")

        with pytest.raises(RuntimeError, match="LLM down"):
            tasks._run("generate_queries_for_topic", _boom)


class TestGenerateForTopic:
    def test_task_adds_only_new_queries(
        self, task_db: Database, task_project: Project, fake_llm
    ):
        fees = next(t for t in task_db.list_topics(task_project.id) if t.name == "Fees")

        summary = tasks.generate_queries_for_topic_task(fees.id).get()

        assert summary["topic_name"] == "Fees"
        assert summary["queries_generated"] == 1
        texts = {q.text for q in task_db.list_queries(fees.id)}
        assert texts == {
            "Which bank has the lowest transfer fees?",
            "Is Acme Bank good for freelancers?",
        }

    def test_missing_topic_raises_not_found(self, task_db: Database, fake_llm):
        with pytest.raises(TopicNotFoundError):
            tasks._generate_for_topic("missing")


class TestFanOut:
    def test_one_task_per_topic(self, task_db: Database, task_project: Project, fake_llm):
        result = tasks._fan_out(task_project.id)

        assert result["additional_queries_generated"] == 2
        assert len(result["task_ids"]) == 2
        mobile = next(t for t in task_db.list_topics(task_project.id) if t.name == "Mobile")
        assert len(task_db.list_queries(mobile.id)) == 2

    def test_initial_task_returns_fan_out_summary(
        self, task_db: Database, task_project: Project, fake_llm
    ):
        result = tasks.generate_initial_queries_task(task_project.id).get()
        assert result["additional_queries_generated"] == 2


class TestBootstrap:
    def test_creates_topics(
        self, task_db: Database, task_project: Project, monkeypatch: pytest.MonkeyPatch, make_llm
    ):
        payload = {"topics": [{"topic": "Loans", "description": "", "queries": ["Best loan?"]}]}
        llm = make_llm(text=json.dumps(payload))
        monkeypatch.setattr(tasks, "LLMClient", lambda settings=None: llm)

        result = tasks.create_topics_and_queries_task(task_project.id).get()

        assert result["topics"][0]["topic"] == "Loans"
        names = {t.name for t in task_db.list_topics(task_project.id)}
        assert names == {"Fees", "Mobile", "Loans"}
