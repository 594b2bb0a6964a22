"""Tests for form actions: validation, membership checks, error reduction."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import respx

from brandlens import actions
from brandlens.actions import ActionFailure, ActionSuccess
from brandlens.actions.projects import CREATE_FAILED, NOT_AUTHENTICATED
from brandlens.clients import AnalysisWebhookClient
from brandlens.models import QueryType

if TYPE_CHECKING:
    from brandlens.db import Database
    from brandlens.models import Project, Topic, User

WEBHOOK_URL = "https://hooks.example.com/analysis"


def _wizard_form(**overrides: str) -> dict[str, str]:
    form = {
        "name": "Acme Bank",
        "websiteUrl": "acme-bank.example",
        "sector": "banking",
        "country": "Spain",
        "language": "Spanish",
        "description": "Retail bank for freelancers",
        "topics": json.dumps(
            [
                {
                    "name": "Fees",
                    "description": "What accounts cost",
                    "queries": [
                        {"text": "Which bank has the lowest fees?", "queryType": "sector"},
                        {"text": "What does Acme Bank charge?", "queryType": "product"},
                    ],
                },
                {"name": "Cards", "description": "Debit and credit cards", "queries": []},
            ]
        ),
    }
    form.update(overrides)
    return form


class TestCreateProject:
    def test_creates_project_topics_and_queries(self, db: Database, user: User):
        enqueued: list[str] = []

        def enqueue(project_id: str) -> str:
            enqueued.append(project_id)
            return "task-1"

        result = actions.create_project(db, _wizard_form(), user, enqueue=enqueue)

        assert isinstance(result, ActionSuccess)
        assert result.data["slug"] == "acme-bank"
        assert result.data["task_id"] == "task-1"
        assert result.revalidate == "/acme-bank"
        assert enqueued == [result.data["project_id"]]

        project = db.get_project_by_slug("acme-bank")
        assert project.url == "https://acme-bank.example"
        assert project.region == "Spain"
        assert db.get_membership(project.id, user.id).role.value == "admin"

        detail = db.get_project_detail("acme-bank")
        assert {t.name: t.query_count for t in detail.topics} == {"Cards": 0, "Fees": 2}
        fees = next(t for t in db.list_topics(project.id) if t.name == "Fees")
        queries = db.list_queries(fees.id)
        assert {q.query_type for q in queries} == {QueryType.SECTOR, QueryType.PRODUCT}
        assert {q.country for q in queries} == {"Spain"}

    def test_slug_collision_gets_suffix(self, db: Database, user: User, project: Project):
        result = actions.create_project(db, _wizard_form(), user, enqueue=lambda _pid: None)

        assert isinstance(result, ActionSuccess)
        assert re.fullmatch(r"acme-bank-[a-z0-9]{4}", result.data["slug"])
        created = db.get_project_by_slug(result.data["slug"])
        assert db.get_membership(created.id, user.id).role.value == "admin"

    def test_missing_fields_are_reported(self, db: Database, user: User):
        form = _wizard_form(name="", country="  ")
        result = actions.create_project(db, form, user, enqueue=lambda _pid: None)

        assert isinstance(result, ActionFailure)
        assert "name: Name is required" in result.error
        assert "country: Country is required" in result.error
        assert db.list_projects() == []

    def test_invalid_website(self, db: Database, user: User):
        form = _wizard_form(websiteUrl="http://")
        result = actions.create_project(db, form, user, enqueue=lambda _pid: None)

        assert isinstance(result, ActionFailure)
        assert "Valid website URL is required" in result.error

    def test_topic_without_description_rejected(self, db: Database, user: User):
        form = _wizard_form(topics=json.dumps([{"name": "Fees", "description": ""}]))
        result = actions.create_project(db, form, user, enqueue=lambda _pid: None)

        assert isinstance(result, ActionFailure)
        assert "topics.0.description" in result.error

    def test_requires_user(self, db: Database):
        result = actions.create_project(db, _wizard_form(), None, enqueue=lambda _pid: None)

        assert result == ActionFailure(error=NOT_AUTHENTICATED)
        assert db.list_projects() == []

    def test_enqueue_failure_keeps_project(self, db: Database, user: User):
        def broken(_project_id: str) -> str:
            raise ConnectionError("queue down")

        result = actions.create_project(db, _wizard_form(), user, enqueue=broken)

        assert isinstance(result, ActionSuccess)
        assert result.data["task_id"] is None
        assert db.slug_exists("acme-bank")

    def test_unexpected_failure(self, db: Database, user: User, monkeypatch):
        def boom(**_kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(db, "create_project", boom)
        result = actions.create_project(db, _wizard_form(), user, enqueue=lambda _pid: None)

        assert result == ActionFailure(error=CREATE_FAILED)


class TestUpdateAndDeleteProject:
    def test_update_project(self, db: Database, user: User, project: Project):
        form = {"projectId": project.id, "name": "Acme Banco", "country": "Mexico"}
        result = actions.update_project(db, form, user)

        assert isinstance(result, ActionSuccess)
        assert result.revalidate == "/acme-bank"
        updated = db.get_project(project.id)
        assert updated.name == "Acme Banco"
        assert updated.region == "Mexico"
        assert updated.sector == "banking"

    def test_update_by_non_member(self, db: Database, other_user: User, project: Project):
        result = actions.update_project(db, {"projectId": project.id, "name": "Hijack"}, other_user)

        assert result == ActionFailure(error="Unauthorized")
        assert db.get_project(project.id).name == "Acme Bank"

    def test_update_without_project_id(self, db: Database, user: User):
        result = actions.update_project(db, {"name": "x"}, user)
        assert result == ActionFailure(error="Invalid input data")

    def test_delete_project(self, db: Database, user: User, project: Project):
        result = actions.delete_project(db, {"projectId": project.id}, user)

        assert isinstance(result, ActionSuccess)
        assert result.revalidate == "/"
        assert db.get_project(project.id) is None

    def test_delete_by_non_member(self, db: Database, other_user: User, project: Project):
        result = actions.delete_project(db, {"projectId": project.id}, other_user)

        assert result == ActionFailure(error="Unauthorized")
        assert db.get_project(project.id) is not None


class TestTopicActions:
    def test_create_topic(self, db: Database, user: User, project: Project):
        form = {"projectId": project.id, "name": "Loans", "description": "Borrowing"}
        result = actions.create_topic(db, form, user)

        assert isinstance(result, ActionSuccess)
        assert result.data["name"] == "Loans"
        assert db.get_topic(result.data["id"]).project_id == project.id

    def test_create_topic_non_member_writes_nothing(
        self, db: Database, other_user: User, project: Project
    ):
        form = {"projectId": project.id, "name": "Loans", "description": "Borrowing"}
        result = actions.create_topic(db, form, other_user)

        assert result == ActionFailure(error="Unauthorized")
        assert [t.name for t in db.list_topics(project.id)] == ["Fees", "Mobile"]

    def test_create_topic_unauthenticated(self, db: Database, project: Project):
        form = {"projectId": project.id, "name": "Loans", "description": "Borrowing"}
        assert actions.create_topic(db, form, None) == ActionFailure(error="Unauthorized")

    def test_create_topic_requires_description(self, db: Database, user: User, project: Project):
        form = {"projectId": project.id, "name": "Loans", "description": ""}
        assert actions.create_topic(db, form, user) == ActionFailure(error="Invalid input data")

    def test_update_topic_keeps_description(self, db: Database, user: User, topic: Topic):
        result = actions.update_topic(db, {"topicId": topic.id, "name": "Pricing"}, user)

        assert isinstance(result, ActionSuccess)
        updated = db.get_topic(topic.id)
        assert updated.name == "Pricing"
        assert updated.description == "What accounts cost"

    def test_update_missing_topic(self, db: Database, user: User):
        result = actions.update_topic(db, {"topicId": "missing", "name": "x"}, user)
        assert result == ActionFailure(error="Topic not found")

    def test_delete_topic_by_non_member(self, db: Database, other_user: User, topic: Topic):
        result = actions.delete_topic(db, {"topicId": topic.id}, other_user)

        assert result == ActionFailure(error="Unauthorized")
        assert db.get_topic(topic.id) is not None

    def test_delete_topic(self, db: Database, user: User, topic: Topic):
        result = actions.delete_topic(db, {"topicId": topic.id}, user)

        assert isinstance(result, ActionSuccess)
        assert result.revalidate == "/acme-bank"
        assert db.get_topic(topic.id) is None


class TestQueryActions:
    def test_create_query(self, db: Database, user: User, project: Project, topic: Topic):
        form = {
            "topicId": topic.id,
            "projectId": project.id,
            "text": "Can I open an account online?",
            "queryType": "product",
        }
        result = actions.create_query(db, form, user)

        assert isinstance(result, ActionSuccess)
        assert result.data["queryType"] == "product"
        created = db.get_query(result.data["id"])
        assert created.country == "Spain"
        assert created.topic_id == topic.id

    def test_create_query_defaults_to_sector(
        self, db: Database, user: User, project: Project, topic: Topic
    ):
        form = {"topicId": topic.id, "projectId": project.id, "text": "Best savings rate?"}
        result = actions.create_query(db, form, user)
        assert result.data["queryType"] == "sector"

    def test_create_query_topic_from_other_project(
        self, db: Database, user: User, project: Project, topic: Topic
    ):
        other = db.create_project(name="Other", slug="other", user_id=user.id)
        form = {"topicId": topic.id, "projectId": other.id, "text": "Sneaky?"}
        result = actions.create_query(db, form, user)

        assert result == ActionFailure(error="Topic not found")
        assert len(db.list_queries(topic.id)) == 2

    def test_create_query_non_member(
        self, db: Database, other_user: User, project: Project, topic: Topic
    ):
        form = {"topicId": topic.id, "projectId": project.id, "text": "Sneaky?"}
        assert actions.create_query(db, form, other_user) == ActionFailure(error="Unauthorized")
        assert len(db.list_queries(topic.id)) == 2

    def test_update_query(self, db: Database, user: User, topic: Topic):
        query = db.list_queries(topic.id)[0]
        form = {"queryId": query.id, "text": "Rewritten?", "active": "false"}
        result = actions.update_query(db, form, user)

        assert isinstance(result, ActionSuccess)
        updated = db.get_query(query.id)
        assert updated.text == "Rewritten?"
        assert updated.active is False
        assert updated.query_type == query.query_type

    def test_update_query_non_member(self, db: Database, other_user: User, topic: Topic):
        query = db.list_queries(topic.id)[0]
        result = actions.update_query(db, {"queryId": query.id, "text": "Hijack"}, other_user)

        assert result == ActionFailure(error="Unauthorized")
        assert db.get_query(query.id).text == query.text

    def test_update_missing_query(self, db: Database, user: User):
        result = actions.update_query(db, {"queryId": "missing", "text": "x"}, user)
        assert result == ActionFailure(error="Query not found")

    def test_delete_query(self, db: Database, user: User, topic: Topic):
        query = db.list_queries(topic.id)[0]
        result = actions.delete_query(db, {"queryId": query.id}, user)

        assert isinstance(result, ActionSuccess)
        assert db.get_query(query.id) is None

    def test_delete_query_unauthenticated(self, db: Database, topic: Topic):
        query = db.list_queries(topic.id)[0]
        assert actions.delete_query(db, {"queryId": query.id}, None) == ActionFailure(
            error="Unauthorized"
        )


class TestStartAnalysis:
    @respx.mock
    def test_triggers_webhook_with_project_models(self, db: Database, project: Project):
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(200, json={"ok": True}))
        for name in ("Claude", "ChatGPT"):
            db.attach_model(project.id, db.upsert_model(name).id)

        result = actions.start_analysis(db, AnalysisWebhookClient(WEBHOOK_URL), project)

        assert result["models"] == ["ChatGPT", "Claude"]
        sent = json.loads(route.calls.last.request.content)
        assert sent == {"project_id": project.id, "models": ["ChatGPT", "Claude"]}
        assert db.get_project(project.id).last_analysis == datetime.now(UTC).date()

    @respx.mock
    def test_explicit_models(self, db: Database, project: Project):
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(202))

        result = actions.start_analysis(
            db, AnalysisWebhookClient(WEBHOOK_URL), project, models=["Perplexity"]
        )

        assert result["status_code"] == 202
        assert json.loads(route.calls.last.request.content)["models"] == ["Perplexity"]
