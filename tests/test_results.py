"""Tests for the results read model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import pytest

from brandlens.db import Database
from brandlens.errors import ProjectNotFoundError
from brandlens.models import Competitor, Execution, Project, Topic
from brandlens.results import build_results_view, competitors_with_mentions


@dataclass
class SeededRun:
    older: Execution
    latest: Execution


@pytest.fixture()
def seeded(db: Database, project: Project, topic: Topic) -> SeededRun:
    """Two analysis runs: one older with a single source, one newer with two."""
    chatgpt = db.upsert_model("ChatGPT", "gpt-4o", "#10a37f")
    claude = db.upsert_model("Claude", "claude-sonnet-4-5", "#d97757")
    query = db.list_queries(topic.id)[0]
    bank_news = db.upsert_domain(project.id, "banknews.example", "media")
    forum = db.upsert_domain(project.id, "forum.example", "ugc")
    rival = db.upsert_competitor(project.id, "Rival Bank", ["Rival"])
    db.upsert_competitor(project.id, "Quiet Bank")

    older = db.record_execution(project.id, datetime(2025, 1, 1, tzinfo=UTC))
    qe_old = db.record_query_execution(older.id, query.id, chatgpt.id, response="...")
    db.record_source(
        project.id,
        "https://banknews.example/a",
        query_execution_id=qe_old.id,
        domain_id=bank_news.id,
    )

    latest = db.record_execution(project.id, datetime(2025, 2, 1, tzinfo=UTC))
    qe_gpt = db.record_query_execution(latest.id, query.id, chatgpt.id, response="...")
    qe_claude = db.record_query_execution(latest.id, query.id, claude.id, response="...")
    src = db.record_source(
        project.id,
        "https://banknews.example/b",
        query_execution_id=qe_gpt.id,
        domain_id=bank_news.id,
    )
    db.record_source(
        project.id, "https://forum.example/t/1", query_execution_id=qe_claude.id, domain_id=forum.id
    )
    db.record_mention(src.id, rival.id)
    return SeededRun(older=older, latest=latest)


class TestBuildResultsView:
    def test_unfiltered_summary(self, db: Database, seeded: SeededRun):
        view = build_results_view(db, "acme-bank")

        assert view.is_filtered is False
        assert [e.id for e in view.executions] == [seeded.latest.id, seeded.older.id]
        # Queries processed comes from the latest run
        assert view.summary.queries_processed == 2
        assert view.summary.total_executions == 2
        assert view.summary.total_sources == 3
        assert view.summary.total_competitors == 2
        assert view.summary.competitors_with_mentions == 1
        assert view.executions_by_model == {"ChatGPT": 2, "Claude": 1}
        assert [(d.name, d.sources) for d in view.top_domains] == [
            ("banknews.example", 2),
            ("forum.example", 1),
        ]

    def test_filtered_by_execution(self, db: Database, seeded: SeededRun):
        view = build_results_view(db, "acme-bank", execution_id=seeded.older.id)

        assert view.is_filtered is True
        assert view.selected_execution_id == seeded.older.id
        assert view.summary.queries_processed == 1
        assert view.summary.total_sources == 1
        assert [s.url for s in view.sources] == ["https://banknews.example/a"]
        assert view.executions_by_model == {"ChatGPT": 1}
        # Competitors are project-wide
        assert view.summary.total_competitors == 2

    def test_unknown_execution_is_ignored(self, db: Database, seeded: SeededRun):
        view = build_results_view(db, "acme-bank", execution_id="not-a-run")
        assert view.selected_execution_id is None
        assert view.summary.total_sources == 3

    def test_empty_project(self, db: Database, project: Project):
        view = build_results_view(db, "acme-bank")
        assert view.summary.total_executions == 0
        assert view.summary.queries_processed == 0
        assert view.executions == []
        assert view.top_domains == []

    def test_unknown_slug(self, db: Database):
        with pytest.raises(ProjectNotFoundError):
            build_results_view(db, "nope")

    def test_serializes_is_filtered(self, db: Database, seeded: SeededRun):
        payload = build_results_view(db, "acme-bank").model_dump(mode="json")
        assert payload["is_filtered"] is False
        assert payload["project"]["slug"] == "acme-bank"


class TestCompetitorsWithMentions:
    def test_filters_zero_counts(self):
        competitors = [
            Competitor(id="1", name="Rival Bank", mention_count=3),
            Competitor(id="2", name="Quiet Bank"),
        ]
        assert [c.name for c in competitors_with_mentions(competitors)] == ["Rival Bank"]

    def test_seeded_view(self, db: Database, seeded: SeededRun):
        view = build_results_view(db, "acme-bank")
        assert [c.name for c in competitors_with_mentions(view.competitors)] == ["Rival Bank"]
