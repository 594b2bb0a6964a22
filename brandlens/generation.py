"""AI topic and query generation on top of the repository and LLM client."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypedDict

import structlog
from pydantic import ValidationError

from brandlens import prompts
from brandlens.errors import GenerationError, ProjectNotFoundError, TopicNotFoundError
from brandlens.metrics import duplicate_queries_dropped_total, queries_generated_total
from brandlens.models import (
    BootstrapTopics,
    CompanyProfile,
    GeneratedQuery,
    GeneratedQueryBatch,
    SuggestedTopics,
)
from brandlens.text import decode_unicode_escapes, normalize_query_text, strip_code_fences

if TYPE_CHECKING:
    from brandlens.config import Settings
    from brandlens.db import Database
    from brandlens.llm import LLMClient

logger = structlog.get_logger()


class GeneratedQueryDict(TypedDict):
    text: str
    queryType: str


class TopicGenerationSummary(TypedDict):
    topic_id: str
    topic_name: str
    queries_generated: int
    queries: list[GeneratedQueryDict]


def parse_llm_json(raw: str) -> Any:
    """Decode escaped unicode, drop code fences, then parse JSON.

    Unicode repair runs on the raw text before parsing. ``strict=False``
    tolerates control characters the repair may have produced inside
    string literals.
    """
    cleaned = strip_code_fences(decode_unicode_escapes(raw))
    try:
        return json.loads(cleaned, strict=False)
    except json.JSONDecodeError as exc:
        raise GenerationError(f"LLM returned invalid JSON: {exc}") from exc


def parse_generated_queries(raw: str) -> list[GeneratedQuery]:
    """Parse ``{"queries": [...]}`` (or a bare list) from model output."""
    payload = parse_llm_json(raw)
    if isinstance(payload, list):
        payload = {"queries": payload}
    try:
        return GeneratedQueryBatch.model_validate(payload).queries
    except ValidationError as exc:
        raise GenerationError(f"LLM returned an unexpected query shape: {exc}") from exc


def drop_duplicates(
    existing: Iterable[str], generated: Iterable[GeneratedQuery]
) -> tuple[list[GeneratedQuery], int]:
    """Keep generated queries whose normalized text is new.

    Returns the kept queries and how many were dropped.
    """
    seen = {normalize_query_text(text) for text in existing}
    kept: list[GeneratedQuery] = []
    dropped = 0
    for query in generated:
        key = normalize_query_text(query.text)
        if not key or key in seen:
            dropped += 1
            continue
        seen.add(key)
        kept.append(query)
    return kept, dropped


class QueryGenerator:
    """Runs the generation prompts and persists what they produce."""

    def __init__(self, db: Database, llm: LLMClient, settings: Settings):
        self.db = db
        self.llm = llm
        self.settings = settings

    def generate_for_topic(self, topic_id: str) -> TopicGenerationSummary:
        """Add supplemental queries to one topic.

        Raises TopicNotFoundError when the topic (or its project) is gone.
        """
        detail = self.db.get_topic_detail(topic_id)
        if detail is None:
            raise TopicNotFoundError(topic_id)

        count = self.settings.supplemental_query_count
        request = prompts.topic_queries_request(detail.project, detail.topic, detail.queries, count)
        raw = self.llm.generate_text(request, system=prompts.TOPIC_QUERIES_PROMPT)
        logger.debug("Raw topic queries", topic_id=topic_id, length=len(raw))

        generated = parse_generated_queries(raw)
        kept, dropped = drop_duplicates((q.text for q in detail.queries), generated)
        if dropped:
            duplicate_queries_dropped_total.inc(dropped)
            logger.info("Dropped duplicate queries", topic_id=topic_id, dropped=dropped)

        self.db.add_queries(
            topic_id=topic_id,
            project_id=detail.project.id,
            queries=[q.to_new_query() for q in kept],
            country=detail.project.region,
        )
        queries_generated_total.labels(source="topic").inc(len(kept))
        logger.info(
            "Supplemental queries generated",
            topic_id=topic_id,
            project_id=detail.project.id,
            generated=len(kept),
        )
        return {
            "topic_id": topic_id,
            "topic_name": detail.topic.name,
            "queries_generated": len(kept),
            "queries": [
                {"text": q.text, "queryType": q.query_type.value} for q in kept
            ],
        }

    def bootstrap_topics(self, project_id: str) -> dict[str, Any]:
        """Ask for a starter set of topics with plain-text queries and insert them."""
        project = self.db.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        raw = self.llm.generate_text(
            prompts.topics_and_queries_request(project),
            system=prompts.TOPICS_AND_QUERIES_PROMPT,
        )
        payload = parse_llm_json(raw)
        try:
            parsed = BootstrapTopics.model_validate(payload)
        except ValidationError as exc:
            raise GenerationError(f"LLM returned an unexpected topic shape: {exc}") from exc

        inserted = 0
        for item in parsed.topics:
            topic = self.db.create_topic(project.id, item.topic, item.description)
            candidates = [GeneratedQuery(text=q) for q in item.queries if q.strip()]
            kept, _ = drop_duplicates((), candidates)
            rows = self.db.add_queries(
                topic.id,
                project.id,
                [q.to_new_query() for q in kept],
                country=project.region,
            )
            inserted += len(rows)
        queries_generated_total.labels(source="bootstrap").inc(inserted)
        logger.info(
            "Bootstrap topics created",
            project_id=project.id,
            topics=len(parsed.topics),
            queries=inserted,
        )
        return parsed.model_dump()

    # --- Wizard helpers (no persistence) ---

    def company_profile(self, url: str) -> CompanyProfile:
        return self.llm.generate(
            prompts.company_profile_request(url),
            CompanyProfile,
            system=prompts.COMPANY_PROFILE_PROMPT,
            profile=True,
        )

    def suggest_topics(
        self,
        website: str,
        name: str | None = None,
        country: str | None = None,
        language: str | None = None,
        sector: str | None = None,
        description: str | None = None,
    ) -> SuggestedTopics:
        raw = self.llm.generate_text(
            prompts.suggested_topics_request(name, website, country, language, sector, description),
            system=prompts.SUGGESTED_TOPICS_PROMPT,
        )
        try:
            return SuggestedTopics.model_validate(parse_llm_json(raw))
        except ValidationError as exc:
            raise GenerationError(f"LLM returned an unexpected topic shape: {exc}") from exc

    def single_query(
        self,
        company_name: str,
        topic_name: str,
        topic_description: str | None = None,
        company_description: str | None = None,
        existing_queries: Iterable[Mapping[str, str]] = (),
    ) -> GeneratedQuery:
        request = prompts.single_query_request(
            company_name, topic_name, topic_description, company_description, existing_queries
        )
        return self.llm.generate(
            request,
            GeneratedQuery,
            system=prompts.SINGLE_QUERY_PROMPT,
            temperature=0.8,
            web_search=False,
        )
