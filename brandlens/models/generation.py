"""Structured outputs requested from the LLM."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from brandlens.models.topic import NewQuery, QueryType


class GeneratedQuery(BaseModel):
    """One AI-suggested query.

    Current shape is ``{"text", "queryType"}``. The older
    ``{"query", "companySpecific"}`` shape is accepted and mapped onto it,
    ``companySpecific=true`` meaning a product query. A bare string is a
    sector query.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(min_length=1)
    query_type: QueryType = Field(default=QueryType.SECTOR, alias="queryType")

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"text": data}
        if isinstance(data, dict) and "text" not in data and "query" in data:
            company_specific = bool(data.get("companySpecific", False))
            return {
                "text": data["query"],
                "queryType": QueryType.PRODUCT if company_specific else QueryType.SECTOR,
            }
        return data

    def to_new_query(self) -> NewQuery:
        return NewQuery(text=self.text.strip(), query_type=self.query_type)


class GeneratedQueryBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    queries: list[GeneratedQuery] = Field(default_factory=list)


class CompanyProfile(BaseModel):
    """Company details inferred from a website by the profiling prompt."""

    model_config = ConfigDict(frozen=True)

    name: str
    country: str | None = None
    language: str
    sector: str | None = None
    description: str
    website: str


class SuggestedTopic(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    queries: list[GeneratedQuery] = Field(default_factory=list)


class SuggestedTopics(BaseModel):
    """Wizard suggestions.

    Also accepts the flat ``topic_1``/``description_1``/``queries_1`` ...
    layout some prompts produce.
    """

    model_config = ConfigDict(frozen=True)

    topics: list[SuggestedTopic] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_numbered_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "topics" in data:
            return data
        topics = []
        index = 1
        while f"topic_{index}" in data:
            topics.append(
                {
                    "name": data[f"topic_{index}"],
                    "description": data.get(f"description_{index}", ""),
                    "queries": data.get(f"queries_{index}", []),
                }
            )
            index += 1
        return {"topics": topics}


class BootstrapTopic(BaseModel):
    """Topic shape returned by the topics-and-queries bootstrap prompt."""

    model_config = ConfigDict(frozen=True)

    topic: str
    description: str = ""
    queries: list[str] = Field(default_factory=list)


class BootstrapTopics(BaseModel):
    model_config = ConfigDict(frozen=True)

    topics: list[BootstrapTopic] = Field(default_factory=list)
