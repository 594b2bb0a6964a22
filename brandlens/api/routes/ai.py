"""AI endpoints: streamed chat and wizard completions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import HttpUrl, TypeAdapter, ValidationError

from brandlens import prompts
from brandlens.api.deps import CurrentUserDep, GeneratorDep, LLMDep
from brandlens.api.schemas import (
    CompanyCompletionRequest,
    PromptRequest,
    QueryCompletionRequest,
    SuggestedTopicsRequest,
)
from brandlens.text import normalize_website_url

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from brandlens.llm import LLMClient, Vendor

router = APIRouter(prefix="/ai", tags=["ai"])

logger = structlog.get_logger()

_http_url: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)

PROMPT_REQUIRED = "Prompt is required"
URL_REQUIRED = "Company website url is required"
URL_INVALID = "Invalid company website url"
NAMES_REQUIRED = "Company name and topic name are required"


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": error})


def _stream(llm: LLMClient, prompt: str, system: str, vendor: Vendor) -> StreamingResponse:
    async def _chunks() -> AsyncIterator[str]:
        async for delta in llm.stream_text(prompt, system=system, vendor=vendor):
            yield delta

    logger.info("Chat stream started", vendor=vendor, prompt_length=len(prompt))
    return StreamingResponse(_chunks(), media_type="text/plain; charset=utf-8")


def _website(raw: str) -> str | JSONResponse:
    if not raw.strip():
        return _bad_request(URL_REQUIRED)
    url = normalize_website_url(raw)
    try:
        _http_url.validate_python(url)
    except ValidationError:
        return _bad_request(URL_INVALID)
    return url


@router.post("/chat/chatgpt", response_model=None)
def chat_chatgpt(body: PromptRequest, llm: LLMDep, _user: CurrentUserDep) -> Any:
    if not body.prompt.strip():
        return _bad_request(PROMPT_REQUIRED)
    return _stream(llm, body.prompt, prompts.CHATGPT_PROMPT, "openai")


@router.post("/chat/claude", response_model=None)
def chat_claude(body: PromptRequest, llm: LLMDep, _user: CurrentUserDep) -> Any:
    if not body.prompt.strip():
        return _bad_request(PROMPT_REQUIRED)
    return _stream(llm, body.prompt, prompts.CLAUDE_PROMPT, "anthropic")


@router.post("/completion/company", response_model=None)
def complete_company(
    body: CompanyCompletionRequest, generator: GeneratorDep, _user: CurrentUserDep
) -> Any:
    """Company profile for a website, researched with web search."""
    website = _website(body.websiteUrl)
    if isinstance(website, JSONResponse):
        return website
    profile = generator.company_profile(website)
    return profile.model_dump(mode="json")


@router.post("/completion/suggested-topics", response_model=None)
def complete_suggested_topics(
    body: SuggestedTopicsRequest, generator: GeneratorDep, _user: CurrentUserDep
) -> Any:
    """Starter topics (each with typed queries) for the onboarding wizard."""
    website = _website(body.websiteUrl)
    if isinstance(website, JSONResponse):
        return website
    suggested = generator.suggest_topics(
        website,
        name=body.name,
        country=body.country,
        language=body.language,
        sector=body.sector,
        description=body.description,
    )
    return suggested.model_dump(mode="json", by_alias=True)


@router.post("/completion/query", response_model=None)
def complete_query(
    body: QueryCompletionRequest, generator: GeneratorDep, _user: CurrentUserDep
) -> Any:
    if not body.companyName.strip() or not body.topicName.strip():
        return _bad_request(NAMES_REQUIRED)
    query = generator.single_query(
        body.companyName,
        body.topicName,
        topic_description=body.topicDescription,
        company_description=body.companyDescription,
        existing_queries=[q.model_dump() for q in body.existingQueries],
    )
    return query.model_dump(mode="json", by_alias=True)
