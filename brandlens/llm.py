"""LLM client wrapper using PydanticAI over OpenAI and Anthropic.

Uses streaming by default to prevent network idle-timeout disconnections
on long-running requests (web-search backed completions can take a while).
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Literal, TypeVar

import structlog
from pydantic import BaseModel

from brandlens.config import Settings
from brandlens.metrics import llm_tokens_total

if TYPE_CHECKING:
    from pydantic_ai import Agent
    from pydantic_ai.models import Model
    from pydantic_ai.settings import ModelSettings
    from pydantic_ai.usage import RunUsage

logger = structlog.get_logger()

Vendor = Literal["openai", "anthropic"]
VENDORS: tuple[Vendor, ...] = ("openai", "anthropic")

T = TypeVar("T", bound=BaseModel)
# Unbounded TypeVar for the streaming helper (must accept both BaseModel and str)
_OutputT = TypeVar("_OutputT")


def _get_or_create_event_loop() -> asyncio.AbstractEventLoop:
    """Get the current event loop or create a new one."""
    try:
        loop = asyncio.get_event_loop()
        if loop.is_closed():
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
        return loop
    except RuntimeError:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        return loop


async def _run_streamed(
    agent: Agent[None, _OutputT],
    prompt: str,
    model_settings: ModelSettings,
) -> tuple[_OutputT, RunUsage]:
    """Run a PydanticAI agent in streaming mode and return the final output."""
    async with agent.run_stream(prompt, model_settings=model_settings) as stream:
        # Consume the stream so data keeps flowing on the connection
        async for _chunk in stream.stream_output():
            pass
        output: _OutputT = await stream.get_output()
        return output, stream.usage()


class LLMClient:
    """PydanticAI wrapper with per-vendor models and optional web search."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._models: dict[str, Model] = {}

    def model_name(self, vendor: Vendor = "openai", profile: bool = False) -> str:
        if vendor == "anthropic":
            return self.settings.anthropic_model
        return self.settings.openai_profile_model if profile else self.settings.openai_model

    def model(self, vendor: Vendor = "openai", profile: bool = False) -> Model:
        """Build (once) the PydanticAI model for a vendor."""
        key = f"{vendor}:profile" if profile and vendor == "openai" else vendor
        if key in self._models:
            return self._models[key]
        # Tests inject a single TestModel under the bare vendor key
        if vendor in self._models:
            return self._models[vendor]

        name = self.model_name(vendor, profile)
        if vendor == "anthropic":
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            built: Model = AnthropicModel(
                name, provider=AnthropicProvider(api_key=self.settings.anthropic_api_key)
            )
        elif vendor == "openai":
            from pydantic_ai.models.openai import OpenAIResponsesModel
            from pydantic_ai.providers.openai import OpenAIProvider

            built = OpenAIResponsesModel(
                name, provider=OpenAIProvider(api_key=self.settings.openai_api_key)
            )
        else:
            raise ValueError(f"Unknown LLM vendor: {vendor}")
        self._models[key] = built
        return built

    def _build_model_settings(
        self,
        vendor: Vendor = "openai",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ModelSettings:
        """Build model_settings; Anthropic gets prompt caching enabled."""
        temp = temperature if temperature is not None else self.settings.llm_temperature
        tokens = max_tokens if max_tokens is not None else self.settings.llm_max_tokens
        if vendor == "anthropic":
            from pydantic_ai.models.anthropic import AnthropicModelSettings

            return AnthropicModelSettings(
                temperature=temp,
                max_tokens=tokens,
                anthropic_cache_instructions=True,
            )
        from pydantic_ai.models.openai import OpenAIResponsesModelSettings

        return OpenAIResponsesModelSettings(temperature=temp, max_tokens=tokens)

    def _agent(
        self,
        vendor: Vendor,
        output_type: Any,
        system: str,
        web_search: bool | None = None,
        profile: bool = False,
    ) -> Agent[None, Any]:
        from pydantic_ai import Agent

        use_search = self.settings.llm_web_search if web_search is None else web_search
        kwargs: dict[str, Any] = {}
        if use_search:
            from pydantic_ai import WebSearchTool

            kwargs["builtin_tools"] = [WebSearchTool()]
        return Agent(
            self.model(vendor, profile),
            output_type=output_type,
            system_prompt=system or "You are a helpful assistant.",
            **kwargs,
        )

    def _log_and_record_usage(self, model_label: str, output_type: str, usage: RunUsage) -> None:
        """Log LLM usage and record Prometheus token counters."""
        logger.info(
            "LLM response",
            model=model_label,
            output_type=output_type,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            cache_read_tokens=usage.cache_read_tokens or 0,
        )
        llm_tokens_total.labels(model=model_label, token_type="request").inc(
            usage.input_tokens or 0
        )
        llm_tokens_total.labels(model=model_label, token_type="response").inc(
            usage.output_tokens or 0
        )
        llm_tokens_total.labels(model=model_label, token_type="cache_read").inc(
            usage.cache_read_tokens or 0
        )

    def generate(
        self,
        prompt: str,
        response_model: type[T],
        system: str = "",
        vendor: Vendor = "openai",
        temperature: float | None = None,
        max_tokens: int | None = None,
        web_search: bool | None = None,
        profile: bool = False,
    ) -> T:
        """Generate a structured response validated against ``response_model``."""
        agent: Agent[None, T] = self._agent(vendor, response_model, system, web_search, profile)
        model_settings = self._build_model_settings(vendor, temperature, max_tokens)
        label = self.model_name(vendor, profile)

        logger.debug(
            "LLM request",
            model=label,
            response_model=response_model.__name__,
            streaming=True,
        )

        loop = _get_or_create_event_loop()
        output, usage = loop.run_until_complete(_run_streamed(agent, prompt, model_settings))

        self._log_and_record_usage(label, response_model.__name__, usage)
        return output

    def generate_text(
        self,
        prompt: str,
        system: str = "",
        vendor: Vendor = "openai",
        temperature: float | None = None,
        max_tokens: int | None = None,
        web_search: bool | None = None,
    ) -> str:
        """Generate a plain text response (callers parse JSON themselves)."""
        agent: Agent[None, str] = self._agent(vendor, str, system, web_search)
        model_settings = self._build_model_settings(vendor, temperature, max_tokens)
        label = self.model_name(vendor)

        logger.debug("LLM request", model=label, response_model="str", streaming=True)

        loop = _get_or_create_event_loop()
        output, usage = loop.run_until_complete(_run_streamed(agent, prompt, model_settings))

        self._log_and_record_usage(label, "str", usage)
        return output

    async def stream_text(
        self,
        prompt: str,
        system: str = "",
        vendor: Vendor = "openai",
        temperature: float | None = None,
        max_tokens: int | None = None,
        web_search: bool | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them."""
        agent: Agent[None, str] = self._agent(vendor, str, system, web_search)
        model_settings = self._build_model_settings(vendor, temperature, max_tokens)
        label = self.model_name(vendor)

        logger.debug("LLM stream", model=label)
        async with agent.run_stream(prompt, model_settings=model_settings) as stream:
            async for delta in stream.stream_text(delta=True):
                yield delta
            usage = stream.usage()
        self._log_and_record_usage(label, "stream", usage)

    def is_available(self, vendor: Vendor = "openai") -> bool:
        if vendor in self._models:
            return True
        if vendor == "anthropic":
            return bool(self.settings.anthropic_api_key)
        return bool(self.settings.openai_api_key)
