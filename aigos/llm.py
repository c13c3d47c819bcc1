"""Streaming structured completions through PydanticAI and Anthropic.

The agent validates the growing tool-call arguments against the output
schema and ``stream_object`` yields every partial object it manages to
build, followed by the fully validated result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog
from pydantic import BaseModel
from pydantic_ai.models.anthropic import AnthropicModelSettings

from aigos.config import Settings
from aigos.metrics import llm_tokens_total

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pydantic_ai.models import Model
    from pydantic_ai.usage import RunUsage

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

DEFAULT_SYSTEM_PROMPT = "You are a meticulous B2B market research analyst."


@dataclass(frozen=True, slots=True)
class StreamedObject(Generic[T]):
    """One item of a structured stream: a partial object, or the final one."""

    output: T
    final: bool = False
    usage: RunUsage | None = None


def _token_counts(usage: RunUsage) -> dict[str, int]:
    return {
        "request": usage.input_tokens or 0,
        "response": usage.output_tokens or 0,
        "cache_read": usage.cache_read_tokens or 0,
        "cache_write": usage.cache_write_tokens or 0,
    }


class LLMClient:
    """Anthropic-backed implementation of the structured streaming port."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._model: Model | None = None

    @property
    def is_available(self) -> bool:
        return bool(self.settings.anthropic_api_key)

    @property
    def model(self) -> Model:
        # Built lazily so a missing key only matters once research is requested.
        if self._model is None:
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            self._model = AnthropicModel(
                self.settings.llm_model,
                provider=AnthropicProvider(api_key=self.settings.anthropic_api_key),
            )
        return self._model

    def model_settings(
        self,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AnthropicModelSettings:
        """Per-call settings; the system prompt is cached across research runs."""
        return AnthropicModelSettings(
            temperature=self.settings.llm_temperature if temperature is None else temperature,
            max_tokens=self.settings.llm_max_tokens if max_tokens is None else max_tokens,
            timeout=self.settings.llm_timeout_s,
            anthropic_cache_instructions=True,
        )

    def _record_usage(self, output_type: str, usage: RunUsage) -> None:
        counts = _token_counts(usage)
        for token_type, count in counts.items():
            llm_tokens_total.labels(model=self.settings.llm_model, token_type=token_type).inc(count)
        logger.info(
            "LLM stream complete",
            model=self.settings.llm_model,
            output_type=output_type,
            total_tokens=usage.total_tokens,
            **{f"{k}_tokens": v for k, v in counts.items()},
        )

    async def stream_object(
        self,
        prompt: str,
        output_type: type[T],
        system: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[StreamedObject[T]]:
        """Stream a schema-constrained completion.

        Yields a ``StreamedObject`` per partial object and a last one with
        ``final=True`` carrying the validated output and token usage.
        Output that cannot be validated raises PydanticAI's
        ``UnexpectedModelBehavior``; transport failures raise the provider's
        HTTP errors. Nothing is retried here.
        """
        from pydantic_ai import Agent

        agent: Agent[None, T] = Agent(
            self.model,
            output_type=output_type,
            system_prompt=system or DEFAULT_SYSTEM_PROMPT,
        )
        logger.debug(
            "LLM stream start",
            model=self.settings.llm_model,
            output_type=output_type.__name__,
            prompt_chars=len(prompt),
        )

        settings = self.model_settings(temperature, max_tokens)
        async with agent.run_stream(prompt, model_settings=settings) as stream:
            async for partial in stream.stream_output(debounce_by=None):
                yield StreamedObject(partial)
            output: T = await stream.get_output()
            usage = stream.usage()

        self._record_usage(output_type.__name__, usage)
        yield StreamedObject(output, final=True, usage=usage)
