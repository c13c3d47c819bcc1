"""Incremental consumption of a structured research stream.

The model emits the research object as a growing sequence of partial
objects. ``merge_partial`` folds each partial into the accumulated result
and ``ResearchStream`` exposes the latest state to callers as typed events
(``delta``, ``error``, ``done``).
"""

from __future__ import annotations

import re
import time
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_ai.exceptions import UnexpectedModelBehavior

from aigos.metrics import research_duration_seconds, research_runs_total
from aigos.models.base import CamelModel
from aigos.models.research import RESEARCH_FIELD_KEYS, CompanyResearchOutput, ExtractionField

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from aigos.llm import StreamedObject

logger = structlog.get_logger()

_CITATION_MARKER = re.compile(r"\[\d+\]")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ResearchError(Exception):
    """Base for failures that cross the research pipeline boundary."""

    code = "research_failed"


class ResearchValidationError(ResearchError):
    """The model output did not conform to the research schema."""

    code = "schema_validation_failed"


class ResearchStreamError(ResearchError):
    """The completion stream failed (network, provider or internal error)."""

    code = "stream_failed"


def _as_research_error(exc: Exception) -> ResearchError:
    if isinstance(exc, ResearchError):
        return exc
    if isinstance(exc, (UnexpectedModelBehavior, ValidationError)):
        return ResearchValidationError(f"Model output failed validation: {exc}")
    return ResearchStreamError("Research stream failed")


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TokenUsage(CamelModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class DeltaEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["delta"] = "delta"
    partial: CompanyResearchOutput


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    code: str
    error: str


class DoneEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["done"] = "done"
    output: CompanyResearchOutput
    usage: TokenUsage | None = None


StreamEvent = Annotated[DeltaEvent | ErrorEvent | DoneEvent, Field(discriminator="type")]


class ResearchState(StrEnum):
    IDLE = "idle"
    SUBMITTED = "submitted"
    STREAMING = "streaming"
    RESOLVED = "resolved"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ResearchState.RESOLVED, ResearchState.ERRORED, ResearchState.CANCELLED)


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def _merge_field(
    current: ExtractionField | None, incoming: ExtractionField | None
) -> ExtractionField | None:
    if incoming is None:
        return current
    if current is None:
        return incoming
    if not incoming.has_value:
        # A populated field never reverts to null; an empty one may gain reasoning.
        if current.has_value:
            return current
        return incoming
    if not current.has_value:
        return incoming
    confidence = (
        incoming.confidence
        if incoming.confidence.rank >= current.confidence.rank
        else current.confidence
    )
    return ExtractionField(
        value=incoming.value,
        confidence=confidence,
        source=incoming.source or current.source,
        reasoning=incoming.reasoning or current.reasoning,
    )


def merge_partial(
    current: CompanyResearchOutput | None, incoming: CompanyResearchOutput
) -> CompanyResearchOutput:
    """Fold one partial object into the accumulated research result.

    Per field: null or absent never overwrites a value, the newest non-null
    value wins, and confidence never drops below the best tier already seen.
    """
    if current is None:
        return incoming
    merged = {
        key: _merge_field(current.field(key), incoming.field(key)) for key in RESEARCH_FIELD_KEYS
    }
    notes = incoming.confidence_notes or current.confidence_notes
    return CompanyResearchOutput(**merged, confidence_notes=notes)


def _clean_value(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = _CITATION_MARKER.sub("", value).strip()
    return cleaned or None


def finalize_output(output: CompanyResearchOutput) -> CompanyResearchOutput:
    """Enforce the evidence rules on a completed research object.

    Inline citation markers such as ``[2]`` are stripped, blank values become
    null and a value with no source is dropped to null.
    """
    fields: dict[str, ExtractionField | None] = {}
    for key in RESEARCH_FIELD_KEYS:
        extraction = output.field(key)
        if extraction is None:
            fields[key] = None
            continue
        value = _clean_value(extraction.value)
        source = extraction.source.strip()
        if value is not None and not source:
            logger.warning("Dropping unsourced research value", field=key)
            value = None
        fields[key] = extraction.model_copy(update={"value": value, "source": source})
    return CompanyResearchOutput(**fields, confidence_notes=output.confidence_notes.strip())


# ---------------------------------------------------------------------------
# Consumer
# ---------------------------------------------------------------------------


class ResearchStream:
    """Consumes one structured research stream.

    ``partial``, ``state``, ``is_loading`` and ``error`` can be read at any
    time without blocking. ``events()`` drives the stream and may be
    iterated once. ``cancel()`` is cooperative: delivery stops at the next
    event boundary and already delivered partials stay delivered.
    """

    def __init__(
        self,
        source: AsyncIterator[StreamedObject[CompanyResearchOutput]],
        *,
        mode: str = "search_only",
    ) -> None:
        self._source = source
        self._mode = mode
        self._state = ResearchState.SUBMITTED
        self._partial: CompanyResearchOutput | None = None
        self._result: CompanyResearchOutput | None = None
        self._error: ResearchError | None = None
        self._consumed = False

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def state(self) -> ResearchState:
        return self._state

    @property
    def partial(self) -> CompanyResearchOutput | None:
        return self._partial

    @property
    def result(self) -> CompanyResearchOutput | None:
        return self._result

    @property
    def error(self) -> ResearchError | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._state in (ResearchState.SUBMITTED, ResearchState.STREAMING)

    def cancel(self) -> None:
        """Move to ``cancelled`` now. No effect once the stream is terminal.

        A consumer blocked on the upstream stops at the next chunk without
        delivering it; the upstream is closed when ``events()`` unwinds.
        """
        if self._state.is_terminal:
            return
        self._finish(ResearchState.CANCELLED)

    async def events(self) -> AsyncIterator[DeltaEvent | ErrorEvent | DoneEvent]:
        """Drive the stream, yielding a delta per partial and one terminal event."""
        if self._consumed:
            raise RuntimeError("ResearchStream.events() can only be iterated once")
        self._consumed = True
        if self._state.is_terminal:
            return

        started = time.monotonic()
        try:
            async for item in self._source:
                if self._state.is_terminal:
                    return
                if item.final:
                    result = finalize_output(merge_partial(self._partial, item.output))
                    self._partial = result
                    self._result = result
                    self._finish(ResearchState.RESOLVED)
                    usage = None
                    if item.usage is not None:
                        usage = TokenUsage(
                            input_tokens=item.usage.input_tokens or 0,
                            output_tokens=item.usage.output_tokens or 0,
                            total_tokens=item.usage.total_tokens or 0,
                        )
                    yield DoneEvent(output=result, usage=usage)
                    return
                self._state = ResearchState.STREAMING
                self._partial = merge_partial(self._partial, item.output)
                yield DeltaEvent(partial=self._partial)
                if self._state.is_terminal:
                    return
            if not self._state.is_terminal:
                raise ResearchStreamError("Stream ended without a final object")
        except Exception as exc:
            # A cancelled stream stays cancelled whatever the upstream does next.
            if not self._state.is_terminal:
                yield self._fail(_as_research_error(exc), exc)
        except BaseException:
            # Consumer went away (generator closed or task cancelled).
            if not self._state.is_terminal:
                self._finish(ResearchState.CANCELLED)
            raise
        finally:
            research_duration_seconds.observe(time.monotonic() - started)
            await self._close_source()

    async def wait(self) -> CompanyResearchOutput:
        """Consume the stream and return the result, raising its error."""
        async for _event in self.events():
            pass
        if self._error is not None:
            raise self._error
        if self._result is None:
            raise ResearchStreamError("Research was cancelled")
        return self._result

    def _fail(self, error: ResearchError, cause: Exception) -> ErrorEvent:
        self._error = error
        self._finish(ResearchState.ERRORED)
        logger.error(
            "Research stream failed",
            code=error.code,
            error=str(cause)[:500],
            error_type=type(cause).__name__,
        )
        return ErrorEvent(code=error.code, error=str(error))

    def _finish(self, state: ResearchState) -> None:
        self._state = state
        outcome = state.value
        research_runs_total.labels(outcome=outcome, mode=self._mode).inc()
        logger.info("Research stream finished", state=outcome, mode=self._mode)

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is not None:
            await aclose()
