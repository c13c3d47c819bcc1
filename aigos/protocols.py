"""Port interfaces (Protocols) for the external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from pydantic import BaseModel

    from aigos.auth import Principal
    from aigos.llm import StreamedObject
    from aigos.models.scrape import BatchScrapeResult


@runtime_checkable
class ScrapeClientPort(Protocol):
    """Batch-scrape capability (Firecrawl or a test double)."""

    @property
    def is_available(self) -> bool: ...

    async def batch_scrape(self, urls: list[str], timeout: float = ...) -> BatchScrapeResult: ...


@runtime_checkable
class StructuredStreamPort(Protocol):
    """Schema-constrained completion that streams partial objects."""

    @property
    def is_available(self) -> bool: ...

    def stream_object(
        self,
        prompt: str,
        output_type: type[BaseModel],
        system: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[StreamedObject[BaseModel]]: ...


@runtime_checkable
class TokenVerifierPort(Protocol):
    """Turns an opaque bearer token into a principal, or None if unknown."""

    def verify(self, token: str) -> Principal | None: ...
