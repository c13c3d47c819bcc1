"""Onboarding research endpoints: streamed research and one-shot prefill."""

from __future__ import annotations

from contextlib import aclosing
from typing import TYPE_CHECKING

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from aigos.api.deps import PrincipalDep, ResearchServiceDep
from aigos.api.schemas import ResearchRequest
from aigos.models.prefill import PrefillResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from aigos.streaming import ResearchStream

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


async def _ndjson(stream: ResearchStream) -> AsyncIterator[str]:
    """Serialize events one per line; a client disconnect closes the upstream."""
    try:
        async with aclosing(stream.events()) as events:
            async for event in events:
                yield event.model_dump_json(by_alias=True) + "\n"
    finally:
        stream.cancel()


@router.post("/research")
async def research_company(
    body: ResearchRequest,
    principal: PrincipalDep,
    service: ResearchServiceDep,
) -> StreamingResponse:
    """Stream research events as newline-delimited JSON.

    URL validation happens before the response starts, so malformed input
    gets a plain 400 instead of an error event.
    """
    stream = await service.start(body.website_url or "", body.linkedin_url)
    return StreamingResponse(
        _ndjson(stream),
        media_type=NDJSON_MEDIA_TYPE,
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/prefill", response_model=PrefillResponse)
async def prefill_company(
    body: ResearchRequest,
    principal: PrincipalDep,
    service: ResearchServiceDep,
) -> PrefillResponse:
    return await service.prefill(body.website_url or "", body.linkedin_url)
