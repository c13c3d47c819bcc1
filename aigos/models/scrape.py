"""Scrape results returned by the batch-scrape collaborator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScrapeResult(BaseModel):
    """Outcome of scraping a single URL."""

    model_config = ConfigDict(frozen=True)

    success: bool
    markdown: str | None = None
    title: str | None = None
    url: str | None = Field(default=None, description="Final URL, may differ after redirects")
    error: str | None = None
    status_code: int | None = None


class BatchScrapeResult(BaseModel):
    """Per-URL results keyed by requested URL, in request order."""

    model_config = ConfigDict(frozen=True)

    results: dict[str, ScrapeResult] = Field(default_factory=dict)
    success_count: int = 0
    failure_count: int = 0


class PricingPageResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    found: bool
    url: str | None = None
    markdown: str | None = None
    title: str | None = None
    error: str | None = None
    attempted_urls: list[str] = Field(default_factory=list)
