"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic_ai import models

from aigos.config import Settings
from aigos.db import Database
from aigos.llm import StreamedObject
from aigos.models.research import CompanyResearchOutput, Confidence, ExtractionField
from aigos.models.scrape import BatchScrapeResult, ScrapeResult

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

# Safety net: block all real LLM API calls during tests.
# TestModel and FunctionModel are exempt from this check.
models.ALLOW_MODEL_REQUESTS = False


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        anthropic_api_key="test-key",
        firecrawl_api_key="",
        api_tokens={"test-token": "user_1", "other-token": "user_2"},
        data_dir=tmp_path,
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def db(tmp_path) -> Database:
    db = Database(tmp_path / "test.db")
    db.init_schema()
    yield db
    db.close()


def field(
    value: str | None,
    confidence: Confidence = Confidence.HIGH,
    source: str = "https://stripe.com",
    reasoning: str = "",
) -> ExtractionField:
    return ExtractionField(value=value, confidence=confidence, source=source, reasoning=reasoning)


class FakeScraper:
    """Batch scraper double returning canned markdown per URL."""

    def __init__(self, pages: dict[str, str] | None = None, available: bool = True) -> None:
        self.pages = pages or {}
        self.available = available
        self.calls: list[list[str]] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def batch_scrape(self, urls: list[str], timeout: float = 15.0) -> BatchScrapeResult:
        self.calls.append(list(urls))
        results = {}
        for url in urls:
            if url in self.pages:
                results[url] = ScrapeResult(success=True, markdown=self.pages[url], url=url)
            else:
                results[url] = ScrapeResult(success=False, url=url, error="HTTP 404")
        success = sum(1 for r in results.values() if r.success)
        return BatchScrapeResult(
            results=results, success_count=success, failure_count=len(urls) - success
        )


class FakeStreamLLM:
    """Structured-stream double that replays a fixed list of partials.

    The last partial is also delivered as the final object unless
    ``error`` is set, in which case it is raised after the partials.
    """

    def __init__(
        self,
        partials: list[CompanyResearchOutput],
        error: Exception | None = None,
    ) -> None:
        self.partials = partials
        self.error = error
        self.prompts: list[dict[str, object]] = []

    @property
    def is_available(self) -> bool:
        return True

    async def stream_object(
        self,
        prompt: str,
        output_type: type[CompanyResearchOutput],
        system: str = "",
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[StreamedObject[CompanyResearchOutput]]:
        self.prompts.append({"prompt": prompt, "system": system, "temperature": temperature})
        for partial in self.partials:
            yield StreamedObject(partial)
        if self.error is not None:
            raise self.error
        yield StreamedObject(self.partials[-1], final=True)


def stripe_research() -> CompanyResearchOutput:
    return CompanyResearchOutput(
        company_name=field("Stripe"),
        industry=field("Financial infrastructure / payments"),
        target_customers=field("Businesses of every size, from startups to enterprises"),
        company_size=field("5,000+ employees", source="https://linkedin.com/company/stripe"),
        headquarters_location=field(
            "South San Francisco, CA", source="https://linkedin.com/company/stripe"
        ),
        product_description=field("Payments infrastructure for the internet"),
        value_proposition=field("Financial infrastructure to grow your revenue [1]"),
        pricing=field("2.9% + 30c per successful card charge", source="https://stripe.com/pricing"),
        competitors=field(None, confidence=Confidence.LOW, source=""),
        pricing_url=field("https://stripe.com/pricing", source="https://stripe.com/pricing"),
        case_studies_url=field(
            "https://stripe.com/customers", source="https://stripe.com/customers"
        ),
        confidence_notes="Homepage and pricing were easy to find.",
    )


@pytest.fixture()
def stripe_output() -> CompanyResearchOutput:
    return stripe_research()


@pytest.fixture()
def make_scraper() -> type[FakeScraper]:
    return FakeScraper


@pytest.fixture()
def make_llm() -> type[FakeStreamLLM]:
    return FakeStreamLLM
