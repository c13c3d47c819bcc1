"""Company research orchestration.

Every call builds its own fetcher, prompt and stream; nothing is shared
between requests except the configured collaborators.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from aigos.clients.firecrawl import FirecrawlClient
from aigos.content import WebsiteContentFetcher
from aigos.llm import LLMClient
from aigos.mapper import collect_citations, count_fields_found, map_research_to_prefill
from aigos.models.prefill import DataSource, PrefillResponse, PrefillSummary
from aigos.models.research import TOTAL_FIELDS, CompanyResearchOutput
from aigos.prompts import PromptVariant, build_research_prompt
from aigos.streaming import ResearchStream
from aigos.urls import normalize_linkedin_url, normalize_website_url

if TYPE_CHECKING:
    from aigos.config import Settings
    from aigos.protocols import ScrapeClientPort, StructuredStreamPort

logger = structlog.get_logger()

SEARCH_ONLY_WARNING = (
    "Website content could not be scraped; results rely on web search and may be less complete."
)


class CompanyResearchService:
    def __init__(
        self,
        settings: Settings,
        scraper: ScrapeClientPort | None = None,
        llm: StructuredStreamPort | None = None,
    ) -> None:
        self.settings = settings
        self.scraper = scraper or FirecrawlClient(
            api_key=settings.firecrawl_api_key,
            base_url=settings.firecrawl_base_url,
            concurrency=settings.firecrawl_concurrency,
            max_retries=settings.firecrawl_max_retries,
        )
        self.llm = llm or LLMClient(settings)

    def _fetcher(self) -> WebsiteContentFetcher:
        return WebsiteContentFetcher(
            self.scraper,
            timeout=self.settings.scrape_timeout_s,
            max_page_chars=self.settings.scrape_max_page_chars,
            max_total_chars=self.settings.scrape_max_total_chars,
        )

    async def start(self, website_url: str, linkedin_url: str | None = None) -> ResearchStream:
        """Validate the URLs, gather website content and open the research stream.

        Raises:
            InvalidUrlError: before any network call, for malformed input.
        """
        website = normalize_website_url(website_url)
        linkedin = normalize_linkedin_url(linkedin_url)

        content = await self._fetcher().fetch(website)
        prompt = build_research_prompt(website, linkedin, content)
        logger.info(
            "Starting company research",
            website_url=website,
            has_linkedin=linkedin is not None,
            mode=prompt.variant.value,
            pages=len(content.pages),
            content_chars=content.total_chars,
        )

        source = self.llm.stream_object(
            prompt.user,
            CompanyResearchOutput,
            system=prompt.system,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
        )
        return ResearchStream(source, mode=prompt.variant.value)  # type: ignore[arg-type]

    async def prefill(self, website_url: str, linkedin_url: str | None = None) -> PrefillResponse:
        """Run research to completion and map it onto the onboarding sections.

        Raises:
            InvalidUrlError: for malformed input.
            ResearchValidationError: when the model output fails the schema.
            ResearchStreamError: for any other stream failure.
        """
        stream = await self.start(website_url, linkedin_url)
        research = await stream.wait()
        return build_prefill_response(research, stream.mode)


def build_prefill_response(
    research: CompanyResearchOutput, variant: PromptVariant | str
) -> PrefillResponse:
    """Map finished research onto the wizard sections and summarize coverage."""
    variant = PromptVariant(variant)
    found = count_fields_found(research)
    warnings: list[str] = []
    if variant is PromptVariant.SEARCH_ONLY:
        warnings.append(SEARCH_ONLY_WARNING)

    logger.info("Company research complete", fields_found=found, total=TOTAL_FIELDS)
    return PrefillResponse(
        research=research,
        prefilled=map_research_to_prefill(research),
        citations=collect_citations(research),
        summary=PrefillSummary(
            fields_found=found,
            fields_missing=TOTAL_FIELDS - found,
            primary_source=(
                DataSource.WEBSITE if variant is PromptVariant.SCRAPED else DataSource.SEARCH
            ),
        ),
        warnings=warnings,
    )
