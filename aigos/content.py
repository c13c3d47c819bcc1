"""Website content collection for company research.

Scrapes a fixed set of likely-informative pages and trims them to a
character budget so the prompt stays within token limits. Scraping is
optional: an unconfigured scraper yields empty content and the caller
switches to search-only prompting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict, Field

from aigos.metrics import scraped_chars
from aigos.urls import base_url

if TYPE_CHECKING:
    from aigos.protocols import ScrapeClientPort

logger = structlog.get_logger()

# Homepage first; under truncation earlier pages win.
SCRAPE_PATHS: tuple[str, ...] = (
    "",
    "/about",
    "/about-us",
    "/pricing",
    "/features",
    "/products",
    "/customers",
    "/case-studies",
)

SCRAPE_TIMEOUT_S = 15.0
MAX_PAGE_CHARS = 3000
MAX_TOTAL_CHARS = 15000


class ScrapedPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    name: str
    content: str


class ScrapedContent(BaseModel):
    """Budgeted website content gathered for one research call."""

    model_config = ConfigDict(frozen=True)

    pages: list[ScrapedPage] = Field(default_factory=list)
    attempted_urls: list[str] = Field(default_factory=list)
    success_count: int = 0
    failure_count: int = 0

    @property
    def has_content(self) -> bool:
        return bool(self.pages)

    @property
    def total_chars(self) -> int:
        return sum(len(p.content) for p in self.pages)

    def to_prompt_block(self) -> str:
        """Render pages as the delimited block embedded in the user prompt."""
        if not self.pages:
            return ""
        sections = "\n\n".join(f"### {p.name} ({p.url})\n{p.content}" for p in self.pages)
        return (
            f"--- SCRAPED WEBSITE CONTENT ({len(self.pages)} pages) ---\n"
            "The following is real content scraped directly from the company's website. "
            "Use this as your primary source.\n\n"
            f"{sections}\n"
            "--- END SCRAPED CONTENT ---"
        )


class WebsiteContentFetcher:
    """Collects markdown for the candidate pages of one company website."""

    def __init__(
        self,
        scraper: ScrapeClientPort,
        *,
        paths: tuple[str, ...] = SCRAPE_PATHS,
        timeout: float = SCRAPE_TIMEOUT_S,
        max_page_chars: int = MAX_PAGE_CHARS,
        max_total_chars: int = MAX_TOTAL_CHARS,
    ) -> None:
        self.scraper = scraper
        self.paths = paths
        self.timeout = timeout
        self.max_page_chars = max_page_chars
        self.max_total_chars = max_total_chars

    def candidate_urls(self, website_url: str) -> list[str]:
        """Absolute URLs for every candidate path, de-duplicated in order."""
        root = base_url(website_url)
        return list(dict.fromkeys(f"{root}{path}" for path in self.paths))

    async def fetch(self, website_url: str) -> ScrapedContent:
        """Scrape the candidate pages and apply the character budget.

        Never raises: an unavailable scraper or an unexpected scraper error
        both produce empty content.
        """
        if not self.scraper.is_available:
            logger.info("Scraper not available, using search-only mode")
            return ScrapedContent()

        urls = self.candidate_urls(website_url)
        root = base_url(website_url)
        logger.info("Scraping website pages", base_url=root, pages=len(urls))

        try:
            batch = await self.scraper.batch_scrape(urls, timeout=self.timeout)
        except Exception as exc:
            logger.error("Website scraping failed", base_url=root, error=str(exc))
            return ScrapedContent(attempted_urls=urls, failure_count=len(urls))

        logger.info(
            "Website scraping complete",
            succeeded=batch.success_count,
            attempted=len(urls),
        )

        pages: list[ScrapedPage] = []
        total = 0
        for url in urls:
            result = batch.results.get(url)
            if result is None or not result.success or not result.markdown:
                continue
            remaining = self.max_total_chars - total
            if remaining <= 0:
                break
            content = result.markdown[: min(self.max_page_chars, remaining)]
            name = result.title or url.removeprefix(root) or "Homepage"
            pages.append(ScrapedPage(url=url, name=name, content=content))
            total += len(content)

        scraped_chars.observe(total)
        return ScrapedContent(
            pages=pages,
            attempted_urls=urls,
            success_count=batch.success_count,
            failure_count=batch.failure_count,
        )
