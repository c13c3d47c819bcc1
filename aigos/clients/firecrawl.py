"""Client for the Firecrawl scrape API.

Firecrawl renders a page (JavaScript included) and returns it as markdown.
Graceful degradation: without an API key every method returns failure
results without touching the network. Callers that need to know upfront
check ``is_available``.
"""

from __future__ import annotations

import asyncio
from urllib.parse import urlsplit

import httpx
import structlog
from typing_extensions import NotRequired, TypedDict

from aigos.metrics import scrape_pages_total
from aigos.models.scrape import BatchScrapeResult, PricingPageResult, ScrapeResult
from aigos.retry import RetryExhaustedError, async_with_retry

logger = structlog.get_logger()

DEFAULT_TIMEOUT_S = 30.0
PRICING_PATHS = ("/pricing", "/plans", "/buy")
_TRANSIENT_STATUS = frozenset({408, 429, 502, 503, 504})
_NOT_CONFIGURED = "Firecrawl not available: FIRECRAWL_API_KEY not configured"


class FirecrawlMetadata(TypedDict, total=False):
    title: str
    url: str
    sourceURL: str
    statusCode: int


class FirecrawlDocument(TypedDict, total=False):
    markdown: str
    metadata: FirecrawlMetadata


class FirecrawlScrapeResponse(TypedDict):
    success: bool
    data: NotRequired[FirecrawlDocument]


class TransientScrapeError(Exception):
    """Firecrawl answered with a status worth retrying."""

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


def _parse_retry_after(value: str | None) -> float | None:
    """Seconds from a numeric Retry-After header; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def _parse_document(
    data: FirecrawlScrapeResponse,
) -> tuple[str, str | None, str | None, int | None]:
    """Pull markdown, title, final URL and status code out of a scrape response."""
    doc = data.get("data")
    if not isinstance(doc, dict):
        return "", None, None, None
    markdown = doc.get("markdown")
    metadata = doc.get("metadata")
    title: str | None = None
    final_url: str | None = None
    status_code: int | None = None
    if isinstance(metadata, dict):
        raw_title = metadata.get("title")
        title = str(raw_title) if raw_title else None
        raw_url = metadata.get("url") or metadata.get("sourceURL")
        final_url = str(raw_url) if raw_url else None
        raw_status = metadata.get("statusCode")
        status_code = raw_status if isinstance(raw_status, int) else None
    return (str(markdown) if markdown else ""), title, final_url, status_code


class FirecrawlClient:
    """Firecrawl v1 API client with bounded concurrency for batches."""

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.firecrawl.dev/v1",
        concurrency: int = 3,
        max_retries: int = 2,
        retry_base_delay: float = 1.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.concurrency = max(1, concurrency)
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    async def scrape(self, url: str, timeout: float = DEFAULT_TIMEOUT_S) -> ScrapeResult:
        """Scrape a single URL to markdown. Never raises."""
        if not self.is_available:
            return ScrapeResult(success=False, url=url, error=_NOT_CONFIGURED)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await self._scrape_with(client, url, timeout)

    async def batch_scrape(
        self, urls: list[str], timeout: float = DEFAULT_TIMEOUT_S
    ) -> BatchScrapeResult:
        """Scrape *urls* in parallel, at most ``concurrency`` at a time.

        A slow or failing page is recorded as a failure for that URL and
        never fails the batch.
        """
        if not self.is_available:
            return BatchScrapeResult(
                results={
                    u: ScrapeResult(success=False, url=u, error=_NOT_CONFIGURED) for u in urls
                },
                success_count=0,
                failure_count=len(urls),
            )

        semaphore = asyncio.Semaphore(self.concurrency)

        async with httpx.AsyncClient(timeout=timeout) as client:

            async def _bounded(url: str) -> ScrapeResult:
                async with semaphore:
                    return await self._scrape_with(client, url, timeout)

            scraped = await asyncio.gather(*(_bounded(u) for u in urls))

        results = dict(zip(urls, scraped, strict=True))
        success_count = sum(1 for r in results.values() if r.success)
        return BatchScrapeResult(
            results=results,
            success_count=success_count,
            failure_count=len(results) - success_count,
        )

    async def scrape_pricing_page(self, website_url: str) -> PricingPageResult:
        """Try the usual pricing paths in order and return the first hit."""
        if not self.is_available:
            return PricingPageResult(found=False, error=_NOT_CONFIGURED)

        parts = urlsplit(website_url if "://" in website_url else f"https://{website_url}")
        base = f"{parts.scheme}://{parts.netloc}"
        attempted: list[str] = []

        for path in PRICING_PATHS:
            url = f"{base}{path}"
            attempted.append(url)
            result = await self.scrape(url)
            if result.success and result.markdown:
                logger.info("Found pricing page", url=url, chars=len(result.markdown))
                return PricingPageResult(
                    found=True,
                    url=result.url or url,
                    markdown=result.markdown,
                    title=result.title,
                    attempted_urls=attempted,
                )
            logger.debug("Pricing path failed", path=path, error=result.error)

        logger.warning("No pricing page found", base_url=base)
        return PricingPageResult(
            found=False,
            error=f"No pricing page found. Tried: {', '.join(PRICING_PATHS)}",
            attempted_urls=attempted,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _request(
        self, client: httpx.AsyncClient, url: str, timeout: float
    ) -> FirecrawlScrapeResponse:
        resp = await client.post(
            f"{self.base_url}/scrape",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={
                "url": url,
                "formats": ["markdown"],
                "onlyMainContent": True,
                "timeout": int(timeout * 1000),
            },
        )
        if resp.status_code in _TRANSIENT_STATUS:
            raise TransientScrapeError(
                f"HTTP {resp.status_code} from Firecrawl",
                retry_after=_parse_retry_after(resp.headers.get("Retry-After")),
            )
        resp.raise_for_status()
        data: FirecrawlScrapeResponse = resp.json()
        return data

    async def _scrape_with(
        self, client: httpx.AsyncClient, url: str, timeout: float
    ) -> ScrapeResult:
        try:
            async with asyncio.timeout(timeout):
                data = await async_with_retry(
                    lambda: self._request(client, url, timeout),
                    max_retries=self.max_retries,
                    base_delay=self.retry_base_delay,
                    retryable=(httpx.TransportError, TransientScrapeError),
                    label="firecrawl_scrape",
                )
        except TimeoutError:
            logger.warning("Scrape timed out", url=url, timeout_s=timeout)
            return self._failure(url, f"Request timed out after {timeout}s")
        except RetryExhaustedError as exc:
            cause = exc.__cause__ or exc
            logger.warning("Scrape retries exhausted", url=url, error=str(cause))
            return self._failure(url, str(cause))
        except httpx.HTTPStatusError as exc:
            logger.warning("Scrape failed", url=url, status=exc.response.status_code)
            return self._failure(url, f"HTTP {exc.response.status_code}", exc.response.status_code)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Scrape failed", url=url, error=str(exc))
            return self._failure(url, str(exc))

        markdown, title, final_url, status_code = _parse_document(data)
        if not markdown.strip():
            return self._failure(url, "Scrape returned empty content", status_code)

        word_count = len(markdown.split())
        if word_count < 100:
            logger.warning("Low word count, page may not have rendered", url=url, words=word_count)

        scrape_pages_total.labels(status="success").inc()
        return ScrapeResult(
            success=True,
            markdown=markdown,
            title=title,
            url=final_url or url,
            status_code=status_code,
        )

    @staticmethod
    def _failure(url: str, error: str, status_code: int | None = None) -> ScrapeResult:
        scrape_pages_total.labels(status="failure").inc()
        return ScrapeResult(success=False, url=url, error=error, status_code=status_code)
