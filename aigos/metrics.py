"""Prometheus metric definitions for the research pipeline."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# --- Scraping ---

scrape_pages_total = Counter(
    "aigos_scrape_pages_total",
    "Website pages requested from the scraping service",
    labelnames=["status"],
)

scraped_chars = Histogram(
    "aigos_scraped_chars",
    "Characters of scraped content retained per research call",
    buckets=(0, 1000, 3000, 6000, 9000, 12000, 15000),
)

# --- Retry ---

retry_attempts_total = Counter(
    "aigos_retry_attempts_total",
    "Total retry attempts against external services",
    labelnames=["fn_name"],
)

retry_exhausted_total = Counter(
    "aigos_retry_exhausted_total",
    "Total times retries were exhausted",
    labelnames=["fn_name"],
)

# --- Research ---

research_runs_total = Counter(
    "aigos_research_runs_total",
    "Company research streams by terminal state",
    labelnames=["outcome", "mode"],
)

research_duration_seconds = Histogram(
    "aigos_research_duration_seconds",
    "Wall time of a company research stream",
    buckets=(1, 5, 10, 20, 30, 60, 90, 120),
)

# --- LLM tokens ---

llm_tokens_total = Counter(
    "aigos_llm_tokens_total",
    "Total LLM tokens consumed",
    labelnames=["model", "token_type"],
)
