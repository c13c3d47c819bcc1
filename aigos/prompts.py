"""Prompts for the company research extraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aigos.content import ScrapedContent

SYSTEM_PROMPT = """\
You are a factual business researcher. You ONLY extract verifiable information \
from real web sources.

You may be provided with SCRAPED WEBSITE CONTENT below. This is the actual \
HTML-to-markdown content of the company's website pages. \
Use it as your PRIMARY source for extraction.

ABSOLUTE RULES:
1. ONLY include information you can VERIFY from the scraped website content, \
LinkedIn page, or credible search results
2. If you cannot find a piece of information, the value MUST be null. \
NEVER guess, infer, or make up data
3. Every non-null value must have a real source URL where you found it. Do NOT fabricate URLs
4. Use the company's own words whenever possible: quote, don't paraphrase
5. Confidence must honestly reflect certainty (high, medium or low). Do NOT inflate it
6. For testimonial quotes, ONLY use real quotes found on the site with attribution
7. For competitor names, ONLY list competitors explicitly mentioned or clearly in the same market
8. For URLs (case studies, pricing, demo pages), ONLY include URLs that actually exist on the site
9. When scraped content is provided, prefer extracting from it over web search. \
It is the ground truth"""


class PromptVariant(StrEnum):
    SCRAPED = "scraped"
    SEARCH_ONLY = "search_only"


@dataclass(frozen=True, slots=True)
class ResearchPrompt:
    system: str
    user: str
    variant: PromptVariant


def build_research_prompt(
    website_url: str,
    linkedin_url: str | None,
    content: ScrapedContent,
) -> ResearchPrompt:
    """Assemble the system and user prompts for one research call."""
    lines = ["Research this company thoroughly:", f"- Website: {website_url}"]
    if linkedin_url:
        lines.append(f"- LinkedIn: {linkedin_url}")

    block = content.to_prompt_block()
    if block:
        variant = PromptVariant.SCRAPED
        lines += [
            "",
            block,
            "",
            "I have provided the actual scraped content from their website above. "
            "Extract information primarily from this content, and supplement with web search "
            "for anything not covered (e.g., LinkedIn data, competitor info).",
        ]
    else:
        variant = PromptVariant.SEARCH_ONLY
        lines += [
            "",
            "Visit the website and extract factual information for each field in the schema.",
        ]

    lines += [
        "For any field you cannot verify from actual sources, set the value to null.",
        "Be thorough but honest: a null value is better than a fabricated one.",
    ]
    return ResearchPrompt(system=SYSTEM_PROMPT, user="\n".join(lines), variant=variant)
