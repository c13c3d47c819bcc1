"""Company research extraction schema.

Every field carries provenance: the extracted value, a confidence tier and
the source it was found at. The descriptions are part of the schema sent to
the model and reinforce factual-only extraction.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from aigos.models.base import CamelModel


class Confidence(StrEnum):
    """Qualitative certainty of an extracted value.

    - high: explicitly stated in the source
    - medium: strongly implied or partially found
    - low: inferred from limited context
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {Confidence.LOW: 0, Confidence.MEDIUM: 1, Confidence.HIGH: 2}


class ExtractionField(CamelModel):
    """A single researched field with confidence and source attribution."""

    value: str | None = Field(
        default=None,
        description=(
            "The extracted value. MUST be null if not found in actual sources. "
            "NEVER guess, infer, or fabricate."
        ),
    )
    confidence: Confidence = Field(
        default=Confidence.LOW,
        description=(
            "high = directly quoted or stated on the website or LinkedIn. "
            "medium = clearly implied by content you read. "
            "low = partially found, interpretation needed. Use low when value is null."
        ),
    )
    source: str = Field(
        default="",
        description=(
            "The specific URL where you found this information "
            '(e.g., "https://example.com/about"). Empty if value is null. '
            "Do NOT fabricate URLs."
        ),
    )
    reasoning: str = Field(
        default="",
        description=(
            "One sentence explaining where you found this or why it is null, "
            'e.g. "Found on the homepage hero section".'
        ),
    )

    @property
    def has_value(self) -> bool:
        return self.value is not None and self.value.strip() != ""


_Field = ExtractionField | None


class CompanyResearchOutput(CamelModel):
    """Company research extraction.

    ONLY information verifiable from the website, LinkedIn page or search
    results. Unverifiable fields MUST have a null value. Every non-null value
    must cite a source URL. Prefer the company's own words.
    """

    # Business basics
    company_name: _Field = Field(
        default=None,
        description="Official company name exactly as displayed on their website.",
    )
    industry: _Field = Field(
        default=None,
        description='Primary industry or vertical (e.g., "B2B SaaS", "Healthcare IT").',
    )

    # Ideal customer profile
    target_customers: _Field = Field(
        default=None,
        description="Who they sell to: industries, company types or personas stated on their site.",
    )
    target_job_titles: _Field = Field(
        default=None,
        description=(
            "Job titles they target, only if mentioned in copy, case studies or "
            "testimonials."
        ),
    )
    company_size: _Field = Field(
        default=None,
        description=(
            'Employee count or range from LinkedIn or their website (e.g., "51-200 '
            'employees").'
        ),
    )
    headquarters_location: _Field = Field(
        default=None,
        description="City and country of headquarters from the footer, about page or LinkedIn.",
    )

    # Product and offer
    product_description: _Field = Field(
        default=None,
        description="What their product or service does, in THEIR words.",
    )
    core_features: _Field = Field(
        default=None,
        description="Main features or deliverables they highlight on their features/product page.",
    )
    value_proposition: _Field = Field(
        default=None,
        description=(
            "Main value prop, tagline or hero statement, quoted from the homepage if "
            "possible."
        ),
    )
    pricing: _Field = Field(
        default=None,
        description="Plan names and prices, ONLY if publicly visible. null if no public pricing.",
    )

    # Market and competition
    competitors: _Field = Field(
        default=None,
        description=(
            "Named competitors ONLY if mentioned on their site or clearly in the same "
            "market."
        ),
    )
    unique_differentiator: _Field = Field(
        default=None,
        description='What they claim makes them different, from "why us" or comparison pages.',
    )
    market_problem: _Field = Field(
        default=None,
        description="The problem they say they solve, using their framing.",
    )

    # Customer journey
    customer_transformation: _Field = Field(
        default=None,
        description="The outcome they promise customers, from case studies or testimonials.",
    )
    common_objections: _Field = Field(
        default=None,
        description="Objections addressed on their site (FAQ sections). null if none found.",
    )

    # Brand and positioning
    brand_positioning: _Field = Field(
        default=None,
        description="How they position themselves, from their about page or homepage.",
    )
    testimonial_quote: _Field = Field(
        default=None,
        description="A real customer testimonial quote with attribution. NEVER fabricate quotes.",
    )

    # Detected asset URLs
    case_studies_url: _Field = Field(
        default=None,
        description="URL of their case studies page if it exists on the site.",
    )
    testimonials_url: _Field = Field(
        default=None,
        description="URL of their testimonials or reviews page if it exists.",
    )
    pricing_url: _Field = Field(
        default=None,
        description="URL of their pricing page if it exists.",
    )
    demo_url: _Field = Field(
        default=None,
        description="URL of their demo, free trial or signup page if it exists.",
    )

    confidence_notes: str = Field(
        default="",
        description=(
            "2-3 sentences on what was easy vs. hard to find. Note inaccessible or "
            "content-light pages. Be honest about gaps."
        ),
    )

    def field(self, key: str) -> ExtractionField | None:
        """Return the extraction for one of RESEARCH_FIELD_KEYS."""
        if key not in RESEARCH_FIELD_KEYS:
            raise KeyError(key)
        result: ExtractionField | None = getattr(self, key)
        return result

    def value(self, key: str) -> str | None:
        """Return the stripped value of a field, or None when empty."""
        extraction = self.field(key)
        if extraction is None or not extraction.has_value:
            return None
        assert extraction.value is not None
        return extraction.value.strip()


RESEARCH_FIELD_KEYS: tuple[str, ...] = (
    "company_name",
    "industry",
    "target_customers",
    "target_job_titles",
    "company_size",
    "headquarters_location",
    "product_description",
    "core_features",
    "value_proposition",
    "pricing",
    "competitors",
    "unique_differentiator",
    "market_problem",
    "customer_transformation",
    "common_objections",
    "brand_positioning",
    "testimonial_quote",
    "case_studies_url",
    "testimonials_url",
    "pricing_url",
    "demo_url",
)

TOTAL_FIELDS = len(RESEARCH_FIELD_KEYS)
