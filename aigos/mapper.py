"""Map research output onto the onboarding wizard sections.

A section is emitted only when one of its trigger fields was found. The
remaining fields of an emitted section are filled opportunistically and
are ``None`` when research did not find them.
"""

from __future__ import annotations

import re

from aigos.models.onboarding import (
    AssetsProof,
    BrandPositioning,
    BusinessBasics,
    CompanySize,
    CustomerJourney,
    IdealCustomerProfile,
    MarketCompetition,
    OnboardingPrefill,
    ProductOffer,
)
from aigos.models.research import RESEARCH_FIELD_KEYS, TOTAL_FIELDS, CompanyResearchOutput

__all__ = [
    "TOTAL_FIELDS",
    "collect_citations",
    "count_fields_found",
    "map_research_to_prefill",
    "parse_company_size",
]

_NUMBER = re.compile(r"\d+")


def parse_company_size(text: str | None) -> CompanySize | None:
    """Bucket a free-text employee count, using the largest number present.

    >>> parse_company_size("1,500 people")
    <CompanySize.ENTERPRISE: '1000+'>
    """
    if not text:
        return None
    numbers = [int(n) for n in _NUMBER.findall(text.replace(",", ""))]
    if not numbers:
        return None
    size = max(numbers)
    if size <= 1:
        return CompanySize.SOLO
    if size <= 10:
        return CompanySize.MICRO
    if size <= 50:
        return CompanySize.SMALL
    if size <= 200:
        return CompanySize.MEDIUM
    if size <= 1000:
        return CompanySize.LARGE
    return CompanySize.ENTERPRISE


def map_research_to_prefill(research: CompanyResearchOutput) -> OnboardingPrefill:
    v = research.value

    business_basics = None
    if v("company_name"):
        business_basics = BusinessBasics(business_name=v("company_name"))

    icp = None
    if v("target_customers") or v("industry"):
        icp = IdealCustomerProfile(
            primary_icp_description=v("target_customers"),
            industry_vertical=v("industry"),
            job_titles=v("target_job_titles"),
            company_size=parse_company_size(v("company_size")),
            geography=v("headquarters_location"),
        )

    product_offer = None
    if v("product_description") or v("value_proposition"):
        product_offer = ProductOffer(
            product_description=v("product_description"),
            core_deliverables=v("core_features"),
            value_prop=v("value_proposition"),
            pricing_details=v("pricing"),
        )

    market_competition = None
    if v("competitors") or v("unique_differentiator"):
        market_competition = MarketCompetition(
            top_competitors=v("competitors"),
            unique_edge=v("unique_differentiator"),
            market_bottlenecks=v("market_problem"),
        )

    customer_journey = None
    if v("customer_transformation") or v("common_objections"):
        customer_journey = CustomerJourney(
            situation_before_buying=v("market_problem"),
            desired_transformation=v("customer_transformation"),
            common_objections=v("common_objections"),
        )

    brand_positioning = None
    if v("brand_positioning") or v("testimonial_quote"):
        brand_positioning = BrandPositioning(
            brand_positioning=v("brand_positioning"),
            customer_voice=v("testimonial_quote"),
        )

    assets_proof = None
    if v("case_studies_url") or v("testimonials_url") or v("demo_url"):
        assets_proof = AssetsProof(
            case_studies_url=v("case_studies_url"),
            testimonials_url=v("testimonials_url"),
            landing_page_url=v("demo_url"),
            pricing_page_url=v("pricing_url"),
        )

    return OnboardingPrefill(
        business_basics=business_basics,
        icp=icp,
        product_offer=product_offer,
        market_competition=market_competition,
        customer_journey=customer_journey,
        brand_positioning=brand_positioning,
        assets_proof=assets_proof,
    )


def count_fields_found(research: CompanyResearchOutput) -> int:
    return sum(1 for key in RESEARCH_FIELD_KEYS if research.value(key))


def collect_citations(research: CompanyResearchOutput) -> list[str]:
    """Distinct http(s) source URLs of populated fields, in field order."""
    seen: dict[str, None] = {}
    for key in RESEARCH_FIELD_KEYS:
        extraction = research.field(key)
        if extraction is None or not extraction.has_value:
            continue
        source = extraction.source.strip()
        if source.startswith(("http://", "https://")):
            seen.setdefault(source, None)
    return list(seen)
