"""Onboarding wizard shape populated by the prefill mapper.

Only the sections the mapper can seed are modelled. Every field is optional:
a section is either absent or carries the values that research found, with
``None`` for anything it did not.
"""

from __future__ import annotations

from enum import StrEnum

from aigos.models.base import CamelModel


class CompanySize(StrEnum):
    SOLO = "solo"
    MICRO = "1-10"
    SMALL = "11-50"
    MEDIUM = "51-200"
    LARGE = "201-1000"
    ENTERPRISE = "1000+"


class BusinessBasics(CamelModel):
    business_name: str | None = None
    website_url: str | None = None


class IdealCustomerProfile(CamelModel):
    primary_icp_description: str | None = None
    industry_vertical: str | None = None
    job_titles: str | None = None
    company_size: CompanySize | None = None
    geography: str | None = None


class ProductOffer(CamelModel):
    product_description: str | None = None
    core_deliverables: str | None = None
    value_prop: str | None = None
    pricing_details: str | None = None


class MarketCompetition(CamelModel):
    top_competitors: str | None = None
    unique_edge: str | None = None
    market_bottlenecks: str | None = None


class CustomerJourney(CamelModel):
    situation_before_buying: str | None = None
    desired_transformation: str | None = None
    common_objections: str | None = None


class BrandPositioning(CamelModel):
    brand_positioning: str | None = None
    customer_voice: str | None = None


class AssetsProof(CamelModel):
    case_studies_url: str | None = None
    testimonials_url: str | None = None
    landing_page_url: str | None = None
    pricing_page_url: str | None = None


class OnboardingPrefill(CamelModel):
    """Partial onboarding form data; absent sections are left to the user."""

    business_basics: BusinessBasics | None = None
    icp: IdealCustomerProfile | None = None
    product_offer: ProductOffer | None = None
    market_competition: MarketCompetition | None = None
    customer_journey: CustomerJourney | None = None
    brand_positioning: BrandPositioning | None = None
    assets_proof: AssetsProof | None = None

    @property
    def sections(self) -> list[str]:
        return [name for name in type(self).model_fields if getattr(self, name) is not None]
