"""Re-exports all Pydantic models."""

from aigos.models.base import CamelModel
from aigos.models.documents import (
    Blueprint,
    Conversation,
    MediaPlan,
    MediaPlanStatus,
    Message,
    MessageRole,
    SharedBlueprint,
)
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
from aigos.models.prefill import DataSource, PrefillResponse, PrefillSummary
from aigos.models.research import (
    RESEARCH_FIELD_KEYS,
    TOTAL_FIELDS,
    CompanyResearchOutput,
    Confidence,
    ExtractionField,
)
from aigos.models.scrape import BatchScrapeResult, PricingPageResult, ScrapeResult

__all__ = [
    "RESEARCH_FIELD_KEYS",
    "TOTAL_FIELDS",
    "AssetsProof",
    "BatchScrapeResult",
    "Blueprint",
    "BrandPositioning",
    "BusinessBasics",
    "CamelModel",
    "CompanyResearchOutput",
    "CompanySize",
    "Confidence",
    "Conversation",
    "CustomerJourney",
    "DataSource",
    "ExtractionField",
    "IdealCustomerProfile",
    "MarketCompetition",
    "MediaPlan",
    "MediaPlanStatus",
    "Message",
    "MessageRole",
    "OnboardingPrefill",
    "PrefillResponse",
    "PrefillSummary",
    "PricingPageResult",
    "ProductOffer",
    "ScrapeResult",
    "SharedBlueprint",
]
