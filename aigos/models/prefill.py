"""Response of the non-streaming prefill flow."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from aigos.models.base import CamelModel
from aigos.models.onboarding import OnboardingPrefill
from aigos.models.research import CompanyResearchOutput


class DataSource(StrEnum):
    WEBSITE = "website"
    SEARCH = "search"


class PrefillSummary(CamelModel):
    fields_found: int
    fields_missing: int
    primary_source: DataSource


class PrefillResponse(CamelModel):
    research: CompanyResearchOutput
    prefilled: OnboardingPrefill
    citations: list[str] = Field(default_factory=list)
    summary: PrefillSummary
    warnings: list[str] = Field(default_factory=list)
