"""FastAPI test client fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from aigos.api.app import include_routers
from aigos.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from aigos.auth import StaticTokenVerifier
from aigos.models.research import CompanyResearchOutput
from aigos.service import CompanyResearchService

if TYPE_CHECKING:
    from aigos.config import Settings
    from aigos.db import Database

AUTH = {"Authorization": "Bearer test-token"}
OTHER_AUTH = {"Authorization": "Bearer other-token"}


def _create_test_app(db: Database, settings: Settings, service: CompanyResearchService) -> FastAPI:
    """Create a FastAPI app with injected test collaborators (no lifespan)."""
    app = FastAPI(title="AI-GOS Test")

    app.state.db = db
    app.state.settings = settings
    app.state.verifier = StaticTokenVerifier(settings.api_tokens)
    app.state.research_service = service

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)
    include_routers(app)
    return app


@pytest.fixture()
def research_llm(make_llm, stripe_output):
    return make_llm([CompanyResearchOutput(), stripe_output])


@pytest.fixture()
def research_scraper(make_scraper):
    return make_scraper({"https://stripe.com": "Stripe homepage"})


@pytest.fixture()
def app(db, settings, research_scraper, research_llm) -> FastAPI:
    service = CompanyResearchService(settings, scraper=research_scraper, llm=research_llm)
    return _create_test_app(db, settings, service)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def auth() -> dict[str, str]:
    return dict(AUTH)


@pytest.fixture()
def other_auth() -> dict[str, str]:
    return dict(OTHER_AUTH)
