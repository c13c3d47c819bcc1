"""FastAPI application factory and entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI

from aigos import __version__
from aigos.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from aigos.api.routes import blueprints, conversations, media_plans, research, system
from aigos.auth import StaticTokenVerifier
from aigos.config import Settings
from aigos.db import Database
from aigos.logging import configure_logging
from aigos.service import CompanyResearchService

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize DB, auth and research collaborators on startup."""
    settings = Settings()
    settings.ensure_data_dir()

    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
    )

    db = Database(settings.db_path)
    db.init_schema()

    app.state.db = db
    app.state.settings = settings
    app.state.verifier = StaticTokenVerifier(settings.api_tokens)
    app.state.research_service = CompanyResearchService(settings)

    if not settings.api_tokens:
        logger.warning("No API tokens configured; every authenticated request will be rejected")
    logger.info("AI-GOS API started", host=settings.api_host, port=settings.api_port)
    yield

    db.close()
    logger.info("AI-GOS API shut down")


def include_routers(app: FastAPI) -> None:
    app.include_router(system.router, prefix=API_PREFIX)
    app.include_router(research.router, prefix=API_PREFIX)
    app.include_router(blueprints.router, prefix=API_PREFIX)
    app.include_router(media_plans.router, prefix=API_PREFIX)
    app.include_router(conversations.router, prefix=API_PREFIX)


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="AI-GOS",
        description="Strategic Blueprint API: company research prefill and saved documents",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)

    # Prometheus metrics endpoint
    from prometheus_client import make_asgi_app

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    include_routers(app)
    return app


def main() -> None:
    """Entry point for the `aigos-api` command."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "aigos.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
