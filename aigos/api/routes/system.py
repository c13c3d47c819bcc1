"""Health check and config endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from aigos import __version__
from aigos.api.deps import DbDep, SettingsDep
from aigos.api.schemas import ConfigCheckResponse, HealthResponse

logger = structlog.get_logger()

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health_check(
    db: DbDep,
) -> HealthResponse:
    db_ok = False
    try:
        db_ok = db.check_connection()
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed", error=str(exc))

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        db_connected=db_ok,
    )


@router.get("/config/check", response_model=ConfigCheckResponse)
def config_check(
    settings: SettingsDep,
) -> ConfigCheckResponse:
    return ConfigCheckResponse(
        configured={
            "anthropic": bool(settings.anthropic_api_key),
            "firecrawl": bool(settings.firecrawl_api_key),
            "api_tokens": bool(settings.api_tokens),
        }
    )
