"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, Request

from aigos.auth import Principal, UnauthorizedError, parse_bearer
from aigos.config import Settings
from aigos.db import Database
from aigos.protocols import TokenVerifierPort
from aigos.service import CompanyResearchService


def _get_db(request: Request) -> Database:
    """Get the database instance from app state."""
    return request.app.state.db  # type: ignore[no-any-return]


def _get_settings(request: Request) -> Settings:
    """Get the settings instance from app state."""
    return request.app.state.settings  # type: ignore[no-any-return]


def _get_research_service(request: Request) -> CompanyResearchService:
    return request.app.state.research_service  # type: ignore[no-any-return]


def _get_principal(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """Resolve the caller from the bearer token, or raise UnauthorizedError."""
    token = parse_bearer(authorization)
    if token is None:
        raise UnauthorizedError("Missing bearer token")
    verifier: TokenVerifierPort = request.app.state.verifier
    principal = verifier.verify(token)
    if principal is None:
        raise UnauthorizedError("Unknown bearer token")
    return principal


DbDep = Annotated[Database, Depends(_get_db)]
SettingsDep = Annotated[Settings, Depends(_get_settings)]
ResearchServiceDep = Annotated[CompanyResearchService, Depends(_get_research_service)]
PrincipalDep = Annotated[Principal, Depends(_get_principal)]
