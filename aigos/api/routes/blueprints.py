"""Blueprint CRUD and public share links."""

from __future__ import annotations

from fastapi import APIRouter, Response

from aigos.api.deps import DbDep, PrincipalDep, SettingsDep
from aigos.api.schemas import (
    BlueprintCreateRequest,
    BlueprintListResponse,
    SharedBlueprintResponse,
    ShareResponse,
)
from aigos.db import NotFoundError
from aigos.models.documents import Blueprint

router = APIRouter(tags=["blueprints"])

MIN_SHARE_TOKEN_LENGTH = 10


@router.post("/blueprints", response_model=Blueprint, status_code=201)
def create_blueprint(
    body: BlueprintCreateRequest,
    principal: PrincipalDep,
    db: DbDep,
) -> Blueprint:
    return db.create_blueprint(
        Blueprint(
            user_id=principal.user_id,
            title=body.title,
            input_data=body.input_data,
            output=body.output,
            generation_metadata=body.generation_metadata,
        )
    )


@router.get("/blueprints", response_model=BlueprintListResponse)
def list_blueprints(principal: PrincipalDep, db: DbDep) -> BlueprintListResponse:
    blueprints = db.list_blueprints(principal.user_id)
    return BlueprintListResponse(blueprints=blueprints, total=len(blueprints))


@router.get("/blueprints/{blueprint_id}", response_model=Blueprint)
def get_blueprint(blueprint_id: int, principal: PrincipalDep, db: DbDep) -> Blueprint:
    blueprint = db.get_blueprint(blueprint_id, principal.user_id)
    if blueprint is None:
        raise NotFoundError(f"Blueprint {blueprint_id} not found")
    return blueprint


@router.delete("/blueprints/{blueprint_id}", status_code=204)
def delete_blueprint(blueprint_id: int, principal: PrincipalDep, db: DbDep) -> Response:
    if not db.delete_blueprint(blueprint_id, principal.user_id):
        raise NotFoundError(f"Blueprint {blueprint_id} not found")
    return Response(status_code=204)


@router.post("/blueprints/{blueprint_id}/share", response_model=ShareResponse, status_code=201)
def share_blueprint(
    blueprint_id: int,
    principal: PrincipalDep,
    db: DbDep,
    settings: SettingsDep,
) -> ShareResponse:
    shared = db.share_blueprint(blueprint_id, principal.user_id)
    if shared is None:
        raise NotFoundError(f"Blueprint {blueprint_id} not found")
    share_url = f"{settings.app_url.rstrip('/')}/shared/{shared.share_token}"
    return ShareResponse(share_token=shared.share_token, share_url=share_url)


@router.get("/shared/{share_token}", response_model=SharedBlueprintResponse)
def get_shared_blueprint(share_token: str, db: DbDep) -> SharedBlueprintResponse:
    """Public view of a shared blueprint; no credentials required."""
    if len(share_token) < MIN_SHARE_TOKEN_LENGTH:
        raise ValueError("Invalid share token")
    shared = db.get_shared_blueprint(share_token)
    if shared is None:
        raise NotFoundError("Blueprint not found")
    return SharedBlueprintResponse(
        title=shared.title,
        blueprint=shared.blueprint_data,
        created_at=shared.created_at,
        view_count=shared.view_count,
    )
