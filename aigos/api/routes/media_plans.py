"""Media plan CRUD endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Response

from aigos.api.deps import DbDep, PrincipalDep
from aigos.api.schemas import MediaPlanCreateRequest, MediaPlanListResponse
from aigos.db import NotFoundError
from aigos.models.documents import MediaPlan

router = APIRouter(prefix="/media-plans", tags=["media-plans"])


@router.post("", response_model=MediaPlan, status_code=201)
def create_media_plan(
    body: MediaPlanCreateRequest,
    principal: PrincipalDep,
    db: DbDep,
) -> MediaPlan:
    return db.create_media_plan(
        MediaPlan(
            user_id=principal.user_id,
            blueprint_id=body.blueprint_id,
            title=body.title,
            output=body.output,
            ad_copy=body.ad_copy,
            generation_metadata=body.generation_metadata,
            status=body.status,
        )
    )


@router.get("", response_model=MediaPlanListResponse)
def list_media_plans(principal: PrincipalDep, db: DbDep) -> MediaPlanListResponse:
    plans = db.list_media_plans(principal.user_id)
    return MediaPlanListResponse(media_plans=plans, total=len(plans))


@router.get("/{plan_id}", response_model=MediaPlan)
def get_media_plan(plan_id: int, principal: PrincipalDep, db: DbDep) -> MediaPlan:
    plan = db.get_media_plan(plan_id, principal.user_id)
    if plan is None:
        raise NotFoundError(f"Media plan {plan_id} not found")
    return plan


@router.delete("/{plan_id}", status_code=204)
def delete_media_plan(plan_id: int, principal: PrincipalDep, db: DbDep) -> Response:
    if not db.delete_media_plan(plan_id, principal.user_id):
        raise NotFoundError(f"Media plan {plan_id} not found")
    return Response(status_code=204)
