"""API request/response schemas (separate from domain models)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aigos.models.base import CamelModel
from aigos.models.documents import (
    Blueprint,
    Conversation,
    MediaPlan,
    MediaPlanStatus,
    Message,
    MessageRole,
)

# --- Responses ---


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    version: str
    db_connected: bool


class ConfigCheckResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    configured: dict[str, bool]


class BlueprintListResponse(CamelModel):
    blueprints: list[Blueprint]
    total: int


class ShareResponse(CamelModel):
    share_token: str
    share_url: str


class SharedBlueprintResponse(CamelModel):
    title: str
    blueprint: dict[str, Any]
    created_at: datetime
    view_count: int


class MediaPlanListResponse(CamelModel):
    media_plans: list[MediaPlan]
    total: int


class ConversationListResponse(CamelModel):
    conversations: list[Conversation]
    total: int


class MessageListResponse(CamelModel):
    messages: list[Message]
    total: int


# --- Requests ---


class ResearchRequest(CamelModel):
    # Optional here so a missing URL gets the same message as a malformed one.
    website_url: str | None = None
    linkedin_url: str | None = None


class BlueprintCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    input_data: dict[str, Any] = Field(default_factory=dict)
    output: dict[str, Any] = Field(default_factory=dict)
    generation_metadata: dict[str, Any] | None = None


class MediaPlanCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    blueprint_id: int | None = None
    output: dict[str, Any] = Field(default_factory=dict)
    ad_copy: dict[str, Any] | None = None
    generation_metadata: dict[str, Any] | None = None
    status: MediaPlanStatus = MediaPlanStatus.DRAFT


class ConversationCreateRequest(CamelModel):
    title: str | None = None
    blueprint_id: int | None = None


class MessageCreateRequest(CamelModel):
    role: MessageRole
    content: str = Field(min_length=1)
    metadata: dict[str, Any] | None = None
