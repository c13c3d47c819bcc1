"""Stored documents: blueprints, media plans, share links and chat history."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import Field

from aigos.models.base import CamelModel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Blueprint(CamelModel):
    """A generated Strategic Blueprint owned by one user."""

    id: int | None = None
    user_id: str
    title: str
    input_data: dict[str, Any] = Field(default_factory=dict)
    output: dict[str, Any] = Field(default_factory=dict)
    generation_metadata: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class MediaPlanStatus(StrEnum):
    DRAFT = "draft"
    APPROVED = "approved"
    ARCHIVED = "archived"


class MediaPlan(CamelModel):
    id: int | None = None
    user_id: str
    blueprint_id: int | None = None
    title: str
    output: dict[str, Any] = Field(default_factory=dict)
    ad_copy: dict[str, Any] | None = None
    generation_metadata: dict[str, Any] | None = None
    status: MediaPlanStatus = MediaPlanStatus.DRAFT
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class SharedBlueprint(CamelModel):
    """Public snapshot of a blueprint reachable by its share token."""

    share_token: str
    blueprint_id: int | None = None
    title: str
    blueprint_data: dict[str, Any] = Field(default_factory=dict)
    view_count: int = 0
    created_at: datetime = Field(default_factory=_utcnow)


class Conversation(CamelModel):
    id: int | None = None
    user_id: str
    blueprint_id: int | None = None
    title: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(CamelModel):
    id: int | None = None
    conversation_id: int
    role: MessageRole
    content: str
    metadata: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=_utcnow)
