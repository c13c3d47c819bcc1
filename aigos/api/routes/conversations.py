"""Chat conversation and message history endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from aigos.api.deps import DbDep, PrincipalDep
from aigos.api.schemas import (
    ConversationCreateRequest,
    ConversationListResponse,
    MessageCreateRequest,
    MessageListResponse,
)
from aigos.models.documents import Conversation, Message

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", response_model=Conversation, status_code=201)
def create_conversation(
    body: ConversationCreateRequest,
    principal: PrincipalDep,
    db: DbDep,
) -> Conversation:
    return db.create_conversation(
        Conversation(user_id=principal.user_id, blueprint_id=body.blueprint_id, title=body.title)
    )


@router.get("", response_model=ConversationListResponse)
def list_conversations(principal: PrincipalDep, db: DbDep) -> ConversationListResponse:
    conversations = db.list_conversations(principal.user_id)
    return ConversationListResponse(conversations=conversations, total=len(conversations))


@router.get("/{conversation_id}/messages", response_model=MessageListResponse)
def list_messages(
    conversation_id: int,
    principal: PrincipalDep,
    db: DbDep,
) -> MessageListResponse:
    messages = db.list_messages(conversation_id, principal.user_id)
    return MessageListResponse(messages=messages, total=len(messages))


@router.post("/{conversation_id}/messages", response_model=Message, status_code=201)
def add_message(
    conversation_id: int,
    body: MessageCreateRequest,
    principal: PrincipalDep,
    db: DbDep,
) -> Message:
    return db.add_message(
        conversation_id,
        principal.user_id,
        role=body.role,
        content=body.content,
        metadata=body.metadata,
    )
