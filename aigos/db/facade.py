"""SQLAlchemy-backed database connection and CRUD helpers.

Every read and write of a user-owned document is scoped to its owner: a
lookup for another user's id behaves exactly like a lookup for a missing id.
"""

from __future__ import annotations

import json
import secrets
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, text, update

from aigos.db.engine import create_db_engine, create_session_factory
from aigos.db.orm import (
    Base,
    BlueprintRow,
    ConversationRow,
    MediaPlanRow,
    MessageRow,
    SharedBlueprintRow,
    _utcnow_str,
)
from aigos.models.documents import (
    Blueprint,
    Conversation,
    MediaPlan,
    MediaPlanStatus,
    Message,
    MessageRole,
    SharedBlueprint,
)

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine
    from sqlalchemy.orm import Session, sessionmaker

SHARE_TOKEN_BYTES = 16


class NotFoundError(LookupError):
    """A document does not exist or is not visible to the caller."""


def _dumps(value: dict[str, Any] | None) -> str | None:
    return None if value is None else json.dumps(value)


def _loads(value: str | None) -> dict[str, Any] | None:
    return None if value is None else json.loads(value)


class Database:
    """SQLAlchemy-backed wrapper with CRUD helpers for blueprints, plans and chats."""

    def __init__(self, db_path: str | Path = ":memory:"):
        self.db_path = str(db_path)
        self._engine: Engine = create_db_engine(self.db_path)
        self._session_factory: sessionmaker[Session] = create_session_factory(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_schema(self) -> None:
        """Create all tables via ORM metadata."""
        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    def check_connection(self) -> bool:
        """Verify the database is reachable. Returns True or raises."""
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))
        return True

    # --- Blueprints ---

    def create_blueprint(self, blueprint: Blueprint) -> Blueprint:
        with self._session_factory() as session:
            row = BlueprintRow(
                user_id=blueprint.user_id,
                title=blueprint.title,
                input_data_json=json.dumps(blueprint.input_data),
                output_json=json.dumps(blueprint.output),
                generation_metadata_json=_dumps(blueprint.generation_metadata),
            )
            session.add(row)
            session.commit()
            return self._row_to_blueprint(row)

    def get_blueprint(self, blueprint_id: int, user_id: str) -> Blueprint | None:
        with self._session_factory() as session:
            row = session.get(BlueprintRow, blueprint_id)
            if row is None or row.user_id != user_id:
                return None
            return self._row_to_blueprint(row)

    def list_blueprints(self, user_id: str) -> list[Blueprint]:
        with self._session_factory() as session:
            stmt = (
                select(BlueprintRow)
                .where(BlueprintRow.user_id == user_id)
                .order_by(BlueprintRow.created_at.desc(), BlueprintRow.id.desc())
            )
            return [self._row_to_blueprint(r) for r in session.scalars(stmt).all()]

    def delete_blueprint(self, blueprint_id: int, user_id: str) -> bool:
        with self._session_factory() as session:
            row = session.get(BlueprintRow, blueprint_id)
            if row is None or row.user_id != user_id:
                return False
            session.delete(row)
            session.commit()
            return True

    # --- Sharing ---

    def share_blueprint(self, blueprint_id: int, user_id: str) -> SharedBlueprint | None:
        """Snapshot an owned blueprint under a fresh url-safe token."""
        with self._session_factory() as session:
            blueprint = session.get(BlueprintRow, blueprint_id)
            if blueprint is None or blueprint.user_id != user_id:
                return None
            row = SharedBlueprintRow(
                share_token=secrets.token_urlsafe(SHARE_TOKEN_BYTES),
                blueprint_id=blueprint.id,
                title=blueprint.title,
                blueprint_data_json=blueprint.output_json,
            )
            session.add(row)
            session.commit()
            return self._row_to_shared(row)

    def get_shared_blueprint(self, share_token: str) -> SharedBlueprint | None:
        """Resolve a share token and count the view.

        The increment runs in SQL so concurrent views are never lost.
        """
        with self._session_factory() as session:
            result = session.execute(
                update(SharedBlueprintRow)
                .where(SharedBlueprintRow.share_token == share_token)
                .values(view_count=SharedBlueprintRow.view_count + 1)
            )
            if result.rowcount == 0:
                session.rollback()
                return None
            session.commit()
            row = session.get(SharedBlueprintRow, share_token, populate_existing=True)
            if row is None:
                return None
            return self._row_to_shared(row)

    # --- Media plans ---

    def create_media_plan(self, plan: MediaPlan) -> MediaPlan:
        """Store a plan, optionally linked to one of the same owner's blueprints.

        Raises:
            NotFoundError: if the linked blueprint is missing or owned by someone else.
        """
        with self._session_factory() as session:
            self._require_owned_blueprint(session, plan.blueprint_id, plan.user_id)
            row = MediaPlanRow(
                user_id=plan.user_id,
                blueprint_id=plan.blueprint_id,
                title=plan.title,
                output_json=json.dumps(plan.output),
                ad_copy_json=_dumps(plan.ad_copy),
                generation_metadata_json=_dumps(plan.generation_metadata),
                status=plan.status.value,
            )
            session.add(row)
            session.commit()
            return self._row_to_media_plan(row)

    def get_media_plan(self, plan_id: int, user_id: str) -> MediaPlan | None:
        with self._session_factory() as session:
            row = session.get(MediaPlanRow, plan_id)
            if row is None or row.user_id != user_id:
                return None
            return self._row_to_media_plan(row)

    def list_media_plans(self, user_id: str) -> list[MediaPlan]:
        with self._session_factory() as session:
            stmt = (
                select(MediaPlanRow)
                .where(MediaPlanRow.user_id == user_id)
                .order_by(MediaPlanRow.created_at.desc(), MediaPlanRow.id.desc())
            )
            return [self._row_to_media_plan(r) for r in session.scalars(stmt).all()]

    def delete_media_plan(self, plan_id: int, user_id: str) -> bool:
        with self._session_factory() as session:
            row = session.get(MediaPlanRow, plan_id)
            if row is None or row.user_id != user_id:
                return False
            session.delete(row)
            session.commit()
            return True

    # --- Conversations ---

    def create_conversation(self, conversation: Conversation) -> Conversation:
        """Raises NotFoundError for a blueprint the owner cannot see."""
        with self._session_factory() as session:
            self._require_owned_blueprint(session, conversation.blueprint_id, conversation.user_id)
            row = ConversationRow(
                user_id=conversation.user_id,
                blueprint_id=conversation.blueprint_id,
                title=conversation.title,
            )
            session.add(row)
            session.commit()
            return self._row_to_conversation(row)

    def get_conversation(self, conversation_id: int, user_id: str) -> Conversation | None:
        with self._session_factory() as session:
            row = session.get(ConversationRow, conversation_id)
            if row is None or row.user_id != user_id:
                return None
            return self._row_to_conversation(row)

    def list_conversations(self, user_id: str) -> list[Conversation]:
        with self._session_factory() as session:
            stmt = (
                select(ConversationRow)
                .where(ConversationRow.user_id == user_id)
                .order_by(ConversationRow.updated_at.desc(), ConversationRow.id.desc())
            )
            return [self._row_to_conversation(r) for r in session.scalars(stmt).all()]

    def add_message(
        self,
        conversation_id: int,
        user_id: str,
        role: MessageRole,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        """Append a message to an owned conversation and bump its updated_at.

        Raises:
            NotFoundError: if the conversation is missing or owned by someone else.
        """
        with self._session_factory() as session:
            conversation = session.get(ConversationRow, conversation_id)
            if conversation is None or conversation.user_id != user_id:
                raise NotFoundError(f"Conversation {conversation_id} not found")
            row = MessageRow(
                conversation_id=conversation_id,
                role=role.value,
                content=content,
                metadata_json=_dumps(metadata),
            )
            conversation.updated_at = _utcnow_str()
            session.add(row)
            session.commit()
            return self._row_to_message(row)

    def list_messages(self, conversation_id: int, user_id: str) -> list[Message]:
        """Messages of an owned conversation, oldest first.

        Raises:
            NotFoundError: if the conversation is missing or owned by someone else.
        """
        with self._session_factory() as session:
            conversation = session.get(ConversationRow, conversation_id)
            if conversation is None or conversation.user_id != user_id:
                raise NotFoundError(f"Conversation {conversation_id} not found")
            stmt = (
                select(MessageRow)
                .where(MessageRow.conversation_id == conversation_id)
                .order_by(MessageRow.id)
            )
            return [self._row_to_message(r) for r in session.scalars(stmt).all()]

    # --- Helpers ---

    @staticmethod
    def _require_owned_blueprint(session: Session, blueprint_id: int | None, user_id: str) -> None:
        if blueprint_id is None:
            return
        blueprint = session.get(BlueprintRow, blueprint_id)
        if blueprint is None or blueprint.user_id != user_id:
            raise NotFoundError(f"Blueprint {blueprint_id} not found")

    @staticmethod
    def _parse_dt(value: str) -> datetime:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    @staticmethod
    def _row_to_blueprint(row: BlueprintRow) -> Blueprint:
        return Blueprint(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            input_data=json.loads(row.input_data_json),
            output=json.loads(row.output_json),
            generation_metadata=_loads(row.generation_metadata_json),
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_shared(row: SharedBlueprintRow) -> SharedBlueprint:
        return SharedBlueprint(
            share_token=row.share_token,
            blueprint_id=row.blueprint_id,
            title=row.title,
            blueprint_data=json.loads(row.blueprint_data_json),
            view_count=row.view_count,
            created_at=Database._parse_dt(row.created_at),
        )

    @staticmethod
    def _row_to_media_plan(row: MediaPlanRow) -> MediaPlan:
        return MediaPlan(
            id=row.id,
            user_id=row.user_id,
            blueprint_id=row.blueprint_id,
            title=row.title,
            output=json.loads(row.output_json),
            ad_copy=_loads(row.ad_copy_json),
            generation_metadata=_loads(row.generation_metadata_json),
            status=MediaPlanStatus(row.status),
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_conversation(row: ConversationRow) -> Conversation:
        return Conversation(
            id=row.id,
            user_id=row.user_id,
            blueprint_id=row.blueprint_id,
            title=row.title,
            created_at=Database._parse_dt(row.created_at),
            updated_at=Database._parse_dt(row.updated_at),
        )

    @staticmethod
    def _row_to_message(row: MessageRow) -> Message:
        return Message(
            id=row.id,
            conversation_id=row.conversation_id,
            role=MessageRole(row.role),
            content=row.content,
            metadata=_loads(row.metadata_json),
            created_at=Database._parse_dt(row.created_at),
        )
