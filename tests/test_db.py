"""Tests for SQLite database CRUD operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import inspect

from aigos.db import NotFoundError
from aigos.models.documents import (
    Blueprint,
    Conversation,
    MediaPlan,
    MediaPlanStatus,
    MessageRole,
)

if TYPE_CHECKING:
    from aigos.db import Database


def _blueprint(db: Database, user_id: str = "user_1", title: str = "Acme Blueprint") -> Blueprint:
    return db.create_blueprint(
        Blueprint(
            user_id=user_id,
            title=title,
            input_data={"businessBasics": {"businessName": "Acme"}},
            output={"industryMarketOverview": {"categorySnapshot": {"category": "Fintech"}}},
        )
    )


class TestSchemaInit:
    def test_init_schema_creates_tables(self, db: Database):
        table_names = set(inspect(db.engine).get_table_names())
        assert {
            "blueprints",
            "media_plans",
            "shared_blueprints",
            "conversations",
            "messages",
        } <= table_names

    def test_init_schema_idempotent(self, db: Database):
        db.init_schema()
        db.init_schema()

    def test_check_connection(self, db: Database):
        assert db.check_connection() is True

    def test_in_memory_database_keeps_schema_across_sessions(self):
        from aigos.db import Database

        memory_db = Database(":memory:")
        try:
            memory_db.init_schema()
            created = _blueprint(memory_db)
            assert memory_db.get_blueprint(created.id, "user_1") is not None
        finally:
            memory_db.close()


class TestBlueprints:
    def test_create_assigns_id_and_timestamps(self, db: Database):
        created = _blueprint(db)
        assert created.id is not None
        assert created.created_at.tzinfo is not None
        assert created.output["industryMarketOverview"]["categorySnapshot"]["category"] == "Fintech"

    def test_get_is_owner_scoped(self, db: Database):
        created = _blueprint(db)
        assert db.get_blueprint(created.id, "user_1") == created
        assert db.get_blueprint(created.id, "user_2") is None
        assert db.get_blueprint(99999, "user_1") is None

    def test_list_newest_first_and_scoped(self, db: Database):
        first = _blueprint(db, title="First")
        second = _blueprint(db, title="Second")
        _blueprint(db, user_id="user_2", title="Someone else's")

        listed = db.list_blueprints("user_1")
        assert [b.id for b in listed] == [second.id, first.id]

    def test_delete(self, db: Database):
        created = _blueprint(db)
        assert not db.delete_blueprint(created.id, "user_2")
        assert db.delete_blueprint(created.id, "user_1")
        assert db.get_blueprint(created.id, "user_1") is None
        assert not db.delete_blueprint(created.id, "user_1")


class TestSharing:
    def test_share_snapshots_output(self, db: Database):
        created = _blueprint(db)
        shared = db.share_blueprint(created.id, "user_1")
        assert shared is not None
        assert len(shared.share_token) >= 10
        assert shared.blueprint_data == created.output
        assert shared.title == "Acme Blueprint"
        assert shared.view_count == 0

    def test_each_share_gets_a_fresh_token(self, db: Database):
        created = _blueprint(db)
        first = db.share_blueprint(created.id, "user_1")
        second = db.share_blueprint(created.id, "user_1")
        assert first is not None and second is not None
        assert first.share_token != second.share_token

    def test_cannot_share_someone_elses_blueprint(self, db: Database):
        created = _blueprint(db)
        assert db.share_blueprint(created.id, "user_2") is None

    def test_resolving_token_counts_views(self, db: Database):
        created = _blueprint(db)
        shared = db.share_blueprint(created.id, "user_1")
        assert shared is not None
        assert db.get_shared_blueprint(shared.share_token).view_count == 1
        assert db.get_shared_blueprint(shared.share_token).view_count == 2

    def test_unknown_token(self, db: Database):
        assert db.get_shared_blueprint("does-not-exist") is None

    def test_concurrent_views_are_all_counted(self, db: Database):
        shared = db.share_blueprint(_blueprint(db).id, "user_1")
        assert shared is not None

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda _: db.get_shared_blueprint(shared.share_token), range(40)))

        final = db.get_shared_blueprint(shared.share_token)
        assert final is not None
        assert final.view_count == 41

    def test_share_survives_blueprint_deletion(self, db: Database):
        created = _blueprint(db)
        shared = db.share_blueprint(created.id, "user_1")
        assert shared is not None
        db.delete_blueprint(created.id, "user_1")
        resolved = db.get_shared_blueprint(shared.share_token)
        assert resolved is not None
        assert resolved.blueprint_id is None
        assert resolved.blueprint_data == created.output


class TestMediaPlans:
    def test_create_and_get(self, db: Database):
        blueprint = _blueprint(db)
        plan = db.create_media_plan(
            MediaPlan(
                user_id="user_1",
                blueprint_id=blueprint.id,
                title="Q3 plan",
                output={"channels": ["linkedin"]},
                status=MediaPlanStatus.APPROVED,
            )
        )
        fetched = db.get_media_plan(plan.id, "user_1")
        assert fetched is not None
        assert fetched.status is MediaPlanStatus.APPROVED
        assert fetched.output == {"channels": ["linkedin"]}
        assert fetched.ad_copy is None
        assert db.get_media_plan(plan.id, "user_2") is None

    def test_cannot_link_someone_elses_blueprint(self, db: Database):
        foreign = _blueprint(db, user_id="user_2")
        with pytest.raises(NotFoundError):
            db.create_media_plan(MediaPlan(user_id="user_1", blueprint_id=foreign.id, title="Q3"))
        assert db.list_media_plans("user_1") == []

    def test_list_and_delete(self, db: Database):
        plan = db.create_media_plan(MediaPlan(user_id="user_1", title="Plan"))
        db.create_media_plan(MediaPlan(user_id="user_2", title="Other"))
        assert [p.id for p in db.list_media_plans("user_1")] == [plan.id]
        assert db.delete_media_plan(plan.id, "user_1")
        assert db.list_media_plans("user_1") == []


class TestConversations:
    def test_cannot_link_someone_elses_blueprint(self, db: Database):
        foreign = _blueprint(db, user_id="user_2")
        with pytest.raises(NotFoundError):
            db.create_conversation(Conversation(user_id="user_1", blueprint_id=foreign.id))
        assert db.list_conversations("user_1") == []

    def test_messages_round_trip_in_order(self, db: Database):
        conversation = db.create_conversation(Conversation(user_id="user_1", title="Chat"))
        db.add_message(conversation.id, "user_1", MessageRole.USER, "Tighten the ICP")
        db.add_message(
            conversation.id,
            "user_1",
            MessageRole.ASSISTANT,
            "Done.",
            metadata={"section": "icp"},
        )

        messages = db.list_messages(conversation.id, "user_1")
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[1].metadata == {"section": "icp"}
        assert messages[0].metadata is None

    def test_foreign_conversation_is_not_found(self, db: Database):
        conversation = db.create_conversation(Conversation(user_id="user_1"))
        with pytest.raises(NotFoundError):
            db.list_messages(conversation.id, "user_2")
        with pytest.raises(NotFoundError):
            db.add_message(conversation.id, "user_2", MessageRole.USER, "hi")

    def test_list_is_scoped(self, db: Database):
        mine = db.create_conversation(Conversation(user_id="user_1"))
        db.create_conversation(Conversation(user_id="user_2"))
        assert [c.id for c in db.list_conversations("user_1")] == [mine.id]
