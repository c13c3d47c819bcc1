"""Database package: engine, ORM models and CRUD facade."""

from aigos.db.engine import create_db_engine, create_session_factory
from aigos.db.facade import Database, NotFoundError
from aigos.db.orm import (
    Base,
    BlueprintRow,
    ConversationRow,
    MediaPlanRow,
    MessageRow,
    SharedBlueprintRow,
)

__all__ = [
    "Base",
    "BlueprintRow",
    "ConversationRow",
    "Database",
    "MediaPlanRow",
    "MessageRow",
    "NotFoundError",
    "SharedBlueprintRow",
    "create_db_engine",
    "create_session_factory",
]
