"""SQLAlchemy engine and session factory for the SQLite document store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine

MEMORY = ":memory:"
BUSY_TIMEOUT_MS = 30_000


def create_db_engine(db_path: str | Path, echo: bool = False) -> Engine:
    """Build an engine for ``db_path``, or a private in-memory database.

    File databases run in WAL mode so API readers never block the writer.
    An in-memory database lives on a single shared connection, otherwise
    each pooled connection would see its own empty schema.
    """
    location = str(db_path)
    in_memory = location == MEMORY

    if in_memory:
        engine = create_engine(
            "sqlite://",
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            f"sqlite:///{location}",
            echo=echo,
            connect_args={"timeout": BUSY_TIMEOUT_MS / 1000, "check_same_thread": False},
        )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn: object, _record: object) -> None:
        cursor = dbapi_conn.cursor()  # type: ignore[attr-defined]
        try:
            # Cascades on messages and SET NULL on plans/shares rely on this.
            cursor.execute("PRAGMA foreign_keys=ON")
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
        finally:
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Sessions keep loaded rows usable after commit for DTO conversion."""
    return sessionmaker(bind=engine, expire_on_commit=False)
