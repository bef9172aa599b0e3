"""Database engine setup for SQLite with WAL mode.

The DB is stored at {project_root}/.menuctl/menus.db by default.

SQLAlchemy Core (not ORM) is used: rows hold whole JSON documents, so
there is nothing for an identity map to track. Connections may be used
from worker threads (the SQL gateway runs blocking calls off the event
loop), hence ``check_same_thread=False``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from menuctl.infrastructure.database.schema import metadata

DEFAULT_DB_PATH = Path(".menuctl") / "menus.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Create the database file's directory and all tables.

    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
