"""SQLite database engine and schema via SQLAlchemy Core."""

from menuctl.infrastructure.database.engine import create_db_engine, init_database
from menuctl.infrastructure.database.schema import menus, metadata, published_menus

__all__ = [
    "create_db_engine",
    "init_database",
    "menus",
    "metadata",
    "published_menus",
]
