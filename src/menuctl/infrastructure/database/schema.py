"""SQLAlchemy Core table definitions for the menuctl database.

Documents and snapshots are stored as camelCase JSON text, the same
shape as export files, so a row can be read without the Python models.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

menus = Table(
    "menus",
    metadata,
    Column("id", Text, primary_key=True),
    Column("user_id", Text),
    Column("name", Text, nullable=False),
    Column("status", Text, nullable=False, default="draft", server_default="draft"),
    Column("document", Text, nullable=False),  # JSON MenuDocument
    Column("deleted", Integer, default=0, server_default="0"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
    Index("ix_menus_user_id", "user_id"),
)

published_menus = Table(
    "published_menus",
    metadata,
    Column("id", Text, primary_key=True),
    Column("source_menu_id", Text),
    Column("slug", Text, nullable=False, unique=True),
    Column("title", Text, nullable=False),
    Column("subtitle", Text),
    Column("snapshot", Text, nullable=False),  # JSON PublishedSnapshot
    Column("published_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)
