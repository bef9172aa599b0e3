"""SqlPersistenceGateway — SQLite-backed Persistence Gateway.

Each public coroutine runs its blocking SQLAlchemy work in a worker
thread via :func:`asyncio.to_thread`, so the event loop (and with it
document mutation) never waits on disk I/O. One transaction per call.

Deleting a menu is a soft delete: the row stays with ``deleted = 1``
and disappears from :meth:`list_menus` and :meth:`load_draft`. Its
published snapshot, if any, stays reachable by slug.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, Engine

from menuctl.domain.errors import NotFoundError, SlugInvalidError
from menuctl.domain.menu import MenuDocument, MenuSummary, PublishedSnapshot
from menuctl.domain.slugs import validate_slug
from menuctl.infrastructure.database.engine import init_database
from menuctl.infrastructure.database.schema import menus, published_menus
from menuctl.infrastructure.gateway import (
    SLUG_TAKEN_MESSAGE,
    PublishOutcome,
    SaveOutcome,
    SlugAvailability,
    new_record_id,
    summarize,
    utc_now,
)

logger = logging.getLogger(__name__)


def _slug_owner(conn: Connection, slug: str) -> str | None:
    return conn.execute(
        select(published_menus.c.id).where(published_menus.c.slug == slug)
    ).scalar_one_or_none()


class SqlPersistenceGateway:
    """Persistence Gateway over a SQLAlchemy engine."""

    def __init__(self, engine: Engine, *, clock: Callable[[], str] | None = None) -> None:
        self._engine = engine
        self._clock = clock or utc_now

    @classmethod
    def from_path(
        cls, db_path: Path, *, clock: Callable[[], str] | None = None
    ) -> SqlPersistenceGateway:
        """Open (creating if needed) the database at *db_path*."""
        return cls(init_database(db_path), clock=clock)

    @property
    def engine(self) -> Engine:
        return self._engine

    def dispose(self) -> None:
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Slugs and publishing
    # ------------------------------------------------------------------

    async def check_slug_available(self, slug: str) -> SlugAvailability:
        return await asyncio.to_thread(self._check_slug_available, slug)

    def _check_slug_available(self, slug: str) -> SlugAvailability:
        try:
            validate_slug(slug)
        except SlugInvalidError as exc:
            return SlugAvailability(available=False, slug=slug, error=exc.message)
        with self._engine.connect() as conn:
            owner = _slug_owner(conn, slug)
        if owner is not None:
            return SlugAvailability(available=False, slug=slug, error=SLUG_TAKEN_MESSAGE)
        return SlugAvailability(available=True, slug=slug)

    async def publish(
        self,
        menu_id: str | None,
        slug: str,
        title: str,
        subtitle: str | None,
        snapshot: PublishedSnapshot,
    ) -> PublishOutcome:
        return await asyncio.to_thread(self._publish, menu_id, slug, title, subtitle, snapshot)

    def _publish(
        self,
        menu_id: str | None,
        slug: str,
        title: str,
        subtitle: str | None,
        snapshot: PublishedSnapshot,
    ) -> PublishOutcome:
        now = self._clock()
        with self._engine.begin() as conn:
            owner = _slug_owner(conn, slug)
            if menu_id is None:
                if owner is not None:
                    return PublishOutcome(success=False, slug=slug, error=SLUG_TAKEN_MESSAGE)
                record_id = new_record_id()
                published_at = now
            else:
                existing = conn.execute(
                    select(published_menus.c.published_at).where(published_menus.c.id == menu_id)
                ).first()
                if existing is None:
                    return PublishOutcome(
                        success=False, slug=slug, error="Published menu not found"
                    )
                if owner is not None and owner != menu_id:
                    return PublishOutcome(success=False, slug=slug, error=SLUG_TAKEN_MESSAGE)
                record_id = menu_id
                published_at = existing.published_at

            record = snapshot.model_copy(deep=True)
            record.menu_id = record_id
            record.slug = slug
            record.title = title
            record.subtitle = subtitle
            record.published_at = published_at
            record.updated_at = now
            values = {
                "source_menu_id": record.source_menu_id,
                "slug": slug,
                "title": title,
                "subtitle": subtitle,
                "snapshot": record.model_dump_json(by_alias=True),
                "published_at": published_at,
                "updated_at": now,
            }
            if menu_id is None:
                conn.execute(insert(published_menus).values(id=record_id, **values))
            else:
                conn.execute(
                    update(published_menus).where(published_menus.c.id == record_id).values(**values)
                )
        logger.debug("Published %s at slug %s", record_id, slug)
        return PublishOutcome(
            success=True,
            menu_id=record_id,
            slug=slug,
            published_at=published_at,
            updated_at=now,
        )

    async def get_published(self, slug: str) -> PublishedSnapshot:
        return await asyncio.to_thread(self._get_published, slug)

    def _get_published(self, slug: str) -> PublishedSnapshot:
        with self._engine.connect() as conn:
            raw = conn.execute(
                select(published_menus.c.snapshot).where(published_menus.c.slug == slug)
            ).scalar_one_or_none()
        if raw is None:
            raise NotFoundError(f"No published menu at {slug!r}", slug=slug)
        return PublishedSnapshot.model_validate_json(raw)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    async def load_draft(self, menu_id: str) -> MenuDocument:
        return await asyncio.to_thread(self._load_draft, menu_id)

    def _load_draft(self, menu_id: str) -> MenuDocument:
        with self._engine.connect() as conn:
            raw = conn.execute(
                select(menus.c.document).where(menus.c.id == menu_id, menus.c.deleted == 0)
            ).scalar_one_or_none()
        if raw is None:
            raise NotFoundError(f"Menu not found: {menu_id}", menu_id=menu_id)
        return MenuDocument.model_validate_json(raw)

    async def save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome:
        return await asyncio.to_thread(self._save_draft, menu_id, document)

    def _save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome:
        now = self._clock()
        stored = document.model_copy(deep=True)
        stored.id = menu_id
        stored.updated_at = now
        with self._engine.begin() as conn:
            row = conn.execute(
                select(menus.c.deleted, menus.c.created_at).where(menus.c.id == menu_id)
            ).first()
            if row is not None and row.deleted:
                return SaveOutcome(success=False, error="Menu has been deleted")
            stored.created_at = stored.created_at or (row.created_at if row else now)
            values = {
                "user_id": stored.user_id,
                "name": stored.name,
                "status": str(stored.status),
                "document": stored.model_dump_json(by_alias=True),
                "updated_at": now,
            }
            if row is None:
                conn.execute(
                    insert(menus).values(id=menu_id, created_at=stored.created_at, **values)
                )
            else:
                conn.execute(update(menus).where(menus.c.id == menu_id).values(**values))
        return SaveOutcome(success=True, updated_at=now)

    async def list_menus(self, user_id: str | None) -> list[MenuSummary]:
        return await asyncio.to_thread(self._list_menus, user_id)

    def _list_menus(self, user_id: str | None) -> list[MenuSummary]:
        query = select(menus.c.document).where(menus.c.deleted == 0)
        if user_id is not None:
            query = query.where(menus.c.user_id == user_id)
        query = query.order_by(menus.c.updated_at.desc())
        with self._engine.connect() as conn:
            rows = conn.execute(query).scalars().all()
        return [summarize(MenuDocument.model_validate_json(raw)) for raw in rows]

    async def delete_menu(self, menu_id: str) -> None:
        await asyncio.to_thread(self._delete_menu, menu_id)

    def _delete_menu(self, menu_id: str) -> None:
        with self._engine.begin() as conn:
            result = conn.execute(
                update(menus)
                .where(menus.c.id == menu_id, menus.c.deleted == 0)
                .values(deleted=1, updated_at=self._clock())
            )
        if result.rowcount == 0:
            raise NotFoundError(f"Menu not found: {menu_id}", menu_id=menu_id)
