"""InMemoryGateway — dict-backed Persistence Gateway.

Stores deep copies in and hands deep copies out, so a caller mutating a
loaded document can never reach the stored one. Used for ephemeral
sessions (``storage.backend = "memory"``) and throughout the tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from menuctl.domain.errors import NotFoundError, SlugInvalidError
from menuctl.domain.menu import MenuDocument, MenuSummary, PublishedSnapshot
from menuctl.domain.slugs import validate_slug
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


class InMemoryGateway:
    """Persistence Gateway holding drafts and snapshots in dicts."""

    def __init__(self, *, clock: Callable[[], str] | None = None) -> None:
        self._clock = clock or utc_now
        self._drafts: dict[str, MenuDocument] = {}
        self._published: dict[str, PublishedSnapshot] = {}
        self.save_calls = 0
        self.publish_calls = 0

    def _slug_owner(self, slug: str) -> str | None:
        for record_id, snapshot in self._published.items():
            if snapshot.slug == slug:
                return record_id
        return None

    async def check_slug_available(self, slug: str) -> SlugAvailability:
        try:
            validate_slug(slug)
        except SlugInvalidError as exc:
            return SlugAvailability(available=False, slug=slug, error=exc.message)
        if self._slug_owner(slug) is not None:
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
        self.publish_calls += 1
        now = self._clock()
        owner = self._slug_owner(slug)

        if menu_id is None:
            if owner is not None:
                return PublishOutcome(success=False, slug=slug, error=SLUG_TAKEN_MESSAGE)
            record_id = new_record_id()
            published_at = now
        else:
            existing = self._published.get(menu_id)
            if existing is None:
                return PublishOutcome(success=False, slug=slug, error="Published menu not found")
            if owner is not None and owner != menu_id:
                return PublishOutcome(success=False, slug=slug, error=SLUG_TAKEN_MESSAGE)
            record_id = menu_id
            published_at = existing.published_at or now

        record = snapshot.model_copy(deep=True)
        record.menu_id = record_id
        record.slug = slug
        record.title = title
        record.subtitle = subtitle
        record.published_at = published_at
        record.updated_at = now
        self._published[record_id] = record
        logger.debug("Published %s at slug %s", record_id, slug)
        return PublishOutcome(
            success=True,
            menu_id=record_id,
            slug=slug,
            published_at=published_at,
            updated_at=now,
        )

    async def get_published(self, slug: str) -> PublishedSnapshot:
        owner = self._slug_owner(slug)
        if owner is None:
            raise NotFoundError(f"No published menu at {slug!r}", slug=slug)
        return self._published[owner].model_copy(deep=True)

    async def load_draft(self, menu_id: str) -> MenuDocument:
        document = self._drafts.get(menu_id)
        if document is None:
            raise NotFoundError(f"Menu not found: {menu_id}", menu_id=menu_id)
        return document.model_copy(deep=True)

    async def save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome:
        self.save_calls += 1
        now = self._clock()
        stored = document.model_copy(deep=True)
        stored.id = menu_id
        stored.updated_at = now
        if stored.created_at is None:
            previous = self._drafts.get(menu_id)
            stored.created_at = previous.created_at if previous else now
        self._drafts[menu_id] = stored
        return SaveOutcome(success=True, updated_at=now)

    async def list_menus(self, user_id: str | None) -> list[MenuSummary]:
        documents = [
            d for d in self._drafts.values() if user_id is None or d.user_id == user_id
        ]
        documents.sort(key=lambda d: d.updated_at or "", reverse=True)
        return [summarize(d) for d in documents]

    async def delete_menu(self, menu_id: str) -> None:
        if self._drafts.pop(menu_id, None) is None:
            raise NotFoundError(f"Menu not found: {menu_id}", menu_id=menu_id)
