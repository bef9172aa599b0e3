"""Persistence Gateway contract.

The editing core talks to storage only through this protocol. Every
method is a suspension point; implementations must not block the event
loop. Which store backs it (SQLite file, in-memory, remote API) is a
deployment choice.

``load_draft`` and ``get_published`` raise :class:`NotFoundError`;
``save_draft`` and ``publish`` report refusals through their outcome
models. Any other exception is an I/O failure and is surfaced by the
session as a :class:`PersistenceError`.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from menuctl.domain.menu import MenuDocument, MenuSummary, PublishedSnapshot

SLUG_TAKEN_MESSAGE = "This URL path is already taken"

_FROZEN = ConfigDict(frozen=True)


def utc_now() -> str:
    """Default gateway clock: ISO 8601 UTC timestamp."""
    return datetime.now(UTC).isoformat()


def new_record_id() -> str:
    """Fresh id for a published menu record."""
    return f"pub-{uuid.uuid4().hex[:12]}"


class SlugAvailability(BaseModel):
    model_config = _FROZEN

    available: bool
    slug: str
    error: str | None = None


class SaveOutcome(BaseModel):
    model_config = _FROZEN

    success: bool
    error: str | None = None
    updated_at: str | None = None


class PublishOutcome(BaseModel):
    """Result of a publish; ``menu_id`` is the published record id."""

    model_config = _FROZEN

    success: bool
    menu_id: str | None = None
    slug: str | None = None
    published_at: str | None = None
    updated_at: str | None = None
    error: str | None = None

    @property
    def slug_taken(self) -> bool:
        return not self.success and self.error == SLUG_TAKEN_MESSAGE


@runtime_checkable
class PersistenceGateway(Protocol):
    """Async storage interface consumed by the editing core."""

    async def check_slug_available(self, slug: str) -> SlugAvailability: ...

    async def publish(
        self,
        menu_id: str | None,
        slug: str,
        title: str,
        subtitle: str | None,
        snapshot: PublishedSnapshot,
    ) -> PublishOutcome: ...

    async def get_published(self, slug: str) -> PublishedSnapshot: ...

    async def load_draft(self, menu_id: str) -> MenuDocument: ...

    async def save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome: ...

    async def list_menus(self, user_id: str | None) -> list[MenuSummary]: ...

    async def delete_menu(self, menu_id: str) -> None: ...


def summarize(document: MenuDocument) -> MenuSummary:
    """Build the list-view summary of *document*."""
    from menuctl.domain.menu import MenuSummary

    return MenuSummary(
        id=document.id,
        name=document.name,
        status=str(document.status),
        published_slug=document.published_slug,
        section_count=len(document.sections),
        item_count=document.item_count(),
        updated_at=document.updated_at,
    )
