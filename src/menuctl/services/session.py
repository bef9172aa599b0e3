"""MenuEditingSession — save/publish lifecycle of one open menu.

The session owns a :class:`DocumentStore` and a :class:`ReorderEngine`
over the same document, and drives the Persistence Gateway it was
constructed with. There is no ambient editor state: every session is an
explicit object, and two sessions never share a document.

Save status::

    mutation ──> unsaved ──persist──> saving ──ok──> saved | needs-publish
                    ^                   │
                    └──────failed───────┘   (error attached, no retry)

Mutations are synchronous and never wait on I/O. Each one bumps a
generation counter, flips the status to ``unsaved`` and schedules a
persist. Persists for a document are serialized through a single
background task: a mutation that lands while a save is in flight is
applied immediately and picked up by one follow-up save once the
in-flight one settles (coalescing, never cancellation).

With ``autosave="debounce"`` the persist starts ``debounce_seconds``
after the last mutation instead of right away; each mutation restarts
the timer.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from menuctl.domain.errors import (
    MenuError,
    NotFoundError,
    PersistenceError,
    SlugTakenError,
    ValidationError,
)
from menuctl.domain.lifecycle import (
    SAVE_TRANSITIONS,
    MenuStatus,
    SaveStatus,
    compute_save_status,
    is_valid_transition,
)
from menuctl.domain.menu import MenuDocument, PublishedSnapshot
from menuctl.domain.preview import SectionPreview, project
from menuctl.domain.slugs import published_url, validate_slug
from menuctl.infrastructure.gateway import SLUG_TAKEN_MESSAGE
from menuctl.services.document import DocumentStore
from menuctl.services.reorder import ReorderEngine

if TYPE_CHECKING:
    from menuctl.infrastructure.gateway import (
        PersistenceGateway,
        PublishOutcome,
        SlugAvailability,
    )
    from menuctl.plugins.notifier import ChangeNotifier

DEFAULT_TITLE = "Our Menu"
DEFAULT_SUBTITLE = "Crafted with care and passion"
DEFAULT_DEBOUNCE_SECONDS = 2.0

ConfirmCallback = Callable[[str], Awaitable[bool]]


class AutosavePolicy(StrEnum):
    IMMEDIATE = "immediate"
    DEBOUNCE = "debounce"


def _content_differs(document: MenuDocument, snapshot: PublishedSnapshot) -> bool:
    """True when the draft's sections or style differ from *snapshot*."""
    return [s.model_dump() for s in document.sections] != [
        s.model_dump() for s in snapshot.sections
    ] or document.style.model_dump() != snapshot.style.model_dump()


def _persistence_error(exc: Exception, action: str, **detail: Any) -> PersistenceError:
    error = PersistenceError(f"Could not {action}: {exc}", **detail)
    error.__cause__ = exc
    return error


class MenuEditingSession:
    """One editing session over one menu document.

    Args:
        gateway: Persistence Gateway all I/O goes through.
        document: The document to edit. The session takes ownership.
        notifier: Receives change, status, and publish events.
        autosave: ``"immediate"`` or ``"debounce"``.
        debounce_seconds: Quiet period before a debounced persist.
        default_title: Title used when publish is called without one.
        default_subtitle: Subtitle used when publish is called without one.
        require_sections: Reject publishing a menu with no sections.
        base_url: Prefix for the public URL reported after publishing.
        confirm: Async callback answering destructive-action prompts.
        published_in_sync: Whether the loaded draft matches its
            published snapshot (ignored for never-published menus).
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        document: MenuDocument,
        *,
        notifier: ChangeNotifier | None = None,
        autosave: AutosavePolicy | str = AutosavePolicy.IMMEDIATE,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        default_title: str = DEFAULT_TITLE,
        default_subtitle: str | None = DEFAULT_SUBTITLE,
        require_sections: bool = True,
        base_url: str | None = None,
        confirm: ConfirmCallback | None = None,
        published_in_sync: bool = True,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._autosave = AutosavePolicy(autosave)
        self._debounce_seconds = debounce_seconds
        self._default_title = default_title
        self._default_subtitle = default_subtitle
        self._require_sections = require_sections
        self._base_url = base_url
        self._confirm = confirm

        self._store = DocumentStore(document, on_change=self._on_document_changed)
        self._reorder = ReorderEngine(self._store)
        self._log = structlog.get_logger(__name__).bind(menu_id=document.id)

        # Generation bookkeeping: every accepted mutation bumps _generation.
        self._generation = 0
        self._saved_generation = 0
        self._published_generation = 0 if published_in_sync else -1

        self._status = compute_save_status(document.published_slug, not published_in_sync)
        self._last_error: MenuError | None = None
        self._pending = False
        self._persist_task: asyncio.Task[None] | None = None
        self._debounce_handle: asyncio.TimerHandle | None = None
        self._publish_lock = asyncio.Lock()

    @classmethod
    async def open(
        cls, gateway: PersistenceGateway, menu_id: str, **options: Any
    ) -> MenuEditingSession:
        """Load *menu_id* from *gateway* and start a session on it.

        Duplicate section ids from a corrupted draft are repaired (and the
        repair scheduled for saving). A published menu whose draft differs
        from its snapshot starts in ``needs-publish``.
        """
        try:
            document = await gateway.load_draft(menu_id)
        except MenuError:
            raise
        except Exception as exc:
            raise _persistence_error(exc, "load menu", menu_id=menu_id) from exc

        in_sync = True
        if document.published_slug:
            try:
                snapshot = await gateway.get_published(document.published_slug)
            except NotFoundError:
                in_sync = False
            except MenuError:
                raise
            except Exception as exc:
                raise _persistence_error(exc, "load published menu", menu_id=menu_id) from exc
            else:
                in_sync = not _content_differs(document, snapshot)

        session = cls(gateway, document, published_in_sync=in_sync, **options)
        session.store.repair_duplicate_section_ids()
        return session

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def document(self) -> MenuDocument:
        return self._store.document

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def reorder(self) -> ReorderEngine:
        return self._reorder

    @property
    def menu_id(self) -> str:
        return self._store.document.id

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def last_error(self) -> MenuError | None:
        """Error of the last failed persist or publish, if not yet superseded."""
        return self._last_error

    @property
    def has_unsaved_changes(self) -> bool:
        return self._saved_generation != self._generation

    def preview(self) -> list[SectionPreview]:
        """Project the current in-memory document."""
        return project(self.document)

    async def confirm(self, prompt: str) -> bool:
        """Ask the injected confirmation callback; True when none is set."""
        if self._confirm is None:
            return True
        return await self._confirm(prompt)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def _set_status(self, status: SaveStatus) -> None:
        current = self._status
        if not is_valid_transition(current, status, SAVE_TRANSITIONS):
            msg = f"Invalid save status transition: {current} -> {status}"
            raise RuntimeError(msg)
        self._status = status
        if status != current:
            self._log.debug("status.changed", previous=str(current), status=str(status))
            if self._notifier is not None:
                self._notifier.status_changed(self.menu_id, status, self._last_error)

    def _settled_status(self) -> SaveStatus:
        return compute_save_status(
            self.document.published_slug,
            self._generation != self._published_generation,
        )

    def _attach_error(self, error: MenuError) -> MenuError:
        self._last_error = error
        self._log.warning("session.error", code=error.code, error=error.message)
        if self._notifier is not None:
            self._notifier.status_changed(self.menu_id, self._status, error)
        return error

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _on_document_changed(self, reason: str) -> None:
        self._generation += 1
        self._set_status(SaveStatus.UNSAVED)
        if self._notifier is not None:
            self._notifier.menu_changed(self.document, reason)
        self._schedule_persist()

    def _schedule_persist(self) -> None:
        self._pending = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: the next flush() or save() persists.
            return
        if self._autosave is AutosavePolicy.DEBOUNCE:
            if self._debounce_handle is not None:
                self._debounce_handle.cancel()
            self._debounce_handle = loop.call_later(
                self._debounce_seconds, self._start_persist_task
            )
        else:
            self._start_persist_task()

    def _start_persist_task(self) -> None:
        self._debounce_handle = None
        if self._persist_task is None or self._persist_task.done():
            self._persist_task = asyncio.get_running_loop().create_task(self._persist_loop())

    async def _persist_loop(self) -> None:
        # A failed save ends the loop unless a newer mutation arrived meanwhile.
        while self._pending:
            self._pending = False
            await self._persist_once()

    async def _persist_once(self) -> bool:
        generation = self._generation
        snapshot = self.document.model_copy(deep=True)
        self._set_status(SaveStatus.SAVING)

        error: MenuError | None = None
        try:
            outcome = await self._gateway.save_draft(self.menu_id, snapshot)
        except MenuError as exc:
            error = exc
        except Exception as exc:
            error = _persistence_error(exc, "save menu", menu_id=self.menu_id)
        else:
            if not outcome.success:
                error = PersistenceError(outcome.error or "Save failed", menu_id=self.menu_id)

        stale = generation != self._generation
        if error is not None:
            if not stale:
                self._set_status(SaveStatus.UNSAVED)
            self._attach_error(error)
            return False

        self._saved_generation = generation
        self._last_error = None
        if outcome.updated_at:
            self.document.updated_at = outcome.updated_at
        self._log.debug("draft.saved", generation=generation)
        if not stale:
            self._set_status(self._settled_status())
        return True

    async def flush(self) -> None:
        """Wait until no persist is pending or in flight.

        A pending debounce timer is skipped and the persist starts now.
        """
        while True:
            if self._debounce_handle is not None:
                self._debounce_handle.cancel()
                self._debounce_handle = None
            if self._pending:
                self._start_persist_task()
            task = self._persist_task
            if task is None or task.done():
                return
            await task

    async def save(self) -> SaveStatus:
        """Persist the current document now (the caller-driven retry)."""
        if self.has_unsaved_changes or self._last_error is not None:
            self._pending = True
        await self.flush()
        return self._status

    async def close(self) -> None:
        await self.flush()

    async def __aenter__(self) -> MenuEditingSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _drop_pending(self) -> None:
        # Unstarted persists are dropped; an in-flight one is awaited.
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None
        self._pending = False
        task = self._persist_task
        if task is not None and not task.done():
            await task

    # ------------------------------------------------------------------
    # Discard
    # ------------------------------------------------------------------

    async def discard_to_saved(self) -> MenuDocument:
        """Replace the document with the last persisted draft.

        Raises:
            NotFoundError: The menu was never saved.
            PersistenceError: The gateway failed.
        """
        await self._drop_pending()
        try:
            document = await self._gateway.load_draft(self.menu_id)
        except MenuError:
            raise
        except Exception as exc:
            raise _persistence_error(exc, "load saved menu", menu_id=self.menu_id) from exc

        self._store.replace_document(document)
        self._generation += 1
        self._saved_generation = self._generation
        self._last_error = None
        self._set_status(SaveStatus.SAVED)
        if self._notifier is not None:
            self._notifier.menu_changed(document, "discard_to_saved")
        return document

    async def discard_to_published(self) -> MenuDocument:
        """Replace sections and style with the published snapshot.

        The stored draft is not overwritten, so the menu stays in
        ``needs-publish`` until the next publish.

        Raises:
            NotFoundError: The menu was never published.
            PersistenceError: The gateway failed.
        """
        slug = self.document.published_slug
        if not slug:
            raise NotFoundError("This menu has not been published", menu_id=self.menu_id)
        await self._drop_pending()
        try:
            snapshot = await self._gateway.get_published(slug)
        except MenuError:
            raise
        except Exception as exc:
            raise _persistence_error(exc, "load published menu", slug=slug) from exc

        document = self.document.model_copy(deep=True)
        document.sections = [s.model_copy(deep=True) for s in snapshot.sections]
        document.style = snapshot.style.model_copy(deep=True)
        document.section_counter = max(
            [document.section_counter, *(s.id for s in document.sections)]
        )
        self._store.replace_document(document)
        self._generation += 1
        self._published_generation = self._generation
        self._last_error = None
        self._set_status(SaveStatus.NEEDS_PUBLISH)
        if self._notifier is not None:
            self._notifier.menu_changed(document, "discard_to_published")
        return document

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    async def check_slug(self, slug: str) -> SlugAvailability:
        """Ask the gateway whether *slug* can be published to."""
        try:
            return await self._gateway.check_slug_available(slug)
        except MenuError:
            raise
        except Exception as exc:
            raise _persistence_error(exc, "check URL path", slug=slug) from exc

    async def publish(
        self,
        slug: str,
        title: str | None = None,
        subtitle: str | None = None,
    ) -> PublishOutcome:
        """Publish the current document at *slug*.

        The draft is saved first. On any failure the document's published
        fields are left untouched and the error is attached as
        :attr:`last_error` before being raised.

        Raises:
            SlugInvalidError: *slug* is malformed.
            ValidationError: The menu has no sections.
            SlugTakenError: Another published menu owns *slug*.
            PersistenceError: Saving or publishing failed.
        """
        async with self._publish_lock:
            try:
                return await self._publish(slug, title, subtitle)
            except MenuError as exc:
                self._attach_error(exc)
                raise

    async def _publish(
        self, slug: str, title: str | None, subtitle: str | None
    ) -> PublishOutcome:
        validate_slug(slug)
        doc = self.document
        if self._require_sections and not doc.sections:
            raise ValidationError("Please add at least one section before publishing")

        title = (title or "").strip() or doc.published_title or self._default_title
        if subtitle is None:
            subtitle = doc.published_subtitle or self._default_subtitle
        if subtitle is not None:
            subtitle = subtitle.strip() or None

        republishing = doc.published_menu_id is not None and doc.published_slug == slug
        if not republishing:
            availability = await self.check_slug(slug)
            if not availability.available:
                raise SlugTakenError(availability.error or SLUG_TAKEN_MESSAGE, slug=slug)

        await self.flush()
        if self.has_unsaved_changes:
            raise PersistenceError(
                "Could not save the menu before publishing",
                menu_id=self.menu_id,
                cause=self._last_error.message if self._last_error else None,
            )

        generation = self._generation
        snapshot = PublishedSnapshot(
            source_menu_id=doc.id,
            slug=slug,
            title=title,
            subtitle=subtitle,
            sections=[s.model_copy(deep=True) for s in doc.sections],
            style=doc.style.model_copy(deep=True),
        )
        try:
            outcome = await self._gateway.publish(
                doc.published_menu_id, slug, title, subtitle, snapshot
            )
        except MenuError:
            raise
        except Exception as exc:
            raise _persistence_error(exc, "publish menu", slug=slug) from exc
        if outcome.slug_taken:
            raise SlugTakenError(outcome.error or SLUG_TAKEN_MESSAGE, slug=slug)
        if not outcome.success:
            raise PersistenceError(outcome.error or "Publish failed", slug=slug)

        doc = self.document
        doc.published_menu_id = outcome.menu_id
        doc.published_slug = slug
        doc.published_title = title
        doc.published_subtitle = subtitle
        doc.status = MenuStatus.PUBLISHED
        self._published_generation = generation
        self._last_error = None
        self._log.info("menu.published", slug=slug, published_menu_id=outcome.menu_id)

        # Persist the published fields without counting them as an edit.
        self._pending = True
        await self.flush()

        if self._notifier is not None:
            url = published_url(self._base_url, slug) if self._base_url else None
            self._notifier.post_publish(self.menu_id, slug, url)
        return outcome
