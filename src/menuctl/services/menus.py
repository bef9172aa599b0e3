"""MenuService — synchronous facade over the editing core.

Each method runs one short-lived editing session on its own event loop
and converts domain exceptions into a failed :class:`ServiceResult`, so
the CLI never sees a raised :class:`MenuError`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from menuctl.config.models import EditorConfig, PublishConfig
from menuctl.domain.errors import MenuError, PersistenceError, ValidationError
from menuctl.domain.lifecycle import MenuStatus
from menuctl.domain.menu import MenuDocument
from menuctl.domain.slugs import default_slug, published_url
from menuctl.domain.transfer import build_export
from menuctl.services._helpers import copy_name, new_menu_id, now_iso
from menuctl.services.base import BaseService
from menuctl.services.result import ServiceResult
from menuctl.services.session import MenuEditingSession
from menuctl.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from menuctl.infrastructure.gateway import PersistenceGateway
    from menuctl.plugins.notifier import ChangeNotifier

_T = TypeVar("_T")

EditAction = Callable[[MenuEditingSession], dict[str, Any] | None]


async def _gateway_call(call: Awaitable[_T], action: str) -> _T:
    try:
        return await call
    except MenuError:
        raise
    except Exception as exc:
        raise PersistenceError(f"Could not {action}: {exc}") from exc


class MenuService(BaseService):
    """Menu management and editing operations for the CLI."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        *,
        notifier: ChangeNotifier | None = None,
        editor: EditorConfig | None = None,
        publish: PublishConfig | None = None,
    ) -> None:
        super().__init__(gateway, notifier=notifier)
        self._editor = editor or EditorConfig()
        self._publish = publish or PublishConfig()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _session_options(self) -> dict[str, Any]:
        return {
            "notifier": self._notifier,
            "autosave": self._editor.autosave,
            "debounce_seconds": self._editor.debounce_seconds,
            "default_title": self._publish.default_title,
            "default_subtitle": self._publish.default_subtitle,
            "require_sections": self._publish.require_sections,
            "base_url": self._publish.base_url,
        }

    async def _open(self, menu_id: str) -> MenuEditingSession:
        with trace_span("open_session"):
            return await MenuEditingSession.open(self._gateway, menu_id, **self._session_options())

    def _drain_warnings(self) -> list[str]:
        if self._notifier is None:
            return []
        warnings = list(self._notifier.warnings)
        self._notifier.warnings.clear()
        return warnings

    def _ok(self, op: str, data: dict[str, Any]) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=data, warnings=self._drain_warnings())

    def _error(self, op: str, exc: MenuError) -> ServiceResult:
        return self._fail(op, exc, self._drain_warnings())

    def _url(self, slug: str | None) -> str | None:
        return published_url(self._publish.base_url, slug) if slug else None

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    @traced
    def create_menu(
        self, name: str = "Untitled Menu", *, user_id: str | None = None
    ) -> ServiceResult:
        """Create and save an empty draft."""
        op = "create_menu"
        clean = name.strip()
        if not clean:
            return self._error(op, ValidationError("Please enter a menu name"))
        now = now_iso()
        document = MenuDocument(
            id=new_menu_id(),
            name=clean,
            user_id=user_id or self._editor.user_id,
            created_at=now,
            updated_at=now,
        )
        try:
            outcome = asyncio.run(
                _gateway_call(self._gateway.save_draft(document.id, document), "create menu")
            )
            if not outcome.success:
                raise PersistenceError(outcome.error or "Save failed", menu_id=document.id)
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, {"id": document.id, "name": document.name, "status": "draft"})

    @traced
    def list_menus(self, user_id: str | None = None) -> ServiceResult:
        op = "list_menus"
        owner = user_id or self._editor.user_id
        try:
            summaries = asyncio.run(_gateway_call(self._gateway.list_menus(owner), "list menus"))
        except MenuError as exc:
            return self._error(op, exc)
        items = [s.model_dump(mode="json") for s in summaries]
        return self._ok(op, {"items": items, "count": len(items)})

    @traced
    def delete_menu(self, menu_id: str, *, confirmed: bool = True) -> ServiceResult:
        """Delete a menu. Without confirmation nothing happens."""
        op = "delete_menu"
        if not confirmed:
            return self._ok(op, {"id": menu_id, "deleted": False})
        try:
            asyncio.run(_gateway_call(self._gateway.delete_menu(menu_id), "delete menu"))
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, {"id": menu_id, "deleted": True})

    @traced
    def duplicate_menu(self, menu_id: str, name: str | None = None) -> ServiceResult:
        """Copy a draft under a new id; the copy is an unpublished draft."""
        op = "duplicate_menu"

        async def run() -> MenuDocument:
            source = await _gateway_call(self._gateway.load_draft(menu_id), "load menu")
            now = now_iso()
            copy = source.model_copy(
                deep=True,
                update={
                    "id": new_menu_id(),
                    "name": (name or "").strip() or copy_name(source.name),
                    "published_menu_id": None,
                    "published_slug": None,
                    "published_title": None,
                    "published_subtitle": None,
                    "status": MenuStatus.DRAFT,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            outcome = await _gateway_call(self._gateway.save_draft(copy.id, copy), "save menu")
            if not outcome.success:
                raise PersistenceError(outcome.error or "Save failed", menu_id=copy.id)
            return copy

        try:
            copy = asyncio.run(run())
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, {"id": copy.id, "name": copy.name, "source_id": menu_id})

    @traced
    def preview(self, menu_id: str) -> ServiceResult:
        """Project a menu the way every preview surface shows it."""
        op = "preview"

        async def run() -> dict[str, Any]:
            async with await self._open(menu_id) as session:
                doc = session.document
                with trace_span("project"):
                    sections = [p.model_dump(mode="json") for p in session.preview()]
                return {
                    "id": doc.id,
                    "name": doc.name,
                    "status": str(doc.status),
                    "save_status": str(session.status),
                    "published_slug": doc.published_slug,
                    "url": self._url(doc.published_slug),
                    "sections": sections,
                }

        try:
            data = asyncio.run(run())
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, data)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    @traced
    def edit(self, menu_id: str, op: str, action: EditAction) -> ServiceResult:
        """Open a session, apply *action*, and wait for the save to settle.

        *action* runs Document Store / Reorder Engine operations on the
        session and may return extra result data. A save that fails
        afterwards turns the result into a failure.
        """

        async def run() -> tuple[dict[str, Any], MenuEditingSession]:
            session = await self._open(menu_id)
            async with session:
                data = action(session) or {}
            return data, session

        try:
            data, session = asyncio.run(run())
            if session.last_error is not None:
                raise session.last_error
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, {"id": menu_id, **data, "save_status": str(session.status)})

    @traced
    def import_menu(self, menu_id: str, payload: Any) -> ServiceResult:
        """Replace a menu's sections with those from an export payload."""
        return self.edit(
            menu_id,
            "import_menu",
            lambda session: {"sections": len(session.store.import_sections(payload))},
        )

    @traced
    def export_menu(self, menu_id: str) -> ServiceResult:
        op = "export_menu"
        try:
            document = asyncio.run(_gateway_call(self._gateway.load_draft(menu_id), "load menu"))
        except MenuError as exc:
            return self._error(op, exc)
        payload = build_export(document.sections, now_iso())
        return self._ok(
            op, {"id": menu_id, "sections": len(document.sections), "export": payload}
        )

    @traced
    def discard(
        self, menu_id: str, target: Literal["saved", "published"] = "saved"
    ) -> ServiceResult:
        """Revert a menu to its last saved draft or its published copy.

        Reverting to the published copy also saves the result as the new
        draft, so the revert outlives this call.
        """
        op = "discard"

        async def run() -> MenuEditingSession:
            async with await self._open(menu_id) as session:
                if target == "published":
                    await session.discard_to_published()
                    await session.save()
                else:
                    await session.discard_to_saved()
            return session

        try:
            session = asyncio.run(run())
            if session.last_error is not None:
                raise session.last_error
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(
            op, {"id": menu_id, "target": target, "save_status": str(session.status)}
        )

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    @traced
    def check_slug(self, slug: str) -> ServiceResult:
        op = "check_slug"
        try:
            availability = asyncio.run(
                _gateway_call(self._gateway.check_slug_available(slug), "check URL path")
            )
        except MenuError as exc:
            return self._error(op, exc)
        return self._ok(op, availability.model_dump(mode="json"))

    @traced
    def publish(
        self,
        menu_id: str,
        slug: str | None = None,
        title: str | None = None,
        subtitle: str | None = None,
    ) -> ServiceResult:
        """Publish a menu.

        Without *slug* the menu's current slug is reused, or a fresh
        ``menu-NNNNNN-xxxx`` slug is generated for a first publish.
        """
        op = "publish"
        warnings: list[str] = []

        async def run() -> dict[str, Any]:
            async with await self._open(menu_id) as session:
                target = slug or session.document.published_slug or default_slug()
                with trace_span("publish"):
                    outcome = await session.publish(target, title, subtitle)
                await session.flush()
                if session.last_error is not None:
                    warnings.append(
                        f"Published, but saving the draft failed: {session.last_error.message}"
                    )
                return {
                    "id": menu_id,
                    "slug": outcome.slug,
                    "url": self._url(outcome.slug),
                    "published_menu_id": outcome.menu_id,
                    "published_at": outcome.published_at,
                    "updated_at": outcome.updated_at,
                    "title": session.document.published_title,
                    "save_status": str(session.status),
                }

        try:
            data = asyncio.run(run())
        except MenuError as exc:
            return self._error(op, exc)
        result = self._ok(op, data)
        return result.model_copy(update={"warnings": [*result.warnings, *warnings]})
