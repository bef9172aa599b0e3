"""ChangeNotifier — fan editing events out to plugin hooks.

The editing session reports every change here and nowhere else. For a
document change the notifier projects the document exactly once and
hands that same list to every ``render_preview`` implementation, so no
two surfaces can show previews of different snapshots.

Implementations are called one at a time. A raising implementation is
logged and recorded in :attr:`warnings`; the remaining ones still run.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from menuctl.domain.preview import SectionPreview, project

if TYPE_CHECKING:
    from menuctl.domain.errors import MenuError
    from menuctl.domain.lifecycle import SaveStatus
    from menuctl.domain.menu import MenuDocument
    from menuctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class ChangeNotifier:
    """Dispatches session events to a :class:`PluginManager`'s hooks."""

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager
        self.warnings: list[str] = []
        self.last_previews: list[SectionPreview] | None = None

    def _dispatch(self, hook_name: str, **kwargs: Any) -> None:
        caller = getattr(self._pm.hook, hook_name)
        for impl in caller.get_hookimpls():
            try:
                impl.function(**kwargs)
            except Exception:
                logger.warning(
                    "Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True
                )
                self.warnings.append(f"Plugin {impl.plugin_name} failed in {hook_name}")

    def menu_changed(self, document: MenuDocument, reason: str) -> list[SectionPreview]:
        """Announce a change and refresh every surface from one projection."""
        self._dispatch("menu_changed", menu_id=document.id, reason=reason)
        previews = project(document)
        self.last_previews = previews
        self._dispatch("render_preview", menu_id=document.id, previews=previews)
        return previews

    def status_changed(self, menu_id: str, status: SaveStatus, error: MenuError | None) -> None:
        message = error.message if error is not None else None
        self._dispatch("status_changed", menu_id=menu_id, status=status, error=message)

    def post_publish(self, menu_id: str, slug: str, url: str | None) -> None:
        self._dispatch("post_publish", menu_id=menu_id, slug=slug, url=url)
