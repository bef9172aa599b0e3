"""Pluggy hook specifications for menu editing events.

Rendering surfaces, exporters, and integrations subscribe to these.
Every hook is fire-and-forget: return values are ignored and a raising
implementation is logged, never propagated into the editing core.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from menuctl.domain.lifecycle import SaveStatus
    from menuctl.domain.preview import SectionPreview

hookspec = pluggy.HookspecMarker("menuctl")


class MenuctlHookSpec:
    """Hook specifications for the menuctl plugin system."""

    @hookspec
    def menu_changed(self, menu_id: str, reason: str) -> None:
        """Called after every accepted document mutation or discard."""

    @hookspec
    def status_changed(self, menu_id: str, status: SaveStatus, error: str | None) -> None:
        """Called when the save status changes or an error is attached."""

    @hookspec
    def render_preview(self, menu_id: str, previews: list[SectionPreview]) -> None:
        """Called with the projection of the document after a change.

        Every implementation receives the same list object.
        """

    @hookspec
    def post_publish(self, menu_id: str, slug: str, url: str | None) -> None:
        """Called after a successful publish."""
