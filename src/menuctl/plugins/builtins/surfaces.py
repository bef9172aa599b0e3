"""Built-in preview surfaces.

A surface is a plugin implementing ``render_preview``. Both built-ins
draw from the previews the notifier hands them and never project the
document themselves.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

import pluggy

from menuctl.output.console import create_console, get_output
from menuctl.output.renderers import render_sections

if TYPE_CHECKING:
    from menuctl.domain.lifecycle import SaveStatus
    from menuctl.domain.preview import SectionPreview

hookimpl = pluggy.HookimplMarker("menuctl")


class SnapshotSurface:
    """Keeps the latest previews and statuses it was sent, per menu."""

    def __init__(self) -> None:
        self.previews: dict[str, list[SectionPreview]] = {}
        self.statuses: list[tuple[str, str, str | None]] = []
        self.render_count = 0

    @hookimpl
    def render_preview(self, menu_id: str, previews: list[SectionPreview]) -> None:
        self.previews[menu_id] = previews
        self.render_count += 1

    @hookimpl
    def status_changed(self, menu_id: str, status: SaveStatus, error: str | None) -> None:
        self.statuses.append((menu_id, str(status), error))


class ConsoleSurface:
    """Prints each refreshed preview through the Rich section renderer.

    Output goes to *write* (stderr by default) so it never mixes with a
    command's own result on stdout.
    """

    def __init__(
        self,
        write: Callable[[str], object] | None = None,
        *,
        width: int | None = None,
    ) -> None:
        self._write = write or sys.stderr.write
        self._width = width

    @hookimpl
    def render_preview(self, menu_id: str, previews: list[SectionPreview]) -> None:
        console = create_console(width=self._width)
        render_sections(console, [p.model_dump(mode="json") for p in previews])
        self._write(get_output(console))
