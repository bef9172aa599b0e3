"""Rich Console factory and theme for menuctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``render_*() -> str`` contract. In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MENU_THEME = Theme(
    {
        "menu.ok": "bold green",
        "menu.error": "bold red",
        "menu.warning": "bold yellow",
        "menu.op": "bold cyan",
        "menu.key": "dim",
        "menu.id": "bold blue",
        "menu.section": "bold magenta",
        "menu.title": "bold",
        "menu.price": "green",
        "menu.description": "italic",
        "menu.placeholder": "dim italic",
        "menu.status.saved": "green",
        "menu.status.unsaved": "yellow",
        "menu.status.saving": "cyan",
        "menu.status.needs-publish": "bold yellow",
        "menu.status.draft": "dim",
        "menu.status.published": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MENU_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a save or menu status."""
    style = f"menu.status.{status}"
    return style if style in MENU_THEME.styles else ""
