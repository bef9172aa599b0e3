"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from menuctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from menuctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "export" in result.data:
        return _json.dumps(result.data["export"], indent=2)
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if "id" in item)
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


def render_sections(console: Console, sections: Sequence[Mapping[str, Any]]) -> None:
    """Print preview records (``SectionPreview`` dumps) as one panel per section."""
    if not sections:
        console.print(Text("  (no sections)", style="menu.placeholder"))
        return
    for section in sections:
        grid = Table.grid(padding=(0, 2), expand=True)
        grid.add_column(ratio=1)
        grid.add_column(justify="right", no_wrap=True)
        for item in section.get("items", []):
            _add_item_rows(grid, item)
        if not section.get("items"):
            grid.add_row(Text("No items yet", style="menu.placeholder"), "")
        title = Text(str(section.get("name", "")), style="menu.section")
        console.print(Panel(grid, title=title, title_align="left", expand=True))


# ── Helpers ───────────────────────────────────────────────────────────


def _add_item_rows(grid: Table, item: Mapping[str, Any]) -> None:
    if item.get("placeholder"):
        grid.add_row(Text(str(item.get("title_text", "")), style="menu.placeholder"), "")
        return
    grid.add_row(
        Text(str(item.get("title_text", "")), style="menu.title"),
        Text(str(item.get("title_price", "")), style="menu.price"),
    )
    if item.get("description"):
        grid.add_row(Text(f"  {item['description']}", style="menu.description"), "")
    cells = [c for c in item.get("data_row", []) if str(c.get("value", "")).strip()]
    if cells:
        row = Text("  ")
        for i, cell in enumerate(cells):
            if i:
                row.append(" · ", style="dim")
            row.append(f"{cell['column']}: ", style="menu.key")
            row.append(str(cell["value"]), style="menu.price" if cell.get("is_price") else "")
        grid.add_row(row, "")


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="menu.ok")
    op = Text(f"  {result.op}", style="menu.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    line = Text()
    line.append(f"  {key}: ", style="menu.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="menu.id")
    elif key in ("status", "save_status"):
        v = Text(str(value), style=style_for_status(str(value)))
    elif key in ("name", "title"):
        v = Text(str(value), style="menu.title")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    line.append_text(v)
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    console.print(f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}")

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="menu.error")
    op = Text(f"  {result.op}", style="menu.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


_MUTATION_KEYS = (
    "id",
    "name",
    "section_id",
    "index",
    "column",
    "status",
    "save_status",
    "deleted",
    "source_id",
    "sections",
    "columns",
    "order",
    "target",
)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/delete/duplicate/edit/discard/import results."""
    _status_line(console, result)
    for key in _MUTATION_KEYS:
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_menu_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_menus as a table."""
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="menu.id", no_wrap=True)
    table.add_column("Name", style="menu.title")
    table.add_column("Status")
    table.add_column("Slug")
    table.add_column("Sections", justify="right")
    table.add_column("Items", justify="right")
    if verbose:
        table.add_column("Updated", style="dim")

    for item in items:
        status = str(item.get("status", ""))
        row: list[str | Text] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            Text(status, style=style_for_status(status)),
            str(item.get("published_slug") or ""),
            str(item.get("section_count", 0)),
            str(item.get("item_count", 0)),
        ]
        if verbose:
            row.append(str(item.get("updated_at") or ""))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} menus")


def _render_preview(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a menu as it appears on every preview surface."""
    d = result.data
    heading = Text(str(d.get("name", "Untitled Menu")), style="menu.title")
    status = str(d.get("save_status") or d.get("status", ""))
    heading.append(f"  [{status}]", style=style_for_status(status))
    console.print(heading)
    if d.get("url"):
        _field(console, "url", d["url"])
    render_sections(console, d.get("sections", []))
    if verbose:
        _render_meta(console, result)


def _render_publish(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("id", "slug", "url", "published_menu_id", "published_at", "save_status"):
        if value := result.data.get(key):
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_check_slug(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    if d.get("available"):
        console.print(Text("available", style="menu.ok"), Text(f"  {d.get('slug')}"))
    else:
        console.print(
            Text("unavailable", style="menu.error"),
            Text(f"  {d.get('slug')} — {d.get('error') or 'taken'}"),
        )


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Export prints the file payload itself (or where it was written)."""
    if "path" in result.data:
        _status_line(console, result)
        _field(console, "path", result.data["path"])
        _field(console, "sections", result.data.get("sections", 0))
        return
    console.print_json(_json.dumps(result.data.get("export", {})))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "create_menu": _render_mutation,
    "delete_menu": _render_mutation,
    "duplicate_menu": _render_mutation,
    "edit": _render_mutation,
    "add_section": _render_mutation,
    "update_section": _render_mutation,
    "delete_section": _render_mutation,
    "reorder_sections": _render_mutation,
    "add_item": _render_mutation,
    "update_item": _render_mutation,
    "delete_item": _render_mutation,
    "duplicate_item": _render_mutation,
    "reorder_items": _render_mutation,
    "move_item": _render_mutation,
    "add_column": _render_mutation,
    "rename_column": _render_mutation,
    "delete_column": _render_mutation,
    "reorder_columns": _render_mutation,
    "discard": _render_mutation,
    "import_menu": _render_mutation,
    "list_menus": _render_menu_list,
    "preview": _render_preview,
    "publish": _render_publish,
    "check_slug": _render_check_slug,
    "export_menu": _render_export,
}
