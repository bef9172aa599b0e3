"""Command group: items (add, set, delete, duplicate, move, transfer).

Items are addressed by SECTION_ID and their 0-based INDEX within the
section, the same positions ``menuctl menu show --json`` reports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from menuctl.commands._base import MenuGroup, yes_option

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext
    from menuctl.services.session import MenuEditingSession

_ITEM_EXAMPLES = """\
  menuctl item add MENU_ID 1 --set "Dish=Margherita" --set "Price=$12"
  menuctl item set MENU_ID 1 0 Price '$13'
  menuctl item duplicate MENU_ID 1 0
  menuctl item move MENU_ID 1 1 0
  menuctl item transfer MENU_ID 1 0 2
  menuctl item delete MENU_ID 1 0 --yes"""


def _parse_assignments(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    assignments: dict[str, str] = {}
    for raw in values:
        column, sep, value = raw.partition("=")
        if not sep or not column.strip():
            raise click.BadParameter(f"expected COLUMN=VALUE, got {raw!r}", ctx, param)
        assignments[column.strip()] = value
    return assignments


@click.group(cls=MenuGroup, examples=_ITEM_EXAMPLES)
def item() -> None:
    """Add, edit, reorder, and remove items within a section."""


@item.command(examples='  menuctl item add MENU_ID 1 --set "Dish=Margherita" --set "Price=$12"')
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.option(
    "--set",
    "values",
    multiple=True,
    callback=_parse_assignments,
    help="COLUMN=VALUE for the new item (repeatable).",
)
@click.pass_obj
def add(app: AppContext, menu_id: str, section_id: int, values: dict[str, str]) -> None:
    """Append an item to a section. Unset columns start empty."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        index = session.store.add_item(section_id, values)
        return {"section_id": section_id, "index": index}

    app.emit(app.service.edit(menu_id, "add_item", action))


@item.command("set", examples="  menuctl item set MENU_ID 1 0 Price '$13'")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("index", type=int)
@click.argument("column")
@click.argument("value")
@click.pass_obj
def set_cmd(
    app: AppContext, menu_id: str, section_id: int, index: int, column: str, value: str
) -> None:
    """Set one column of an item."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        session.store.update_item(section_id, index, column, value)
        return {"section_id": section_id, "index": index, "column": column}

    app.emit(app.service.edit(menu_id, "update_item", action))


@item.command(examples="  menuctl item delete MENU_ID 1 0 --yes")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("index", type=int)
@yes_option
@click.pass_obj
def delete(app: AppContext, menu_id: str, section_id: int, index: int, yes: bool) -> None:
    """Delete an item."""
    confirmed = app.confirm(
        f"Delete item {index} of section {section_id}? This action cannot be undone.",
        yes=yes,
    )

    def action(session: MenuEditingSession) -> dict[str, Any]:
        deleted = session.store.delete_item(section_id, index, confirmed=confirmed)
        return {"section_id": section_id, "index": index, "deleted": deleted}

    app.emit(app.service.edit(menu_id, "delete_item", action))


@item.command(examples="  menuctl item duplicate MENU_ID 1 0")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("index", type=int)
@click.pass_obj
def duplicate(app: AppContext, menu_id: str, section_id: int, index: int) -> None:
    """Insert a copy of an item directly after it."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        copy_index = session.store.duplicate_item(section_id, index)
        return {"section_id": section_id, "index": copy_index}

    app.emit(app.service.edit(menu_id, "duplicate_item", action))


@item.command(examples="  menuctl item move MENU_ID 1 3 0")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("from_index", type=int)
@click.argument("to_index", type=int)
@click.pass_obj
def move(
    app: AppContext, menu_id: str, section_id: int, from_index: int, to_index: int
) -> None:
    """Move an item to a new position within its section."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        session.reorder.reorder_items(section_id, from_index, to_index)
        return {"section_id": section_id, "index": to_index}

    app.emit(app.service.edit(menu_id, "reorder_items", action))


@item.command(examples="  menuctl item transfer MENU_ID 1 0 2")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("index", type=int)
@click.argument("target_section_id", type=int)
@click.pass_obj
def transfer(
    app: AppContext, menu_id: str, section_id: int, index: int, target_section_id: int
) -> None:
    """Move an item to the end of another section.

    Values carry over by column name; columns the target lacks are dropped.
    """

    def action(session: MenuEditingSession) -> dict[str, Any]:
        new_index = session.store.move_item(section_id, index, target_section_id)
        return {"section_id": target_section_id, "index": new_index}

    app.emit(app.service.edit(menu_id, "move_item", action))
