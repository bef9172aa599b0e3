"""Command group: columns (add, rename, delete, move)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from menuctl.commands._base import MenuGroup, yes_option

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext
    from menuctl.services.session import MenuEditingSession

_COLUMN_EXAMPLES = """\
  menuctl column add MENU_ID 1 "Glass Price"
  menuctl column rename MENU_ID 1 "Glass Price" "Glass"
  menuctl column move MENU_ID 1 3 1
  menuctl column delete MENU_ID 1 "Glass" --yes"""


@click.group(cls=MenuGroup, examples=_COLUMN_EXAMPLES)
def column() -> None:
    """Add, rename, reorder, and remove a section's columns."""


@column.command(examples='  menuctl column add MENU_ID 1 "Glass Price"')
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("name")
@click.pass_obj
def add(app: AppContext, menu_id: str, section_id: int, name: str) -> None:
    """Append a column; existing items get an empty value for it."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        section = session.store.add_column(section_id, name)
        return {"section_id": section_id, "column": section.columns[-1]}

    app.emit(app.service.edit(menu_id, "add_column", action))


@column.command(examples='  menuctl column rename MENU_ID 1 "Glass Price" "Glass"')
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("old_name")
@click.argument("new_name")
@click.pass_obj
def rename(
    app: AppContext, menu_id: str, section_id: int, old_name: str, new_name: str
) -> None:
    """Rename a column, keeping every item's value."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        section = session.store.rename_column(section_id, old_name, new_name)
        return {"section_id": section_id, "column": new_name.strip(), "columns": section.columns}

    app.emit(app.service.edit(menu_id, "rename_column", action))


@column.command(examples='  menuctl column delete MENU_ID 1 "Glass" --yes')
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("name")
@yes_option
@click.pass_obj
def delete(app: AppContext, menu_id: str, section_id: int, name: str, yes: bool) -> None:
    """Delete a column and its value from every item."""
    confirmed = app.confirm(
        f'Delete column "{name}"? All data in this column will be lost.', yes=yes
    )

    def action(session: MenuEditingSession) -> dict[str, Any]:
        deleted = session.store.delete_column(section_id, name, confirmed=confirmed)
        return {"section_id": section_id, "column": name, "deleted": deleted}

    app.emit(app.service.edit(menu_id, "delete_column", action))


@column.command(examples="  menuctl column move MENU_ID 1 3 1")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.argument("from_index", type=int)
@click.argument("to_index", type=int)
@click.pass_obj
def move(
    app: AppContext, menu_id: str, section_id: int, from_index: int, to_index: int
) -> None:
    """Move a column to a new position (0-based)."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        section = session.reorder.reorder_columns(section_id, from_index, to_index)
        return {"section_id": section_id, "columns": section.columns}

    app.emit(app.service.edit(menu_id, "reorder_columns", action))
