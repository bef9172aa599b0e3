"""Command group: sections (add, update, delete, move)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from menuctl.commands._base import MenuGroup, yes_option
from menuctl.domain.templates import SECTION_TYPES

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext
    from menuctl.services.session import MenuEditingSession

_SECTION_EXAMPLES = """\
  menuctl section add MENU_ID "Starters" --type food
  menuctl section add MENU_ID "Specials" -c "Dish" -c "Price" -t "Dish"
  menuctl section update MENU_ID 2 --name "Mains"
  menuctl section move MENU_ID 2 0
  menuctl section delete MENU_ID 2 --yes"""

_type_choice = click.Choice(sorted(SECTION_TYPES))


@click.group(cls=MenuGroup, examples=_SECTION_EXAMPLES)
def section() -> None:
    """Add, change, reorder, and remove menu sections."""


@section.command(
    examples="""\
  menuctl section add MENU_ID "Draft Beers" --type beer
  menuctl section add MENU_ID "Specials" -c "Dish" -c "Description" -c "Price" -t "Dish\""""
)
@click.argument("menu_id")
@click.argument("name")
@click.option("--type", "section_type", type=_type_choice, default="custom", show_default=True)
@click.option("-c", "--column", "columns", multiple=True, help="Column name (repeatable).")
@click.option(
    "-t", "--title-column", "title_columns", multiple=True, help="Title column (repeatable)."
)
@click.pass_obj
def add(
    app: AppContext,
    menu_id: str,
    name: str,
    section_type: str,
    columns: tuple[str, ...],
    title_columns: tuple[str, ...],
) -> None:
    """Add a section. Template types fill in their columns when none are given."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        added = session.store.add_section(
            name,
            section_type,
            columns=list(columns) if columns else None,
            title_columns=list(title_columns) if title_columns else None,
        )
        return {"section_id": added.id, "name": added.name, "columns": added.columns}

    app.emit(app.service.edit(menu_id, "add_section", action))


@section.command(examples='  menuctl section update MENU_ID 2 --name "Mains" -t "Dish"')
@click.argument("menu_id")
@click.argument("section_id", type=int)
@click.option("--name", default=None, help="New section name.")
@click.option("--type", "section_type", type=_type_choice, default=None)
@click.option("-c", "--column", "columns", multiple=True, help="Replace the column list.")
@click.option(
    "-t", "--title-column", "title_columns", multiple=True, help="Replace the title columns."
)
@click.pass_obj
def update(
    app: AppContext,
    menu_id: str,
    section_id: int,
    name: str | None,
    section_type: str | None,
    columns: tuple[str, ...],
    title_columns: tuple[str, ...],
) -> None:
    """Change a section's name, type, columns, or title columns."""
    patch: dict[str, Any] = {}
    if name is not None:
        patch["name"] = name
    if section_type is not None:
        patch["type"] = section_type
    if columns:
        patch["columns"] = list(columns)
    if title_columns:
        patch["title_columns"] = list(title_columns)

    def action(session: MenuEditingSession) -> dict[str, Any]:
        updated = session.store.update_section(section_id, patch)
        return {"section_id": updated.id, "name": updated.name, "columns": updated.columns}

    app.emit(app.service.edit(menu_id, "update_section", action))


@section.command(examples="  menuctl section delete MENU_ID 2 --yes")
@click.argument("menu_id")
@click.argument("section_id", type=int)
@yes_option
@click.pass_obj
def delete(app: AppContext, menu_id: str, section_id: int, yes: bool) -> None:
    """Delete a section and all of its items."""
    confirmed = app.confirm(
        f"Delete section {section_id} and all its items? This action cannot be undone.",
        yes=yes,
    )

    def action(session: MenuEditingSession) -> dict[str, Any]:
        deleted = session.store.delete_section(section_id, confirmed=confirmed)
        return {"section_id": section_id, "deleted": deleted}

    app.emit(app.service.edit(menu_id, "delete_section", action))


@section.command(examples="  menuctl section move MENU_ID 2 0")
@click.argument("menu_id")
@click.argument("from_index", type=int)
@click.argument("to_index", type=int)
@click.pass_obj
def move(app: AppContext, menu_id: str, from_index: int, to_index: int) -> None:
    """Move the section at FROM_INDEX to TO_INDEX (0-based positions)."""

    def action(session: MenuEditingSession) -> dict[str, Any]:
        session.reorder.reorder_sections(from_index, to_index)
        return {"order": [s.id for s in session.document.sections]}

    app.emit(app.service.edit(menu_id, "reorder_sections", action))
