"""Command group: menu management (create, list, show, delete, duplicate)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menuctl.commands._base import MenuGroup, yes_option

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext

_MENU_EXAMPLES = """\
  menuctl menu create "Dinner"
  menuctl menu list
  menuctl menu show menu-3f9c2a1b7d04
  menuctl menu duplicate menu-3f9c2a1b7d04 --name "Brunch"
  menuctl menu delete menu-3f9c2a1b7d04 --yes"""


@click.group(cls=MenuGroup, examples=_MENU_EXAMPLES)
def menu() -> None:
    """Create, list, inspect, and delete menus."""


@menu.command(
    examples="""\
  menuctl menu create "Dinner"
  menuctl menu create "Happy Hour" --user owner-42"""
)
@click.argument("name", required=False)
@click.option("--user", "user_id", default=None, help="Owner of the new menu.")
@click.pass_obj
def create(app: AppContext, name: str | None, user_id: str | None) -> None:
    """Create an empty draft menu."""
    if name is None:
        name = (
            click.prompt("Menu name", default="Untitled Menu")
            if app.is_interactive()
            else "Untitled Menu"
        )
    app.emit(app.service.create_menu(name, user_id=user_id))


@menu.command("list", examples="  menuctl menu list\n  menuctl --json menu list --user owner-42")
@click.option("--user", "user_id", default=None, help="Only menus owned by this user.")
@click.pass_obj
def list_cmd(app: AppContext, user_id: str | None) -> None:
    """List menus, most recently updated first."""
    app.emit(app.service.list_menus(user_id))


@menu.command(examples="  menuctl menu show menu-3f9c2a1b7d04")
@click.argument("menu_id")
@click.pass_obj
def show(app: AppContext, menu_id: str) -> None:
    """Show a menu's preview and save status."""
    app.emit(app.service.preview(menu_id))


@menu.command(examples="  menuctl menu delete menu-3f9c2a1b7d04 --yes")
@click.argument("menu_id")
@yes_option
@click.pass_obj
def delete(app: AppContext, menu_id: str, yes: bool) -> None:
    """Delete a menu."""
    confirmed = app.confirm(
        f"Delete menu {menu_id}? This action cannot be undone.", yes=yes
    )
    app.emit(app.service.delete_menu(menu_id, confirmed=confirmed))


@menu.command(examples='  menuctl menu duplicate menu-3f9c2a1b7d04 --name "Brunch"')
@click.argument("menu_id")
@click.option("--name", default=None, help='Name of the copy (default: "<name> (Copy)").')
@click.pass_obj
def duplicate(app: AppContext, menu_id: str, name: str | None) -> None:
    """Copy a menu into a new unpublished draft."""
    app.emit(app.service.duplicate_menu(menu_id, name))
