"""Subcommand modules for menuctl.

Provides register_commands() which uses deferred imports to keep
``menuctl --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    4 groups (have subcommands) + 5 standalone commands.
    """
    # --- Groups ---
    from menuctl.commands.column import column
    from menuctl.commands.item import item
    from menuctl.commands.menu import menu
    from menuctl.commands.section import section

    cli.add_command(menu)
    cli.add_command(section)
    cli.add_command(item)
    cli.add_command(column)

    # --- Standalone commands ---
    from menuctl.commands.publish import check_slug, discard, publish
    from menuctl.commands.transfer import export_cmd, import_cmd

    cli.add_command(publish)
    cli.add_command(check_slug)
    cli.add_command(discard)
    cli.add_command(export_cmd)
    cli.add_command(import_cmd)
