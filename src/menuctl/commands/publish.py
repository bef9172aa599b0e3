"""Publishing commands: publish, check-slug, discard."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from menuctl.commands._base import MenuCommand, yes_option

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext


@click.command(
    cls=MenuCommand,
    examples="""\
  menuctl publish MENU_ID --slug joes-diner
  menuctl publish MENU_ID --title "Joe's Diner" --subtitle "Since 1982"
  menuctl publish MENU_ID""",
)
@click.argument("menu_id")
@click.option("--slug", default=None, help="URL path (3-50 chars: a-z, 0-9, hyphens).")
@click.option("--title", default=None, help="Title shown on the published page.")
@click.option("--subtitle", default=None, help="Subtitle shown under the title.")
@click.pass_obj
def publish(
    app: AppContext,
    menu_id: str,
    slug: str | None,
    title: str | None,
    subtitle: str | None,
) -> None:
    """Publish a menu under a public URL path.

    Without --slug the current path is reused, or one is generated.
    """
    app.emit(app.service.publish(menu_id, slug, title, subtitle))


@click.command(
    "check-slug",
    cls=MenuCommand,
    examples="  menuctl check-slug joes-diner",
)
@click.argument("slug")
@click.pass_obj
def check_slug(app: AppContext, slug: str) -> None:
    """Check whether a URL path is free to publish under."""
    app.emit(app.service.check_slug(slug))


@click.command(
    cls=MenuCommand,
    examples="""\
  menuctl discard MENU_ID
  menuctl discard MENU_ID --to published --yes""",
)
@click.argument("menu_id")
@click.option(
    "--to",
    "target",
    type=click.Choice(["saved", "published"]),
    default="saved",
    show_default=True,
    help="Revert to the last saved draft or to the published copy.",
)
@yes_option
@click.pass_obj
def discard(app: AppContext, menu_id: str, target: str, yes: bool) -> None:
    """Throw away changes and revert a menu."""
    if target == "published":
        app.confirm(
            "Discard all changes since the last publish? This cannot be undone.", yes=yes
        )
    app.emit(app.service.discard(menu_id, target))  # type: ignore[arg-type]
