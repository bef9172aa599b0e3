"""Export and import of menu sections as JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from menuctl.commands._base import MenuCommand, yes_option
from menuctl.domain.errors import ValidationError
from menuctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from menuctl.commands._context import AppContext


@click.command(
    "export",
    cls=MenuCommand,
    examples="""\
  menuctl export MENU_ID
  menuctl export MENU_ID --output dinner.json""",
)
@click.argument("menu_id")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the export to a file instead of stdout.",
)
@click.pass_obj
def export_cmd(app: AppContext, menu_id: str, output_path: Path | None) -> None:
    """Export a menu's sections as JSON."""
    result = app.service.export_menu(menu_id)
    if result.ok and output_path is not None:
        output_path.write_text(
            json.dumps(result.data["export"], indent=2) + "\n", encoding="utf-8"
        )
        data = {k: v for k, v in result.data.items() if k != "export"}
        result = result.model_copy(update={"data": {**data, "path": str(output_path)}})
    app.emit(result)


@click.command(
    "import",
    cls=MenuCommand,
    examples="  menuctl import MENU_ID dinner.json --yes",
)
@click.argument("menu_id")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@yes_option
@click.pass_obj
def import_cmd(app: AppContext, menu_id: str, source: Path, yes: bool) -> None:
    """Replace a menu's sections with those in an export file."""
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        err = ServiceError(
            code=ValidationError.code,
            message="Invalid menu file format",
            detail={"path": str(source), "reason": str(exc)},
        )
        app.emit(ServiceResult(ok=False, op="import_menu", error=err))
        return
    app.confirm("Importing will replace all current sections. Continue?", yes=yes)
    app.emit(app.service.import_menu(menu_id, payload))
