"""Tests for export and import."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from menuctl.cli import cli
from tests.conftest import add_food_section_cli, create_menu_cli, invoke_json


@pytest.fixture
def menu_with_food(cli_runner: CliRunner, _isolated_project: None) -> str:
    menu_id = create_menu_cli(cli_runner)
    add_food_section_cli(cli_runner, menu_id)
    return menu_id


class TestExport:
    def test_export_to_stdout(self, cli_runner: CliRunner, menu_with_food: str) -> None:
        result = cli_runner.invoke(cli, ["export", menu_with_food])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["version"] == "1.0"
        assert "exportDate" in payload
        [section] = payload["sections"]
        assert section["name"] == "Food Items"
        assert section["titleColumns"] == ["Item Name", "Price"]
        assert section["items"] == [
            {"Item Name": "Burger", "Description": "Beef patty", "Price": "$9.99"}
        ]

    def test_export_to_file(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        target = tmp_path / "dinner.json"
        out = invoke_json(cli_runner, "export", menu_with_food, "--output", str(target))
        assert out["data"]["path"] == str(target)
        assert "export" not in out["data"]
        payload = json.loads(target.read_text(encoding="utf-8"))
        assert len(payload["sections"]) == 1

    def test_quiet_export_prints_payload(
        self, cli_runner: CliRunner, menu_with_food: str
    ) -> None:
        result = cli_runner.invoke(cli, ["-q", "export", menu_with_food])
        assert result.exit_code == 0
        assert json.loads(result.output)["sections"][0]["name"] == "Food Items"

    def test_export_unknown_menu(self, cli_runner: CliRunner, _isolated_project: None) -> None:
        result = cli_runner.invoke(cli, ["export", "menu-missing"])
        assert result.exit_code == 1


class TestImport:
    def test_round_trip_into_other_menu(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        target = tmp_path / "dinner.json"
        invoke_json(cli_runner, "export", menu_with_food, "--output", str(target))
        other = create_menu_cli(cli_runner, "Brunch")

        out = invoke_json(cli_runner, "import", other, str(target), "--yes")
        assert out["data"]["sections"] == 1

        shown = invoke_json(cli_runner, "menu", "show", other)["data"]
        assert shown["sections"][0]["items"][0]["title_text"] == "Burger"

    def test_import_replaces_sections(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        source = tmp_path / "drinks.json"
        source.write_text(
            json.dumps(
                {
                    "sections": [
                        {
                            "id": 7,
                            "name": "Taps",
                            "type": "beer",
                            "columns": ["Beer Name", "Price"],
                            "titleColumns": ["Beer Name"],
                            "items": [{"Beer Name": "Pils", "Price": "$6"}],
                        }
                    ]
                }
            ),
            encoding="utf-8",
        )
        invoke_json(cli_runner, "import", menu_with_food, str(source), "--yes")
        shown = invoke_json(cli_runner, "menu", "show", menu_with_food)["data"]
        assert [s["name"] for s in shown["sections"]] == ["Taps"]
        assert shown["sections"][0]["items"][0]["title_price"] == "$6"

        added = invoke_json(cli_runner, "section", "add", menu_with_food, "More", "--type", "food")
        assert added["data"]["section_id"] == 8

    def test_invalid_json(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        source = tmp_path / "broken.json"
        source.write_text("{not json", encoding="utf-8")
        result = cli_runner.invoke(cli, ["import", menu_with_food, str(source), "--yes"])
        assert result.exit_code == 1
        assert "Invalid menu file format" in result.output

    def test_missing_sections_key(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        source = tmp_path / "other.json"
        source.write_text(json.dumps({"items": []}), encoding="utf-8")
        result = cli_runner.invoke(cli, ["import", menu_with_food, str(source), "--yes"])
        assert result.exit_code == 1
        assert "Invalid menu file format" in result.output
        shown = invoke_json(cli_runner, "menu", "show", menu_with_food)["data"]
        assert shown["sections"][0]["name"] == "Food Items"

    def test_import_declined(
        self, cli_runner: CliRunner, menu_with_food: str, tmp_path: Path
    ) -> None:
        source = tmp_path / "empty.json"
        source.write_text(json.dumps({"sections": []}), encoding="utf-8")
        result = cli_runner.invoke(cli, ["import", menu_with_food, str(source)], input="n\n")
        assert result.exit_code == 1
        shown = invoke_json(cli_runner, "menu", "show", menu_with_food)["data"]
        assert len(shown["sections"]) == 1
