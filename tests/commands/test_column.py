"""Tests for the column command group."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from menuctl.cli import cli
from tests.conftest import add_food_section_cli, create_menu_cli, invoke_json


@pytest.fixture
def menu_with_food(cli_runner: CliRunner, _isolated_project: None) -> tuple[str, str]:
    menu_id = create_menu_cli(cli_runner)
    section_id = add_food_section_cli(cli_runner, menu_id)
    return menu_id, str(section_id)


def _first_item(runner: CliRunner, menu_id: str) -> dict:
    return invoke_json(runner, "menu", "show", menu_id)["data"]["sections"][0]["items"][0]


class TestColumnAdd:
    def test_add_backfills_items(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        out = invoke_json(cli_runner, "column", "add", menu_id, section_id, "Spice")
        assert out["data"]["column"] == "Spice"
        invoke_json(cli_runner, "item", "set", menu_id, section_id, "0", "Spice", "Hot")
        cells = _first_item(cli_runner, menu_id)["data_row"]
        assert {"column": "Spice", "value": "Hot", "is_price": False} in cells

    def test_add_duplicate_name(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        result = cli_runner.invoke(cli, ["column", "add", menu_id, section_id, "Price"])
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestColumnRename:
    def test_rename_keeps_values(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        out = invoke_json(cli_runner, "column", "rename", menu_id, section_id, "Item Name", "Dish")
        assert out["data"]["columns"] == ["Dish", "Description", "Price"]
        assert _first_item(cli_runner, menu_id)["title_text"] == "Burger"

    def test_rename_missing_column(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        result = cli_runner.invoke(cli, ["column", "rename", menu_id, section_id, "Nope", "X"])
        assert result.exit_code == 1
        assert "Column not found" in result.output


class TestColumnDelete:
    def test_delete_with_yes(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        out = invoke_json(cli_runner, "column", "delete", menu_id, section_id, "Description", "--yes")
        assert out["data"]["deleted"] is True
        assert _first_item(cli_runner, menu_id)["description"] == ""

    def test_delete_declined(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        result = cli_runner.invoke(
            cli, ["column", "delete", menu_id, section_id, "Description"], input="n\n"
        )
        assert result.exit_code == 1
        assert _first_item(cli_runner, menu_id)["description"] == "Beef patty"

    def test_last_column_is_kept(self, cli_runner: CliRunner, _isolated_project: None) -> None:
        menu_id = create_menu_cli(cli_runner)
        section_id = invoke_json(cli_runner, "section", "add", menu_id, "Notes", "-c", "Note")[
            "data"
        ]["section_id"]
        result = cli_runner.invoke(
            cli, ["column", "delete", menu_id, str(section_id), "Note", "--yes"]
        )
        assert result.exit_code == 1
        assert "Cannot delete the last column" in result.output


class TestColumnMove:
    def test_move_reorders_columns(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        out = invoke_json(cli_runner, "column", "move", menu_id, section_id, "2", "0")
        assert out["data"]["columns"] == ["Price", "Item Name", "Description"]

    def test_move_out_of_range(
        self, cli_runner: CliRunner, menu_with_food: tuple[str, str]
    ) -> None:
        menu_id, section_id = menu_with_food
        result = cli_runner.invoke(cli, ["column", "move", menu_id, section_id, "0", "7"])
        assert result.exit_code == 1
        assert "Cannot move column" in result.output
