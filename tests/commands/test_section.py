"""Tests for the section command group."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from menuctl.cli import cli
from tests.conftest import add_food_section_cli, create_menu_cli, invoke_json


def _sections(runner: CliRunner, menu_id: str) -> list[dict]:
    return invoke_json(runner, "menu", "show", menu_id)["data"]["sections"]


@pytest.mark.usefixtures("_isolated_project")
class TestSectionAdd:
    def test_template_columns(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        out = invoke_json(cli_runner, "section", "add", menu_id, "Taps", "--type", "beer")
        data = out["data"]
        assert data["section_id"] == 1
        assert data["columns"] == ["Beer Name", "Brewery", "Style", "ABV", "Price"]
        assert data["save_status"] == "saved"

    def test_custom_columns(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        out = invoke_json(
            cli_runner,
            "section", "add", menu_id, "Specials",
            "-c", "Dish", "-c", "Price", "-t", "Dish",
        )
        assert out["data"]["columns"] == ["Dish", "Price"]

    def test_ids_keep_counting(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        invoke_json(cli_runner, "section", "add", menu_id, "A", "--type", "food")
        invoke_json(cli_runner, "section", "delete", menu_id, "1", "--yes")
        out = invoke_json(cli_runner, "section", "add", menu_id, "B", "--type", "food")
        assert out["data"]["section_id"] == 2

    def test_custom_without_columns_rejected(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        result = cli_runner.invoke(cli, ["section", "add", menu_id, "Specials"])
        assert result.exit_code == 1
        assert "at least one column" in result.output

    def test_unknown_title_column_rejected(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        result = cli_runner.invoke(
            cli, ["section", "add", menu_id, "Specials", "-c", "Dish", "-t", "Nope"]
        )
        assert result.exit_code == 1
        assert "Title columns must be section columns" in result.output

    def test_unknown_type_rejected_by_click(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        result = cli_runner.invoke(cli, ["section", "add", menu_id, "X", "--type", "pizza"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_project")
class TestSectionUpdate:
    def test_rename(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        section_id = add_food_section_cli(cli_runner, menu_id)
        out = invoke_json(
            cli_runner, "section", "update", menu_id, str(section_id), "--name", "Mains"
        )
        assert out["data"]["name"] == "Mains"
        assert _sections(cli_runner, menu_id)[0]["name"] == "Mains"

    def test_replace_columns_keeps_shared_values(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        section_id = add_food_section_cli(cli_runner, menu_id)
        invoke_json(
            cli_runner,
            "section", "update", menu_id, str(section_id),
            "-c", "Item Name", "-c", "Price",
        )
        [item] = _sections(cli_runner, menu_id)[0]["items"]
        assert item["title_text"] == "Burger"
        assert item["description"] == ""

    def test_unknown_section(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        result = cli_runner.invoke(cli, ["section", "update", menu_id, "9", "--name", "X"])
        assert result.exit_code == 1
        assert "Section not found" in result.output


@pytest.mark.usefixtures("_isolated_project")
class TestSectionDelete:
    def test_delete_with_yes(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        section_id = add_food_section_cli(cli_runner, menu_id)
        out = invoke_json(cli_runner, "section", "delete", menu_id, str(section_id), "--yes")
        assert out["data"]["deleted"] is True
        assert _sections(cli_runner, menu_id) == []

    def test_delete_declined_keeps_section(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        section_id = add_food_section_cli(cli_runner, menu_id)
        result = cli_runner.invoke(
            cli, ["section", "delete", menu_id, str(section_id)], input="n\n"
        )
        assert result.exit_code == 1
        assert len(_sections(cli_runner, menu_id)) == 1

    def test_delete_unknown_is_noop(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        out = invoke_json(cli_runner, "section", "delete", menu_id, "42", "--yes")
        assert out["data"]["deleted"] is False


@pytest.mark.usefixtures("_isolated_project")
class TestSectionMove:
    def test_move_to_front(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        for name in ("A", "B", "C"):
            invoke_json(cli_runner, "section", "add", menu_id, name, "--type", "food")
        out = invoke_json(cli_runner, "section", "move", menu_id, "2", "0")
        assert out["data"]["order"] == [3, 1, 2]
        assert [s["name"] for s in _sections(cli_runner, menu_id)] == ["C", "A", "B"]

    def test_move_out_of_range(self, cli_runner: CliRunner) -> None:
        menu_id = create_menu_cli(cli_runner)
        invoke_json(cli_runner, "section", "add", menu_id, "A", "--type", "food")
        result = cli_runner.invoke(cli, ["section", "move", menu_id, "0", "5"])
        assert result.exit_code == 1
