"""Tests for output mode selection."""

import json

from menuctl.output.formatters import OutputSettings, format_result
from menuctl.services.result import ServiceResult


def _result() -> ServiceResult:
    return ServiceResult(ok=True, op="create_menu", data={"id": "menu-abc", "name": "Dinner"})


class TestFormatResult:
    def test_default_is_rich(self) -> None:
        output = format_result(_result())
        assert output.startswith("OK")

    def test_json_wins_over_quiet(self) -> None:
        output = format_result(_result(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(output)["data"]["id"] == "menu-abc"

    def test_quiet(self) -> None:
        assert format_result(_result(), settings=OutputSettings(quiet=True)) == "menu-abc"
