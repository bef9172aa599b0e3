"""Shared pytest fixtures and test helpers for menuctl tests."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from menuctl.cli import cli
from menuctl.config.logging import configure_logging
from menuctl.domain.menu import MenuDocument, Section
from menuctl.infrastructure.database.engine import init_database
from menuctl.infrastructure.gateway import SaveOutcome
from menuctl.infrastructure.memory_gateway import InMemoryGateway
from menuctl.services.telemetry import _current_span, disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "menus.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.delenv("MENUCTL_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _quiet_logging() -> Generator[None]:
    """Route structlog through stdlib at WARNING so debug events stay off stdout."""
    root = logging.getLogger()
    menu_logger = logging.getLogger("menuctl")
    handlers, level, menu_level = list(root.handlers), root.level, menu_logger.level
    configure_logging()
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    menu_logger.setLevel(menu_level)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """``--verbose`` turns telemetry on for the whole thread; undo it."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def food_section(section_id: int = 1, **overrides: Any) -> Section:
    """The "Food Items" section used across the projection and reorder tests."""
    data: dict[str, Any] = {
        "id": section_id,
        "name": "Food Items",
        "type": "food",
        "columns": ["Item Name", "Description", "Price"],
        "title_columns": ["Item Name", "Price"],
        "items": [{"Item Name": "Burger", "Description": "Beef patty", "Price": "$9.99"}],
    }
    data.update(overrides)
    return Section(**data)


def make_document(menu_id: str = "menu-test", *sections: Section, **fields: Any) -> MenuDocument:
    return MenuDocument(
        id=menu_id,
        name=fields.pop("name", "Dinner"),
        sections=list(sections),
        section_counter=max((s.id for s in sections), default=0),
        **fields,
    )


def seed(gateway: InMemoryGateway, document: MenuDocument) -> MenuDocument:
    """Store *document* as a saved draft."""
    asyncio.run(gateway.save_draft(document.id, document))
    return document


class GatedGateway(InMemoryGateway):
    """While :attr:`gated`, holds every ``save_draft`` until :attr:`release` is set.

    Construct it inside the running event loop.
    """

    def __init__(self) -> None:
        super().__init__()
        self.gated = False
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.saved: list[MenuDocument] = []

    async def save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome:
        if self.gated:
            self.started.set()
            await self.release.wait()
        self.saved.append(document.model_copy(deep=True))
        return await super().save_draft(menu_id, document)


class FailingGateway(InMemoryGateway):
    """Refuses saves while :attr:`fail` is set (or raises, with ``raise_error``)."""

    def __init__(self, *, raise_error: bool = False) -> None:
        super().__init__()
        self.fail = False
        self.raise_error = raise_error

    async def save_draft(self, menu_id: str, document: MenuDocument) -> SaveOutcome:
        if self.fail:
            self.save_calls += 1
            if self.raise_error:
                raise OSError("disk full")
            return SaveOutcome(success=False, error="Database unavailable")
        return await super().save_draft(menu_id, document)


def invoke_json(runner: CliRunner, *args: str) -> dict[str, Any]:
    """Run ``menuctl --json ARGS`` and return the parsed result envelope."""
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


def create_menu_cli(runner: CliRunner, name: str = "Dinner") -> str:
    """Create a menu through the CLI and return its id."""
    return invoke_json(runner, "menu", "create", name)["data"]["id"]


def add_food_section_cli(runner: CliRunner, menu_id: str) -> int:
    """Add a food section with one Burger item; returns the section id."""
    data = invoke_json(runner, "section", "add", menu_id, "Food Items", "--type", "food")["data"]
    section_id = data["section_id"]
    invoke_json(
        runner,
        "item",
        "add",
        menu_id,
        str(section_id),
        "--set",
        "Item Name=Burger",
        "--set",
        "Description=Beef patty",
        "--set",
        "Price=$9.99",
    )
    return section_id
