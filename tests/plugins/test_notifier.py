"""Tests for ChangeNotifier fan-out and the built-in surfaces."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from menuctl.domain.preview import SectionPreview, project
from menuctl.infrastructure.memory_gateway import InMemoryGateway
from menuctl.plugins.builtins.surfaces import ConsoleSurface, SnapshotSurface, hookimpl
from menuctl.plugins.manager import PluginManager
from menuctl.plugins.notifier import ChangeNotifier
from menuctl.services.session import MenuEditingSession
from tests.conftest import FailingGateway, food_section, make_document


class _Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []
        self.previews: list[list[SectionPreview]] = []

    @hookimpl
    def menu_changed(self, menu_id: str, reason: str) -> None:
        self.events.append(("menu_changed", reason))

    @hookimpl
    def render_preview(self, menu_id: str, previews: list[SectionPreview]) -> None:
        self.previews.append(previews)

    @hookimpl
    def post_publish(self, menu_id: str, slug: str, url: str | None) -> None:
        self.events.append(("post_publish", url))


class _Broken:
    @hookimpl
    def render_preview(self, menu_id: str, previews: list[SectionPreview]) -> None:
        raise RuntimeError("surface crashed")


@pytest.fixture
def pm() -> PluginManager:
    return PluginManager()


class TestChangeNotifier:
    def test_every_surface_gets_the_same_projection(self, pm: PluginManager) -> None:
        first, second = _Recorder(), SnapshotSurface()
        pm.register_plugin(first, name="first")
        pm.register_plugin(second, name="second")
        notifier = ChangeNotifier(pm)
        document = make_document("m1", food_section())

        previews = notifier.menu_changed(document, "add_item")

        assert first.previews == [previews]
        assert first.previews[0] is second.previews["m1"]
        assert previews == project(document)
        assert notifier.last_previews is previews
        assert first.events == [("menu_changed", "add_item")]

    def test_failing_plugin_does_not_stop_others(self, pm: PluginManager) -> None:
        recorder = _Recorder()
        pm.register_plugin(_Broken(), name="broken")
        pm.register_plugin(recorder, name="recorder")
        notifier = ChangeNotifier(pm)

        notifier.menu_changed(make_document("m1"), "add_section")

        assert len(recorder.previews) == 1
        assert notifier.warnings == ["Plugin broken failed in render_preview"]

    def test_status_changed_passes_message(self, pm: PluginManager) -> None:
        surface = SnapshotSurface()
        pm.register_plugin(surface)
        notifier = ChangeNotifier(pm)

        async def scenario() -> None:
            gateway = FailingGateway()
            await gateway.save_draft("m1", make_document("m1", food_section()))
            session = await MenuEditingSession.open(gateway, "m1", notifier=notifier)
            gateway.fail = True
            session.store.add_item(1)
            await session.flush()

        asyncio.run(scenario())
        assert ("m1", "unsaved", None) in surface.statuses
        assert ("m1", "saving", None) in surface.statuses
        assert surface.statuses[-1] == ("m1", "unsaved", "Database unavailable")

    def test_session_refreshes_surfaces_once_per_mutation(self, pm: PluginManager) -> None:
        surface = SnapshotSurface()
        pm.register_plugin(surface)
        notifier = ChangeNotifier(pm)

        async def scenario() -> None:
            gateway = InMemoryGateway()
            await gateway.save_draft("m1", make_document("m1", food_section()))
            session = await MenuEditingSession.open(
                gateway, "m1", notifier=notifier, base_url="https://menus.test/m"
            )
            session.store.add_item(1, {"Item Name": "Fries"})
            session.reorder.reorder_items(1, 1, 0)
            await session.flush()
            assert surface.previews["m1"] == session.preview()

        asyncio.run(scenario())
        assert surface.render_count == 2
        assert surface.previews["m1"][0].items[0].title_text == "Fries"

    def test_post_publish_url(self, pm: PluginManager) -> None:
        recorder = _Recorder()
        pm.register_plugin(recorder)
        notifier = ChangeNotifier(pm)

        async def scenario() -> None:
            gateway = InMemoryGateway()
            await gateway.save_draft("m1", make_document("m1", food_section()))
            session = await MenuEditingSession.open(
                gateway, "m1", notifier=notifier, base_url="https://menus.test/m"
            )
            await session.publish("joes-diner")

        asyncio.run(scenario())
        assert ("post_publish", "https://menus.test/m/joes-diner") in recorder.events


class TestConsoleSurface:
    def test_renders_sections(self) -> None:
        written: list[str] = []
        surface = ConsoleSurface(written.append, width=60)
        surface.render_preview("m1", project(make_document("m1", food_section())))
        output = "".join(written)
        assert "Food Items" in output
        assert "Burger" in output
        assert "$9.99" in output

    def test_empty_menu(self) -> None:
        written: list[str] = []
        ConsoleSurface(written.append).render_preview("m1", [])
        assert "(no sections)" in "".join(written)
