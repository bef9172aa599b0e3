"""Tests for PluginManager discovery and registration."""

from __future__ import annotations

from unittest.mock import patch

import pluggy

from menuctl.plugins.builtins.surfaces import SnapshotSurface, hookimpl
from menuctl.plugins.manager import PluginManager


class _EntryPointPlugin:
    @hookimpl
    def post_publish(self, menu_id: str, slug: str, url: str | None) -> None:
        pass


class TestPluginManager:
    def test_register_and_list(self) -> None:
        pm = PluginManager()
        surface = SnapshotSurface()
        pm.register_plugin(surface, name="snapshot")
        assert "snapshot" in pm.list_plugin_names()
        assert surface in pm.get_plugins()

        pm.unregister(surface)
        assert "snapshot" not in pm.list_plugin_names()

    def test_default_name_is_class_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(SnapshotSurface())
        assert pm.list_plugin_names() == ["SnapshotSurface"]

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        with patch.object(pluggy.PluginManager, "load_setuptools_entrypoints", return_value=0):
            pm.discover_and_load()
        assert pm.is_loaded

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()

        def fake_load(self: pluggy.PluginManager, group: str) -> int:
            self.register(_EntryPointPlugin, name="from-entry-point")
            return 1

        with patch.object(pluggy.PluginManager, "load_setuptools_entrypoints", fake_load):
            names = pm.discover_and_load()

        assert names == ["from-entry-point"]
        assert isinstance(pm.get_plugins()[0], _EntryPointPlugin)

    def test_has_hook_impls(self) -> None:
        assert PluginManager._has_hook_impls(_EntryPointPlugin)
        assert not PluginManager._has_hook_impls(object)
