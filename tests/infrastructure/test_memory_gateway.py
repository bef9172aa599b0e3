"""Tests for InMemoryGateway."""

from __future__ import annotations

import asyncio

import pytest

from menuctl.domain.errors import NotFoundError
from menuctl.domain.menu import PublishedSnapshot
from menuctl.infrastructure.gateway import PersistenceGateway
from menuctl.infrastructure.memory_gateway import InMemoryGateway
from tests.conftest import food_section, make_document


def _snapshot(slug: str) -> PublishedSnapshot:
    return PublishedSnapshot(slug=slug, title="Menu", sections=[food_section()])


class TestDrafts:
    def test_satisfies_protocol(self, gateway: InMemoryGateway) -> None:
        assert isinstance(gateway, PersistenceGateway)

    def test_save_and_load_are_copies(self, gateway: InMemoryGateway) -> None:
        document = make_document("m1", food_section())
        asyncio.run(gateway.save_draft("m1", document))
        document.sections[0].name = "Changed after save"

        loaded = asyncio.run(gateway.load_draft("m1"))
        assert loaded.sections[0].name == "Food Items"
        loaded.sections.clear()
        assert asyncio.run(gateway.load_draft("m1")).sections

    def test_save_stamps_times(self) -> None:
        gateway = InMemoryGateway(clock=lambda: "2026-03-01T12:00:00+00:00")
        outcome = asyncio.run(gateway.save_draft("m1", make_document("m1")))
        assert outcome.success
        assert outcome.updated_at == "2026-03-01T12:00:00+00:00"
        loaded = asyncio.run(gateway.load_draft("m1"))
        assert loaded.created_at == loaded.updated_at

    def test_load_missing(self, gateway: InMemoryGateway) -> None:
        with pytest.raises(NotFoundError):
            asyncio.run(gateway.load_draft("nope"))

    def test_list_newest_first(self) -> None:
        ticks = iter(["2026-01-01", "2026-01-02", "2026-01-03"])
        gateway = InMemoryGateway(clock=lambda: next(ticks))
        asyncio.run(gateway.save_draft("old", make_document("old", user_id="u1")))
        asyncio.run(gateway.save_draft("new", make_document("new", user_id="u1")))
        asyncio.run(gateway.save_draft("other", make_document("other", user_id="u2")))
        summaries = asyncio.run(gateway.list_menus("u1"))
        assert [s.id for s in summaries] == ["new", "old"]

    def test_delete(self, gateway: InMemoryGateway) -> None:
        asyncio.run(gateway.save_draft("m1", make_document("m1")))
        asyncio.run(gateway.delete_menu("m1"))
        with pytest.raises(NotFoundError):
            asyncio.run(gateway.delete_menu("m1"))


class TestPublishing:
    def test_first_publish_then_update(self) -> None:
        ticks = iter(["t1", "t2"])
        gateway = InMemoryGateway(clock=lambda: next(ticks))
        first = asyncio.run(gateway.publish(None, "joes-diner", "Joe's", None, _snapshot("x")))
        assert first.success
        second = asyncio.run(
            gateway.publish(first.menu_id, "joes-diner", "Joe's", "Since 1982", _snapshot("x"))
        )
        assert second.menu_id == first.menu_id
        assert (second.published_at, second.updated_at) == ("t1", "t2")
        stored = asyncio.run(gateway.get_published("joes-diner"))
        assert stored.subtitle == "Since 1982"
        assert stored.slug == "joes-diner"

    def test_taken_slug(self, gateway: InMemoryGateway) -> None:
        asyncio.run(gateway.publish(None, "joes-diner", "A", None, _snapshot("joes-diner")))
        outcome = asyncio.run(gateway.publish(None, "joes-diner", "B", None, _snapshot("x")))
        assert not outcome.success
        assert outcome.slug_taken

    def test_unknown_record(self, gateway: InMemoryGateway) -> None:
        outcome = asyncio.run(gateway.publish("pub-nope", "abc", "A", None, _snapshot("abc")))
        assert not outcome.success
        assert not outcome.slug_taken

    def test_check_slug(self, gateway: InMemoryGateway) -> None:
        assert asyncio.run(gateway.check_slug_available("joes-diner")).available
        invalid = asyncio.run(gateway.check_slug_available("ab"))
        assert not invalid.available
        assert "at least 3" in invalid.error

    def test_get_published_missing(self, gateway: InMemoryGateway) -> None:
        with pytest.raises(NotFoundError):
            asyncio.run(gateway.get_published("joes-diner"))
