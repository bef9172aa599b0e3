"""Tests for the menu and save status lifecycles."""

from __future__ import annotations

import pytest

from menuctl.domain.lifecycle import (
    SAVE_TRANSITIONS,
    MenuStatus,
    SaveStatus,
    compute_save_status,
    is_valid_transition,
)


class TestMenuStatus:
    def test_values(self) -> None:
        assert MenuStatus.DRAFT == "draft"
        assert MenuStatus.PUBLISHED == "published"


class TestSaveStatus:
    @pytest.mark.parametrize("current", [s.value for s in SaveStatus])
    def test_mutation_allowed_from_every_state(self, current: str) -> None:
        assert is_valid_transition(current, "unsaved", SAVE_TRANSITIONS)

    def test_saving_cannot_restart_saving(self) -> None:
        assert not is_valid_transition("saving", "saving", SAVE_TRANSITIONS)

    def test_unknown_state(self) -> None:
        assert not is_valid_transition("bogus", "saved", SAVE_TRANSITIONS)

    def test_needs_publish_value(self) -> None:
        assert SaveStatus.NEEDS_PUBLISH == "needs-publish"


class TestComputeSaveStatus:
    def test_unpublished_is_saved(self) -> None:
        assert compute_save_status(None, True) is SaveStatus.SAVED

    def test_published_and_changed(self) -> None:
        assert compute_save_status("joes-diner", True) is SaveStatus.NEEDS_PUBLISH

    def test_published_in_sync(self) -> None:
        assert compute_save_status("joes-diner", False) is SaveStatus.SAVED
