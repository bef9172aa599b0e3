"""Menu status and save-status lifecycle models.

Two lifecycles:
- Menu status: draft until the first successful publish, then published.
- Save status: tracked by the editing session, driven by mutations and
  persistence outcomes. Never set directly by a command.
"""

from __future__ import annotations

from enum import StrEnum


class MenuStatus(StrEnum):
    """Publication status stored on the document."""

    DRAFT = "draft"
    PUBLISHED = "published"


class SaveStatus(StrEnum):
    """Save status of an editing session."""

    SAVED = "saved"
    UNSAVED = "unsaved"
    SAVING = "saving"
    NEEDS_PUBLISH = "needs-publish"


# --- Transition map ---

# Any mutation moves to "unsaved" from any state, including itself.
SAVE_TRANSITIONS: dict[str, list[str]] = {
    "saved": ["unsaved", "saving", "saved", "needs-publish"],
    "unsaved": ["unsaved", "saving", "saved", "needs-publish"],
    "saving": ["unsaved", "saved", "needs-publish"],
    "needs-publish": ["unsaved", "saving", "saved", "needs-publish"],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def compute_save_status(published_slug: str | None, changed_since_publish: bool) -> SaveStatus:
    """Status after a successful persist.

    A published menu whose content moved on since the last publish still
    needs a publish; everything else is simply saved.
    """
    if published_slug and changed_since_publish:
        return SaveStatus.NEEDS_PUBLISH
    return SaveStatus.SAVED
