"""Shared service-layer helper functions."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (export dates, audit trails)."""
    return datetime.now(UTC).isoformat()


def new_menu_id() -> str:
    """Fresh draft id, e.g. ``menu-3f9c2a1b7d04``."""
    return f"menu-{uuid.uuid4().hex[:12]}"


def copy_name(name: str) -> str:
    """Name given to a duplicated menu.

    Examples:
        >>> copy_name("Dinner")
        'Dinner (Copy)'
    """
    return f"{name} (Copy)"
