"""Slug rules for published menus.

A slug is the URL-safe path a published menu is served under:
lowercase letters, digits, and dashes, at least three characters.
"""

from __future__ import annotations

import random
import re
import string
import time

from menuctl.domain.errors import SlugInvalidError

SLUG_PATTERN = re.compile(r"^[a-z0-9-]{3,}$")
SLUG_MIN_LENGTH = 3

_SLUG_CHARS = re.compile(r"^[a-z0-9-]+$")
_INVALID_CHARS = re.compile(r"[^a-z0-9-]")


def validate_slug(slug: str | None) -> str:
    """Return *slug* unchanged if valid, else raise SlugInvalidError."""
    if is_valid_slug(slug):
        return str(slug)
    if not slug:
        raise SlugInvalidError("Please enter a URL path.", slug=slug)
    if not _SLUG_CHARS.match(slug):
        raise SlugInvalidError(
            "Path can only contain lowercase letters, numbers, and dashes.", slug=slug
        )
    if len(slug) < SLUG_MIN_LENGTH:
        raise SlugInvalidError(
            f"Path must be at least {SLUG_MIN_LENGTH} characters long.", slug=slug
        )
    return slug


def is_valid_slug(slug: str | None) -> bool:
    return bool(slug) and SLUG_PATTERN.match(slug or "") is not None


def normalize_slug(raw: str) -> str:
    """Lowercase *raw* and strip every character outside ``[a-z0-9-]``.

    Examples:
        >>> normalize_slug("Joe's Diner")
        'joesdiner'
        >>> normalize_slug("happy-hour-2")
        'happy-hour-2'
    """
    return _INVALID_CHARS.sub("", raw.lower())


def default_slug() -> str:
    """Suggested slug for a first publish: ``menu-<6 digits>-<4 chars>``."""
    stamp = str(int(time.time() * 1000))[-6:]
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=4))
    return f"menu-{stamp}-{suffix}"


def published_url(base_url: str, slug: str) -> str:
    """Public URL of the menu published at *slug*."""
    return f"{base_url.rstrip('/')}/{slug}"
