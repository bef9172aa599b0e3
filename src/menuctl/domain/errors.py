"""Error taxonomy for menu editing.

Document Store and Reorder Engine errors are raised synchronously and
leave the document untouched. Persistence and publish errors are also
attached to the editing session's status. Every error carries a stable
``code`` that the service facade copies into ``ServiceError.code``.
"""

from __future__ import annotations

from typing import Any


class MenuError(Exception):
    """Base class for all menu editing errors."""

    code = "MENU_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(MenuError):
    """Bad or missing input (empty name, empty column list, unknown type)."""

    code = "VALIDATION_FAILED"


class DuplicateNameError(MenuError):
    """A column add or rename collides with an existing column."""

    code = "DUPLICATE_NAME"


class LastColumnError(MenuError):
    """Attempt to delete the only column of a section."""

    code = "LAST_COLUMN"


class NotFoundError(MenuError):
    """Unknown section, item, column, menu, or missing snapshot."""

    code = "NOT_FOUND"


class SlugInvalidError(ValidationError):
    """Publish slug does not match ``^[a-z0-9-]{3,}$``."""

    code = "SLUG_INVALID"


class SlugTakenError(MenuError):
    """Publish slug is already used by another published menu."""

    code = "SLUG_TAKEN"


class PersistenceError(MenuError):
    """The persistence gateway failed or refused a write."""

    code = "PERSISTENCE_FAILED"
