"""Export/import file format.

    {"sections": [...], "exportDate": "<ISO 8601>", "version": "1.0"}

Import accepts any object with a ``sections`` array; everything else in
the payload is ignored. A rejected payload never touches the document.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from menuctl.domain.errors import ValidationError
from menuctl.domain.menu import Section, rebuild_item

EXPORT_VERSION = "1.0"


def build_export(sections: Iterable[Section], export_date: str) -> dict[str, Any]:
    """Build the export payload; item keys follow each section's column order."""
    exported: list[dict[str, Any]] = []
    for section in sections:
        data = section.model_dump(mode="json", by_alias=True)
        data["items"] = [rebuild_item(section.columns, item) for item in section.items]
        exported.append(data)
    return {"sections": exported, "exportDate": export_date, "version": EXPORT_VERSION}


def parse_import(payload: Any) -> list[Section]:
    """Validate an import payload and return its sections.

    Raises:
        ValidationError: ``sections`` is missing, not an array, or holds a
            malformed section.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid menu file format")
    raw_sections = payload.get("sections")
    if not isinstance(raw_sections, list):
        raise ValidationError("Invalid menu file format")

    sections: list[Section] = []
    for index, raw in enumerate(raw_sections):
        try:
            sections.append(Section.model_validate(raw))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid section at position {index}",
                index=index,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
                ],
            ) from exc
    return sections
