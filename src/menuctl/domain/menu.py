"""Menu document model — sections, columns, items, and style settings.

Field names are snake_case in Python and camelCase on the wire (export
files, stored drafts, published snapshots) via a pydantic alias
generator, so ``section.title_columns`` round-trips as ``titleColumns``.

Models carry shape only. Structural invariants (unique ids, at least one
column, title columns tracking column order) are enforced by the
Document Store on every mutation, not by validators here: a corrupted
draft must still load so it can be repaired.

Column-name rules live here as pure helpers so the store, the reorder
engine, and the preview projector agree on them:

- a column whose name contains ``price`` (any case) is a price column
  and always belongs to the title columns;
- the first column whose name contains ``description`` is the item's
  description.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from menuctl.domain.lifecycle import MenuStatus

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
)

PRICE_KEYWORD = "price"
DESCRIPTION_KEYWORD = "description"

Item = dict[str, str]


# ---------------------------------------------------------------------------
# Column-name rules
# ---------------------------------------------------------------------------


def is_price_column(name: str) -> bool:
    """Return True when *name* contains ``price`` (case-insensitive)."""
    return PRICE_KEYWORD in name.lower()


def is_description_column(name: str) -> bool:
    """Return True when *name* contains ``description`` (case-insensitive)."""
    return DESCRIPTION_KEYWORD in name.lower()


def find_description_column(columns: Iterable[str]) -> str | None:
    """First description-named column in *columns* order, or None."""
    for column in columns:
        if is_description_column(column):
            return column
    return None


def normalize_title_columns(columns: list[str], selected: Iterable[str]) -> list[str]:
    """Derive the stored title columns for a section.

    Keeps the *selected* names that are real columns, adds every
    price-named column, and orders the result by position in *columns*.
    """
    wanted = set(selected)
    return [c for c in columns if c in wanted or is_price_column(c)]


def rebuild_item(columns: list[str], item: Mapping[str, str] | None = None) -> Item:
    """Build a fresh item keyed by *columns*, in column order.

    Existing values are copied; missing keys default to an empty string.
    Keys not in *columns* are dropped.
    """
    source = item or {}
    return {column: source.get(column, "") for column in columns}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class StyleSettings(BaseModel):
    """Logo, background, font, palette, and navigation settings.

    Opaque to the core: copied verbatim into drafts and snapshots.
    Unknown keys are kept so newer editors can round-trip through us.
    """

    model_config = ConfigDict(**_WIRE_CONFIG, extra="allow")

    menu_logo: str | None = None
    logo_size: str = "medium"
    background_type: str = "none"
    background_value: str | None = None
    font_family: str = "Inter"
    color_palette: str = "classic"
    navigation_theme: str = "modern"


class Section(BaseModel):
    """A named, typed group of items sharing a column schema."""

    model_config = _WIRE_CONFIG

    id: int
    name: str
    type: str = "custom"
    columns: list[str] = Field(default_factory=list)
    title_columns: list[str] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)

    def column_index(self, name: str) -> int:
        """Position of *name* in ``columns``; raises ValueError if absent."""
        return self.columns.index(name)


class MenuDocument(BaseModel):
    """The editable menu: ordered sections plus style and publish metadata."""

    model_config = _WIRE_CONFIG

    id: str
    name: str = "Untitled Menu"
    user_id: str | None = None
    sections: list[Section] = Field(default_factory=list)
    section_counter: int = 0
    style: StyleSettings = Field(default_factory=StyleSettings)
    published_menu_id: str | None = None
    published_slug: str | None = None
    published_title: str | None = None
    published_subtitle: str | None = None
    status: MenuStatus = MenuStatus.DRAFT
    created_at: str | None = None
    updated_at: str | None = None

    def find_section(self, section_id: int) -> Section | None:
        """Return the section with *section_id*, or None."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def item_count(self) -> int:
        return sum(len(s.items) for s in self.sections)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class MenuSummary(BaseModel):
    """One row of a user's menu list."""

    model_config = ConfigDict(**_WIRE_CONFIG, frozen=True)

    id: str
    name: str
    status: str
    published_slug: str | None = None
    section_count: int = 0
    item_count: int = 0
    updated_at: str | None = None


class PublishedSnapshot(BaseModel):
    """Copy of a menu exposed at a slug; immutable until republished."""

    model_config = _WIRE_CONFIG

    menu_id: str | None = None
    source_menu_id: str | None = None
    slug: str
    title: str
    subtitle: str | None = None
    sections: list[Section] = Field(default_factory=list)
    style: StyleSettings = Field(default_factory=StyleSettings)
    published_at: str | None = None
    updated_at: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
