"""Built-in section templates.

A section's ``type`` is one of these keys or ``custom``. Adding a section
with a template type and no explicit columns copies the template's
column schema.
"""

from __future__ import annotations

from dataclasses import dataclass

CUSTOM_TYPE = "custom"


@dataclass(frozen=True)
class SectionTemplate:
    """Default name and column schema for a section type."""

    key: str
    name: str
    columns: tuple[str, ...]
    title_columns: tuple[str, ...]


SECTION_TEMPLATES: dict[str, SectionTemplate] = {
    t.key: t
    for t in (
        SectionTemplate(
            "food",
            "Food Items",
            ("Item Name", "Description", "Price"),
            ("Item Name", "Price"),
        ),
        SectionTemplate(
            "beer",
            "Beer",
            ("Beer Name", "Brewery", "Style", "ABV", "Price"),
            ("Beer Name", "Price"),
        ),
        SectionTemplate(
            "wine",
            "Wine",
            ("Wine Name", "Producer", "Vintage", "Region", "Price"),
            ("Wine Name", "Producer", "Vintage", "Price"),
        ),
        SectionTemplate(
            "cocktails",
            "Cocktails",
            ("Cocktail Name", "Description", "Base Spirit", "Price"),
            ("Cocktail Name", "Price"),
        ),
        SectionTemplate(
            "coffee",
            "Coffee/Tea",
            ("Item Name", "Type", "Size Options", "Price"),
            ("Item Name", "Price"),
        ),
        SectionTemplate(
            "desserts",
            "Desserts",
            ("Dessert Name", "Description", "Allergens", "Price"),
            ("Dessert Name", "Price"),
        ),
    )
}

SECTION_TYPES: frozenset[str] = frozenset({*SECTION_TEMPLATES, CUSTOM_TYPE})


def get_template(key: str) -> SectionTemplate | None:
    """Return the template for *key*, or None for ``custom``/unknown keys."""
    return SECTION_TEMPLATES.get(key)
