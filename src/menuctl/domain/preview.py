"""Preview projector — pure mapping from document state to preview records.

Every rendering surface consumes the same records, so the projection
is the single place that decides what an item looks like:

1. Title columns are the section's title columns (or its first column
   when none are set), with any unselected price column appended.
2. The description column is the first column named like
   ``description``.
3. Remaining columns form the data row, in column order.
4. Non-blank title values become title text, except price-named ones,
   which become the title price.
5. An item with nothing to show becomes an "Empty Item" placeholder.

``project`` reads its input and nothing else: two calls on an unchanged
document return equal (frozen) records.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from menuctl.domain.menu import (
    MenuDocument,
    Section,
    find_description_column,
    is_price_column,
)

EMPTY_ITEM_LABEL = "Empty Item"

_FROZEN = ConfigDict(frozen=True)


class DataCell(BaseModel):
    """One visible, non-title column value."""

    model_config = _FROZEN

    column: str
    value: str
    is_price: bool


class ItemPreview(BaseModel):
    """Surface-agnostic rendering of a single item."""

    model_config = _FROZEN

    index: int
    placeholder: bool = False
    title_text: str = ""
    title_price: str = ""
    description: str = ""
    data_row: tuple[DataCell, ...] = ()


class SectionPreview(BaseModel):
    """Rendering of a section: its name and item records."""

    model_config = _FROZEN

    section_id: int
    name: str
    items: tuple[ItemPreview, ...] = ()


def _is_blank(value: str) -> bool:
    return not value.strip()


def effective_title_columns(section: Section) -> list[str]:
    """Title columns used for rendering, price columns always included."""
    if section.title_columns:
        titles = list(section.title_columns)
    else:
        titles = section.columns[:1]
    for column in section.columns:
        if is_price_column(column) and column not in titles:
            titles.append(column)
    return titles


def project_item(section: Section, item: Mapping[str, str], index: int) -> ItemPreview:
    """Project one *item* of *section* at position *index*."""
    titles = effective_title_columns(section)
    description_column = find_description_column(section.columns)
    visible = [c for c in section.columns if c not in titles and c != description_column]

    title_parts: list[str] = []
    price_parts: list[str] = []
    for column in titles:
        value = item.get(column) or ""
        if _is_blank(value):
            continue
        if is_price_column(column):
            price_parts.append(value)
        else:
            title_parts.append(value)

    title_text = " ".join(title_parts)
    title_price = " ".join(price_parts)
    description = (item.get(description_column) or "") if description_column else ""
    data_row = tuple(
        DataCell(column=c, value=item.get(c) or "", is_price=is_price_column(c)) for c in visible
    )

    if (
        not title_text
        and not title_price
        and _is_blank(description)
        and all(_is_blank(cell.value) for cell in data_row)
    ):
        return ItemPreview(index=index, placeholder=True, title_text=EMPTY_ITEM_LABEL)

    return ItemPreview(
        index=index,
        title_text=title_text,
        title_price=title_price,
        description=description,
        data_row=data_row,
    )


def project_section(section: Section) -> SectionPreview:
    """Project every item of *section*."""
    return SectionPreview(
        section_id=section.id,
        name=section.name,
        items=tuple(project_item(section, item, i) for i, item in enumerate(section.items)),
    )


def project(document: MenuDocument) -> list[SectionPreview]:
    """Project the whole *document*, sections in document order."""
    return [project_section(section) for section in document.sections]
