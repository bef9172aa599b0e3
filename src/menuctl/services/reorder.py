"""ReorderEngine — move sections, columns, and items.

Works on the Document Store's document and reports through the same
change callback. Moving a column keeps the derived fields consistent:
title columns are re-sorted by the new column positions, and every item
is rebuilt from the current column list. Rebuilding (rather than
splicing item keys by position) stays correct even when an item's key
order has drifted from ``columns``.

Moving an element onto its own position is a no-op, not an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from menuctl.domain.errors import NotFoundError
from menuctl.domain.menu import normalize_title_columns, rebuild_item

if TYPE_CHECKING:
    from menuctl.domain.menu import Section
    from menuctl.services.document import DocumentStore

_T = TypeVar("_T")


def _move(seq: list[_T], old_index: int, new_index: int, what: str) -> None:
    """Move ``seq[old_index]`` so that it ends up at *new_index*."""
    size = len(seq)
    for label, index in (("from", old_index), ("to", new_index)):
        if not 0 <= index < size:
            raise NotFoundError(
                f"Cannot move {what} {label} position {index}: only {size} present",
                index=index,
                size=size,
            )
    seq.insert(new_index, seq.pop(old_index))


class ReorderEngine:
    """Reorders document elements through a :class:`DocumentStore`."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def reorder_sections(self, old_index: int, new_index: int) -> None:
        if old_index == new_index:
            return
        _move(self._store.document.sections, old_index, new_index, "section")
        self._store.commit("reorder_sections")

    def reorder_columns(self, section_id: int, old_index: int, new_index: int) -> Section:
        """Move a column, then re-derive title column order and item key order."""
        section = self._store.get_section(section_id)
        if old_index == new_index:
            return section

        columns = list(section.columns)
        _move(columns, old_index, new_index, "column")

        position = {name: i for i, name in enumerate(columns)}
        titles = sorted(
            (c for c in section.title_columns if c in position),
            key=position.__getitem__,
        )
        section.columns = columns
        section.title_columns = normalize_title_columns(columns, titles)
        section.items = [rebuild_item(columns, item) for item in section.items]
        self._store.commit("reorder_columns")
        return section

    def reorder_items(self, section_id: int, old_index: int, new_index: int) -> Section:
        section = self._store.get_section(section_id)
        if old_index == new_index:
            return section
        _move(section.items, old_index, new_index, "item")
        self._store.commit("reorder_items")
        return section
