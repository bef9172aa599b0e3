"""DocumentStore — validated, atomic mutations of a MenuDocument.

Every public mutation validates all of its inputs before touching the
document, so a rejected call leaves the prior state intact. Accepted
mutations report themselves through the ``on_change`` callback with the
operation name; rejected and no-op calls do not.

INVARIANTS (hold after every operation):
- Section ids are unique and never reused (``section_counter`` only grows).
- Every section has at least one column; column names are unique and
  non-empty.
- ``title_columns`` is a subset of ``columns``, contains every
  price-named column, and follows column order.
- Item keys follow column order; column rename/delete touches every
  item of the section or none.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from menuctl.domain.errors import (
    DuplicateNameError,
    LastColumnError,
    NotFoundError,
    ValidationError,
)
from menuctl.domain.menu import (
    Item,
    MenuDocument,
    Section,
    normalize_title_columns,
    rebuild_item,
)
from menuctl.domain.templates import SECTION_TYPES, get_template
from menuctl.domain.transfer import parse_import

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]


class SectionPatch(BaseModel):
    """Fields accepted by :meth:`DocumentStore.update_section`.

    Unset fields are left alone.
    """

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    type: str | None = None
    columns: list[str] | None = None
    title_columns: list[str] | None = None


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _clean_name(name: str | None, what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"Please enter a {what} name")
    return cleaned


def _clean_columns(columns: Iterable[str] | None) -> list[str]:
    cleaned = [(c or "").strip() for c in (columns or [])]
    if any(not c for c in cleaned):
        raise ValidationError("Column names must not be empty")
    if not cleaned:
        raise ValidationError("Please add at least one column")
    seen: set[str] = set()
    for column in cleaned:
        if column in seen:
            raise DuplicateNameError(f"A column named {column!r} already exists.", column=column)
        seen.add(column)
    return cleaned


def _check_type(section_type: str) -> str:
    if section_type not in SECTION_TYPES:
        raise ValidationError(
            f"Unknown section type: {section_type!r}",
            allowed=sorted(SECTION_TYPES),
        )
    return section_type


def _check_title_columns(columns: list[str], title_columns: Iterable[str]) -> list[str]:
    selected = list(title_columns)
    unknown = [c for c in selected if c not in columns]
    if unknown:
        raise ValidationError(
            f"Title columns must be section columns: {', '.join(unknown)}",
            unknown=unknown,
        )
    return normalize_title_columns(columns, selected)


class DocumentStore:
    """Owns the in-memory document and applies validated mutations."""

    def __init__(self, document: MenuDocument, *, on_change: ChangeCallback | None = None) -> None:
        self._document = document
        self._on_change = on_change

    @property
    def document(self) -> MenuDocument:
        return self._document

    def replace_document(self, document: MenuDocument) -> None:
        """Swap in a whole document (discard/revert). Does not notify."""
        self._document = document

    def commit(self, reason: str) -> None:
        """Report an accepted mutation to the change callback."""
        logger.debug("Document changed: %s", reason)
        if self._on_change is not None:
            self._on_change(reason)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_section(self, section_id: int) -> Section:
        section = self._document.find_section(section_id)
        if section is None:
            raise NotFoundError(f"Section not found: {section_id}", section_id=section_id)
        return section

    def _get_item_index(self, section: Section, index: int) -> int:
        if not 0 <= index < len(section.items):
            raise NotFoundError(
                f"Item not found at index {index} in section {section.id}",
                section_id=section.id,
                index=index,
            )
        return index

    @staticmethod
    def _require_column(section: Section, name: str) -> None:
        if name not in section.columns:
            raise NotFoundError(
                f"Column not found: {name!r} in section {section.id}",
                section_id=section.id,
                column=name,
            )

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def add_section(
        self,
        name: str,
        section_type: str = "custom",
        columns: Iterable[str] | None = None,
        title_columns: Iterable[str] | None = None,
    ) -> Section:
        """Append a new section; its id comes from ``section_counter``.

        A template *section_type* with no *columns* uses the template's schema.
        """
        clean_name = _clean_name(name, "section")
        section_type = _check_type(section_type)
        template = get_template(section_type)

        if columns is None and template is not None:
            clean_columns = list(template.columns)
            if title_columns is None:
                title_columns = template.title_columns
        else:
            clean_columns = _clean_columns(columns)
        titles = _check_title_columns(clean_columns, title_columns or [])

        doc = self._document
        section = Section(
            id=doc.section_counter + 1,
            name=clean_name,
            type=section_type,
            columns=clean_columns,
            title_columns=titles,
            items=[],
        )
        doc.section_counter = section.id
        doc.sections.append(section)
        self.commit("add_section")
        return section

    def update_section(
        self, section_id: int, patch: SectionPatch | Mapping[str, Any]
    ) -> Section:
        """Apply *patch* to a section.

        Changing ``columns`` rebuilds every item from the new column list.
        """
        section = self.get_section(section_id)
        if not isinstance(patch, SectionPatch):
            try:
                patch = SectionPatch.model_validate(dict(patch))
            except PydanticValidationError as exc:
                msg = f"Invalid section patch: {exc.error_count()} error(s)"
                raise ValidationError(msg) from exc

        name = _clean_name(patch.name, "section") if patch.name is not None else section.name
        section_type = _check_type(patch.type) if patch.type is not None else section.type
        columns = _clean_columns(patch.columns) if patch.columns is not None else section.columns
        if patch.title_columns is not None:
            titles = _check_title_columns(columns, patch.title_columns)
        else:
            titles = normalize_title_columns(
                columns, [c for c in section.title_columns if c in columns]
            )

        columns_changed = columns != section.columns
        section.name = name
        section.type = section_type
        section.columns = list(columns)
        section.title_columns = titles
        if columns_changed:
            section.items = [rebuild_item(section.columns, item) for item in section.items]
        self.commit("update_section")
        return section

    def delete_section(self, section_id: int, *, confirmed: bool = True) -> bool:
        """Remove a section. Idempotent: an unknown id is not an error."""
        if not confirmed:
            return False
        before = len(self._document.sections)
        self._document.sections = [s for s in self._document.sections if s.id != section_id]
        if len(self._document.sections) == before:
            return False
        self.commit("delete_section")
        return True

    def repair_duplicate_section_ids(self) -> bool:
        """Reassign ids ``1..N`` in order if any two sections share one.

        Also raises ``section_counter`` to the highest id present so new
        sections never reuse an id. Returns True when anything changed;
        a second call is always a no-op.
        """
        doc = self._document
        ids = [s.id for s in doc.sections]
        changed = False
        if len(ids) != len(set(ids)):
            logger.info("Detected duplicate section ids %s, reassigning", ids)
            for index, section in enumerate(doc.sections, start=1):
                section.id = index
            doc.section_counter = len(doc.sections)
            changed = True
        highest = max((s.id for s in doc.sections), default=0)
        if doc.section_counter < highest:
            doc.section_counter = highest
            changed = True
        if changed:
            self.commit("repair_duplicate_section_ids")
        return changed

    def import_sections(self, payload: Any) -> list[Section]:
        """Replace all sections with those in an export payload.

        Rejected payloads leave the document untouched.
        """
        imported = parse_import(payload)
        for section in imported:
            section.name = _clean_name(section.name, "section")
            section.columns = _clean_columns(section.columns)
            section.title_columns = normalize_title_columns(
                section.columns, section.title_columns
            )
            section.items = [rebuild_item(section.columns, item) for item in section.items]

        doc = self._document
        doc.sections = imported
        doc.section_counter = max((s.id for s in imported), default=0)
        ids = [s.id for s in imported]
        if len(ids) != len(set(ids)):
            for index, section in enumerate(imported, start=1):
                section.id = index
            doc.section_counter = len(imported)
        self.commit("import_sections")
        return imported

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(self, section_id: int, values: Mapping[str, str] | None = None) -> int:
        """Append an item; unset fields default to empty strings.

        Returns the new item's index.
        """
        section = self.get_section(section_id)
        values = dict(values or {})
        for column in values:
            self._require_column(section, column)
        section.items.append(rebuild_item(section.columns, {k: str(v) for k, v in values.items()}))
        self.commit("add_item")
        return len(section.items) - 1

    def update_item(self, section_id: int, index: int, column: str, value: str) -> Item:
        section = self.get_section(section_id)
        self._get_item_index(section, index)
        self._require_column(section, column)
        item = section.items[index]
        if column in item:
            item[column] = str(value)
        else:
            section.items[index] = rebuild_item(section.columns, {**item, column: str(value)})
        self.commit("update_item")
        return section.items[index]

    def delete_item(self, section_id: int, index: int, *, confirmed: bool = True) -> bool:
        section = self.get_section(section_id)
        self._get_item_index(section, index)
        if not confirmed:
            return False
        del section.items[index]
        self.commit("delete_item")
        return True

    def duplicate_item(self, section_id: int, index: int) -> int:
        """Insert a copy right after the original; returns the copy's index."""
        section = self.get_section(section_id)
        self._get_item_index(section, index)
        section.items.insert(index + 1, dict(section.items[index]))
        self.commit("duplicate_item")
        return index + 1

    def move_item(self, section_id: int, index: int, target_section_id: int) -> int:
        """Move an item to the end of another section.

        Values are matched by column name; columns the target lacks are
        dropped. Returns the index in the target section.
        """
        source = self.get_section(section_id)
        self._get_item_index(source, index)
        target = self.get_section(target_section_id)
        if target is source:
            return index
        moved = rebuild_item(target.columns, source.items[index])
        del source.items[index]
        target.items.append(moved)
        self.commit("move_item")
        return len(target.items) - 1

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def add_column(self, section_id: int, name: str) -> Section:
        """Append a column and back-fill it as an empty string on every item."""
        section = self.get_section(section_id)
        column = _clean_name(name, "column")
        if column in section.columns:
            raise DuplicateNameError(
                "A column with this name already exists.", section_id=section_id, column=column
            )
        section.columns.append(column)
        section.title_columns = normalize_title_columns(section.columns, section.title_columns)
        for item in section.items:
            item[column] = ""
        self.commit("add_column")
        return section

    def rename_column(self, section_id: int, old_name: str, new_name: str) -> Section:
        """Rename a column, moving each item's value to the new key."""
        section = self.get_section(section_id)
        self._require_column(section, old_name)
        column = _clean_name(new_name, "column")
        if column == old_name:
            return section
        if column in section.columns:
            raise DuplicateNameError(
                "A column with this name already exists.", section_id=section_id, column=column
            )

        position = section.column_index(old_name)
        columns = list(section.columns)
        columns[position] = column
        selected = [column if c == old_name else c for c in section.title_columns]
        items = [
            {(column if key == old_name else key): value for key, value in item.items()}
            for item in section.items
        ]

        section.columns = columns
        section.title_columns = normalize_title_columns(columns, selected)
        section.items = [rebuild_item(columns, item) for item in items]
        self.commit("rename_column")
        return section

    def delete_column(self, section_id: int, name: str, *, confirmed: bool = True) -> bool:
        """Remove a column and its value from every item."""
        section = self.get_section(section_id)
        self._require_column(section, name)
        if len(section.columns) <= 1:
            raise LastColumnError(
                "Cannot delete the last column. Sections must have at least one column.",
                section_id=section_id,
                column=name,
            )
        if not confirmed:
            return False

        section.columns = [c for c in section.columns if c != name]
        section.title_columns = [c for c in section.title_columns if c != name]
        for item in section.items:
            item.pop(name, None)
        self.commit("delete_column")
        return True
