"""Tests for the preview projector."""

from __future__ import annotations

from menuctl.domain.menu import MenuDocument, Section
from menuctl.domain.preview import (
    EMPTY_ITEM_LABEL,
    effective_title_columns,
    project,
    project_item,
)


def _food(title_columns: list[str]) -> Section:
    return Section(
        id=1,
        name="Food Items",
        type="food",
        columns=["Item Name", "Description", "Price"],
        title_columns=title_columns,
        items=[{"Item Name": "Burger", "Description": "Beef patty", "Price": "$9.99"}],
    )


class TestProjectItem:
    def test_food_item(self) -> None:
        section = _food(["Item Name"])
        record = project_item(section, section.items[0], 0)
        assert record.title_text == "Burger"
        assert record.title_price == "$9.99"
        assert record.description == "Beef patty"
        assert record.data_row == ()
        assert record.placeholder is False

    def test_first_column_is_title_when_none_selected(self) -> None:
        section = Section(
            id=1,
            name="Beer",
            columns=["Beer Name", "Style"],
            items=[{"Beer Name": "Pils", "Style": "Lager"}],
        )
        record = project_item(section, section.items[0], 0)
        assert record.title_text == "Pils"
        assert [(c.column, c.value) for c in record.data_row] == [("Style", "Lager")]

    def test_multiple_title_values_joined(self) -> None:
        section = Section(
            id=1,
            name="Wine",
            columns=["Wine Name", "Vintage", "Region", "Price"],
            title_columns=["Wine Name", "Vintage", "Price"],
            items=[{"Wine Name": "Rioja", "Vintage": "2019", "Region": "Spain", "Price": "$40"}],
        )
        record = project_item(section, section.items[0], 0)
        assert record.title_text == "Rioja 2019"
        assert record.title_price == "$40"
        assert [c.column for c in record.data_row] == ["Region"]

    def test_blank_title_values_skipped(self) -> None:
        section = _food(["Item Name"])
        item = {"Item Name": "   ", "Description": "", "Price": "$5"}
        record = project_item(section, item, 0)
        assert record.title_text == ""
        assert record.title_price == "$5"
        assert record.placeholder is False

    def test_all_blank_item_is_placeholder(self) -> None:
        section = _food(["Item Name"])
        record = project_item(section, {"Item Name": "", "Description": " ", "Price": ""}, 3)
        assert record.placeholder is True
        assert record.title_text == EMPTY_ITEM_LABEL
        assert record.index == 3

    def test_missing_keys_read_as_blank(self) -> None:
        section = _food(["Item Name"])
        record = project_item(section, {}, 0)
        assert record.placeholder is True


class TestEffectiveTitleColumns:
    def test_price_appended_when_unselected(self) -> None:
        section = Section(id=1, name="S", columns=["Price", "Name"], title_columns=["Name"])
        assert effective_title_columns(section) == ["Name", "Price"]


class TestProject:
    def test_sections_in_document_order(self) -> None:
        first = _food(["Item Name"])
        second = Section(id=7, name="Drinks", columns=["Drink"], items=[])
        doc = MenuDocument(id="m", sections=[second, first], section_counter=7)
        previews = project(doc)
        assert [p.section_id for p in previews] == [7, 1]
        assert previews[0].items == ()

    def test_projection_is_pure(self) -> None:
        doc = MenuDocument(id="m", sections=[_food(["Item Name"])], section_counter=1)
        before = doc.model_dump()
        assert project(doc) == project(doc)
        assert doc.model_dump() == before
