from __future__ import annotations

import pytest

from table_engine.core.columns import Align
from table_engine.core.render import render_rows
from table_engine.core.selection import (
    SelectionConfig,
    SelectionManager,
    SelectionSet,
)


def test_duplicate_selected_ids_rejected():
    with pytest.raises(ValueError):
        SelectionConfig(selected_ids=[1, 1])


def test_manager_relays_without_mutating_config(get_row_key):
    toggles = []
    config = SelectionConfig(selected_ids=[2], on_toggle_select=toggles.append)
    manager = SelectionManager(config, get_row_key)
    manager.toggle(5)
    assert toggles == [5]
    assert config.selected_ids == [2]
    assert manager.is_selected(2)
    assert not manager.is_selected(5)


def test_selection_column_marks_rows(records, columns, get_row_key):
    manager = SelectionManager(SelectionConfig(selected_ids=[2]), get_row_key)
    column = manager.column()
    assert column.align is Align.CENTER
    rows = render_rows(records[:3], [column, *columns], get_row_key, manager)
    assert [str(row.cells[0].content) for row in rows] == ["[ ]", "[x]", "[ ]"]
    assert [row.selected for row in rows] == [False, True, False]
    assert len(rows[0].cells) == len(columns) + 1


def test_header_reflects_all_selected(get_row_key):
    manager = SelectionManager(SelectionConfig(all_selected=True), get_row_key)
    assert str(manager.header()) == "[x]"


def test_toggle_is_its_own_inverse():
    store = SelectionSet([1, 2])
    store.toggle(3)
    store.toggle(3)
    assert store.ids == [1, 2]
    store.toggle(1)
    assert store.ids == [2]


def test_select_all_adds_without_duplicates():
    store = SelectionSet([2])
    store.select_all([1, 2, 3])
    assert store.ids == [2, 1, 3]
    assert len(store) == 3
    assert store.all_selected([1, 2, 3])
    assert not store.all_selected([])


def test_to_config_select_all_flips_between_select_and_clear():
    store = SelectionSet()
    config = store.to_config([1, 2])
    assert config.all_selected is False
    config.on_select_all()
    assert store.ids == [1, 2]

    config = store.to_config([1, 2])
    assert config.all_selected is True
    config.on_select_all()
    assert len(store) == 0

    store.to_config([4]).on_toggle_select(4)
    assert 4 in store
