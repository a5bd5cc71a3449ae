import pytest

from app.services.column_layout import ColumnLayout
from app.services.layout_actions import Combine, Reorder, Sanitize, Split, reduce_layout


def test_reduce_combine_then_split():
    layout = ColumnLayout.from_lists([0, 1, 2], [])
    combined = reduce_layout(layout, Combine(0, 1), 3)
    assert combined.groups_list() == [[0, 1]]

    assert reduce_layout(combined, Split(0, 1), 3) == layout


def test_reduce_reorder_moves_group():
    layout = ColumnLayout.from_lists([0, 1, 2, 3], [[2, 3]])
    moved = reduce_layout(layout, Reorder(2, 0), 4)
    assert moved.order_list() == [2, 3, 0, 1]
    assert moved.groups_list() == [[2, 3]]


def test_reduce_sanitize_repairs_stale_state():
    stale = ColumnLayout.from_lists([2, 0], [[0, 5]])
    assert reduce_layout(stale, Sanitize(), 3) == ColumnLayout.from_lists([0, 1, 2], [])


def test_reduce_does_not_touch_input():
    layout = ColumnLayout.from_lists([0, 1, 2], [])
    reduce_layout(layout, Combine(1, 2), 3)
    assert layout.groups_list() == []


def test_reduce_starts_from_identity_when_nothing_stored():
    result = reduce_layout(ColumnLayout(), Reorder(0, 2), 3)
    assert result.order_list() == [1, 2, 0]


def test_reduce_rejects_unknown_action():
    with pytest.raises(TypeError):
        reduce_layout(ColumnLayout(), "combine", 3)
