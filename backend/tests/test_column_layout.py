"""Original/display index mapping and repair of stale persisted layouts."""
import logging
from itertools import permutations

import pytest

from app.services.column_layout import (
    ColumnLayout,
    LevelKey,
    display_to_original,
    is_valid_order,
    ordered_levels,
    original_to_display,
    reconcile,
    sanitize,
    valid_combined_groups,
)


def test_level_key_round_trip():
    key = LevelKey("Level 3", "B")
    assert key.as_str() == "Level 3|B"
    assert LevelKey.parse("Level 3|B") == key
    assert LevelKey.parse("Xcel Gold") == LevelKey("Xcel Gold", "A")


def test_ordered_levels_follows_every_valid_permutation():
    levels = ["A", "B", "C", "D"]
    for order in permutations(range(4)):
        result = ordered_levels(levels, order)
        for display_idx, original_idx in enumerate(order):
            assert result[display_idx] == levels[original_idx]


@pytest.mark.parametrize(
    "order",
    [
        [0, 0, 1],  # duplicate
        [0, 1, 3],  # out of range
        [0, 1],  # too short
        [0, 1, 2, 3],  # too long
        [-1, 0, 1],
        None,
        [],
    ],
)
def test_invalid_order_falls_back_to_identity(order):
    assert not is_valid_order(order, 3)
    assert display_to_original(order, 3) == [0, 1, 2]
    assert ordered_levels(["A", "B", "C"], order) == ["A", "B", "C"]


def test_original_to_display_is_inverse():
    order = [2, 0, 3, 1]
    inverse = original_to_display(order, 4)
    assert inverse == [1, 3, 0, 2]
    for display_idx, original_idx in enumerate(order):
        assert inverse[original_idx] == display_idx


def test_valid_combined_groups_drops_out_of_range_members():
    assert valid_combined_groups([[0, 1, 5], [2, 7]], 3) == [[0, 1]]


def test_valid_combined_groups_keeps_groups_disjoint():
    # 1 is already claimed by the first group
    assert valid_combined_groups([[0, 1], [1, 2, 3]], 4) == [[0, 1], [2, 3]]
    assert valid_combined_groups([[0, 0]], 2) == []
    # a dropped singleton does not claim its index
    assert valid_combined_groups([[1, 9], [1, 2]], 3) == [[1, 2]]


def test_valid_combined_groups_empty():
    assert valid_combined_groups(None, 3) == []
    assert valid_combined_groups([], 0) == []


def test_sanitize_stale_short_order():
    stored = ColumnLayout.from_lists([2, 0], [])
    repaired = sanitize(stored, 3)
    assert repaired.order_list() == [0, 1, 2]


def test_sanitize_repairs_halves_independently():
    # order is valid, group references a removed level
    stored = ColumnLayout.from_lists([1, 0], [[0, 1], [1, 4]])
    repaired = sanitize(stored, 2)
    assert repaired.order_list() == [1, 0]
    assert repaired.groups_list() == [[0, 1]]


def test_sanitize_of_empty_layout_is_identity():
    assert sanitize(ColumnLayout(), 3) == ColumnLayout.from_lists([0, 1, 2], [])


def test_sanitize_logs_stale_groups_with_empty_order(caplog):
    stored = ColumnLayout.from_lists([], [[0, 7]])
    with caplog.at_level(logging.INFO, logger="app.services.column_layout"):
        repaired = sanitize(stored, 3)

    assert repaired == ColumnLayout.from_lists([0, 1, 2], [])
    assert "Repaired stale column layout" in caplog.text


def test_sanitize_of_default_layout_logs_nothing(caplog):
    with caplog.at_level(logging.INFO, logger="app.services.column_layout"):
        sanitize(ColumnLayout(), 3)
        sanitize(ColumnLayout.from_lists([1, 0, 2], [[0, 1]]), 3)

    assert "Repaired" not in caplog.text


def test_reconcile_resets_everything_when_order_no_longer_fits():
    held = ColumnLayout.from_lists([1, 0, 2], [[0, 1]])
    assert reconcile(held, 4) == ColumnLayout.from_lists([0, 1, 2, 3], [])


def test_reconcile_only_sanitizes_groups_when_order_still_fits():
    held = ColumnLayout.from_lists([2, 1, 0], [[0, 1], [2, 5]])
    assert reconcile(held, 3) == ColumnLayout.from_lists([2, 1, 0], [[0, 1]])


def test_layout_lists_are_copies():
    layout = ColumnLayout.from_lists([1, 0], [[0, 1]])
    layout.order_list().append(5)
    layout.groups_list()[0].append(5)
    assert layout.column_order == (1, 0)
    assert layout.combined_groups == ((0, 1),)
