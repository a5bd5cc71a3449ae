"""Drag-to-select state machine: press / enter / release over 5-minute rows."""
from dataclasses import dataclass
from typing import Optional

from app.services.block_selector import IDLE, BlockIntervalSelector, Selecting
from app.services.column_layout import ColumnLayout
from app.services.rotation_grid_view import build_display_groups
from tests.helpers import level, t


@dataclass
class Event:
    id: Optional[int]
    name: str
    color: str


WARMUP = Event(id=1, name="Warmup", color="#f59e0b")


def _groups(levels, combined=()):
    return build_display_groups(levels, ColumnLayout.from_lists(range(len(levels)), combined))


def test_press_requires_event(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    assert not selector.press(a, 0, None)
    assert selector.state == IDLE


def test_press_requires_active_cell(abc_levels):
    c = _groups(abc_levels)[2]
    selector = BlockIntervalSelector(t("09:00"))
    # C starts at 09:30 (row 6)
    assert not selector.press(c, 5, WARMUP)
    assert not selector.press(c, -1, WARMUP)
    assert selector.press(c, 6, WARMUP)
    assert isinstance(selector.state, Selecting)


def test_release_emits_half_open_interval(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 2, WARMUP)
    selector.enter(a, 5)

    request = selector.release()
    assert request.level == "A"
    assert request.schedule_group == "A"
    assert request.rotation_event_id == 1
    assert request.event_name == "Warmup"
    assert request.color == "#f59e0b"
    assert (request.start_time, request.end_time) == (t("09:10"), t("09:30"))
    assert selector.state == IDLE


def test_single_cell_selection_covers_one_row(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 0, WARMUP)
    request = selector.release()
    assert (request.start_time, request.end_time) == (t("09:00"), t("09:05"))


def test_upward_drag_is_normalized(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 8, WARMUP)
    selector.enter(a, 3)
    assert selector.selection_rows() == (3, 8)

    request = selector.release()
    assert (request.start_time, request.end_time) == (t("09:15"), t("09:45"))


def test_enter_other_column_is_ignored(abc_levels):
    a, b, c = _groups(abc_levels)
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 1, WARMUP)
    selector.enter(a, 4)
    assert not selector.enter(b, 9)
    assert not selector.enter(c, 10)
    assert selector.selection_rows() == (1, 4)


def test_enter_inactive_row_keeps_last_valid_extent(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 9, WARMUP)
    selector.enter(a, 11)
    # A ends at 10:00 (row 12)
    assert not selector.enter(a, 12)
    assert not selector.enter(a, 15)

    request = selector.release()
    assert request.end_time == t("10:00")


def test_release_outside_grid_uses_last_row(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 0, WARMUP)
    selector.enter(a, 2)
    # pointer left the grid: no enter, just release
    request = selector.release()
    assert request is not None
    assert request.end_time == t("09:15")


def test_enter_and_release_when_idle(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    assert not selector.enter(a, 1)
    assert selector.release() is None
    assert selector.selection_rows() is None


def test_cancel_discards_selection(abc_levels):
    a = _groups(abc_levels)[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 0, WARMUP)
    selector.cancel()
    assert not selector.is_selecting
    assert selector.release() is None


def test_combined_column_locks_to_primary_level(abc_levels):
    merged, c = _groups(abc_levels, [[0, 1]])
    selector = BlockIntervalSelector(t("09:00"))
    assert selector.press(merged, 2, WARMUP)
    assert selector.state.level_key == abc_levels[0].key
    selector.enter(merged, 5)

    request = selector.release()
    assert request.level == "A"
    assert (request.start_time, request.end_time) == (t("09:10"), t("09:30"))


def test_combined_column_is_active_across_all_members():
    levels = [level("A", "09:00", "09:30"), level("B", "09:30", "10:00")]
    merged = _groups(levels, [[0, 1]])[0]
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(merged, 0, WARMUP)
    # row 8 (09:40) is only B's window but the combined column is active there
    assert selector.enter(merged, 8)
    assert selector.release().end_time == t("09:45")


def test_event_captured_at_press():
    levels = [level("A", "09:00", "10:00")]
    a = _groups(levels)[0]
    event = Event(id=7, name="Beam", color="#8b5cf6")
    selector = BlockIntervalSelector(t("09:00"))
    selector.press(a, 0, event)
    event.name = "Floor"
    assert selector.release().event_name == "Beam"


def test_drag_to_end_of_day_ends_at_2359():
    late = level("A", "23:00", "23:59")
    group = build_display_groups([late], ColumnLayout.from_lists([0], []))[0]
    selector = BlockIntervalSelector(t("23:00"))
    assert selector.press(group, 11, WARMUP)

    request = selector.release()
    assert (request.start_time, request.end_time) == (t("23:55"), t("23:59"))
