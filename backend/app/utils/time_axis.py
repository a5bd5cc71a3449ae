"""
Rotation grid time axis.

The grid is sliced into fixed 5-minute rows starting at the earliest practice
start of the day. Row 0 is the range start; a level occupies the half-open
interval [start_time, end_time), so its last visible row is the one whose time
is end_time - 5 minutes.
"""
from dataclasses import dataclass
from datetime import time
from typing import List, Protocol, Sequence, Tuple

MINUTES_PER_ROW = 5
MINUTES_PER_DAY = 24 * 60


class TimedLevel(Protocol):
    start_time: time
    end_time: time


@dataclass(frozen=True)
class TimeLabel:
    label: str
    is_hour: bool


def _to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _from_minutes(total_minutes: int) -> time:
    if total_minutes < 0 or total_minutes >= MINUTES_PER_DAY:
        raise ValueError(f"{total_minutes} minutes is outside a single day")
    return time(total_minutes // 60, total_minutes % 60)


def time_range(levels: Sequence[TimedLevel]) -> Tuple[time, time]:
    """Earliest start and latest end across the day's levels."""
    if not levels:
        raise ValueError("time_range requires at least one level")
    start = min(level.start_time for level in levels)
    end = max(level.end_time for level in levels)
    return start, end


def row_for_time(t: time, range_start: time) -> int:
    return (_to_minutes(t) - _to_minutes(range_start)) // MINUTES_PER_ROW


def time_for_row(row: int, range_start: time) -> time:
    return _from_minutes(_to_minutes(range_start) + row * MINUTES_PER_ROW)


def row_end_time(row: int, range_start: time) -> time:
    """Exclusive end of a row; the last row of the day ends at 23:59."""
    minutes = _to_minutes(range_start) + (row + 1) * MINUTES_PER_ROW
    return _from_minutes(min(minutes, MINUTES_PER_DAY - 1))


def row_count(range_start: time, range_end: time) -> int:
    """Number of rows needed to cover [range_start, range_end)."""
    span = _to_minutes(range_end) - _to_minutes(range_start)
    if span <= 0:
        return 0
    return -(-span // MINUTES_PER_ROW)


def time_slots(range_start: time, range_end: time) -> List[time]:
    return [time_for_row(row, range_start) for row in range(row_count(range_start, range_end))]


def is_active_at(level: TimedLevel, slot: time) -> bool:
    return level.start_time <= slot < level.end_time


def is_hour_boundary(t: time) -> bool:
    return t.minute == 0


def format_time_label(t: time) -> TimeLabel:
    """Row label for the time column: "4:00 PM" on the hour, "4:05" inside it."""
    hour12 = t.hour % 12 or 12
    if is_hour_boundary(t):
        ampm = "PM" if t.hour >= 12 else "AM"
        return TimeLabel(label=f"{hour12}:00 {ampm}", is_hour=True)
    return TimeLabel(label=f"{hour12}:{t.minute:02d}", is_hour=False)


def format_clock_time(t: time) -> str:
    """Block time display, e.g. "4:30 PM"."""
    hour12 = t.hour % 12 or 12
    ampm = "PM" if t.hour >= 12 else "AM"
    return f"{hour12}:{t.minute:02d} {ampm}"
