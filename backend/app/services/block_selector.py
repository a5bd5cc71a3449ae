"""
Drag-to-select state machine for creating rotation blocks.

    Idle --press(active cell, event selected)--> Selecting
    Selecting --enter(same column, active cell)--> Selecting (end_row moves)
    Selecting --release--> Idle, emitting a BlockRequest

The column is locked to the primary level at press time. Cells in other columns
or outside the column's practice window are ignored during the drag, so the
selection keeps its last valid extent. Releasing outside the grid is just a
release.
"""
from dataclasses import dataclass
from datetime import time
from typing import Optional, Protocol, Tuple, Union

from app.services.column_layout import ActiveLevel, LevelKey
from app.utils.time_axis import row_end_time, time_for_row


class EventTemplate(Protocol):
    id: Optional[int]
    name: str
    color: str


class SelectableColumn(Protocol):
    @property
    def primary(self) -> ActiveLevel: ...

    def contains(self, level_key: LevelKey) -> bool: ...

    def is_active_at(self, slot: time) -> bool: ...


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selecting:
    level_key: LevelKey
    start_row: int
    end_row: int
    rotation_event_id: Optional[int]
    event_name: str
    color: str

    def rows(self) -> Tuple[int, int]:
        return min(self.start_row, self.end_row), max(self.start_row, self.end_row)


SelectorState = Union[Idle, Selecting]

IDLE = Idle()


@dataclass(frozen=True)
class BlockRequest:
    level: str
    schedule_group: str
    rotation_event_id: Optional[int]
    event_name: str
    color: str
    start_time: time
    end_time: time


class BlockIntervalSelector:
    def __init__(self, range_start: time):
        self.range_start = range_start
        self.state: SelectorState = IDLE

    @property
    def is_selecting(self) -> bool:
        return isinstance(self.state, Selecting)

    def selection_rows(self) -> Optional[Tuple[int, int]]:
        """Normalized (first_row, last_row) of the live selection, both inclusive."""
        if isinstance(self.state, Selecting):
            return self.state.rows()
        return None

    def _is_active(self, column: SelectableColumn, row: int) -> bool:
        if row < 0:
            return False
        try:
            slot = time_for_row(row, self.range_start)
        except ValueError:
            return False
        return column.is_active_at(slot)

    def press(self, column: SelectableColumn, row: int, event: Optional[EventTemplate]) -> bool:
        if event is None or not self._is_active(column, row):
            return False
        self.state = Selecting(
            level_key=column.primary.key,
            start_row=row,
            end_row=row,
            rotation_event_id=event.id,
            event_name=event.name,
            color=event.color,
        )
        return True

    def enter(self, column: SelectableColumn, row: int) -> bool:
        state = self.state
        if not isinstance(state, Selecting):
            return False
        if not column.contains(state.level_key) or not self._is_active(column, row):
            return False
        self.state = Selecting(
            level_key=state.level_key,
            start_row=state.start_row,
            end_row=row,
            rotation_event_id=state.rotation_event_id,
            event_name=state.event_name,
            color=state.color,
        )
        return True

    def release(self) -> Optional[BlockRequest]:
        state = self.state
        self.state = IDLE
        if not isinstance(state, Selecting):
            return None

        first_row, last_row = state.rows()
        return BlockRequest(
            level=state.level_key.level,
            schedule_group=state.level_key.schedule_group,
            rotation_event_id=state.rotation_event_id,
            event_name=state.event_name,
            color=state.color,
            start_time=time_for_row(first_row, self.range_start),
            # The last selected row is included, so the block ends where the next row begins
            end_time=row_end_time(last_row, self.range_start),
        )

    def cancel(self) -> None:
        self.state = IDLE
