"""
Rotation Grid Session

Holds the in-memory state of the grid for one hub while a user edits it and
wires the pure pieces together:

    DataStore  ->  levels / layout / blocks
    layout_actions.reduce_layout  ->  combine, split, reorder
    LayoutSaveScheduler  ->  debounced layout persistence
    BlockIntervalSelector  ->  drag-to-create blocks

The session is the only writer of the layout it holds. Layout edits apply
synchronously and schedule a debounced save; block operations go straight to
the store. Store failures are logged and reported through the return value;
nothing is rolled back or retried, the next successful refresh reconciles.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.models.rotation_block import RotationBlock
from app.services.block_selector import BlockIntervalSelector, BlockRequest, EventTemplate
from app.services.column_layout import ActiveLevel, ColumnLayout, LevelKey, reconcile, sanitize
from app.services.data_store import DataStore, DataStoreError, SqlDataStore
from app.services.layout_actions import Combine, LayoutAction, Reorder, Split, reduce_layout
from app.services.layout_save_scheduler import LayoutSaveScheduler, PendingLayoutSave
from app.services.rotation_grid_view import (
    DisplayGroup,
    GridView,
    build_display_groups,
    build_grid_view,
    column_boundaries,
)
from app.utils.time_axis import time_range

logger = logging.getLogger(__name__)


@dataclass
class DayState:
    levels: List[ActiveLevel]
    layout: ColumnLayout
    column_names: Dict[str, str]


def load_day_state(store: DataStore, hub_id: int, day_of_week: int) -> DayState:
    """Read a day's levels and stored layout; the layout is repaired against the level count."""
    levels = store.list_active_levels(hub_id, day_of_week)
    settings = store.get_grid_layout(hub_id, day_of_week)
    stored = ColumnLayout()
    column_names: Dict[str, str] = {}
    if settings is not None:
        stored = ColumnLayout.from_lists(settings.column_order, settings.combined_indices)
        column_names = dict(settings.column_names or {})
    return DayState(levels=levels, layout=sanitize(stored, len(levels)), column_names=column_names)


def layout_writer(store: DataStore) -> Callable[[PendingLayoutSave], None]:
    """
    Writer callback for LayoutSaveScheduler that upserts through a DataStore.

    The default scheduler timer calls the writer on its own thread, so the
    store must be safe to use from there. For the database use
    sql_layout_writer, which never touches the caller's Session.
    """

    def write(payload: PendingLayoutSave) -> None:
        store.save_grid_layout(
            payload.hub_id,
            payload.day_of_week,
            payload.layout.order_list(),
            payload.layout.groups_list(),
            payload.column_names,
        )

    return write


def sql_layout_writer(engine: Engine) -> Callable[[PendingLayoutSave], None]:
    """Writer callback that opens a fresh Session per save, safe to run on the timer thread."""

    def write(payload: PendingLayoutSave) -> None:
        with Session(engine) as session:
            layout_writer(SqlDataStore(session))(payload)

    return write


class RotationGridSession:
    def __init__(self, store: DataStore, scheduler: LayoutSaveScheduler, hub_id: int, day_of_week: int):
        self.store = store
        self.scheduler = scheduler
        self.hub_id = hub_id
        self.day_of_week = day_of_week
        self.levels: List[ActiveLevel] = []
        self.layout = ColumnLayout()
        self.column_names: Dict[str, str] = {}
        self.blocks: List[RotationBlock] = []
        self.selected_event: Optional[EventTemplate] = None
        self.selector: Optional[BlockIntervalSelector] = None
        self.load_day(day_of_week)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_day(self, day_of_week: int) -> None:
        """
        Switch to a day and read its state fresh from the store.

        A save still pending for the previous day is left alone; it was
        scheduled with that day's key and will write there.
        """
        self.day_of_week = day_of_week
        state = load_day_state(self.store, self.hub_id, day_of_week)
        self.levels = state.levels
        self.layout = state.layout
        self.column_names = state.column_names

        self._reset_selector()
        self.refresh_blocks()

    def set_levels(self, levels: List[ActiveLevel]) -> None:
        """Replace the day's levels after a schedule edit, reconciling the held layout."""
        self.levels = list(levels)
        self.layout = reconcile(self.layout, len(self.levels))
        self._reset_selector()

    def refresh_blocks(self) -> bool:
        try:
            self.blocks = self.store.list_blocks(self.hub_id, self.day_of_week)
        except DataStoreError as exc:
            logger.error("Error fetching blocks for hub %d day %d: %s", self.hub_id, self.day_of_week, exc)
            return False
        return True

    def _reset_selector(self) -> None:
        self.selector = BlockIntervalSelector(time_range(self.levels)[0]) if self.levels else None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def display_groups(self) -> List[DisplayGroup]:
        return build_display_groups(self.levels, self.layout, self.column_names)

    def grid_view(self) -> GridView:
        return build_grid_view(self.levels, self.layout, self.blocks, self.column_names)

    def apply(self, action: LayoutAction) -> ColumnLayout:
        new_layout = reduce_layout(self.layout, action, len(self.levels))
        if new_layout != self.layout:
            self.layout = new_layout
            self._schedule_save()
        return self.layout

    def combine(self, left_original: int, right_original: int) -> ColumnLayout:
        return self.apply(Combine(left_original, right_original))

    def split(self, left_original: int, right_original: int) -> ColumnLayout:
        return self.apply(Split(left_original, right_original))

    def reorder(self, dragged_display: int, target_display: int) -> ColumnLayout:
        return self.apply(Reorder(dragged_display, target_display))

    def toggle_boundary(self, group_index: int) -> ColumnLayout:
        """Combine or split the seam to the right of a display group."""
        for boundary in column_boundaries(self.levels, self.layout):
            if boundary.group_index != group_index:
                continue
            if boundary.is_combined:
                return self.split(boundary.left_original, boundary.right_original)
            return self.combine(boundary.left_original, boundary.right_original)
        return self.layout

    def rename_column(self, level_key: LevelKey, name: Optional[str]) -> None:
        key = level_key.as_str()
        if name and name.strip():
            self.column_names[key] = name.strip()
        else:
            self.column_names.pop(key, None)
        self._schedule_save()

    def _schedule_save(self) -> None:
        self.scheduler.schedule(self.hub_id, self.day_of_week, self.layout, self.column_names)

    # ------------------------------------------------------------------
    # Block selection
    # ------------------------------------------------------------------

    def select_event(self, event: Optional[EventTemplate]) -> None:
        self.selected_event = event

    def press(self, group_index: int, row: int) -> bool:
        groups = self.display_groups()
        if self.selector is None or not 0 <= group_index < len(groups):
            return False
        return self.selector.press(groups[group_index], row, self.selected_event)

    def enter(self, group_index: int, row: int) -> bool:
        groups = self.display_groups()
        if self.selector is None or not 0 <= group_index < len(groups):
            return False
        return self.selector.enter(groups[group_index], row)

    def release(self) -> Optional[int]:
        """Finish the drag; returns the new block id, or None if nothing was created."""
        if self.selector is None:
            return None
        request = self.selector.release()
        if request is None:
            return None
        return self.create_block(request)

    def create_block(self, request: BlockRequest) -> Optional[int]:
        try:
            block_id = self.store.create_block(
                self.hub_id,
                self.day_of_week,
                LevelKey(request.level, request.schedule_group),
                request.rotation_event_id,
                request.event_name,
                request.start_time,
                request.end_time,
                request.color,
            )
        except DataStoreError as exc:
            logger.error("Error creating block: %s", exc)
            return None
        self.refresh_blocks()
        return block_id

    def delete_block(self, block_id: int) -> bool:
        try:
            self.store.delete_block(block_id)
        except DataStoreError as exc:
            logger.error("Error deleting block %d: %s", block_id, exc)
            return False
        self.refresh_blocks()
        return True

    def assign_coach(self, block_id: int, coach_id: Optional[int]) -> bool:
        try:
            self.store.assign_coach(block_id, coach_id)
        except DataStoreError as exc:
            logger.error("Error assigning coach to block %d: %s", block_id, exc)
            return False
        self.refresh_blocks()
        return True
