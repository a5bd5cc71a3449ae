"""
Rotation Grid View Models

Builds everything the grid needs to render one day in a single pass:

- display groups: one per visible column, with combined groups collapsed into
  a single column at the position of their first member
- column boundaries: the combine/split toggle between neighbouring columns
- time rows and block placement on the 5-minute axis

A combined group reads and writes blocks through its PRIMARY level (first
member by display order). Blocks stored on the other members are hidden while
the group exists and come back when it is split.
"""
from dataclasses import dataclass, field
from datetime import time
from typing import Dict, List, Optional, Sequence, Tuple

from app.models.rotation_block import RotationBlock
from app.services.column_layout import (
    ActiveLevel,
    ColumnLayout,
    LevelKey,
    display_to_original,
    original_to_display,
    valid_combined_groups,
)
from app.services.group_combiner import are_combined, group_for
from app.utils.time_axis import (
    TimeLabel,
    format_time_label,
    is_active_at,
    row_count,
    row_for_time,
    time_range,
    time_slots,
)


@dataclass
class DisplayGroup:
    levels: List[ActiveLevel]
    original_indices: List[int]
    display_indices: List[int]
    start_time: time
    end_time: time
    custom_names: Dict[str, str] = field(default_factory=dict)

    @property
    def primary(self) -> ActiveLevel:
        return self.levels[0]

    @property
    def key(self) -> str:
        return "+".join(level.key.as_str() for level in self.levels)

    @property
    def label(self) -> str:
        return "/".join(self.custom_names.get(level.key.as_str(), level.level) for level in self.levels)

    @property
    def is_combined(self) -> bool:
        return len(self.levels) > 1

    @property
    def is_external(self) -> bool:
        return any(level.is_external_group for level in self.levels)

    def contains(self, level_key: LevelKey) -> bool:
        return any(level.key == level_key for level in self.levels)

    def is_active_at(self, slot: time) -> bool:
        return any(is_active_at(level, slot) for level in self.levels)


@dataclass(frozen=True)
class ColumnBoundary:
    """The seam to the right of a display group, between two original indices."""

    group_index: int
    left_original: int
    right_original: int
    is_combined: bool


def build_display_groups(
    levels: Sequence[ActiveLevel],
    layout: ColumnLayout,
    column_names: Optional[Dict[str, str]] = None,
) -> List[DisplayGroup]:
    count = len(levels)
    display_to_orig = display_to_original(layout.column_order, count)
    orig_to_display = original_to_display(layout.column_order, count)
    groups = valid_combined_groups(layout.combined_groups, count)
    names = dict(column_names or {})

    result: List[DisplayGroup] = []
    processed = set()
    for original_idx in display_to_orig:
        if original_idx in processed:
            continue

        members = group_for(groups, original_idx) or [original_idx]
        members.sort(key=lambda idx: orig_to_display[idx])
        member_levels = [levels[idx] for idx in members]
        result.append(
            DisplayGroup(
                levels=member_levels,
                original_indices=members,
                display_indices=[orig_to_display[idx] for idx in members],
                start_time=min(level.start_time for level in member_levels),
                end_time=max(level.end_time for level in member_levels),
                custom_names=names,
            )
        )
        processed.update(members)

    return result


def column_boundaries(levels: Sequence[ActiveLevel], layout: ColumnLayout) -> List[ColumnBoundary]:
    """
    One boundary per display group that has a column after it.

    The boundary joins the group's last displayed member with the next display
    column; toggling it combines or splits exactly those two.
    """
    count = len(levels)
    display_to_orig = display_to_original(layout.column_order, count)
    groups = valid_combined_groups(layout.combined_groups, count)

    boundaries: List[ColumnBoundary] = []
    for group_index, group in enumerate(build_display_groups(levels, layout)):
        last_display = max(group.display_indices)
        if last_display + 1 >= count:
            continue
        left = display_to_orig[last_display]
        right = display_to_orig[last_display + 1]
        boundaries.append(
            ColumnBoundary(
                group_index=group_index,
                left_original=left,
                right_original=right,
                is_combined=are_combined(groups, left, right),
            )
        )
    return boundaries


def blocks_for_group(group: DisplayGroup, blocks: Sequence[RotationBlock]) -> List[RotationBlock]:
    primary = group.primary
    return [b for b in blocks if b.level == primary.level and b.schedule_group == primary.schedule_group]


def block_placement(block: RotationBlock, range_start: time) -> Tuple[int, int]:
    """(top_row, row_span) of a block; a block always covers at least one row."""
    start_row = row_for_time(block.start_time, range_start)
    # a block ending mid-row (23:59) still covers that row
    end_row = row_count(range_start, block.end_time)
    return start_row, max(end_row - start_row, 1)


@dataclass
class GridRow:
    row: int
    time: time
    label: TimeLabel


@dataclass
class GridColumn:
    group: DisplayGroup
    active_rows: List[bool]
    blocks: List[RotationBlock]


@dataclass
class GridView:
    range_start: Optional[time]
    range_end: Optional[time]
    rows: List[GridRow]
    columns: List[GridColumn]
    boundaries: List[ColumnBoundary]


def build_grid_view(
    levels: Sequence[ActiveLevel],
    layout: ColumnLayout,
    blocks: Sequence[RotationBlock],
    column_names: Optional[Dict[str, str]] = None,
) -> GridView:
    if not levels:
        return GridView(range_start=None, range_end=None, rows=[], columns=[], boundaries=[])

    range_start, range_end = time_range(levels)
    slots = time_slots(range_start, range_end)
    rows = [GridRow(row=i, time=slot, label=format_time_label(slot)) for i, slot in enumerate(slots)]

    columns = []
    for group in build_display_groups(levels, layout, column_names):
        columns.append(
            GridColumn(
                group=group,
                active_rows=[group.is_active_at(slot) for slot in slots],
                blocks=blocks_for_group(group, blocks),
            )
        )

    return GridView(
        range_start=range_start,
        range_end=range_end,
        rows=rows,
        columns=columns,
        boundaries=column_boundaries(levels, layout),
    )
