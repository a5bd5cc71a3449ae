"""
Drag-and-drop column reordering.

Dragging a column that belongs to a combined group moves the whole group; its
members stay contiguous and keep their relative display order.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.services.column_layout import display_to_original, valid_combined_groups
from app.services.group_combiner import group_for

logger = logging.getLogger(__name__)


def reorder_columns(
    dragged: int,
    target: int,
    order: Optional[Sequence[int]],
    groups: Sequence[Sequence[int]],
    count: int,
) -> List[int]:
    """
    Return the column order after dropping display column `dragged` onto `target`.

    Solo column: it ends up at display index `target` (after the target column
    when moving right, before it when moving left).

    Grouped column: every member is lifted out, the target is shifted left by
    the number of members that sat before it, and the members are reinserted
    there as one contiguous run.
    """
    current = display_to_original(order, count)
    if dragged == target or not (0 <= dragged < count) or not (0 <= target < count):
        return current

    dragged_original = current[dragged]
    group = group_for(valid_combined_groups(groups, count), dragged_original)

    if group:
        member_displays = sorted(current.index(idx) for idx in group)
        members = [current[d] for d in member_displays]
        remaining = [idx for idx in current if idx not in members]
        shift = sum(1 for d in member_displays if d < target)
        insert_at = min(max(target - shift, 0), len(remaining))
        new_order = remaining[:insert_at] + members + remaining[insert_at:]
        logger.debug("Moved group %s from display %s to %d: %s", members, member_displays, insert_at, new_order)
        return new_order

    new_order = list(current)
    moved = new_order.pop(dragged)
    new_order.insert(target, moved)
    return new_order


@dataclass
class ColumnDragState:
    """Header drag feedback: which column is lifted and which one is hovered."""

    dragged_index: Optional[int] = None
    target_index: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.dragged_index is not None

    def drag_start(self, display_index: int) -> None:
        self.dragged_index = display_index
        self.target_index = None

    def drag_over(self, display_index: int) -> None:
        if self.active and display_index != self.dragged_index:
            self.target_index = display_index

    def drag_end(self) -> None:
        self.dragged_index = None
        self.target_index = None

    def drop(
        self,
        target: int,
        order: Optional[Sequence[int]],
        groups: Sequence[Sequence[int]],
        count: int,
    ) -> Optional[List[int]]:
        """Finish the gesture; returns the new order, or None when nothing was dragged."""
        dragged = self.dragged_index
        self.drag_end()
        if dragged is None:
            return None
        return reorder_columns(dragged, target, order, groups, count)
