"""
Column layout for the daily rotation grid.

Columns have two index spaces:

- original index: position in the day's active-level list as derived from
  practice schedules (stable while the schedules don't change)
- display index: position on screen after applying the stored column order

column_order[display] = original. Combined groups are stored in original-index
space so that they survive reordering.

Persisted layouts go stale whenever practice schedules change, so nothing in
here raises on bad stored state: an invalid order falls back to the identity
order and out-of-range group members are dropped.
"""
import logging
from dataclasses import dataclass
from datetime import time
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LevelKey:
    """Identity of a schedulable column: (level, schedule_group)."""

    level: str
    schedule_group: str

    def as_str(self) -> str:
        return f"{self.level}|{self.schedule_group}"

    @classmethod
    def parse(cls, value: str) -> "LevelKey":
        level, _, schedule_group = value.partition("|")
        return cls(level=level, schedule_group=schedule_group or "A")


@dataclass(frozen=True)
class ActiveLevel:
    level: str
    schedule_group: str
    start_time: time
    end_time: time
    is_external_group: bool = False

    @property
    def key(self) -> LevelKey:
        return LevelKey(self.level, self.schedule_group)


def identity_order(count: int) -> List[int]:
    return list(range(count))


def is_valid_order(order: Optional[Sequence[int]], count: int) -> bool:
    """True if order is a permutation of 0..count-1."""
    if order is None or len(order) != count:
        return False
    if not all(isinstance(i, int) for i in order):
        return False
    return sorted(order) == identity_order(count)


def display_to_original(order: Optional[Sequence[int]], count: int) -> List[int]:
    if is_valid_order(order, count):
        return list(order)
    return identity_order(count)


def original_to_display(order: Optional[Sequence[int]], count: int) -> List[int]:
    """Inverse of display_to_original: result[original] = display."""
    inverse = [0] * count
    for display_idx, original_idx in enumerate(display_to_original(order, count)):
        inverse[original_idx] = display_idx
    return inverse


def ordered_levels(levels: Sequence[T], order: Optional[Sequence[int]]) -> List[T]:
    return [levels[i] for i in display_to_original(order, len(levels))]


def valid_combined_groups(groups: Optional[Iterable[Iterable[int]]], count: int) -> List[List[int]]:
    """
    Sanitize stored combined groups against the current level count.

    - indices outside 0..count-1 are dropped
    - an index already claimed by an earlier group (or repeated) is dropped
    - groups left with fewer than 2 members are dropped
    """
    cleaned: List[List[int]] = []
    claimed = set()
    for group in groups or []:
        members = []
        for idx in group:
            if 0 <= idx < count and idx not in claimed:
                members.append(idx)
                claimed.add(idx)
        if len(members) > 1:
            cleaned.append(members)
        else:
            claimed.difference_update(members)
    return cleaned


@dataclass(frozen=True)
class ColumnLayout:
    """In-memory layout state for one day: column order plus combined groups."""

    column_order: Tuple[int, ...] = ()
    combined_groups: Tuple[Tuple[int, ...], ...] = ()

    @classmethod
    def from_lists(
        cls, column_order: Optional[Sequence[int]], combined_groups: Optional[Iterable[Iterable[int]]]
    ) -> "ColumnLayout":
        return cls(
            column_order=tuple(column_order or ()),
            combined_groups=tuple(tuple(g) for g in (combined_groups or ())),
        )

    def order_list(self) -> List[int]:
        return list(self.column_order)

    def groups_list(self) -> List[List[int]]:
        return [list(g) for g in self.combined_groups]


def sanitize(layout: ColumnLayout, count: int) -> ColumnLayout:
    """Repair a stored layout for display: each half is repaired independently."""
    order = display_to_original(layout.column_order, count)
    groups = valid_combined_groups(layout.combined_groups, count)
    repaired = ColumnLayout.from_lists(order, groups)
    # an empty stored order is the default, not a stale one
    stale_order = bool(layout.column_order) and repaired.column_order != layout.column_order
    if stale_order or repaired.combined_groups != layout.combined_groups:
        logger.info(
            "Repaired stale column layout (count=%d): order %s -> %s, groups %s -> %s",
            count,
            list(layout.column_order),
            order,
            layout.groups_list(),
            groups,
        )
    return repaired


def reconcile(layout: ColumnLayout, count: int) -> ColumnLayout:
    """
    Bring held layout state in line with a new active-level count.

    If the order no longer fits the count, start over from the identity order
    with no combined groups; otherwise only the groups are sanitized.
    """
    if not is_valid_order(layout.column_order, count):
        if layout.column_order:
            logger.info("Column order %s invalid for %d levels; resetting layout", list(layout.column_order), count)
        return ColumnLayout.from_lists(identity_order(count), [])
    return ColumnLayout.from_lists(layout.column_order, valid_combined_groups(layout.combined_groups, count))
