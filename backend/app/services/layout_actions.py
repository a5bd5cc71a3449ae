"""Pure state transitions for a day's column layout."""
from dataclasses import dataclass
from typing import Union

from app.services.column_layout import ColumnLayout, display_to_original, sanitize
from app.services.column_reorder import reorder_columns
from app.services.group_combiner import combine, split


@dataclass(frozen=True)
class Combine:
    left: int  # original index
    right: int


@dataclass(frozen=True)
class Split:
    left: int  # original index
    right: int


@dataclass(frozen=True)
class Reorder:
    dragged: int  # display index
    target: int


@dataclass(frozen=True)
class Sanitize:
    pass


LayoutAction = Union[Combine, Split, Reorder, Sanitize]


def reduce_layout(layout: ColumnLayout, action: LayoutAction, count: int) -> ColumnLayout:
    """Apply one action; the result is always sanitized for `count` levels."""
    order = display_to_original(layout.column_order, count)
    groups = layout.groups_list()

    if isinstance(action, Combine):
        groups = combine(groups, action.left, action.right, count)
    elif isinstance(action, Split):
        groups = split(groups, action.left, action.right, order, count)
    elif isinstance(action, Reorder):
        order = reorder_columns(action.dragged, action.target, order, groups, count)
    elif not isinstance(action, Sanitize):
        raise TypeError(f"Unknown layout action: {action!r}")

    return sanitize(ColumnLayout.from_lists(order, groups), count)
