"""
Combine / split adjacent grid columns.

Groups are lists of ORIGINAL indices. Storage order inside a group is insertion
order and means nothing on screen; anything user-visible (labels, primary level,
split boundary) is derived from the current display order instead.
"""
from typing import List, Optional, Sequence

from app.services.column_layout import original_to_display, valid_combined_groups

Groups = List[List[int]]


def group_for(groups: Sequence[Sequence[int]], original_idx: int) -> Optional[List[int]]:
    for group in groups:
        if original_idx in group:
            return list(group)
    return None


def are_combined(groups: Sequence[Sequence[int]], a: int, b: int) -> bool:
    return any(a in g and b in g for g in groups)


def combine(groups: Sequence[Sequence[int]], left: int, right: int, count: int) -> Groups:
    """
    Merge the column at original index `right` into `left`'s column.

    - neither grouped: new group [left, right]
    - only left grouped: right appended to left's group
    - only right grouped: left prepended to right's group
    - grouped separately: both groups merged into one
    - already in the same group: unchanged
    """
    cleaned = valid_combined_groups(groups, count)
    if not (0 <= left < count and 0 <= right < count) or left == right:
        return cleaned

    left_pos = next((i for i, g in enumerate(cleaned) if left in g), -1)
    right_pos = next((i for i, g in enumerate(cleaned) if right in g), -1)

    if left_pos == -1 and right_pos == -1:
        return cleaned + [[left, right]]
    if right_pos == -1:
        cleaned[left_pos] = cleaned[left_pos] + [right]
        return cleaned
    if left_pos == -1:
        cleaned[right_pos] = [left] + cleaned[right_pos]
        return cleaned
    if left_pos != right_pos:
        merged = cleaned[left_pos] + cleaned[right_pos]
        rest = [g for i, g in enumerate(cleaned) if i not in (left_pos, right_pos)]
        return rest + [merged]
    return cleaned


def split(
    groups: Sequence[Sequence[int]], left: int, right: int, order: Optional[Sequence[int]], count: int
) -> Groups:
    """
    Break the link between `left` and `right` inside their shared group.

    Members are sorted by their current display position and cut right before
    `right` (or before `left`, if the two are displayed the other way round).
    Each side is kept as a group only if it still has 2+ members.
    """
    cleaned = valid_combined_groups(groups, count)
    group_pos = next((i for i, g in enumerate(cleaned) if left in g and right in g), -1)
    if group_pos == -1 or left == right:
        return cleaned

    display_of = original_to_display(order, count)
    members = sorted(cleaned[group_pos], key=lambda idx: display_of[idx])
    # Cut between the two columns whichever way round they are displayed
    split_at = max(members.index(left), members.index(right))

    left_part = members[:split_at]
    right_part = members[split_at:]

    result = [g for i, g in enumerate(cleaned) if i != group_pos]
    if len(left_part) > 1:
        result.append(left_part)
    if len(right_part) > 1:
        result.append(right_part)
    return result
