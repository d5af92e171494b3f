"""
Selection index repair for ordered collections.

A selection is an optional index into the *current* snapshot of an ordered
collection (lists, or the items of one list). Whenever the snapshot is
rebuilt from storage the index must be repaired so that, if set, it satisfies
0 <= index < length. These helpers are pure: they take the old index and the
collection sizes and return the new index. No I/O happens here.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class SelectionOp(str, Enum):
    REFRESH = "refresh"
    DELETE = "delete"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    SELECT_FIRST = "select_first"
    SELECT_NEXT = "select_next"
    SELECT_PREVIOUS = "select_previous"
    DESELECT = "deselect"


def after_refresh(previous: Optional[int], new_length: int) -> Optional[int]:
    """Keep a still-valid index, clamp an overflowing one, drop it on empty."""
    if previous is None:
        return None
    if previous < new_length:
        return previous
    if new_length > 0:
        return new_length - 1
    return None


def after_delete(index: Optional[int], new_length: int) -> Optional[int]:
    """Index after the entity at `index` was deleted.

    The following entity slides into the freed slot, so the index usually
    stays put; deleting the last entity clamps to the new end.
    """
    if index is None:
        return None
    if new_length <= 0:
        return None
    if index >= new_length:
        return new_length - 1
    return index


def after_move_up(index: Optional[int], length: int) -> Optional[int]:
    """Selection follows an entity swapped with its upper neighbour."""
    if index is None or length <= 0:
        return None
    if index > 0:
        return min(index - 1, length - 1)
    return index


def after_move_down(index: Optional[int], length: int) -> Optional[int]:
    """Selection follows an entity swapped with its lower neighbour."""
    if index is None or length <= 0:
        return None
    if index + 1 < length:
        return index + 1
    return min(index, length - 1)


def select_first(current: Optional[int], length: int) -> Optional[int]:
    """Select the first entity unless something is already selected."""
    if current is not None:
        return current
    return 0 if length > 0 else None


def select_next(current: Optional[int], length: int) -> Optional[int]:
    if length <= 0:
        return None
    if current is None:
        return 0
    return min(current + 1, length - 1)


def select_previous(current: Optional[int], length: int) -> Optional[int]:
    if length <= 0:
        return None
    if current is None:
        return length - 1
    return max(min(current, length) - 1, 0)


def repair(
    index: Optional[int],
    old_length: int,
    new_length: int,
    op: SelectionOp,
) -> Optional[int]:
    """
    Compute the selection after `op` changed a collection from `old_length`
    to `new_length` entities.

    Every operation on an empty collection yields None.

    Args:
        index: Selection before the operation
        old_length: Collection size before the operation
        new_length: Collection size after the operation (after reloading)
        op: What happened to the collection

    Returns:
        The repaired selection index, or None for "nothing selected"
    """
    if op is SelectionOp.REFRESH:
        return after_refresh(index, new_length)
    if op is SelectionOp.DELETE:
        return after_delete(index, new_length)
    if op is SelectionOp.MOVE_UP:
        return after_move_up(index, new_length)
    if op is SelectionOp.MOVE_DOWN:
        return after_move_down(index, new_length)
    if op is SelectionOp.SELECT_FIRST:
        return select_first(after_refresh(index, new_length), new_length)
    if op is SelectionOp.SELECT_NEXT:
        return select_next(after_refresh(index, old_length), new_length)
    if op is SelectionOp.SELECT_PREVIOUS:
        return select_previous(after_refresh(index, old_length), new_length)
    if op is SelectionOp.DESELECT:
        return None
    raise ValueError(f"Unknown selection operation: {op!r}")


__all__ = [
    "SelectionOp",
    "after_refresh",
    "after_delete",
    "after_move_up",
    "after_move_down",
    "select_first",
    "select_next",
    "select_previous",
    "repair",
]
