from __future__ import annotations

from collections.abc import Callable
from typing import Final, NamedTuple

from ..shared.a1 import MAX_COLUMNS, MAX_ROWS, RangeRect
from ..types import AdjustDirection, AdjustKind, PivotPosition

_Bounds = Callable[[int, int, int], tuple[int, int]]

# (kind, where the pivot falls) -> new (start, end) given the signed offset.
# Insert and delete differ when the pivot equals the start.
_POLICY: Final[dict[tuple[AdjustKind, PivotPosition], _Bounds]] = {
    ("insert", "before"): lambda start, end, offset: (start + offset, end + offset),
    ("insert", "at_start"): lambda start, end, offset: (start + offset, end + offset),
    ("insert", "inside"): lambda start, end, offset: (start, end + offset),
    ("insert", "after"): lambda start, end, offset: (start, end),
    ("delete", "before"): lambda start, end, offset: (start + offset, end + offset),
    ("delete", "at_start"): lambda start, end, offset: (start, end + offset),
    ("delete", "inside"): lambda start, end, offset: (start, end + offset),
    ("delete", "after"): lambda start, end, offset: (start, end),
}


class AxisAdjustment(NamedTuple):
    """New bounds of an interval; ``collapsed`` means it no longer spans anything."""

    start: int
    end: int
    collapsed: bool


def axis_limit(direction: AdjustDirection) -> int:
    """Return the worksheet size along ``direction``."""
    return MAX_ROWS if direction == "rows" else MAX_COLUMNS


def classify_pivot(start: int, end: int, pivot: int) -> PivotPosition:
    """Locate ``pivot`` relative to the interval ``[start, end]``."""
    if pivot < start:
        return "before"
    if pivot == start:
        return "at_start"
    if pivot <= end:
        return "inside"
    return "after"


def adjust_axis(
    start: int, end: int, pivot: int, offset: int, *, limit: int | None = None
) -> AxisAdjustment:
    """Move one axis of an interval for an insert (offset > 0) or delete (offset < 0).

    Args:
        start: First position of the interval (1-based).
        end: Last position of the interval, ``end >= start``.
        pivot: Position where rows/columns are inserted or deleted.
        offset: Signed count of inserted (positive) or deleted (negative) units.
        limit: Optional axis size; an end pushed past it is clamped.

    Returns:
        The adjusted bounds. ``collapsed`` is True when the new end precedes
        the new start and the owner must discard the interval.

    Raises:
        ValueError: If ``start > end`` or ``offset`` is zero.
    """
    if start > end:
        raise ValueError(f"Interval start {start} is after its end {end}.")
    if offset == 0:
        raise ValueError("Offset must be non-zero.")
    kind: AdjustKind = "insert" if offset > 0 else "delete"
    new_start, new_end = _POLICY[(kind, classify_pivot(start, end, pivot))](
        start, end, offset
    )
    new_start = max(new_start, 1)
    if limit is not None:
        new_end = min(new_end, limit)
    return AxisAdjustment(new_start, new_end, new_end < new_start)


def adjust_rect(
    rect: RangeRect, direction: AdjustDirection, pivot: int, offset: int
) -> tuple[RangeRect, bool]:
    """Apply :func:`adjust_axis` to the axis of ``rect`` named by ``direction``.

    Returns:
        The moved rect and whether it collapsed. A collapsed rect is
        degenerate on the adjusted axis.
    """
    if direction == "rows":
        result = adjust_axis(
            rect.start_row, rect.end_row, pivot, offset, limit=axis_limit(direction)
        )
        moved = rect.model_copy(
            update={"start_row": result.start, "end_row": result.end}
        )
    else:
        result = adjust_axis(
            rect.start_col, rect.end_col, pivot, offset, limit=axis_limit(direction)
        )
        moved = rect.model_copy(
            update={"start_col": result.start, "end_col": result.end}
        )
    return moved, result.collapsed
