from __future__ import annotations

import logging

from ..model import Worksheet
from ..shared.a1 import RangeRect, format_range_reference, parse_range_reference
from ..types import AdjustDirection
from .axis import adjust_rect

logger = logging.getLogger(__name__)


def adjust_merge_cells(
    worksheet: Worksheet, direction: AdjustDirection, pivot: int, offset: int
) -> int:
    """Move merged regions of ``worksheet`` and drop the ones that collapse.

    Every reference is parsed before anything is changed, so an unreadable
    region leaves the merge list untouched.

    Args:
        worksheet: Worksheet whose merge list is mutated in place.
        direction: Axis being edited.
        pivot: 1-based row/column where the edit happens.
        offset: Signed number of inserted (positive) or deleted rows/columns.

    Returns:
        Number of regions removed.

    Raises:
        InvalidCellReferenceError: If a region reference cannot be parsed.
    """
    rects: list[RangeRect] = [
        parse_range_reference(merge_cell.ref) for merge_cell in worksheet.merge_cells
    ]
    collapsed_indexes: list[int] = []
    for index, (merge_cell, rect) in enumerate(zip(worksheet.merge_cells, rects)):
        moved, collapsed = adjust_rect(rect, direction, pivot, offset)
        if collapsed:
            collapsed_indexes.append(index)
            continue
        merge_cell.rect = moved
        if moved != rect:
            merge_cell.ref = format_range_reference(moved, collapse_single=False)
    for index in reversed(collapsed_indexes):
        logger.debug(
            "Removing merged region %s on sheet %s.",
            worksheet.merge_cells[index].ref,
            worksheet.name,
        )
        worksheet.remove_merge_cell(index)
    return len(collapsed_indexes)
