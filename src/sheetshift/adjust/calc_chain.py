from __future__ import annotations

import logging

from ..model import CalcChain, CalcChainEntry
from ..shared.a1 import cell_reference_to_coordinates, coordinates_to_cell_reference
from ..types import AdjustDirection
from .axis import adjust_axis, axis_limit

logger = logging.getLogger(__name__)


def adjust_calc_chain(
    calc_chain: CalcChain | None,
    sheet_id: int,
    direction: AdjustDirection,
    pivot: int,
    offset: int,
) -> int:
    """Rewrite calc-chain cell references of one sheet after a row/column edit.

    Entries of the sheet move like a one-cell interval. Entries whose cell was
    deleted or pushed off the sheet are dropped, and entries of the sheet that
    end up on the same cell are de-duplicated keeping the first. Every
    reference is parsed before the chain is changed.

    Args:
        calc_chain: Workbook calculation chain, or None when the workbook has none.
        sheet_id: Id of the edited sheet (the ``i`` attribute of entries).
        direction: Axis being edited.
        pivot: 1-based row/column where the edit happens.
        offset: Signed number of inserted (positive) or deleted rows/columns.

    Returns:
        Number of entries removed.

    Raises:
        InvalidCellReferenceError: If an entry of the sheet cannot be parsed.
    """
    if calc_chain is None:
        return 0
    entries = calc_chain.entries
    effective_ids = _effective_sheet_ids(entries)
    limit = axis_limit(direction)
    updates: dict[int, str] = {}
    deleted: set[int] = set()
    for index, entry in enumerate(entries):
        if effective_ids[index] != sheet_id:
            continue
        col, row = cell_reference_to_coordinates(entry.ref)
        position = row if direction == "rows" else col
        result = adjust_axis(position, position, pivot, offset, limit=limit)
        if result.collapsed:
            deleted.add(index)
        elif result.start != position:
            updates[index] = (
                coordinates_to_cell_reference(col, result.start)
                if direction == "rows"
                else coordinates_to_cell_reference(result.start, row)
            )

    survivors: list[CalcChainEntry] = []
    seen: set[str] = set()
    previous_id = 0
    for index, entry in enumerate(entries):
        if index in deleted:
            continue
        effective_id = effective_ids[index]
        if effective_id == sheet_id:
            ref = updates.get(index, entry.ref)
            if ref in seen:
                continue
            seen.add(ref)
            entry.ref = ref
        if entry.sheet_id is None and effective_id != previous_id:
            entry.sheet_id = effective_id
        previous_id = effective_id
        survivors.append(entry)

    removed = len(entries) - len(survivors)
    if removed:
        logger.debug("Removed %d calc chain entries of sheet id %d.", removed, sheet_id)
    calc_chain.entries = survivors
    return removed


def _effective_sheet_ids(entries: list[CalcChainEntry]) -> list[int]:
    """Resolve omitted sheet ids, which repeat the previous entry's id."""
    resolved: list[int] = []
    previous = 0
    for entry in entries:
        current = entry.sheet_id if entry.sheet_id is not None else previous
        resolved.append(current)
        previous = current
    return resolved
