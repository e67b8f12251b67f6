from __future__ import annotations

import logging
from typing import TYPE_CHECKING, get_args

from ..model import AdjustReport
from ..types import AdjustDirection
from .auto_filter import adjust_auto_filter
from .calc_chain import adjust_calc_chain
from .merge import adjust_merge_cells
from .table import adjust_tables

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..document import Document

logger = logging.getLogger(__name__)


def adjust_helper(
    document: Document,
    sheet_name: str,
    direction: AdjustDirection,
    pivot: int,
    offset: int,
) -> AdjustReport:
    """Keep every structural artifact of a sheet consistent after a row/column edit.

    Merged regions, the auto-filter, table parts and the calc chain are
    adjusted in that order. The first hard error propagates and artifacts
    adjusted before it stay changed; there is no rollback.

    Args:
        document: Document owning the sheet, its table parts and the calc chain.
        sheet_name: Name of the edited sheet.
        direction: ``"rows"`` or ``"columns"``.
        pivot: 1-based row/column where rows/columns are inserted or deleted.
        offset: Number of inserted (positive) or deleted (negative) rows/columns.

    Returns:
        Report of what was moved or removed.

    Raises:
        SheetNotFoundError: If the sheet does not exist.
        ValueError: If direction, pivot or offset is out of range.
        InvalidCellReferenceError: If a merge, filter or calc-chain reference
            cannot be parsed.
    """
    worksheet = document.resolve(sheet_name)
    _validate_arguments(direction, pivot, offset)
    report = AdjustReport(
        sheet=worksheet.name, direction=direction, pivot=pivot, offset=offset
    )
    report.merge_cells_removed = adjust_merge_cells(worksheet, direction, pivot, offset)
    report.auto_filter_removed = adjust_auto_filter(worksheet, direction, pivot, offset)
    report.tables = adjust_tables(
        document.package,
        worksheet,
        direction,
        pivot,
        offset,
        encodings=document.config.table_encodings,
    )
    report.calc_chain_removed = adjust_calc_chain(
        document.calc_chain, worksheet.sheet_id, direction, pivot, offset
    )
    logger.debug(
        "Adjusted %s of sheet %s at %d by %d: %d merges removed, %d tables, "
        "%d calc chain entries removed.",
        direction,
        worksheet.name,
        pivot,
        offset,
        report.merge_cells_removed,
        len(report.tables),
        report.calc_chain_removed,
    )
    return report


def _validate_arguments(direction: str, pivot: int, offset: int) -> None:
    if direction not in get_args(AdjustDirection):
        raise ValueError(f"Invalid direction: {direction}. Use 'rows' or 'columns'.")
    if pivot < 1:
        raise ValueError(f"Pivot must be a positive 1-based position, got {pivot}.")
    if offset == 0:
        raise ValueError("Offset must be non-zero.")
