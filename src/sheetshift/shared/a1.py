from __future__ import annotations

import re
from typing import Final

from openpyxl.utils.cell import column_index_from_string, get_column_letter
from pydantic import BaseModel

from ..errors import InvalidCellReferenceError

MAX_COLUMNS: Final[int] = 16384
MAX_ROWS: Final[int] = 1048576

_A1_PATTERN = re.compile(r"^\$?([A-Za-z]{1,3})\$?([1-9][0-9]*)$")
_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Za-z]{1,3}$")


class RangeRect(BaseModel):
    """Rectangle of cells, 1-based and inclusive on both corners."""

    start_col: int
    start_row: int
    end_col: int
    end_row: int

    @property
    def is_degenerate(self) -> bool:
        """Return True when an end precedes its start on either axis."""
        return self.end_col < self.start_col or self.end_row < self.start_row

    def as_list(self) -> list[int]:
        """Return ``[start_col, start_row, end_col, end_row]``."""
        return [self.start_col, self.start_row, self.end_col, self.end_row]


def split_a1(value: str) -> tuple[str, int]:
    """Split A1 notation into normalized (column_label, row_index).

    Absolute markers (``$B$3``) are accepted and dropped.
    """
    match = _A1_PATTERN.fullmatch(value) if value else None
    if match is None:
        raise InvalidCellReferenceError(value)
    return match.group(1).upper(), int(match.group(2))


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index."""
    normalized = label.strip().upper()
    if not _COLUMN_LABEL_PATTERN.match(normalized):
        raise InvalidCellReferenceError(label)
    index = column_index_from_string(normalized)
    if index > MAX_COLUMNS:
        raise InvalidCellReferenceError(label)
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1 or index > MAX_COLUMNS:
        raise InvalidCellReferenceError(str(index))
    return get_column_letter(index)


def cell_reference_to_coordinates(value: str) -> tuple[int, int]:
    """Convert a cell reference like ``B3`` to ``(column, row)``.

    Raises:
        InvalidCellReferenceError: If the text is empty, malformed, or
            outside the worksheet limits.
    """
    try:
        column, row = split_a1(value)
        col_index = column_label_to_index(column)
    except InvalidCellReferenceError as exc:
        raise InvalidCellReferenceError(value) from exc
    if row > MAX_ROWS:
        raise InvalidCellReferenceError(value)
    return col_index, row


def coordinates_to_cell_reference(col: int, row: int) -> str:
    """Convert ``(column, row)`` to a cell reference like ``B3``."""
    if col < 1 or col > MAX_COLUMNS or row < 1 or row > MAX_ROWS:
        raise InvalidCellReferenceError(f"({col}, {row})")
    return f"{get_column_letter(col)}{row}"


def parse_range_reference(value: str) -> RangeRect:
    """Parse an A1 range (``A1:B3``, ``B3:A1`` or a lone ``C4``) into a rect.

    Corners are normalized per axis, so reversed ranges are accepted.
    """
    parts = value.split(":") if value else []
    if not parts or len(parts) > 2:
        raise InvalidCellReferenceError(value)
    first_col, first_row = cell_reference_to_coordinates(parts[0])
    if len(parts) == 1:
        last_col, last_row = first_col, first_row
    else:
        last_col, last_row = cell_reference_to_coordinates(parts[1])
    return RangeRect(
        start_col=min(first_col, last_col),
        start_row=min(first_row, last_row),
        end_col=max(first_col, last_col),
        end_row=max(first_row, last_row),
    )


def format_range_reference(rect: RangeRect, *, collapse_single: bool = True) -> str:
    """Format a rect as ``TopLeft:BottomRight``.

    A 1x1 rect is written as a lone reference unless ``collapse_single`` is
    False; merged regions always keep both corners.
    """
    top_left = coordinates_to_cell_reference(rect.start_col, rect.start_row)
    bottom_right = coordinates_to_cell_reference(rect.end_col, rect.end_row)
    if collapse_single and top_left == bottom_right:
        return top_left
    return f"{top_left}:{bottom_right}"
