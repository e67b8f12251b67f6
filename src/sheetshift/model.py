from __future__ import annotations

from pydantic import BaseModel, Field

from .shared.a1 import RangeRect, format_range_reference, parse_range_reference
from .types import AdjustDirection, TableAdjustStatus


class MergeCell(BaseModel):
    """Merged-cell region: textual reference plus its cached rectangle."""

    ref: str
    rect: RangeRect | None = None

    @classmethod
    def from_ref(cls, ref: str) -> MergeCell:
        """Build a region from a range reference, normalizing both forms."""
        rect = parse_range_reference(ref)
        return cls(ref=format_range_reference(rect, collapse_single=False), rect=rect)


class AutoFilter(BaseModel):
    """Auto-filter range of a worksheet."""

    ref: str


class Worksheet(BaseModel):
    """In-memory worksheet record owning its structural artifacts."""

    name: str
    sheet_id: int = Field(ge=1)
    path: str
    merge_cells: list[MergeCell] = Field(default_factory=list)
    auto_filter: AutoFilter | None = None
    table_parts: list[str] = Field(
        default_factory=list, description="Relationship ids of table parts."
    )
    relationships: dict[str, str] = Field(
        default_factory=dict, description="Relationship id to part target."
    )
    hidden_rows: list[int] = Field(default_factory=list)

    def add_merge_cell(self, ref: str) -> MergeCell:
        """Append a merged region for ``ref`` and return it."""
        merge_cell = MergeCell.from_ref(ref)
        self.merge_cells.append(merge_cell)
        return merge_cell

    def remove_merge_cell(self, index: int) -> None:
        """Remove the merged region at ``index``; out-of-range indexes are ignored."""
        if 0 <= index < len(self.merge_cells):
            del self.merge_cells[index]

    def set_auto_filter(self, ref: str) -> AutoFilter:
        """Install the worksheet auto-filter over ``ref``."""
        rect = parse_range_reference(ref)
        self.auto_filter = AutoFilter(ref=format_range_reference(rect))
        return self.auto_filter

    def next_relationship_id(self) -> str:
        """Return the first unused ``rIdN`` identifier."""
        index = len(self.relationships) + 1
        while f"rId{index}" in self.relationships:
            index += 1
        return f"rId{index}"


class CalcChainEntry(BaseModel):
    """One calculation-chain cell; ``sheet_id`` None repeats the previous id."""

    ref: str
    sheet_id: int | None = None


class CalcChain(BaseModel):
    """Workbook-wide calculation chain."""

    entries: list[CalcChainEntry] = Field(default_factory=list)


class TableOptions(BaseModel):
    """Options for creating a table part."""

    name: str | None = None
    style: str | None = "TableStyleMedium2"
    show_first_column: bool = False
    show_last_column: bool = False
    show_row_stripes: bool = True
    show_column_stripes: bool = False


class TableAdjustResult(BaseModel):
    """Outcome of adjusting one table part."""

    path: str
    status: TableAdjustStatus
    ref: str | None = None
    reason: str | None = None


class AdjustReport(BaseModel):
    """Summary of one structural adjustment call."""

    sheet: str
    direction: AdjustDirection
    pivot: int
    offset: int
    merge_cells_removed: int = 0
    auto_filter_removed: bool = False
    tables: list[TableAdjustResult] = Field(default_factory=list)
    calc_chain_removed: int = 0
