from __future__ import annotations

from collections.abc import Sequence
import logging
from xml.etree import ElementTree as ET

from ..errors import (
    InvalidCellReferenceError,
    MalformedPartError,
    UnsupportedCharsetError,
)
from ..model import TableAdjustResult, Worksheet
from ..package import Package, resolve_part_path
from ..shared.a1 import RangeRect, format_range_reference, parse_range_reference
from ..shared.xml_part import (
    decode_part,
    encode_part,
    local_name,
    parse_part,
    replace_start_tag_attribute,
)
from ..types import AdjustDirection
from .axis import adjust_rect, axis_limit

logger = logging.getLogger(__name__)


def adjust_tables(
    package: Package,
    worksheet: Worksheet,
    direction: AdjustDirection,
    pivot: int,
    offset: int,
    *,
    encodings: Sequence[str],
) -> list[TableAdjustResult]:
    """Move the range of every table part attached to ``worksheet``.

    Problems with a single part never fail the call: a missing part, an
    undecodable charset or an unreadable reference leaves that part as it
    is and processing continues with the next table.

    Args:
        package: Part store holding the table XML.
        worksheet: Worksheet whose ``tablePart`` relationships are followed.
        direction: Axis being edited.
        pivot: 1-based row/column where the edit happens.
        offset: Signed number of inserted (positive) or deleted rows/columns.
        encodings: Fallback encodings for parts without a BOM or declaration.

    Returns:
        One tagged result per table part, in worksheet order.
    """
    results: list[TableAdjustResult] = []
    for relationship_id in worksheet.table_parts:
        result = _adjust_table_part(
            package,
            worksheet,
            relationship_id,
            direction,
            pivot,
            offset,
            encodings=encodings,
        )
        if result.status == "skipped_missing":
            logger.debug("Skipping table %s: %s", result.path, result.reason)
        elif result.status != "adjusted":
            logger.warning("Skipping table %s: %s", result.path, result.reason)
        results.append(result)
    return results


def _adjust_table_part(
    package: Package,
    worksheet: Worksheet,
    relationship_id: str,
    direction: AdjustDirection,
    pivot: int,
    offset: int,
    *,
    encodings: Sequence[str],
) -> TableAdjustResult:
    target = worksheet.relationships.get(relationship_id)
    if target is None:
        return TableAdjustResult(
            path=relationship_id,
            status="skipped_missing",
            reason=f"relationship {relationship_id} not found",
        )
    path = resolve_part_path(worksheet.path, target)
    content = package.load(path)
    if content is None:
        return TableAdjustResult(
            path=path, status="skipped_missing", reason="part not in package"
        )
    try:
        decoded = decode_part(content, encodings)
    except UnsupportedCharsetError as exc:
        return TableAdjustResult(path=path, status="skipped_charset", reason=str(exc))
    try:
        root = parse_part(decoded.text)
        if local_name(root.tag) != "table":
            raise MalformedPartError(f"unexpected root <{local_name(root.tag)}>")
        ref = root.get("ref")
        if not ref:
            raise MalformedPartError("table has no ref attribute")
        rect = parse_range_reference(ref)
    except (MalformedPartError, InvalidCellReferenceError) as exc:
        return TableAdjustResult(
            path=path, status="skipped_malformed", reason=str(exc)
        )

    moved, collapsed = adjust_rect(rect, direction, pivot, offset)
    if collapsed:
        moved = _clamp_collapsed(moved, direction)
    if moved == rect:
        return TableAdjustResult(path=path, status="adjusted", ref=ref)
    new_ref = format_range_reference(moved)
    try:
        text = replace_start_tag_attribute(decoded.text, "table", "ref", new_ref)
        if _has_auto_filter_ref(root):
            text = replace_start_tag_attribute(text, "autoFilter", "ref", new_ref)
    except MalformedPartError as exc:
        return TableAdjustResult(
            path=path, status="skipped_malformed", reason=str(exc)
        )
    package.store(path, encode_part(text, decoded.encoding, decoded.bom))
    return TableAdjustResult(path=path, status="adjusted", ref=new_ref)


def _clamp_collapsed(rect: RangeRect, direction: AdjustDirection) -> RangeRect:
    """Pin a collapsed axis to a single position; tables are kept, not deleted."""
    limit = axis_limit(direction)
    if direction == "rows":
        row = min(rect.start_row, limit)
        return rect.model_copy(update={"start_row": row, "end_row": row})
    col = min(rect.start_col, limit)
    return rect.model_copy(update={"start_col": col, "end_col": col})


def _has_auto_filter_ref(root: ET.Element) -> bool:
    for child in root:
        if local_name(child.tag) == "autoFilter" and child.get("ref"):
            return True
    return False
