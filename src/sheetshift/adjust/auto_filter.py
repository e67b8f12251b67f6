from __future__ import annotations

import logging

from ..model import Worksheet
from ..shared.a1 import format_range_reference, parse_range_reference
from ..types import AdjustDirection
from .axis import adjust_rect

logger = logging.getLogger(__name__)


def adjust_auto_filter(
    worksheet: Worksheet, direction: AdjustDirection, pivot: int, offset: int
) -> bool:
    """Move the auto-filter range of ``worksheet``.

    Hidden-row flags produced by filtering are left as they are.

    Returns:
        True when the filter collapsed and was removed.

    Raises:
        InvalidCellReferenceError: If the filter reference cannot be parsed.
    """
    if worksheet.auto_filter is None:
        return False
    rect = parse_range_reference(worksheet.auto_filter.ref)
    moved, collapsed = adjust_rect(rect, direction, pivot, offset)
    if collapsed:
        logger.debug(
            "Removing auto-filter %s on sheet %s.",
            worksheet.auto_filter.ref,
            worksheet.name,
        )
        worksheet.auto_filter = None
        return True
    if moved != rect:
        worksheet.auto_filter.ref = format_range_reference(moved)
    return False
