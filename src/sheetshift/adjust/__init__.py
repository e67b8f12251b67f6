from __future__ import annotations

from .auto_filter import adjust_auto_filter
from .axis import AxisAdjustment, adjust_axis, adjust_rect, classify_pivot
from .calc_chain import adjust_calc_chain
from .merge import adjust_merge_cells
from .service import adjust_helper
from .table import adjust_tables

__all__ = [
    "AxisAdjustment",
    "adjust_auto_filter",
    "adjust_axis",
    "adjust_calc_chain",
    "adjust_helper",
    "adjust_merge_cells",
    "adjust_rect",
    "adjust_tables",
    "classify_pivot",
]
