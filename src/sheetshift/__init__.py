"""Structural reference adjustment for xlsx documents."""

from __future__ import annotations

from .adjust import adjust_helper
from .config import AdjustConfig, configure_logging, load_config
from .document import Document
from .errors import (
    FilePathError,
    InvalidCellReferenceError,
    MalformedPartError,
    SheetNotFoundError,
    SheetshiftError,
    UnsupportedCharsetError,
    WorkbookFileFormatError,
)
from .model import (
    AdjustReport,
    AutoFilter,
    CalcChain,
    CalcChainEntry,
    MergeCell,
    TableAdjustResult,
    TableOptions,
    Worksheet,
)
from .package import Package
from .shared.a1 import RangeRect

__all__ = [
    "AdjustConfig",
    "AdjustReport",
    "AutoFilter",
    "CalcChain",
    "CalcChainEntry",
    "Document",
    "FilePathError",
    "InvalidCellReferenceError",
    "MalformedPartError",
    "MergeCell",
    "Package",
    "RangeRect",
    "SheetNotFoundError",
    "SheetshiftError",
    "TableAdjustResult",
    "TableOptions",
    "UnsupportedCharsetError",
    "WorkbookFileFormatError",
    "Worksheet",
    "adjust_helper",
    "configure_logging",
    "load_config",
]
