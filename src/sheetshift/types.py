from __future__ import annotations

from typing import Literal

AdjustDirection = Literal["rows", "columns"]
AdjustKind = Literal["insert", "delete"]
PivotPosition = Literal["before", "at_start", "inside", "after"]
TableAdjustStatus = Literal[
    "adjusted",
    "skipped_missing",
    "skipped_malformed",
    "skipped_charset",
]
