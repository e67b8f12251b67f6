from __future__ import annotations

import io
import logging
from pathlib import Path
import re
from typing import BinaryIO, Final
from xml.etree import ElementTree as ET

from openpyxl.xml.constants import SHEET_MAIN_NS

from .adjust.service import adjust_helper
from .config import AdjustConfig
from .errors import FilePathError, SheetNotFoundError, WorkbookFileFormatError
from .model import AdjustReport, CalcChain, TableOptions, Worksheet
from .package import Package
from .shared.a1 import format_range_reference, parse_range_reference
from .shared.xml_part import serialize_part
from .types import AdjustDirection

logger = logging.getLogger(__name__)

_TABLE_PART_PATTERN = re.compile(r"^xl/tables/table(\d+)\.xml$")
SUPPORTED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".xlam", ".xlsm", ".xlsx", ".xltm", ".xltx"}
)
MAX_FILE_PATH_LENGTH: Final[int] = 207


class Document:
    """Spreadsheet document: worksheet registry, part store and calc chain.

    The document is shared mutable state and performs no locking; callers
    serialize structural edits against one document.
    """

    def __init__(
        self,
        *,
        package: Package | None = None,
        config: AdjustConfig | None = None,
        calc_chain: CalcChain | None = None,
        path: str | Path | None = None,
    ) -> None:
        self.package = package if package is not None else Package()
        self.config = config if config is not None else AdjustConfig()
        self.calc_chain = calc_chain
        self.path = Path(path) if path is not None else None
        self._sheets: list[Worksheet] = []

    @classmethod
    def new(cls, *, config: AdjustConfig | None = None) -> Document:
        """Create a document holding one empty ``Sheet1``."""
        document = cls(config=config)
        document.add_sheet("Sheet1")
        return document

    @property
    def sheets(self) -> list[Worksheet]:
        return list(self._sheets)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self._sheets]

    def add_sheet(self, name: str) -> Worksheet:
        """Register a new worksheet with the next free sheet id.

        Raises:
            ValueError: If the name is empty or already used.
        """
        candidate = name.strip()
        if not candidate:
            raise ValueError("Sheet name must not be empty.")
        if self._find(candidate) is not None:
            raise ValueError(f"Sheet already exists: {candidate}")
        sheet_id = max((sheet.sheet_id for sheet in self._sheets), default=0) + 1
        worksheet = Worksheet(
            name=candidate,
            sheet_id=sheet_id,
            path=f"xl/worksheets/sheet{sheet_id}.xml",
        )
        self._sheets.append(worksheet)
        return worksheet

    def resolve(self, name: str) -> Worksheet:
        """Return the worksheet named ``name`` (case-insensitive).

        Raises:
            SheetNotFoundError: If no sheet has that name.
        """
        worksheet = self._find(name)
        if worksheet is None:
            raise SheetNotFoundError(name)
        return worksheet

    def _find(self, name: str) -> Worksheet | None:
        folded = name.strip().casefold()
        for sheet in self._sheets:
            if sheet.name.casefold() == folded:
                return sheet
        return None

    def add_table(
        self, sheet_name: str, ref: str, options: TableOptions | None = None
    ) -> str:
        """Create a table part over ``ref`` and attach it to the sheet.

        Args:
            sheet_name: Target worksheet.
            ref: Table range including its header row.
            options: Name and style flags; defaults when omitted.

        Returns:
            Package path of the new table part.
        """
        worksheet = self.resolve(sheet_name)
        opts = options or TableOptions()
        rect = parse_range_reference(ref)
        normalized_ref = format_range_reference(rect)
        table_id = self._next_table_id()
        table_name = opts.name or f"Table{table_id}"
        root = _build_table_element(
            table_id,
            table_name,
            normalized_ref,
            rect.end_col - rect.start_col + 1,
            opts,
        )
        path = f"xl/tables/table{table_id}.xml"
        self.package.store(path, serialize_part(root))
        relationship_id = worksheet.next_relationship_id()
        worksheet.relationships[relationship_id] = f"../tables/table{table_id}.xml"
        worksheet.table_parts.append(relationship_id)
        logger.debug(
            "Added table %s at %s on sheet %s.", table_name, path, worksheet.name
        )
        return path

    def _next_table_id(self) -> int:
        used = [
            int(match.group(1))
            for match in (_TABLE_PART_PATTERN.match(path) for path in self.package)
            if match is not None
        ]
        return max(used, default=0) + 1

    def adjust(
        self, sheet_name: str, direction: AdjustDirection, pivot: int, offset: int
    ) -> AdjustReport:
        """Adjust structural references of a sheet; see :func:`adjust_helper`."""
        return adjust_helper(self, sheet_name, direction, pivot, offset)

    def save(self) -> None:
        """Overwrite the package at :attr:`path`.

        Raises:
            FilePathError: If the document has no path.
        """
        if self.path is None:
            raise FilePathError(
                "no path defined for file, consider Document.write or "
                "Document.write_to_buffer"
            )
        self.save_as(self.path)

    def save_as(self, name: str | Path) -> None:
        """Write the package to ``name`` and remember it as :attr:`path`.

        Raises:
            FilePathError: If the path is longer than the supported maximum.
            WorkbookFileFormatError: If the extension is not a workbook format.
        """
        target = Path(name)
        if len(str(target)) > MAX_FILE_PATH_LENGTH:
            raise FilePathError("file name length exceeds maximum limit")
        _check_extension(target)
        self.path = target
        with target.open("wb") as stream:
            self.write(stream)
        logger.debug("Saved %d parts to %s.", len(self.package), target)

    def write(self, stream: BinaryIO) -> None:
        """Write the package as a zip archive to a binary stream.

        Raises:
            WorkbookFileFormatError: If :attr:`path` has an unsupported extension.
        """
        if self.path is not None:
            _check_extension(self.path)
        self.package.write_zip(stream)

    def write_to_buffer(self) -> io.BytesIO:
        """Return the zipped package in memory, positioned at its start."""
        buffer = io.BytesIO()
        self.write(buffer)
        buffer.seek(0)
        return buffer


def _check_extension(path: Path) -> None:
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise WorkbookFileFormatError(path.suffix or path.name)


def _build_table_element(
    table_id: int, name: str, ref: str, column_count: int, options: TableOptions
) -> ET.Element:
    def qname(tag: str) -> str:
        return f"{{{SHEET_MAIN_NS}}}{tag}"

    root = ET.Element(
        qname("table"),
        {
            "id": str(table_id),
            "name": name,
            "displayName": name,
            "ref": ref,
        },
    )
    ET.SubElement(root, qname("autoFilter"), {"ref": ref})
    columns = ET.SubElement(root, qname("tableColumns"), {"count": str(column_count)})
    for index in range(1, column_count + 1):
        ET.SubElement(
            columns, qname("tableColumn"), {"id": str(index), "name": f"Column{index}"}
        )
    if options.style:
        ET.SubElement(
            root,
            qname("tableStyleInfo"),
            {
                "name": options.style,
                "showFirstColumn": _flag(options.show_first_column),
                "showLastColumn": _flag(options.show_last_column),
                "showRowStripes": _flag(options.show_row_stripes),
                "showColumnStripes": _flag(options.show_column_stripes),
            },
        )
    return root


def _flag(value: bool) -> str:
    return "1" if value else "0"
