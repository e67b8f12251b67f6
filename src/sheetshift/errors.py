from __future__ import annotations


class SheetshiftError(Exception):
    """Base class for errors raised by sheetshift."""


class InvalidCellReferenceError(SheetshiftError, ValueError):
    """Raised when a cell or range reference cannot be converted to coordinates."""

    def __init__(self, text: str) -> None:
        super().__init__(
            f'cannot convert cell "{text}" to coordinates: invalid cell name "{text}"'
        )
        self.text = text


class SheetNotFoundError(SheetshiftError, LookupError):
    """Raised when a worksheet name cannot be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"sheet {name} does not exist")
        self.name = name


class UnsupportedCharsetError(SheetshiftError):
    """Raised when an XML part cannot be decoded to text."""


class MalformedPartError(SheetshiftError):
    """Raised when an XML part does not hold the expected structure."""


class WorkbookFileFormatError(SheetshiftError, ValueError):
    """Raised when a workbook path or stream is not a supported package format."""

    def __init__(self, detail: str | None = None) -> None:
        message = "unsupported workbook file format"
        super().__init__(f"{message}: {detail}" if detail else message)


class FilePathError(SheetshiftError, ValueError):
    """Raised when a document cannot be saved to the requested path."""
