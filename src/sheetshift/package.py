from __future__ import annotations

from collections.abc import Iterator, Mapping
import io
import logging
from pathlib import Path
import posixpath
from typing import BinaryIO
from zipfile import ZIP_DEFLATED, BadZipFile, ZipFile

from .errors import WorkbookFileFormatError

logger = logging.getLogger(__name__)


class Package:
    """In-memory store of package parts addressed by path."""

    def __init__(self, parts: Mapping[str, bytes] | None = None) -> None:
        self._parts: dict[str, bytes] = dict(parts or {})

    @classmethod
    def from_zip(cls, source: str | Path | bytes | BinaryIO) -> Package:
        """Read every part of a zip package.

        Args:
            source: Path of the package, its raw bytes, or a readable binary
                stream.

        Raises:
            WorkbookFileFormatError: If the source is not a zip archive.
        """
        archive = io.BytesIO(source) if isinstance(source, bytes) else source
        try:
            with ZipFile(archive) as zip_file:
                parts = {
                    info.filename: zip_file.read(info)
                    for info in zip_file.infolist()
                    if not info.is_dir()
                }
        except BadZipFile as exc:
            raise WorkbookFileFormatError(str(exc)) from exc
        logger.debug("Loaded %d package parts.", len(parts))
        return cls(parts)

    def write_zip(self, target: str | Path | BinaryIO) -> None:
        """Write every part, in insertion order, as a deflated zip archive."""
        with ZipFile(target, "w", compression=ZIP_DEFLATED) as zip_file:
            for path, content in self._parts.items():
                zip_file.writestr(path, content)

    def load(self, path: str) -> bytes | None:
        """Return the part bytes, or None when the part is absent."""
        return self._parts.get(path)

    def store(self, path: str, content: bytes) -> None:
        self._parts[path] = content

    def delete(self, path: str) -> None:
        """Remove a part; deleting an absent part is a no-op."""
        self._parts.pop(path, None)

    def __contains__(self, path: object) -> bool:
        return path in self._parts

    def __iter__(self) -> Iterator[str]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)


def resolve_part_path(source_path: str, target: str) -> str:
    """Resolve a relationship target against the part that declares it.

    ``../tables/table1.xml`` declared by ``xl/worksheets/sheet1.xml`` resolves
    to ``xl/tables/table1.xml``; absolute targets are package-rooted.
    """
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    base_dir = posixpath.dirname(source_path)
    return posixpath.normpath(posixpath.join(base_dir, target))
