from __future__ import annotations

from collections.abc import Callable

import pytest

from sheetshift import Document, Worksheet

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

TableXmlBuilder = Callable[..., str]
TablePartAttacher = Callable[..., str]


def _table_xml(
    ref: str,
    *,
    encoding: str = "UTF-8",
    name: str = "Table1",
    auto_filter: bool = True,
) -> str:
    filter_element = f'<autoFilter ref="{ref}"/>' if auto_filter else ""
    return (
        f'<?xml version="1.0" encoding="{encoding}" standalone="yes"?>\n'
        f'<table xmlns="{MAIN_NS}" id="1" name="{name}" displayName="{name}" '
        f'ref="{ref}">{filter_element}<tableColumns count="1">'
        '<tableColumn id="1" name="Column1"/></tableColumns></table>'
    )


@pytest.fixture
def table_xml() -> TableXmlBuilder:
    """Builder for the text of a minimal table part over a range."""
    return _table_xml


@pytest.fixture
def document() -> Document:
    """Fresh document with ``Sheet1``."""
    return Document.new()


@pytest.fixture
def sheet(document: Document) -> Worksheet:
    return document.resolve("Sheet1")


@pytest.fixture
def attach_table_part(document: Document, sheet: Worksheet) -> TablePartAttacher:
    """Store raw table bytes in the package and link them to ``Sheet1``."""

    def _attach(content: bytes, *, target: str = "../tables/table1.xml") -> str:
        relationship_id = sheet.next_relationship_id()
        sheet.relationships[relationship_id] = target
        sheet.table_parts.append(relationship_id)
        path = target.replace("../", "xl/", 1)
        document.package.store(path, content)
        return path

    return _attach
