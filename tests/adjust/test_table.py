from __future__ import annotations

import codecs
from collections.abc import Callable
from xml.etree import ElementTree as ET

import pytest

from sheetshift import Document, Worksheet
from sheetshift.adjust.table import adjust_tables
from sheetshift.types import AdjustDirection

MAIN = "{http://schemas.openxmlformats.org/spreadsheetml/2006/main}"
ENCODINGS = ["utf-8", "cp1252"]


def _refs(document: Document, path: str) -> tuple[str | None, str | None]:
    content = document.package.load(path)
    assert content is not None
    root = ET.fromstring(content)
    auto_filter = root.find(f"{MAIN}autoFilter")
    return root.get("ref"), auto_filter.get("ref") if auto_filter is not None else None


@pytest.fixture
def four_tables(document: Document) -> list[str]:
    return [
        document.add_table("Sheet1", ref)
        for ref in ("B2:C3", "E3:F5", "H5:H8", "J5:K9")
    ]


@pytest.mark.parametrize(
    ("direction", "pivot", "offset", "expected"),
    [
        ("rows", 2, -1, ["B2:C2", "E2:F4", "H4:H7", "J4:K8"]),
        ("rows", 1, 1, ["B3:C4", "E4:F6", "H6:H9", "J6:K10"]),
        ("columns", 2, -1, ["B2:B3", "D3:E5", "G5:G8", "I5:J9"]),
        ("columns", 9, 2, ["B2:C3", "E3:F5", "H5:H8", "L5:M9"]),
    ],
)
def test_adjust_tables_moves_every_table(
    document: Document,
    sheet: Worksheet,
    four_tables: list[str],
    direction: AdjustDirection,
    pivot: int,
    offset: int,
    expected: list[str],
) -> None:
    results = adjust_tables(
        document.package,
        sheet,
        direction,
        pivot,
        offset,
        encodings=ENCODINGS,
    )
    assert [result.status for result in results] == ["adjusted"] * 4
    assert [result.path for result in results] == four_tables
    assert [result.ref for result in results] == expected
    for path, ref in zip(four_tables, expected):
        assert _refs(document, path) == (ref, ref)


def test_adjust_tables_leaves_unmoved_part_bytes(
    document: Document, sheet: Worksheet, four_tables: list[str]
) -> None:
    before = {path: document.package.load(path) for path in four_tables}
    adjust_tables(document.package, sheet, "rows", 20, 3, encodings=ENCODINGS)
    assert {path: document.package.load(path) for path in four_tables} == before


def test_adjust_tables_rewrites_only_ref_attributes(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B3").replace('ref="A1:B3">', "ref='A1:B3' >")
    path = attach_table_part(text.encode("utf-8"))
    adjust_tables(document.package, sheet, "rows", 2, 1, encodings=ENCODINGS)
    expected = text.replace("ref='A1:B3'", "ref='A1:B4'").replace(
        '<autoFilter ref="A1:B3"/>', '<autoFilter ref="A1:B4"/>'
    )
    assert document.package.load(path) == expected.encode("utf-8")


def test_adjust_tables_without_auto_filter(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    path = attach_table_part(table_xml("A2:B3", auto_filter=False).encode("utf-8"))
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert results[0].ref == "A3:B4"
    assert _refs(document, path) == ("A3:B4", None)


def test_adjust_tables_keeps_legacy_encoding(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B2", encoding="windows-1251", name="Таблица")
    path = attach_table_part(text.encode("cp1251"))
    results = adjust_tables(
        document.package, sheet, "columns", 1, 2, encodings=ENCODINGS
    )
    assert results[0].status == "adjusted"
    assert document.package.load(path) == text.replace("A1:B2", "C1:D2").encode(
        "cp1251"
    )


def test_adjust_tables_strict_namespace(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B2").replace(
        "http://schemas.openxmlformats.org/spreadsheetml/2006/main",
        "http://purl.oclc.org/ooxml/spreadsheetml/main",
    )
    path = attach_table_part(text.encode("utf-8"))
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert results[0].ref == "A2:B3"
    assert document.package.load(path) == text.replace("A1:B2", "A2:B3").encode(
        "utf-8"
    )


def test_adjust_tables_unsupported_charset_is_skipped(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    content = table_xml("A1:B2", encoding="x-bogus-charset").encode("ascii")
    path = attach_table_part(content)
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert results[0].status == "skipped_charset"
    assert "x-bogus-charset" in (results[0].reason or "")
    assert document.package.load(path) == content


@pytest.mark.parametrize(
    "content",
    [
        b'<table ref="-" />',
        b"<table id='1'/>",
        b'<worksheet ref="A1:B2"/>',
        b'<table ref="A1:B2">',
    ],
)
def test_adjust_tables_malformed_part_is_skipped(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    content: bytes,
) -> None:
    path = attach_table_part(content)
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert results[0].status == "skipped_malformed"
    assert results[0].path == path
    assert document.package.load(path) == content


def test_adjust_tables_continues_after_skipped_part(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    attach_table_part(b'<table ref="-" />', target="../tables/table7.xml")
    good = attach_table_part(
        table_xml("C3:D4").encode("utf-8"), target="../tables/table8.xml"
    )
    results = adjust_tables(
        document.package, sheet, "rows", 3, -1, encodings=ENCODINGS
    )
    assert [result.status for result in results] == ["skipped_malformed", "adjusted"]
    assert _refs(document, good) == ("C3:D3", "C3:D3")


def test_adjust_tables_missing_part_and_relationship(
    document: Document, sheet: Worksheet
) -> None:
    sheet.relationships["rId1"] = "../tables/table9.xml"
    sheet.table_parts.extend(["rId1", "rId2"])
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert [(result.path, result.status) for result in results] == [
        ("xl/tables/table9.xml", "skipped_missing"),
        ("rId2", "skipped_missing"),
    ]


def test_adjust_tables_collapsed_range_is_kept(
    document: Document, sheet: Worksheet
) -> None:
    path = document.add_table("Sheet1", "D1:D3")
    before = document.package.load(path)
    results = adjust_tables(
        document.package, sheet, "columns", 4, -1, encodings=ENCODINGS
    )
    assert results[0].status == "adjusted"
    assert results[0].ref == "D1:D3"
    assert document.package.load(path) == before


def test_adjust_tables_only_touches_own_sheet(document: Document) -> None:
    other = document.add_sheet("Sheet2")
    own = document.add_table("Sheet1", "A1:B2")
    foreign = document.add_table("Sheet2", "A1:B2")
    adjust_tables(
        document.package,
        document.resolve("Sheet1"),
        "rows",
        1,
        1,
        encodings=ENCODINGS,
    )
    assert _refs(document, own) == ("A2:B3", "A2:B3")
    assert _refs(document, foreign) == ("A1:B2", "A1:B2")
    assert other.table_parts == ["rId1"]


def test_adjust_tables_ignores_table_markup_in_comments(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B3").replace(
        "\n<table ", '\n<!-- <table ref="Z9"> --><table ', 1
    )
    path = attach_table_part(text.encode("utf-8"))
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert (results[0].status, results[0].ref) == ("adjusted", "A2:B4")
    assert _refs(document, path) == ("A2:B4", "A2:B4")
    content = document.package.load(path)
    assert content is not None
    assert b'<!-- <table ref="Z9"> -->' in content


def test_adjust_tables_accepts_angle_bracket_in_attribute_value(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B3").replace('id="1"', 'id="1" comment="a>b"', 1)
    path = attach_table_part(text.encode("utf-8"))
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert (results[0].status, results[0].ref) == ("adjusted", "A2:B4")
    assert document.package.load(path) == text.replace("A1:B3", "A2:B4").encode(
        "utf-8"
    )


def test_adjust_tables_keeps_big_endian_utf16(
    document: Document,
    sheet: Worksheet,
    attach_table_part: Callable[..., str],
    table_xml: Callable[..., str],
) -> None:
    text = table_xml("A1:B2", encoding="UTF-16")
    path = attach_table_part(codecs.BOM_UTF16_BE + text.encode("utf-16-be"))
    results = adjust_tables(
        document.package, sheet, "rows", 1, 1, encodings=ENCODINGS
    )
    assert results[0].status == "adjusted"
    assert document.package.load(path) == codecs.BOM_UTF16_BE + text.replace(
        "A1:B2", "A2:B3"
    ).encode("utf-16-be")
