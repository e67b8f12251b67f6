from __future__ import annotations

import pytest

from sheetshift.errors import InvalidCellReferenceError
from sheetshift.shared.a1 import (
    MAX_COLUMNS,
    MAX_ROWS,
    RangeRect,
    cell_reference_to_coordinates,
    column_index_to_label,
    column_label_to_index,
    coordinates_to_cell_reference,
    format_range_reference,
    parse_range_reference,
    split_a1,
)


def test_column_roundtrip() -> None:
    assert column_label_to_index("A") == 1
    assert column_label_to_index("AA") == 27
    assert column_label_to_index("xfd") == MAX_COLUMNS
    assert column_index_to_label(1) == "A"
    assert column_index_to_label(27) == "AA"
    assert column_index_to_label(MAX_COLUMNS) == "XFD"


def test_split_a1() -> None:
    assert split_a1("b12") == ("B", 12)
    assert split_a1("$C$4") == ("C", 4)


def test_cell_reference_to_coordinates() -> None:
    assert cell_reference_to_coordinates("B3") == (2, 3)
    assert cell_reference_to_coordinates(f"XFD{MAX_ROWS}") == (MAX_COLUMNS, MAX_ROWS)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "A",
        "12",
        "1A",
        "A0",
        "A-1",
        "XFE1",
        "ABCD1",
        f"A{MAX_ROWS + 1}",
        "invalid coordinates",
        " A1 ",
        "A1\n",
        "A 1",
    ],
)
def test_cell_reference_rejects_invalid(text: str) -> None:
    with pytest.raises(InvalidCellReferenceError) as excinfo:
        cell_reference_to_coordinates(text)
    assert excinfo.value.text == text


def test_invalid_cell_reference_message() -> None:
    with pytest.raises(
        InvalidCellReferenceError,
        match='cannot convert cell "A" to coordinates: invalid cell name "A"',
    ):
        parse_range_reference("A:B1")


def test_invalid_cell_reference_is_value_error() -> None:
    with pytest.raises(ValueError):
        cell_reference_to_coordinates("1A")


def test_coordinates_to_cell_reference() -> None:
    assert coordinates_to_cell_reference(3, 10) == "C10"
    with pytest.raises(InvalidCellReferenceError):
        coordinates_to_cell_reference(0, 1)
    with pytest.raises(InvalidCellReferenceError):
        coordinates_to_cell_reference(1, MAX_ROWS + 1)


def test_parse_range_reference_normalizes_corners() -> None:
    rect = parse_range_reference("B3:A1")
    assert rect.as_list() == [1, 1, 2, 3]


def test_parse_range_reference_single_cell() -> None:
    assert parse_range_reference("C4").as_list() == [3, 4, 3, 4]


def test_parse_range_reference_absolute_markers() -> None:
    assert parse_range_reference("$A$2:$B$3").as_list() == [1, 2, 2, 3]


@pytest.mark.parametrize("text", ["", "A1:B", "A1:B2:C3", "-", ":"])
def test_parse_range_reference_rejects_invalid(text: str) -> None:
    with pytest.raises(InvalidCellReferenceError):
        parse_range_reference(text)


def test_format_range_reference() -> None:
    rect = RangeRect(start_col=1, start_row=2, end_col=2, end_row=3)
    assert format_range_reference(rect) == "A2:B3"
    single = RangeRect(start_col=1, start_row=1, end_col=1, end_row=1)
    assert format_range_reference(single) == "A1"
    assert format_range_reference(single, collapse_single=False) == "A1:A1"


def test_range_rect_degenerate() -> None:
    assert RangeRect(start_col=1, start_row=3, end_col=2, end_row=2).is_degenerate
    assert not RangeRect(start_col=1, start_row=2, end_col=1, end_row=2).is_degenerate
