from __future__ import annotations

from .a1 import (
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
from .xml_part import (
    DecodedPart,
    decode_part,
    encode_part,
    local_name,
    parse_part,
    replace_start_tag_attribute,
    serialize_part,
    strict_to_transitional,
)

__all__ = [
    "MAX_COLUMNS",
    "MAX_ROWS",
    "DecodedPart",
    "RangeRect",
    "cell_reference_to_coordinates",
    "column_index_to_label",
    "column_label_to_index",
    "coordinates_to_cell_reference",
    "decode_part",
    "encode_part",
    "format_range_reference",
    "local_name",
    "parse_part",
    "parse_range_reference",
    "replace_start_tag_attribute",
    "serialize_part",
    "split_a1",
    "strict_to_transitional",
]
