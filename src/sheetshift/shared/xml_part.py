from __future__ import annotations

import codecs
from collections.abc import Iterator, Sequence
import re
from typing import Final, NamedTuple
from xml.etree import ElementTree as ET

from openpyxl.xml.constants import REL_NS, SHEET_MAIN_NS

from ..errors import MalformedPartError, UnsupportedCharsetError

XML_HEADER: Final[str] = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'

_DECLARED_ENCODING = re.compile(
    rb"^\s*<\?xml[^>]*?encoding\s*=\s*[\"']([A-Za-z0-9._:-]+)[\"']"
)
_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_BOMS: Final[tuple[tuple[bytes, str], ...]] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)
_STRICT_TO_TRANSITIONAL: Final[dict[str, str]] = {
    "http://purl.oclc.org/ooxml/spreadsheetml/main": SHEET_MAIN_NS,
    "http://purl.oclc.org/ooxml/officeDocument/relationships": REL_NS,
    "http://purl.oclc.org/ooxml/drawingml/main": (
        "http://schemas.openxmlformats.org/drawingml/2006/main"
    ),
    "http://purl.oclc.org/ooxml/drawingml/chart": (
        "http://schemas.openxmlformats.org/drawingml/2006/chart"
    ),
    "http://purl.oclc.org/ooxml/drawingml/spreadsheetDrawing": (
        "http://schemas.openxmlformats.org/drawingml/2006/spreadsheetDrawing"
    ),
}

# Markup that may contain "<" without opening an element, longest opener first.
_SKIPPED_SECTIONS: Final[tuple[tuple[str, str], ...]] = (
    ("<!--", "-->"),
    ("<![CDATA[", "]]>"),
    ("<?", "?>"),
    ("<!", ">"),
)
_TAG_NAME = re.compile(r"[^\s/>=\"']+")
_ATTRIBUTE = re.compile(r"""\s+([^\s=/>"']+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_TAG_END = re.compile(r"\s*/?>")

ET.register_namespace("", SHEET_MAIN_NS)
ET.register_namespace("r", REL_NS)


class DecodedPart(NamedTuple):
    """Text of an XML part plus what is needed to encode it back unchanged."""

    text: str
    encoding: str
    bom: bytes = b""


class _AttributeSpan(NamedTuple):
    name: str
    value_start: int
    value_end: int


class _StartTag(NamedTuple):
    name: str
    attributes: list[_AttributeSpan]


def decode_part(content: bytes, encodings: Sequence[str]) -> DecodedPart:
    """Decode XML part bytes to text.

    A byte-order mark wins, then the encoding named by the XML declaration,
    then each of ``encodings`` in order. The mark itself is kept aside in
    ``bom`` and is not part of ``text``.

    Raises:
        UnsupportedCharsetError: If the declared charset is unknown or no
            candidate decodes the bytes.
    """
    for bom, encoding in _BOMS:
        if content.startswith(bom):
            text = _decode_with(content[len(bom) :], encoding).text
            return DecodedPart(text, encoding, bom)
    declared = _DECLARED_ENCODING.match(content)
    if declared is not None:
        label = declared.group(1).decode("ascii")
        try:
            codec = codecs.lookup(label)
        except LookupError as exc:
            raise UnsupportedCharsetError(f"unsupported charset: {label}") from exc
        return _decode_with(content, codec.name)
    for encoding in encodings:
        try:
            return _decode_with(content, encoding)
        except UnsupportedCharsetError:
            continue
    raise UnsupportedCharsetError(
        f"content is not decodable as any of: {', '.join(encodings)}"
    )


def _decode_with(content: bytes, encoding: str) -> DecodedPart:
    try:
        return DecodedPart(content.decode(encoding), encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        raise UnsupportedCharsetError(f"cannot decode as {encoding}: {exc}") from exc


def encode_part(text: str, encoding: str, bom: bytes = b"") -> bytes:
    """Encode text back with the codec and byte-order mark it was read with."""
    return bom + text.encode(encoding)


def strict_to_transitional(text: str) -> str:
    """Rewrite Strict OOXML namespace URIs to their transitional form."""
    for strict, transitional in _STRICT_TO_TRANSITIONAL.items():
        text = text.replace(strict, transitional)
    return text


def parse_part(text: str) -> ET.Element:
    """Parse decoded part text into an element tree root.

    Raises:
        MalformedPartError: If the text is not well-formed XML.
    """
    body = _DECLARATION.sub("", text, count=1)
    try:
        return ET.fromstring(strict_to_transitional(body))
    except ET.ParseError as exc:
        raise MalformedPartError(f"invalid XML: {exc}") from exc


def serialize_part(root: ET.Element) -> bytes:
    """Serialize a newly built part as UTF-8 with the standard header."""
    return (XML_HEADER + ET.tostring(root, encoding="unicode")).encode("utf-8")


def local_name(tag: str) -> str:
    """Return the tag name without its ``{namespace}`` or ``prefix:`` qualifier."""
    return tag.rsplit("}", 1)[-1].rsplit(":", 1)[-1]


def _iter_start_tags(text: str) -> Iterator[_StartTag]:
    """Yield element start tags in document order with their attribute spans.

    Comments, CDATA sections, processing instructions and declarations are
    skipped, and quoted attribute values may contain ``<`` or ``>``.
    """
    position = 0
    while True:
        position = text.find("<", position)
        if position < 0:
            return
        for opener, closer in _SKIPPED_SECTIONS:
            if text.startswith(opener, position):
                close = text.find(closer, position + len(opener))
                if close < 0:
                    raise MalformedPartError(f"unterminated {opener} section")
                position = close + len(closer)
                break
        else:
            if text.startswith("</", position):
                close = text.find(">", position)
                if close < 0:
                    raise MalformedPartError("unterminated end tag")
                position = close + 1
                continue
            name = _TAG_NAME.match(text, position + 1)
            if name is None:
                raise MalformedPartError(f"invalid start tag at offset {position}")
            attributes: list[_AttributeSpan] = []
            cursor = name.end()
            attribute = _ATTRIBUTE.match(text, cursor)
            while attribute is not None:
                group = 2 if attribute.group(2) is not None else 3
                attributes.append(
                    _AttributeSpan(
                        attribute.group(1),
                        attribute.start(group),
                        attribute.end(group),
                    )
                )
                cursor = attribute.end()
                attribute = _ATTRIBUTE.match(text, cursor)
            end = _TAG_END.match(text, cursor)
            if end is None:
                raise MalformedPartError(
                    f"unterminated <{name.group(0)}> start tag at offset {position}"
                )
            yield _StartTag(name.group(0), attributes)
            position = end.end()


def replace_start_tag_attribute(text: str, tag: str, attribute: str, value: str) -> str:
    """Replace one attribute of the first ``tag`` element in raw XML text.

    Only the attribute value changes; everything else in the part is kept
    byte-for-byte. ``value`` is written as is and must not need escaping.

    Raises:
        MalformedPartError: If the tag or attribute is not present.
    """
    for start_tag in _iter_start_tags(text):
        if local_name(start_tag.name) != tag:
            continue
        for span in start_tag.attributes:
            if span.name == attribute:
                return text[: span.value_start] + value + text[span.value_end :]
        raise MalformedPartError(f"<{tag}> has no {attribute} attribute")
    raise MalformedPartError(f"missing <{tag}> element")
