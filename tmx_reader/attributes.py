"""Typed access to XML attributes, failing with DocumentParseFailure."""

import re
import xml.etree.ElementTree as ET

from .errors import DocumentParseFailure

# Optional sign followed by decimal digits, nothing else
INT_RE = re.compile(r'[+-]?[0-9]+')


def parse_xml(data: bytes, root_tag: str) -> ET.Element:
    """
    Parse a TMX/TSX document and check its root element.

    Parameters:
    -----------
    data : bytes
        Raw document bytes
    root_tag : str
        Expected root element, 'map' or 'tileset'
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DocumentParseFailure(f"Error unmarshaling XML: {e}") from e
    if root.tag != root_tag:
        raise DocumentParseFailure(f"Expected <{root_tag}> root element, found <{root.tag}>")
    return root


def int_attr(elem: ET.Element, name: str, default: int = 0) -> int:
    value = elem.get(name)
    if value is None or value == '':
        return default
    # int() alone would accept whitespace and underscores
    if not INT_RE.fullmatch(value):
        raise DocumentParseFailure(
            f"<{elem.tag}> attribute {name}={value!r} is not an integer"
        )
    return int(value)


def float_attr(elem: ET.Element, name: str, default: float = 0.0) -> float:
    value = elem.get(name)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except ValueError as e:
        raise DocumentParseFailure(
            f"<{elem.tag}> attribute {name}={value!r} is not a number"
        ) from e

