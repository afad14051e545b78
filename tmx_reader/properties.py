"""
Custom properties attached to maps, layers, tilesets and tiles

=============================================================================
WHAT ARE CUSTOM PROPERTIES?
=============================================================================

Tiled lets the author attach key/value annotations to almost anything:

    <properties>
        <property name="solid" type="bool" value="true"/>
        <property name="damage" type="int" value="10"/>
        <property name="description" value="A wooden door"/>
    </properties>

Every value is stored as a string in the document. The optional ``type``
attribute tells us how to read it back. Tiled does NOT write ``type`` for
plain string properties, so a missing type means "string".

=============================================================================
COERCION RULES
=============================================================================

    declared type     stored value               effective type
    -------------     ------------               --------------
    string            raw string                 string
    bool              raw == "true"              bool
    int               signed 32-bit integer      int
    anything else     raw string                 string

"anything else" includes float, color and file. Those are kept as the raw
text and their type collapses to string, so game code can still read them
with get_string().

Unrecognised booleans never fail: "True", "yes" and "" all read as False.

=============================================================================
LOOKUP
=============================================================================

Properties are stored by name (last one wins if a name repeats). The
get_*() helpers are total: they return the caller's fallback when the key is
missing or holds a different type, so game code never has to catch:

    speed = layer.properties.get_int("speed", 1)
    solid = tile.properties.get_bool("solid", False)

=============================================================================
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from .attributes import INT_RE
from .errors import InvalidIntegerProperty, PropertyTypeMismatch

logger = logging.getLogger(__name__)

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

PropertyValue = Union[bool, int, str]


class PropertyType(str, Enum):
    """
    Declared type of a custom property.

    FLOAT, COLOR and FILE exist so documents can be described faithfully,
    but coerce_properties() currently stores them as STRING.
    """
    BOOL = "bool"
    COLOR = "color"
    FLOAT = "float"
    FILE = "file"
    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class CustomProperty:
    """
    One typed property.

    ``value`` always matches ``type``: bool for BOOL, int for INT, str for
    STRING. Use the as_*() helpers for forgiving access and the value_*()
    helpers when a type mismatch is a bug worth raising.
    """
    name: str
    type: PropertyType
    value: PropertyValue

    # -------------------------------------------------------------------------
    # Forgiving accessors
    # -------------------------------------------------------------------------

    def as_bool(self, fallback: bool = False) -> bool:
        return self.value if self.type is PropertyType.BOOL else fallback

    def as_int(self, fallback: int = 0) -> int:
        return self.value if self.type is PropertyType.INT else fallback

    def as_string(self, fallback: str = "") -> str:
        return self.value if self.type is PropertyType.STRING else fallback

    # -------------------------------------------------------------------------
    # Strict accessors
    # -------------------------------------------------------------------------

    def _expect(self, wanted: PropertyType) -> PropertyValue:
        if self.type is not wanted:
            raise PropertyTypeMismatch(self.name, self.type.value, wanted.value)
        return self.value

    def value_bool(self) -> bool:
        return self._expect(PropertyType.BOOL)

    def value_int(self) -> int:
        return self._expect(PropertyType.INT)

    def value_string(self) -> str:
        return self._expect(PropertyType.STRING)

    def __str__(self) -> str:
        return f"{self.name}:{self.value!r}"


class CustomProperties(dict):
    """Mapping of property name -> CustomProperty with typed getters."""

    def get_bool(self, key: str, fallback: bool = False) -> bool:
        prop = self.get(key)
        return prop.as_bool(fallback) if prop is not None else fallback

    def get_int(self, key: str, fallback: int = 0) -> int:
        prop = self.get(key)
        return prop.as_int(fallback) if prop is not None else fallback

    def get_string(self, key: str, fallback: str = "") -> str:
        prop = self.get(key)
        return prop.as_string(fallback) if prop is not None else fallback

    def __str__(self) -> str:
        return " ".join(str(prop) for prop in self.values())


# =============================================================================
# COERCION
# =============================================================================

def _parse_int32(name: str, raw: str) -> int:
    # int() alone would accept whitespace, underscores and leading "+0x"
    if not INT_RE.fullmatch(raw):
        raise InvalidIntegerProperty(name, raw)
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidIntegerProperty(name, raw)
    return value


def coerce_property(name: str, declared_type: Optional[str], raw: str) -> CustomProperty:
    """
    Turn one (name, declared type, raw string) triple into a CustomProperty.

    Raises:
    -------
    InvalidIntegerProperty : declared "int" but the value does not parse
    """
    if declared_type == PropertyType.BOOL.value:
        return CustomProperty(name, PropertyType.BOOL, raw == "true")
    if declared_type == PropertyType.INT.value:
        return CustomProperty(name, PropertyType.INT, _parse_int32(name, raw))
    # "string", missing, and every other type degrade to a plain string
    return CustomProperty(name, PropertyType.STRING, raw)


def coerce_properties(entries: Iterable[Tuple[str, Optional[str], str]]) -> CustomProperties:
    """
    Build a CustomProperties mapping from raw (name, type, value) triples.

    Later entries overwrite earlier ones with the same name.
    """
    props = CustomProperties()
    for name, declared_type, raw in entries:
        if name in props:
            logger.debug("Property %r repeated, keeping the later value", name)
        props[name] = coerce_property(name, declared_type, raw)
    return props


# =============================================================================
# XML HELPERS
# =============================================================================

def property_entries(elem: Optional[ET.Element]):
    """
    Yield raw (name, type, value) triples from an element's <properties>.

    Parameters:
    -----------
    elem : ET.Element or None
        Any element that may own a <properties> child (map, layer, tile...)
    """
    if elem is None:
        return
    props_elem = elem.find('properties')
    if props_elem is None:
        return
    for prop_elem in props_elem.findall('property'):
        # Multi-line string values are written as element text, not value=""
        value = prop_elem.get('value')
        if value is None:
            value = prop_elem.text or ''
        yield prop_elem.get('name', ''), prop_elem.get('type'), value


def parse_properties(elem: Optional[ET.Element]) -> CustomProperties:
    """Parse and coerce the <properties> block of an element."""
    return coerce_properties(property_entries(elem))


def raw_property(elem: Optional[ET.Element], name: str) -> str:
    """Return the raw string of the first property called ``name``, or ""."""
    for prop_name, _, value in property_entries(elem):
        if prop_name == name:
            return value
    return ''
