"""
Structured map attributes: orientation, render order, staggering, colors

=============================================================================
MAP ORIENTATIONS
=============================================================================

ORTHOGONAL (most common):
    Standard square grid, tiles aligned in rows and columns.
    +---+---+---+
    | 0 | 1 | 2 |
    +---+---+---+
    | 3 | 4 | 5 |
    +---+---+---+

ISOMETRIC:
    Diamond-shaped tiles for pseudo-3D effect.

STAGGERED:
    Isometric tiles with every other row (or column) shifted, so the map
    stays rectangular. Uses staggeraxis / staggerindex.

HEXAGONAL:
    Staggered hexagons. Uses staggeraxis / staggerindex / hexsidelength.

=============================================================================
RENDER ORDER
=============================================================================

Determines which corner rendering starts from:
- right-down: Left-to-right, top-to-bottom (most common)
- right-up: Left-to-right, bottom-to-top
- left-down: Right-to-left, top-to-bottom
- left-up: Right-to-left, bottom-to-top

Unlike most attributes, an unrecognised orientation or render order is an
error: guessing would silently draw the map wrong.

=============================================================================
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from PIL import ImageColor

from .attributes import int_attr
from .errors import DocumentParseFailure, UnknownOrientation, UnknownRenderOrder

RGBA = Tuple[int, int, int, int]


class Orientation(str, Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    ISOMETRIC_STAGGERED = "staggered"
    HEXAGONAL_STAGGERED = "hexagonal"


class RenderOrder(str, Enum):
    RIGHT_DOWN = "right-down"
    RIGHT_UP = "right-up"
    LEFT_DOWN = "left-down"
    LEFT_UP = "left-up"


class StaggerAxis(str, Enum):
    X = "x"
    Y = "y"


class StaggerIndex(str, Enum):
    ODD = "odd"
    EVEN = "even"


def parse_orientation(value: str) -> Orientation:
    try:
        return Orientation(value)
    except ValueError:
        raise UnknownOrientation(value) from None


def parse_render_order(value: str) -> RenderOrder:
    try:
        return RenderOrder(value)
    except ValueError:
        raise UnknownRenderOrder(value) from None


def _optional_enum(enum_cls, elem: ET.Element, name: str):
    value = elem.get(name)
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise DocumentParseFailure(f"<{elem.tag}> attribute {name}={value!r} is not valid") from None


def parse_color(value: str) -> RGBA:
    """
    Parse a Tiled color into an (r, g, b, a) tuple.

    Tiled writes "#RRGGBB" or "#AARRGGBB" (alpha FIRST, unlike CSS). The
    leading '#' is optional.

        "#ff0000"   -> (255, 0, 0, 255)
        "#80ff0000" -> (255, 0, 0, 128)
    """
    hex_part = value[1:] if value.startswith('#') else value
    if len(hex_part) == 8:
        # ARGB -> RGBA so Pillow reads the channels in the right order
        hex_part = hex_part[2:] + hex_part[:2]
    elif len(hex_part) != 6:
        raise DocumentParseFailure(f"Invalid color {value!r}")
    try:
        rgba = ImageColor.getrgb('#' + hex_part)
    except ValueError as e:
        raise DocumentParseFailure(f"Invalid color {value!r}") from e
    if len(rgba) == 3:
        rgba = rgba + (255,)
    return rgba


@dataclass(frozen=True)
class MapProperties:
    """Typed view of the <map> element's attributes."""
    orientation: Orientation = Orientation.ORTHOGONAL
    width: int = 0                                   # Map width in tiles
    height: int = 0                                  # Map height in tiles
    tilewidth: int = 0                               # Tile width in pixels
    tileheight: int = 0                              # Tile height in pixels
    infinite: bool = False                           # Is map infinite?
    hexsidelength: int = 0                           # Hex maps only
    stagger_axis: Optional[StaggerAxis] = None
    stagger_index: Optional[StaggerIndex] = None
    renderorder: RenderOrder = RenderOrder.RIGHT_DOWN
    compressionlevel: int = -1                       # -1 = codec default
    nextlayerid: int = 0
    nextobjectid: int = 0
    background_color: Optional[RGBA] = None

    @classmethod
    def from_xml(cls, root: ET.Element) -> 'MapProperties':
        """
        Read map attributes from the <map> element.

        Raises:
        -------
        UnknownOrientation, UnknownRenderOrder : unrecognised enum strings
        DocumentParseFailure : bad numbers, stagger values or colors
        """
        background = root.get('backgroundcolor')
        return cls(
            orientation=parse_orientation(root.get('orientation', 'orthogonal')),
            width=int_attr(root, 'width'),
            height=int_attr(root, 'height'),
            tilewidth=int_attr(root, 'tilewidth'),
            tileheight=int_attr(root, 'tileheight'),
            infinite=root.get('infinite', '0') == '1',
            hexsidelength=int_attr(root, 'hexsidelength'),
            stagger_axis=_optional_enum(StaggerAxis, root, 'staggeraxis'),
            stagger_index=_optional_enum(StaggerIndex, root, 'staggerindex'),
            renderorder=parse_render_order(root.get('renderorder', 'right-down')),
            compressionlevel=int_attr(root, 'compressionlevel', -1),
            nextlayerid=int_attr(root, 'nextlayerid'),
            nextobjectid=int_attr(root, 'nextobjectid'),
            background_color=parse_color(background) if background else None,
        )
