"""
Tilesets (TSX) and their tiles

=============================================================================
TILESET TYPES
=============================================================================

1. SPRITESHEET TILESET (most common):
   One large image divided into a grid of tiles.

   +---+---+---+---+
   | 0 | 1 | 2 | 3 |
   +---+---+---+---+
   | 4 | 5 | 6 | 7 |
   +---+---+---+---+

   Attributes used: image, tilewidth, tileheight, columns, spacing, margin

2. IMAGE COLLECTION TILESET:
   Each tile is a separate image file, listed on its own <tile> element.

=============================================================================
FIRST GID
=============================================================================

A tileset document does not know its own first GID. The MAP decides it when
it references the tileset:

    <tileset firstgid="101" source="items.tsx"/>

so a tileset loaded on its own has firstgid=0, and the map assembler hands
back a copy stamped with the value from the reference (with_firstgid()).
Resolving a GID back to tileset + local id is left to the caller:

    local_id = gid - tileset.firstgid

=============================================================================
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Union

from .acquire import FileSystemAcquirer
from .attributes import int_attr, parse_xml
from .errors import NotFound
from .properties import CustomProperties, parse_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Image:
    """Image reference: a spritesheet or one tile's own picture."""
    source: str                          # Path to image file
    width: int = 0                       # Image width (pixels)
    height: int = 0                      # Image height (pixels)
    trans: Optional[str] = None          # Transparent color (RRGGBB)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Image':
        return cls(
            source=elem.get('source', ''),
            width=int_attr(elem, 'width'),
            height=int_attr(elem, 'height'),
            trans=elem.get('trans'),
        )


@dataclass(frozen=True)
class Grid:
    """How tile images are laid out in the editor (orthogonal/isometric)."""
    orientation: str = "orthogonal"
    width: int = 0
    height: int = 0

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Grid':
        return cls(
            orientation=elem.get('orientation', 'orthogonal'),
            width=int_attr(elem, 'width'),
            height=int_attr(elem, 'height'),
        )


@dataclass(frozen=True)
class Tile:
    """
    Metadata for one tile of a tileset.

    ``id`` is LOCAL to the tileset (0-based). Only tiles that carry
    properties, a type or their own image appear in the document, so a
    tileset can have far fewer Tile entries than ``tilecount``.
    """
    id: int                                          # Local tile ID
    width: int = 0                                   # From the tile image
    height: int = 0
    source: Optional[str] = None                     # Image path, if any
    type: str = ""                                   # Tile type/class
    image: Optional[Image] = None
    properties: CustomProperties = field(default_factory=CustomProperties)

    @classmethod
    def from_xml(cls, elem: ET.Element) -> 'Tile':
        img_elem = elem.find('image')
        image = Image.from_xml(img_elem) if img_elem is not None else None
        return cls(
            id=int_attr(elem, 'id', 0),
            width=image.width if image else 0,
            height=image.height if image else 0,
            source=image.source if image else None,
            # Tiled 1.9 renamed "type" to "class"
            type=elem.get('type') or elem.get('class') or '',
            image=image,
            properties=parse_properties(elem),
        )


@dataclass(frozen=True)
class Tileset:
    """
    Tileset - a named palette of tiles.

    ``firstgid`` is 0 until a map stamps it; ``source`` is the reference
    path for external tilesets and None for tilesets embedded in a map.
    """
    name: str                                        # Tileset name
    firstgid: int = 0                                # First Global ID
    source: Optional[str] = None                     # TSX path (if external)
    tilewidth: int = 0                               # Tile width in pixels
    tileheight: int = 0                              # Tile height in pixels
    tilecount: int = 0                               # Total number of tiles
    columns: int = 0                                 # Tiles per row
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    version: str = ""
    tiledversion: str = ""
    image: Optional[Image] = None                    # Spritesheet image
    grid: Optional[Grid] = None
    tiles: List[Tile] = field(default_factory=list)  # In document order
    properties: CustomProperties = field(default_factory=CustomProperties)

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def from_xml(cls, elem: ET.Element, source: Optional[str] = None) -> 'Tileset':
        """
        Build a tileset from a <tileset> element (TSX root or embedded).

        Tile properties are coerced here; a bad int property fails the
        whole tileset. The ``firstgid`` attribute of the element is ignored
        on purpose - see with_firstgid().
        """
        img_elem = elem.find('image')
        grid_elem = elem.find('grid')
        tileset = cls(
            name=elem.get('name', ''),
            source=source,
            tilewidth=int_attr(elem, 'tilewidth'),
            tileheight=int_attr(elem, 'tileheight'),
            tilecount=int_attr(elem, 'tilecount'),
            columns=int_attr(elem, 'columns'),
            spacing=int_attr(elem, 'spacing'),
            margin=int_attr(elem, 'margin'),
            version=elem.get('version', ''),
            tiledversion=elem.get('tiledversion', ''),
            image=Image.from_xml(img_elem) if img_elem is not None else None,
            grid=Grid.from_xml(grid_elem) if grid_elem is not None else None,
            tiles=[Tile.from_xml(tile_elem) for tile_elem in elem.findall('tile')],
            properties=parse_properties(elem),
        )
        logger.debug("Parsed tileset %r: %d tiles described", tileset.name, len(tileset.tiles))
        return tileset

    @classmethod
    def from_bytes(cls, data: bytes, source: Optional[str] = None) -> 'Tileset':
        """
        Parse a TSX document held in memory.

        Raises:
        -------
        DocumentParseFailure : malformed XML or attributes
        InvalidIntegerProperty : a tile property declared int does not parse
        """
        return cls.from_xml(parse_xml(data, 'tileset'), source=source)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'Tileset':
        """Read and parse a TSX file. See from_bytes()."""
        filepath = Path(filepath)
        data = FileSystemAcquirer(filepath.parent).acquire(filepath.name)
        return cls.from_bytes(data, source=str(filepath))

    def with_firstgid(self, firstgid: int) -> 'Tileset':
        """Copy of this tileset as referenced by a map at ``firstgid``."""
        return replace(self, firstgid=firstgid)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_tile(self, tile_id: int) -> Tile:
        """
        Get the Tile entry for a local id.

        Raises NotFound if the document does not describe that tile.
        """
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        raise NotFound(f"Tileset {self.name!r} has no tile {tile_id}")
