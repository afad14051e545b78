"""
TiledMap - the root object of a TMX document, and the loader that builds it

=============================================================================
LOADING PIPELINE
=============================================================================

    TMX bytes
        |
        v
    parse XML ------------------------------> DocumentParseFailure
        |
        +--> every <layer>:   decode data, coerce properties
        |                     (failures wrapped in LayerLoadError)
        |
        +--> <map> attributes: orientation / render order checked
        |
        +--> every <tileset>: external -> acquirer.acquire(source) -> TSX
        |                     embedded -> parsed in place
        |                     then stamped with the reference's firstgid
        |                     (failures wrapped in TilesetLoadError)
        v
    TiledMap

Loading is all-or-nothing: either every layer and tileset is valid and a
complete TiledMap comes back, or the first failure (in document order) is
raised and nothing is returned.

=============================================================================
USAGE
=============================================================================

Loading:
    level = TiledMap.load("level1.tmx")
    print(f"Map size: {level.properties.width}x{level.properties.height}")

Accessing layers:
    ground = level.get_layers_by_name("Ground")[0]
    tile_gid = ground.get_tile_gid(5, 10)

From memory (e.g. a pak file), with tilesets served by your own acquirer:
    level = TiledMap.from_bytes(data, acquirer=PakAcquirer(pak))

=============================================================================
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .acquire import Acquirer, FileSystemAcquirer
from .attributes import int_attr, parse_xml
from .errors import (
    LayerLoadError, NotFound, ResourceAcquisitionFailure, TilesetLoadError, TmxError,
)
from .layer import Layer, decode_layer
from .map_properties import MapProperties
from .properties import CustomProperties, parse_properties
from .tileset import Tileset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TiledMap:
    """
    Complete Tiled map.

    ``properties`` holds the structured <map> attributes (size, orientation,
    render order...); ``custom_properties`` holds the author's own
    key/value properties. Layers and tilesets keep document order.
    """
    properties: MapProperties = field(default_factory=MapProperties)
    custom_properties: CustomProperties = field(default_factory=CustomProperties)
    tilesets: List[Tileset] = field(default_factory=list)
    layers: List[Layer] = field(default_factory=list)
    version: str = ""                                # TMX format version
    tiledversion: str = ""                           # Tiled editor version

    # =========================================================================
    # LOADING
    # =========================================================================

    @classmethod
    def from_bytes(cls, data: bytes, acquirer: Optional[Acquirer] = None,
                   base_dir: Union[str, Path] = '.') -> 'TiledMap':
        """
        Assemble a map from TMX bytes.

        Parameters:
        -----------
        data : bytes
            The TMX document
        acquirer : Acquirer, optional
            Supplies external TSX documents by their ``source`` path.
            Defaults to reading files relative to ``base_dir``.
        base_dir : str or Path
            Directory external tileset paths are relative to, when no
            acquirer is given.

        Raises:
        -------
        DocumentParseFailure : malformed document
        LayerLoadError : a layer failed (cause in __cause__)
        UnknownOrientation, UnknownRenderOrder : bad <map> attributes
        TilesetLoadError : a tileset failed (cause in __cause__)
        InvalidIntegerProperty : a map-level int property does not parse
        """
        if acquirer is None:
            acquirer = FileSystemAcquirer(base_dir)
        root = parse_xml(data, 'map')

        # -----------------------------------------------------------------
        # LAYERS
        # -----------------------------------------------------------------
        layers = []
        for elem in root:
            if elem.tag == 'layer':
                layers.append(_load_layer(elem))
            elif elem.tag not in ('tileset', 'properties'):
                # objectgroup, imagelayer, group...
                logger.debug("Skipping <%s> %r", elem.tag, elem.get('name', ''))

        # -----------------------------------------------------------------
        # MAP ATTRIBUTES
        # -----------------------------------------------------------------
        map_properties = MapProperties.from_xml(root)
        custom_properties = parse_properties(root)

        # -----------------------------------------------------------------
        # TILESETS
        # -----------------------------------------------------------------
        tilesets = [_load_tileset(elem, acquirer) for elem in root.findall('tileset')]

        map_obj = cls(
            properties=map_properties,
            custom_properties=custom_properties,
            tilesets=tilesets,
            layers=layers,
            version=root.get('version', ''),
            tiledversion=root.get('tiledversion', ''),
        )
        logger.info("Loaded %dx%d map: %d layers, %d tilesets",
                    map_properties.width, map_properties.height, len(layers), len(tilesets))
        return map_obj

    @classmethod
    def load(cls, filepath: Union[str, Path], acquirer: Optional[Acquirer] = None) -> 'TiledMap':
        """
        Load a TMX file from disk.

        External tilesets are looked up next to the map file unless an
        acquirer is given.
        """
        filepath = Path(filepath)
        data = FileSystemAcquirer(filepath.parent).acquire(filepath.name)
        if acquirer is None:
            acquirer = FileSystemAcquirer(filepath.parent)
        return cls.from_bytes(data, acquirer=acquirer)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_version(self) -> str:
        return self.version

    def get_tiled_version(self) -> str:
        return self.tiledversion

    def get_layers_by_name(self, name: str) -> List[Layer]:
        """
        All layers called ``name``, in document order.

        Layer names are not unique in Tiled, so this can return zero, one
        or several layers.
        """
        return [layer for layer in self.layers if layer.name == name]

    def get_layer(self, layer_id: int) -> Layer:
        """
        The layer with the given id.

        Raises NotFound if no layer has that id.
        """
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        raise NotFound(f"No such layer: {layer_id}")

    def get_tileset_by_name(self, name: str) -> Tileset:
        """First tileset called ``name``; raises NotFound if none."""
        for tileset in self.tilesets:
            if tileset.name == name:
                return tileset
        raise NotFound(f"No such tileset: {name!r}")


# =============================================================================
# ASSEMBLY HELPERS
# =============================================================================

def _load_layer(elem: ET.Element) -> Layer:
    name = elem.get('name', '')
    try:
        return decode_layer(elem)
    except TmxError as e:
        raise LayerLoadError(name, e) from e


def _load_tileset(elem: ET.Element, acquirer: Acquirer) -> Tileset:
    source = elem.get('source')
    label = source or elem.get('name', '<embedded>')
    try:
        # firstgid belongs to the reference, never to the TSX document
        firstgid = int_attr(elem, 'firstgid', 0)

        if source:
            # ---------------------------------------------------------
            # EXTERNAL TILESET (TSX)
            # ---------------------------------------------------------
            try:
                data = acquirer.acquire(source)
            except TmxError:
                raise
            except Exception as e:
                # Custom acquirers may raise anything (KeyError, PermissionError...)
                raise ResourceAcquisitionFailure(source, str(e)) from e
            tileset = Tileset.from_bytes(data, source=source)
        else:
            # ---------------------------------------------------------
            # EMBEDDED TILESET
            # ---------------------------------------------------------
            tileset = Tileset.from_xml(elem)
    except TmxError as e:
        raise TilesetLoadError(label, e) from e

    logger.debug("Loaded tileset %r (firstgid=%d, %d tiles)", label, firstgid, tileset.tilecount)
    return tileset.with_firstgid(firstgid)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def load_map(filepath: Union[str, Path], acquirer: Optional[Acquirer] = None) -> TiledMap:
    """Shortcut for TiledMap.load()."""
    return TiledMap.load(filepath, acquirer=acquirer)


def load_tileset(filepath: Union[str, Path]) -> Tileset:
    """Shortcut for Tileset.load()."""
    return Tileset.load(filepath)
