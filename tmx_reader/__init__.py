"""
TMX Reader - decode Tiled maps (TMX) and tilesets (TSX)

Usage:
    from tmx_reader import load_map

    level = load_map("maps/level1.tmx")
    for layer in level.get_layers_by_name("Ground"):
        print(layer.get_tile_gid(0, 0))
"""

from .acquire import Acquirer, FileSystemAcquirer
from .errors import (
    CorruptPayload, DimensionMismatch, DocumentParseFailure, InvalidIntegerProperty,
    InvalidPayloadLength, LayerDataError, LayerLoadError, MalformedInteger, NotFound,
    PropertyTypeMismatch, ResourceAcquisitionFailure, TilesetLoadError, TmxError,
    UnknownOrientation, UnknownRenderOrder, UnsupportedCompression, UnsupportedEncoding,
)
from .layer import Layer, decode_layer_data, merge_layers
from .map_properties import (
    MapProperties, Orientation, RenderOrder, StaggerAxis, StaggerIndex, parse_color,
)
from .properties import (
    CustomProperties, CustomProperty, PropertyType, coerce_properties, raw_property,
)
from .tiled_map import TiledMap, load_map, load_tileset
from .tileset import Grid, Image, Tile, Tileset

__version__ = "1.0.0"
__all__ = [
    "Acquirer",
    "FileSystemAcquirer",
    "TiledMap",
    "MapProperties",
    "Orientation",
    "RenderOrder",
    "StaggerAxis",
    "StaggerIndex",
    "Layer",
    "Tileset",
    "Tile",
    "Image",
    "Grid",
    "CustomProperties",
    "CustomProperty",
    "PropertyType",
    "coerce_properties",
    "raw_property",
    "decode_layer_data",
    "merge_layers",
    "parse_color",
    "load_map",
    "load_tileset",
    "TmxError",
    "LayerDataError",
    "UnsupportedCompression",
    "UnsupportedEncoding",
    "MalformedInteger",
    "InvalidPayloadLength",
    "CorruptPayload",
    "InvalidIntegerProperty",
    "PropertyTypeMismatch",
    "UnknownOrientation",
    "UnknownRenderOrder",
    "DimensionMismatch",
    "NotFound",
    "DocumentParseFailure",
    "ResourceAcquisitionFailure",
    "LayerLoadError",
    "TilesetLoadError",
]
