"""
Tile layers: payload decoding, the Layer entity and layer merging

=============================================================================
DATA ENCODINGS
=============================================================================

The grid of a tile layer lives in its <data> element:

1. CSV:
   <data encoding="csv">
   1,2,3,4,
   5,6,7,8
   </data>
   One row per line. The comma Tiled leaves at the end of a row is dropped,
   then the rows are joined and split on commas.

2. Base64:
   <data encoding="base64" compression="gzip">
   H4sIAAAAAAAA/2NkYGBgAmIWKM0GpQEAKWY9UhAAAAA=
   </data>
   Binary little-endian uint32 words, one per cell, optionally gzipped.

3. Raw (no encoding attribute, bytes supplied by the caller):
   The payload already is the little-endian word stream, optionally gzipped.

4. XML (deprecated):
   <data><tile gid="1"/><tile gid="2"/>...</data>
   Only handled by decode_layer(), since it needs the element tree.

=============================================================================
COMPRESSION
=============================================================================

Only gzip is supported. A Base64 payload may be given either way round:
gzip bytes that wrap Base64 text, or Base64 text that wraps gzip bytes (the
layout Tiled writes). A gzip stream starts with 0x1f 0x8b, which can never
be Base64 text, so the first two bytes tell the layouts apart.

=============================================================================
CELL ORDER
=============================================================================

Tiles are stored left-to-right, top-to-bottom:

    index = y * width + x

GID 0 means "no tile". merge_layers() relies on that to let the upper layer
show through only where it actually paints something.

=============================================================================
"""

import array
import base64
import binascii
import gzip
import logging
import re
import struct
import xml.etree.ElementTree as ET
import zlib
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .attributes import float_attr, int_attr
from .errors import (
    CorruptPayload, DimensionMismatch, DocumentParseFailure, InvalidPayloadLength,
    MalformedInteger, UnsupportedCompression, UnsupportedEncoding,
)
from .properties import CustomProperties, parse_properties

logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
UINT32_MAX = 0xFFFFFFFF

_DIGITS_RE = re.compile(r'[0-9]+')


# =============================================================================
# PAYLOAD DECODING
# =============================================================================

def _gunzip(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise CorruptPayload(f"Error decompressing gzip data: {e}") from e


def _decode_csv(data: bytes) -> array.array:
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise CorruptPayload(f"CSV data is not valid UTF-8: {e}") from e

    # Tiled ends every row but the last with a comma; plain CSV does not
    rows = []
    for line in text.replace('\r', '').split('\n'):
        if not line:
            continue
        rows.append(line[:-1] if line.endswith(',') else line)

    tiles = array.array('I')
    if not rows:
        return tiles
    for token in ','.join(rows).split(','):
        if not _DIGITS_RE.fullmatch(token):
            raise MalformedInteger(token)
        gid = int(token)
        if gid > UINT32_MAX:
            raise MalformedInteger(token)
        tiles.append(gid)
    return tiles


def _words_le(raw: bytes) -> array.array:
    # Each tile is 4 bytes, little-endian regardless of host byte order
    if len(raw) % 4 != 0:
        raise InvalidPayloadLength(len(raw))
    count = len(raw) // 4
    return array.array('I', struct.unpack(f'<{count}I', raw))


def _b64decode(text: bytes) -> bytes:
    # Tiled wraps the text in newlines and indentation
    compact = b''.join(text.split())
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise CorruptPayload(f"Error decoding base64 data: {e}") from e


def decode_layer_data(encoding: Optional[str], compression: Optional[str],
                      payload: bytes) -> array.array:
    """
    Decode a <data> payload into a flat array of uint32 GIDs.

    Parameters:
    -----------
    encoding : str or None
        'csv', 'base64', or ''/None for a raw little-endian word stream
    compression : str or None
        'gzip', or ''/None for uncompressed
    payload : bytes
        The element text (or raw bytes)

    Returns:
    --------
    array.array('I') : GIDs in cell order. No width/height check is made here.

    Raises:
    -------
    UnsupportedCompression, UnsupportedEncoding, MalformedInteger,
    InvalidPayloadLength, CorruptPayload
    """
    compression = compression or ''
    encoding = encoding or ''

    if compression not in ('', 'gzip'):
        raise UnsupportedCompression(compression)
    if encoding not in ('', 'csv', 'base64'):
        raise UnsupportedEncoding(encoding)

    # -------------------------------------------------------------------------
    # STEP 1: DECOMPRESS
    # -------------------------------------------------------------------------
    # Base64 text that wraps a gzip stream is inflated after step 2 instead
    inflate_later = False
    if compression == 'gzip':
        if encoding == 'base64' and not payload.startswith(GZIP_MAGIC):
            inflate_later = True
        else:
            payload = _gunzip(payload)

    # -------------------------------------------------------------------------
    # STEP 2: DECODE
    # -------------------------------------------------------------------------
    if encoding == 'csv':
        return _decode_csv(payload)

    if encoding == 'base64':
        raw = _b64decode(payload)
        if inflate_later:
            raw = _gunzip(raw)
        return _words_le(raw)

    return _words_le(payload)


# =============================================================================
# LAYER
# =============================================================================

@dataclass(frozen=True)
class Layer:
    """
    Tile layer - a grid of GIDs plus its custom properties.

    ``id`` is assigned by the map author and unique within a map; ``name``
    is not unique. ``data`` always holds exactly width * height GIDs for
    layers produced by a map load.
    """
    id: int                                          # Unique layer ID
    name: str                                        # Layer name
    width: int                                       # Width in tiles
    height: int                                      # Height in tiles
    data: array.array = field(default_factory=lambda: array.array('I'))
    properties: CustomProperties = field(default_factory=CustomProperties)
    visible: bool = True                             # Is layer rendered?
    opacity: float = 1.0                             # Transparency
    offsetx: float = 0                               # X pixel offset
    offsety: float = 0                               # Y pixel offset

    @property
    def size(self):
        return self.width, self.height

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get GID at tile position (x, y).

        Raises IndexError outside the layer, instead of wrapping around
        the way a plain flat index would.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Tile ({x}, {y}) outside {self.width}x{self.height} layer")
        return self.data[y * self.width + x]

    def as_grid(self) -> np.ndarray:
        """
        Read-only 2-D view of the layer, indexed as grid[y, x].

        Shape is (height, width), dtype uint32.
        """
        grid = np.array(self.data, dtype=np.uint32).reshape(self.height, self.width)
        grid.flags.writeable = False
        return grid

    def merge(self, other: 'Layer') -> 'Layer':
        """Overlay ``other`` on top of this layer. See merge_layers()."""
        return merge_layers(self, other)


def merge_layers(a: Layer, b: Layer) -> Layer:
    """
    Combine two same-sized layers cell by cell.

    Wherever ``b`` has a tile (GID != 0) it wins, otherwise the cell from
    ``a`` shows through:

        a:      1 0 3        b:      0 5 0        result: 1 5 3

    The result is a new layer with no custom properties, named
    "<a.name> + <b.name>". Neither input is modified.

    Raises:
    -------
    DimensionMismatch : if the layers differ in width or height
    DocumentParseFailure : if either layer holds other than width x height GIDs
    """
    if a.size != b.size:
        raise DimensionMismatch(a.size, b.size)
    cells = a.width * a.height
    for layer in (a, b):
        if len(layer.data) != cells:
            raise DocumentParseFailure(
                f"layer {layer.name!r} has {len(layer.data)} tiles, expected {a.width}x{a.height}={cells}"
            )

    below = np.array(a.data, dtype=np.uint32)
    above = np.array(b.data, dtype=np.uint32)
    merged = np.where(above != 0, above, below)

    return Layer(
        id=0,
        name=f"{a.name} + {b.name}",
        width=a.width,
        height=a.height,
        data=array.array('I', merged.tolist()),
        properties=CustomProperties(),
    )


# =============================================================================
# XML
# =============================================================================

def _xml_tile_gids(data_elem: ET.Element) -> array.array:
    # Deprecated format: one <tile gid="..."/> element per cell
    tiles = array.array('I')
    for tile_elem in data_elem.findall('tile'):
        gid = int_attr(tile_elem, 'gid', 0)
        if not 0 <= gid <= UINT32_MAX:
            raise MalformedInteger(str(gid))
        tiles.append(gid)
    return tiles


def decode_layer(elem: ET.Element) -> Layer:
    """
    Build a Layer from a <layer> element.

    Decodes the data payload, checks it against width x height and coerces
    the layer's custom properties. Errors propagate unwrapped; the map
    assembler adds the layer name.
    """
    width = int_attr(elem, 'width', 0)
    height = int_attr(elem, 'height', 0)

    data_elem = elem.find('data')
    if data_elem is None:
        raise DocumentParseFailure("layer has no <data> element")

    encoding = data_elem.get('encoding', '')
    compression = data_elem.get('compression', '')

    if not encoding and data_elem.find('tile') is not None:
        tiles = _xml_tile_gids(data_elem)
    else:
        payload = (data_elem.text or '').encode('utf-8')
        tiles = decode_layer_data(encoding, compression, payload)

    if len(tiles) != width * height:
        raise DocumentParseFailure(
            f"layer data has {len(tiles)} tiles, expected {width}x{height}={width * height}"
        )

    layer = Layer(
        id=int_attr(elem, 'id', 0),
        name=elem.get('name', ''),
        width=width,
        height=height,
        data=tiles,
        properties=parse_properties(elem),
        # '1' is default for visible (absent means visible)
        visible=elem.get('visible', '1') == '1',
        opacity=float_attr(elem, 'opacity', 1.0),
        offsetx=float_attr(elem, 'offsetx', 0),
        offsety=float_attr(elem, 'offsety', 0),
    )
    logger.debug("Decoded layer %r: %dx%d, encoding=%r, compression=%r",
                 layer.name, width, height, encoding, compression)
    return layer
