"""
Exception hierarchy for TMX/TSX loading

Every failure raised by this package derives from TmxError, so callers can
catch one type at the load boundary. Loads are all-or-nothing: the first
failure in document order aborts the load.

When the map assembler fails inside a layer or an external tileset it raises
LayerLoadError / TilesetLoadError *from* the underlying error, so the
original cause stays reachable through ``__cause__``.
"""

from typing import Tuple


class TmxError(Exception):
    """Base class for all tmx_reader errors."""


# =============================================================================
# LAYER DATA
# =============================================================================

class LayerDataError(TmxError):
    """Base class for failures while decoding a <data> payload."""


class UnsupportedCompression(LayerDataError):
    def __init__(self, compression: str):
        super().__init__(f"Unsupported compression format: {compression!r}")
        self.compression = compression


class UnsupportedEncoding(LayerDataError):
    def __init__(self, encoding: str):
        super().__init__(f"Unsupported encoding: {encoding!r}")
        self.encoding = encoding


class MalformedInteger(LayerDataError):
    def __init__(self, token: str):
        super().__init__(f"Error parsing data: {token!r} is not a 32-bit unsigned integer")
        self.token = token


class InvalidPayloadLength(LayerDataError):
    def __init__(self, length: int):
        super().__init__(f"Invalid base64 data length: {length} (not a multiple of 4)")
        self.length = length


class CorruptPayload(LayerDataError):
    """Payload bytes could not be base64-decoded or gunzipped."""


# =============================================================================
# PROPERTIES
# =============================================================================

class InvalidIntegerProperty(TmxError):
    def __init__(self, name: str, value: str):
        super().__init__(f"Property {name!r}: {value!r} is not a 32-bit integer")
        self.name = name
        self.value = value


class PropertyTypeMismatch(TmxError):
    def __init__(self, name: str, actual: str, wanted: str):
        super().__init__(f"Property {name!r} is type {actual}, not {wanted}")
        self.name = name
        self.actual = actual
        self.wanted = wanted


# =============================================================================
# MAP ATTRIBUTES
# =============================================================================

class UnknownOrientation(TmxError):
    def __init__(self, value: str):
        super().__init__(f"Unknown map orientation: {value!r}")
        self.value = value


class UnknownRenderOrder(TmxError):
    def __init__(self, value: str):
        super().__init__(f"Unknown render order: {value!r}")
        self.value = value


# =============================================================================
# COMPOSITION / LOOKUP
# =============================================================================

class DimensionMismatch(TmxError):
    def __init__(self, first: Tuple[int, int], second: Tuple[int, int]):
        super().__init__(
            f"Layer dimension mismatch: {first[0]}x{first[1]} vs {second[0]}x{second[1]}"
        )
        self.first = first
        self.second = second


class NotFound(TmxError, LookupError):
    """Requested layer, tileset or tile does not exist."""


# =============================================================================
# DOCUMENT / RESOURCES
# =============================================================================

class DocumentParseFailure(TmxError):
    """Malformed XML or an attribute that cannot be converted."""


class ResourceAcquisitionFailure(TmxError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to read {path!r}: {reason}")
        self.path = path


# =============================================================================
# CONTEXT WRAPPERS
# =============================================================================

class LayerLoadError(TmxError):
    def __init__(self, layer_name: str, cause: Exception):
        super().__init__(f"Unable to decode layer {layer_name!r}: {cause}")
        self.layer_name = layer_name


class TilesetLoadError(TmxError):
    def __init__(self, source: str, cause: Exception):
        super().__init__(f"Unable to load tileset {source!r}: {cause}")
        self.source = source
