"""
TMX Reader - parse Tiled maps into an immutable document model

Requisitos:
    pip install numpy zstandard
"""

from .errors import (
    TmxError,
    MalformedAttributes,
    UnsupportedEncoding,
    DecompressionFailure,
    EncodingFailure,
    TokenizerFailure,
    PrematureEnd,
    ExternalResourceError,
    MapFileNotFound,
    MapFileUnreadable,
    PropertyError,
    UnknownPropertyType,
    PropertyValueParseFailure,
)
from .gid import DecodedGid, decode_gid, encode_gid
from .model import (
    Color, Orientation, PropertyType, PropertyValue,
    Image, Frame, Tile, Tileset,
    Rect, Ellipse, Polyline, Polygon, Object, ObjectGroup,
    Layer, ImageLayer, Map,
)
from .parser import (
    parse, parse_with_path, parse_file,
    parse_tileset, parse_tileset_file,
    lookup_tileset_for_gid,
)

__version__ = "0.1.0"
__all__ = [
    "parse",
    "parse_with_path",
    "parse_file",
    "parse_tileset",
    "parse_tileset_file",
    "lookup_tileset_for_gid",
    "decode_gid",
    "encode_gid",
    "DecodedGid",
    "Color",
    "Orientation",
    "PropertyType",
    "PropertyValue",
    "Image",
    "Frame",
    "Tile",
    "Tileset",
    "Rect",
    "Ellipse",
    "Polyline",
    "Polygon",
    "Object",
    "ObjectGroup",
    "Layer",
    "ImageLayer",
    "Map",
    "TmxError",
    "MalformedAttributes",
    "UnsupportedEncoding",
    "DecompressionFailure",
    "EncodingFailure",
    "TokenizerFailure",
    "PrematureEnd",
    "ExternalResourceError",
    "MapFileNotFound",
    "MapFileUnreadable",
    "PropertyError",
    "UnknownPropertyType",
    "PropertyValueParseFailure",
]
