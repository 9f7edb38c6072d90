"""
Entry points: read a whole TMX map (or a standalone TSX tileset).

=============================================================================
USAGE
=============================================================================

    from tmx_reader import parse_file, lookup_tileset_for_gid

    level = parse_file("level1.tmx")
    ground = level.get_layer_by_name("Ground")
    gid = ground.get_tile_gid(5, 10)
    tileset = lookup_tileset_for_gid(level, gid)

When a loader only has the bytes of a map (an asset pipeline, an archive)
but knows where the map logically lives, use parse_with_path() so that
external tilesets can still be found:

    level = parse_with_path(blob, "assets/maps/level1.tmx")

parse() with no path works for maps whose tilesets are all embedded.

=============================================================================
"""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .attributes import AttributeSchema, as_str, as_uint
from .cursor import TagCursor, close_tag, parse_tag
from .errors import MapFileNotFound, MapFileUnreadable
from .layers import parse_imagelayer, parse_layer
from .model import Color, Map, Orientation, Tileset
from .objects import parse_objectgroup
from .properties import parse_properties
from .tileset import parse_tileset_element, read_tileset_document

logger = logging.getLogger(__name__)

Source = Union[BinaryIO, bytes, str]
PathLike = Union[str, Path]

MAP_ATTRS = AttributeSchema(
    optionals=[("backgroundcolor", Color.parse)],
    required=[
        ("version", as_str),
        ("orientation", Orientation.parse),
        ("width", as_uint),
        ("height", as_uint),
        ("tilewidth", as_uint),
        ("tileheight", as_uint),
    ],
    error="map must have a version, width and height with correct types",
)


def _as_stream(source: Source) -> BinaryIO:
    """Accept raw document bytes/text as well as a binary file object."""
    if isinstance(source, str):
        return io.BytesIO(source.encode('utf-8'))
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return source


def _parse_map(cursor: TagCursor, attrs, map_path: Optional[Path]) -> Map:
    (background_color,), (version, orientation, width, height, tile_width, tile_height) = \
        MAP_ATTRS.extract(attrs)

    tilesets = []
    layers = []
    image_layers = []
    object_groups = []
    properties = {}
    # shared by layers, image layers and object groups, in document order
    layer_index = 0

    def on_tileset(attrs):
        tilesets.append(parse_tileset_element(cursor, attrs, map_path))

    def on_layer(attrs):
        nonlocal layer_index
        layers.append(parse_layer(cursor, attrs, width, layer_index))
        layer_index += 1

    def on_imagelayer(attrs):
        nonlocal layer_index
        image_layers.append(parse_imagelayer(cursor, attrs, layer_index))
        layer_index += 1

    def on_objectgroup(attrs):
        nonlocal layer_index
        object_groups.append(parse_objectgroup(cursor, attrs, layer_index))
        layer_index += 1

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    # <group>s are flattened: their layers join the map lists in document
    # order and the group's own properties are dropped
    layer_handlers = {
        "layer": on_layer,
        "imagelayer": on_imagelayer,
        "objectgroup": on_objectgroup,
    }

    def on_group(_attrs):
        parse_tag(cursor, "group", {
            **layer_handlers,
            "group": on_group,
            "properties": lambda _attrs: close_tag(cursor, "properties"),
        })

    parse_tag(cursor, "map", {
        **layer_handlers,
        "tileset": on_tileset,
        "group": on_group,
        "properties": on_properties,
    })

    logger.debug("Parsed %dx%d %s map: %d tilesets, %d layers",
                 width, height, orientation.value, len(tilesets), layer_index)

    return Map(
        version=version,
        orientation=orientation,
        width=width,
        height=height,
        tile_width=tile_width,
        tile_height=tile_height,
        tilesets=tuple(tilesets),
        layers=tuple(layers),
        image_layers=tuple(image_layers),
        object_groups=tuple(object_groups),
        properties=properties,
        background_color=background_color,
    )


def _open(path: Path) -> BinaryIO:
    try:
        return open(path, 'rb')
    except FileNotFoundError as e:
        raise MapFileNotFound(path) from e
    except OSError as e:
        raise MapFileUnreadable(path, e.strerror or str(e)) from e


def _parse_impl(source: Source, map_path: Optional[PathLike]) -> Map:
    cursor = TagCursor(_as_stream(source))
    root = cursor.find_root("map")
    return _parse_map(cursor, root.attrs, Path(map_path) if map_path is not None else None)


# =============================================================================
# PUBLIC API
# =============================================================================

def parse(source: Source) -> Map:
    """
    Parse a TMX document from a binary stream (or bytes/str).

    External tilesets cannot be resolved: there is no map location to
    resolve them against, so they raise ExternalResourceError.
    """
    return _parse_impl(source, None)


def parse_with_path(source: Source, path: PathLike) -> Map:
    """
    Parse a TMX document whose logical location is `path`.

    The stream is read as-is; `path` is only used to find external
    tilesets next to the map.
    """
    return _parse_impl(source, path)


def parse_file(path: PathLike) -> Map:
    """
    Load a TMX file from disk.

    Raises:
    -------
    MapFileNotFound : if the file does not exist
    MapFileUnreadable : if it exists but cannot be opened
    TmxError : any parse failure
    """
    path = Path(path)
    with _open(path) as stream:
        return _parse_impl(stream, path)


def parse_tileset(source: Source, first_gid: int = 1) -> Tileset:
    """
    Parse a standalone tileset document (.tsx).

    A .tsx has no firstgid of its own; pass the one the map uses, or 1
    if GIDs do not matter.
    """
    return read_tileset_document(_as_stream(source), first_gid)


def parse_tileset_file(path: PathLike, first_gid: int = 1) -> Tileset:
    """parse_tileset() for a file on disk."""
    path = Path(path)
    with _open(path) as stream:
        return read_tileset_document(stream, first_gid, source=path.name)


def lookup_tileset_for_gid(tiled_map: Map, gid: int) -> Optional[Tileset]:
    """Tileset owning `gid` (see Map.get_tileset_by_gid), or None."""
    return tiled_map.get_tileset_by_gid(gid)
