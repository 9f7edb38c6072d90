"""
Tilesets, their tiles, and external .tsx resolution.

=============================================================================
EMBEDDED vs EXTERNAL TILESETS
=============================================================================

EMBEDDED: the tileset is written inside the TMX file

    <tileset firstgid="1" name="terrain" tilewidth="32" tileheight="32">
        <image source="terrain.png" width="256" height="256"/>
        <tile id="3"><properties>...</properties></tile>
    </tileset>

EXTERNAL: the TMX only holds a reference

    <tileset firstgid="1" source="terrain.tsx"/>

    and terrain.tsx holds the definition, without firstgid:

    <tileset name="terrain" tilewidth="32" tileheight="32">...</tileset>

The same .tsx can be shared by many maps at different firstgids, so the
firstgid always comes from the referencing map.

=============================================================================
RESOLUTION
=============================================================================

parse_tileset_element() first tries the embedded attributes. Only if
those are missing does it treat the element as a reference. The .tsx
path is relative to the directory of the map, so a reference can only be
followed when the map's own path is known.

=============================================================================
"""

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from .attributes import AttributeSchema, as_float, as_str, as_uint
from .cursor import TagCursor, close_tag, parse_tag
from .errors import ExternalResourceError, MalformedAttributes
from .gid import decode_gid
from .model import Color, Frame, Image, Tile, Tileset
from .objects import parse_objectgroup
from .properties import parse_properties

logger = logging.getLogger(__name__)

_TILESET_ERROR = "tileset must have a firstgid, name tile width and height with correct types"

IMAGE_ATTRS = AttributeSchema(
    optionals=[("trans", Color.parse)],
    required=[("source", as_str), ("width", as_uint), ("height", as_uint)],
    error="image must have a source, width and height with correct types",
)

FRAME_ATTRS = AttributeSchema(
    required=[("tileid", as_uint), ("duration", as_uint)],
    error="A frame must have tileid and duration",
)

TILE_ATTRS = AttributeSchema(
    optionals=[("type", as_str), ("class", as_str), ("probability", as_float)],
    required=[("id", as_uint)],
    error="tile must have an id with the correct type",
)

_TILESET_OPTIONALS = [
    ("spacing", as_uint),
    ("margin", as_uint),
    ("tilecount", as_uint),
    ("columns", as_uint),
]

EMBEDDED_TILESET_ATTRS = AttributeSchema(
    optionals=_TILESET_OPTIONALS,
    required=[
        ("firstgid", as_uint),
        ("name", as_str),
        ("tilewidth", as_uint),
        ("tileheight", as_uint),
    ],
    error=_TILESET_ERROR,
)

REFERENCE_TILESET_ATTRS = AttributeSchema(
    required=[("firstgid", as_uint), ("source", as_str)],
    error="tileset must either be embedded (firstgid, name, tilewidth, tileheight) "
          "or reference a file (firstgid, source)",
)

EXTERNAL_TILESET_ATTRS = AttributeSchema(
    optionals=_TILESET_OPTIONALS,
    required=[("name", as_str), ("tilewidth", as_uint), ("tileheight", as_uint)],
    error=_TILESET_ERROR,
)


# =============================================================================
# IMAGES, FRAMES, TILES
# =============================================================================

def parse_image(cursor: TagCursor, attrs) -> Image:
    (trans,), (source, width, height) = IMAGE_ATTRS.extract(attrs)
    close_tag(cursor, "image")
    return Image(source=source, width=width, height=height, transparent_color=trans)


def parse_animation(cursor: TagCursor) -> tuple:
    frames: List[Frame] = []

    def on_frame(attrs):
        _, (tile_id, duration) = FRAME_ATTRS.extract(attrs)
        frames.append(Frame(tile_id=tile_id, duration=duration))
        close_tag(cursor, "frame")

    parse_tag(cursor, "animation", {"frame": on_frame})
    return tuple(frames)


def parse_tile(cursor: TagCursor, attrs) -> Tile:
    """
    Read a tileset <tile>.

    The id goes through the GID codec like a layer value would. Tiled
    never sets flip bits on tileset ids, so flip_h/flip_v are normally
    False here.
    """
    (tile_type, tile_class, probability), (raw_id,) = TILE_ATTRS.extract(attrs)
    decoded = decode_gid(raw_id)

    images = []
    properties = {}
    objectgroup = None
    animation = None

    def on_image(attrs):
        images.append(parse_image(cursor, attrs))

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    def on_objectgroup(attrs):
        nonlocal objectgroup
        objectgroup = parse_objectgroup(cursor, attrs, None)

    def on_animation(_attrs):
        nonlocal animation
        animation = parse_animation(cursor)

    parse_tag(cursor, "tile", {
        "image": on_image,
        "properties": on_properties,
        "objectgroup": on_objectgroup,
        "animation": on_animation,
    })

    return Tile(
        id=decoded.id,
        flip_h=decoded.flip_h,
        flip_v=decoded.flip_v,
        images=tuple(images),
        properties=properties,
        objectgroup=objectgroup,
        animation=animation,
        tile_type=tile_type if tile_type is not None else tile_class,
        probability=probability if probability is not None else 1.0,
    )


# =============================================================================
# TILESETS
# =============================================================================

def _parse_tileset_body(cursor: TagCursor, first_gid: int, name: str, tile_width: int,
                        tile_height: int, optionals, source: Optional[str] = None) -> Tileset:
    """Children shared by embedded and external tilesets."""
    spacing, margin, tilecount, columns = optionals

    images = []
    tiles = []
    properties = {}

    def on_image(attrs):
        images.append(parse_image(cursor, attrs))

    def on_tile(attrs):
        tiles.append(parse_tile(cursor, attrs))

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    def skip(name):
        return lambda _attrs: close_tag(cursor, name)

    # wang sets and terrains carry <properties> of their own
    parse_tag(cursor, "tileset", {
        "image": on_image,
        "tile": on_tile,
        "properties": on_properties,
        "wangsets": skip("wangsets"),
        "terraintypes": skip("terraintypes"),
    })

    return Tileset(
        first_gid=first_gid,
        name=name,
        tile_width=tile_width,
        tile_height=tile_height,
        spacing=spacing or 0,
        margin=margin or 0,
        images=tuple(images),
        tiles=tuple(tiles),
        tilecount=tilecount,
        columns=columns,
        properties=properties,
        source=source,
    )


def read_tileset_document(stream: BinaryIO, first_gid: int,
                          source: Optional[str] = None) -> Tileset:
    """
    Parse a standalone tileset document (a .tsx file).

    Parameters:
    -----------
    stream : binary file-like
        The document; the caller owns and closes it
    first_gid : int
        First GID, supplied by the referencing map. Use 1 when GIDs do
        not matter.
    source : str, optional
        Reference as written in the map, kept on the Tileset
    """
    cursor = TagCursor(stream)
    root = cursor.find_root("tileset")
    optionals, (name, tile_width, tile_height) = EXTERNAL_TILESET_ATTRS.extract(root.attrs)
    return _parse_tileset_body(cursor, first_gid, name, tile_width, tile_height,
                               optionals, source=source)


def _resolve_reference(cursor: TagCursor, attrs, map_path: Optional[Path]) -> Tileset:
    _, (first_gid, source) = REFERENCE_TILESET_ATTRS.extract(attrs)
    close_tag(cursor, "tileset")

    if map_path is None:
        raise ExternalResourceError(
            "Maps with external tilesets must know their file location. "
            "See parse_with_path().", source)

    tileset_path = Path(map_path).parent / source
    logger.debug("Loading external tileset %s (firstgid=%d)", tileset_path, first_gid)
    try:
        with open(tileset_path, 'rb') as stream:
            return read_tileset_document(stream, first_gid, source=source)
    except OSError as e:
        raise ExternalResourceError(
            f"External tileset file not found: {tileset_path}", tileset_path) from e


def parse_tileset_element(cursor: TagCursor, attrs,
                          map_path: Optional[Union[str, Path]]) -> Tileset:
    """
    Read a <tileset> inside a map, embedded or referenced.

    Raises:
    -------
    MalformedAttributes : neither the embedded nor the reference
                          attributes are present
    ExternalResourceError : the reference cannot be followed
    """
    try:
        optionals, (first_gid, name, tile_width, tile_height) = \
            EMBEDDED_TILESET_ATTRS.extract(attrs)
    except MalformedAttributes:
        return _resolve_reference(cursor, attrs, Path(map_path) if map_path else None)

    return _parse_tileset_body(cursor, first_gid, name, tile_width, tile_height, optionals)
