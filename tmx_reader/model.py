"""
Document model produced by the TMX reader.

Every class here is a frozen dataclass. An entity is built in one pass
while its XML element is open and is never changed afterwards. Ownership
is a plain tree: no entity is shared between two parents and nothing
points back to its parent.

Sequences are tuples so whole maps compare with ==, which is how the
tests check that differently-encoded files describe the same map.
Entities that carry a properties dict are not hashable; plain values
(Color, Image, Frame, shapes, PropertyValue) are.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .gid import strip_flags


# =============================================================================
# BASIC VALUES
# =============================================================================

@dataclass(frozen=True)
class Color:
    """RGB color; TMX colors used by this model carry no alpha."""
    red: int
    green: int
    blue: int

    @classmethod
    def parse(cls, text: str) -> Optional['Color']:
        """
        Parse "RRGGBB" or "#RRGGBB".

        Returns None for anything else so the value can be used as an
        attribute coercer.
        """
        if text.startswith('#'):
            text = text[1:]
        if len(text) != 6:
            return None
        try:
            return cls(red=int(text[0:2], 16),
                       green=int(text[2:4], 16),
                       blue=int(text[4:6], 16))
        except ValueError:
            return None

    def to_int(self) -> int:
        """Packed 0xRRGGBB."""
        return (self.red << 16) | (self.green << 8) | self.blue


class Orientation(enum.Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"

    @classmethod
    def parse(cls, text: str) -> Optional['Orientation']:
        try:
            return cls(text)
        except ValueError:
            return None


class PropertyType(enum.Enum):
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"
    COLOR = "color"
    STRING = "string"


@dataclass(frozen=True)
class PropertyValue:
    """
    Typed custom property value.

    `value` is a bool, float, int, packed 0xRRGGBB int or str depending
    on `type`.
    """
    type: PropertyType
    value: Any


Properties = Dict[str, PropertyValue]


# =============================================================================
# IMAGES, TILES, TILESETS
# =============================================================================

@dataclass(frozen=True)
class Image:
    """
    Image reference.

    source is the path exactly as written in the file, relative to the
    TMX/TSX that contains it. Pixels of transparent_color are meant to be
    keyed out by the renderer.
    """
    source: str
    width: int
    height: int
    transparent_color: Optional[Color] = None


@dataclass(frozen=True)
class Frame:
    """One animation step: show tile `tile_id` of the same tileset for `duration` ms."""
    tile_id: int
    duration: int


@dataclass(frozen=True)
class Tile:
    """
    Metadata for one tile of a tileset.

    Tilesets only list tiles that have something extra to say (properties,
    an animation, a collision shape, their own image). A tile index with
    no Tile entry is normal.
    """
    id: int
    flip_h: bool = False
    flip_v: bool = False
    images: Tuple[Image, ...] = ()
    properties: Properties = field(default_factory=dict)
    objectgroup: Optional['ObjectGroup'] = None
    animation: Optional[Tuple[Frame, ...]] = None
    tile_type: Optional[str] = None
    probability: float = 1.0

    __hash__ = None


@dataclass(frozen=True)
class Tileset:
    """
    A collection of tiles occupying the GID range [first_gid, next first_gid).

    source is set when the tileset came from an external .tsx file. It is
    left out of equality: an inline tileset and the same tileset loaded
    through a reference compare equal.
    """
    first_gid: int
    name: str
    tile_width: int
    tile_height: int
    spacing: int = 0
    margin: int = 0
    images: Tuple[Image, ...] = ()
    tiles: Tuple[Tile, ...] = ()
    tilecount: Optional[int] = None
    columns: Optional[int] = None
    properties: Properties = field(default_factory=dict)
    source: Optional[str] = field(default=None, compare=False)

    __hash__ = None

    def get_tile(self, local_id: int) -> Optional[Tile]:
        """Metadata for a tileset-local id, or None if the tile has none."""
        for tile in self.tiles:
            if tile.id == local_id:
                return tile
        return None


# =============================================================================
# OBJECTS
# =============================================================================

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    width: float
    height: float


@dataclass(frozen=True)
class Ellipse:
    width: float
    height: float


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]


ObjectShape = Union[Rect, Ellipse, Polyline, Polygon]


@dataclass(frozen=True)
class Object:
    """
    A freeform object placed on an object layer.

    gid is 0 unless this is a tile object. Points of polylines and
    polygons are relative to (x, y).
    """
    id: int
    gid: int
    name: str
    type: str
    x: float
    y: float
    rotation: float = 0.0
    visible: bool = True
    shape: ObjectShape = Rect(0.0, 0.0)
    properties: Properties = field(default_factory=dict)

    __hash__ = None


@dataclass(frozen=True)
class ObjectGroup:
    """
    Object layer.

    layer_index is None when the group is the collision shape of a tile
    rather than a layer of the map.
    """
    name: str = ""
    opacity: float = 1.0
    visible: bool = True
    color: Optional[Color] = None
    objects: Tuple[Object, ...] = ()
    layer_index: Optional[int] = None
    properties: Properties = field(default_factory=dict)

    __hash__ = None


# =============================================================================
# LAYERS
# =============================================================================

@dataclass(frozen=True)
class Layer:
    """
    Tile layer.

    tiles[row][column] is the raw 32-bit value from the file: a GID with
    the flip flags still in its top bits (see gid.decode_gid).
    """
    name: str
    opacity: float = 1.0
    visible: bool = True
    tiles: Tuple[Tuple[int, ...], ...] = ()
    properties: Properties = field(default_factory=dict)
    layer_index: int = 0

    __hash__ = None

    @property
    def height(self) -> int:
        return len(self.tiles)

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    def get_tile_gid(self, x: int, y: int) -> int:
        """Raw value at column x, row y; 0 (empty) when out of bounds."""
        if 0 <= y < len(self.tiles) and 0 <= x < len(self.tiles[y]):
            return self.tiles[y][x]
        return 0


@dataclass(frozen=True)
class ImageLayer:
    name: str
    opacity: float = 1.0
    visible: bool = True
    offset_x: float = 0.0
    offset_y: float = 0.0
    image: Optional[Image] = None
    properties: Properties = field(default_factory=dict)
    layer_index: int = 0

    __hash__ = None


AnyLayer = Union[Layer, ImageLayer, ObjectGroup]


# =============================================================================
# MAP
# =============================================================================

@dataclass(frozen=True)
class Map:
    """
    Root of a parsed TMX file.

    layers, image_layers and object_groups are kept apart; their shared
    layer_index gives the drawing order across the three lists.
    """
    version: str
    orientation: Orientation
    width: int
    height: int
    tile_width: int
    tile_height: int
    tilesets: Tuple[Tileset, ...] = ()
    layers: Tuple[Layer, ...] = ()
    image_layers: Tuple[ImageLayer, ...] = ()
    object_groups: Tuple[ObjectGroup, ...] = ()
    properties: Properties = field(default_factory=dict)
    background_color: Optional[Color] = None

    __hash__ = None

    def get_tileset_by_gid(self, gid: int) -> Optional[Tileset]:
        """
        Find which tileset a GID belongs to.

        =======================================================================
        ALGORITHM
        =======================================================================

        A GID belongs to the tileset with the largest first_gid <= gid:

            Tileset A: first_gid=1
            Tileset B: first_gid=50
            Tileset C: first_gid=120

            GID 49:  -> A
            GID 50:  -> B
            GID 200: -> C
            GID 0:   -> None (empty cell)

        Tilesets are not assumed to be sorted, so every one is checked.
        Flip flags are ignored, so raw values from Layer.tiles work too.
        """
        gid = strip_flags(gid)
        best = None
        for tileset in self.tilesets:
            # >= so the last of several equal first_gids wins
            if tileset.first_gid <= gid and (best is None or tileset.first_gid >= best.first_gid):
                best = tileset
        return best

    def get_layer_by_name(self, name: str) -> Optional[AnyLayer]:
        """First layer of any kind called `name`, in drawing order."""
        for layer in self.all_layers():
            if layer.name == name:
                return layer
        return None

    def all_layers(self) -> Tuple[AnyLayer, ...]:
        """Every layer, image layer and object group in drawing order."""
        return tuple(sorted(
            [*self.layers, *self.image_layers, *self.object_groups],
            key=lambda layer: layer.layer_index))
