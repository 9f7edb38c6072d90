"""
Object layers: <objectgroup> and the <object>s inside it.

    <objectgroup name="Collisions" color="#ff0000">
        <object id="1" x="100" y="200" width="32" height="32"/>
        <object id="2" x="10" y="10" width="20" height="40"><ellipse/></object>
        <object id="3" x="0" y="0"><polygon points="0,0 32,0 32,32"/></object>
    </objectgroup>

An object without a shape child is a rectangle of its width/height. The
same parser reads the collision shapes embedded in tileset <tile>s; those
groups have no layer_index.
"""

from typing import List, Optional, Tuple

from .attributes import AttributeSchema, as_flag, as_float, as_str, as_uint
from .cursor import TagCursor, close_tag, parse_tag
from .errors import MalformedAttributes
from .model import Color, Ellipse, Object, ObjectGroup, Point, Polygon, Polyline, Rect
from .properties import parse_properties

OBJECTGROUP_ATTRS = AttributeSchema(
    optionals=[
        ("opacity", as_float),
        ("visible", as_flag),
        ("color", Color.parse),
        ("name", as_str),
    ],
)

OBJECT_ATTRS = AttributeSchema(
    optionals=[
        ("id", as_uint),
        ("gid", as_uint),
        ("name", as_str),
        ("type", as_str),
        ("class", as_str),
        ("width", as_float),
        ("height", as_float),
        ("visible", as_flag),
        ("rotation", as_float),
    ],
    required=[("x", as_float), ("y", as_float)],
    error="objects must have an x and a y number",
)

POLYLINE_ATTRS = AttributeSchema(
    required=[("points", as_str)],
    error="A polyline must have points",
)

POLYGON_ATTRS = AttributeSchema(
    required=[("points", as_str)],
    error="A polygon must have points",
)


def parse_points(text: str) -> Tuple[Point, ...]:
    """
    Parse Tiled's point list: "x1,y1 x2,y2 ...".

    Raises MalformedAttributes if a pair is incomplete or not numeric.
    """
    points: List[Point] = []
    for pair in text.split():
        coords = pair.split(',')
        if len(coords) != 2:
            raise MalformedAttributes(
                "one of a polyline's points does not have an x and y coordinate")
        x, y = as_float(coords[0]), as_float(coords[1])
        if x is None or y is None:
            raise MalformedAttributes(
                "one of a polyline's points does not have numeric coordinates")
        points.append((x, y))
    return tuple(points)


def parse_object(cursor: TagCursor, attrs) -> Object:
    (obj_id, gid, name, obj_type, obj_class, width, height, visible, rotation), (x, y) = \
        OBJECT_ATTRS.extract(attrs)
    width = width or 0.0
    height = height or 0.0

    shape = None
    properties = {}

    def on_ellipse(_attrs):
        nonlocal shape
        shape = Ellipse(width, height)
        close_tag(cursor, "ellipse")

    def on_polyline(attrs):
        nonlocal shape
        _, (points,) = POLYLINE_ATTRS.extract(attrs)
        shape = Polyline(parse_points(points))
        close_tag(cursor, "polyline")

    def on_polygon(attrs):
        nonlocal shape
        _, (points,) = POLYGON_ATTRS.extract(attrs)
        shape = Polygon(parse_points(points))
        close_tag(cursor, "polygon")

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    parse_tag(cursor, "object", {
        "ellipse": on_ellipse,
        "polyline": on_polyline,
        "polygon": on_polygon,
        "properties": on_properties,
    })

    # Tiled 1.9 renamed "type" to "class"
    if obj_type is None:
        obj_type = obj_class

    return Object(
        id=obj_id or 0,
        gid=gid or 0,
        name=name or "",
        type=obj_type or "",
        x=x,
        y=y,
        rotation=rotation if rotation is not None else 0.0,
        visible=visible if visible is not None else True,
        shape=shape if shape is not None else Rect(width, height),
        properties=properties,
    )


def parse_objectgroup(cursor: TagCursor, attrs, layer_index: Optional[int]) -> ObjectGroup:
    """
    Read an <objectgroup>.

    Parameters:
    -----------
    layer_index : int or None
        Position among the map's layers, or None for a tile's collision group
    """
    (opacity, visible, color, name), _ = OBJECTGROUP_ATTRS.extract(attrs)

    objects = []
    properties = {}

    def on_object(attrs):
        objects.append(parse_object(cursor, attrs))

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    parse_tag(cursor, "objectgroup", {
        "object": on_object,
        "properties": on_properties,
    })

    return ObjectGroup(
        name=name or "",
        opacity=opacity if opacity is not None else 1.0,
        visible=visible if visible is not None else True,
        color=color,
        objects=tuple(objects),
        layer_index=layer_index,
        properties=properties,
    )
