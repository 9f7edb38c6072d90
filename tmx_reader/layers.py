"""
Tile layers and image layers.

    <layer name="Ground" width="100" height="100" opacity="0.8">
        <properties>...</properties>
        <data encoding="csv">...</data>
    </layer>

    <imagelayer name="Sky" offsetx="0" offsety="-32">
        <image source="sky.png" width="640" height="480"/>
    </imagelayer>
"""

from .attributes import AttributeSchema, as_flag, as_float, as_str, as_uint
from .cursor import TagCursor, parse_tag
from .model import ImageLayer, Layer
from .properties import parse_properties
from .tile_data import parse_data
from .tileset import parse_image

LAYER_ATTRS = AttributeSchema(
    optionals=[
        ("opacity", as_float),
        ("visible", as_flag),
        ("width", as_uint),
    ],
    required=[("name", as_str)],
    error="layer must have a name",
)

IMAGELAYER_ATTRS = AttributeSchema(
    optionals=[
        ("opacity", as_float),
        ("visible", as_flag),
        ("offsetx", as_float),
        ("offsety", as_float),
    ],
    required=[("name", as_str)],
    error="layer must have a name",
)


def parse_layer(cursor: TagCursor, attrs, map_width: int, layer_index: int) -> Layer:
    """
    Read a <layer>.

    Rows of binary tile data are `width` tiles long: the layer's own width
    attribute when present, the map's width otherwise.
    """
    (opacity, visible, width), (name,) = LAYER_ATTRS.extract(attrs)
    width = width if width is not None else map_width

    tiles = ()
    properties = {}

    def on_data(attrs):
        nonlocal tiles
        tiles = parse_data(cursor, attrs, width)

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    parse_tag(cursor, "layer", {
        "data": on_data,
        "properties": on_properties,
    })

    return Layer(
        name=name,
        opacity=opacity if opacity is not None else 1.0,
        visible=visible if visible is not None else True,
        tiles=tiles,
        properties=properties,
        layer_index=layer_index,
    )


def parse_imagelayer(cursor: TagCursor, attrs, layer_index: int) -> ImageLayer:
    (opacity, visible, offset_x, offset_y), (name,) = IMAGELAYER_ATTRS.extract(attrs)

    image = None
    properties = {}

    def on_image(attrs):
        nonlocal image
        image = parse_image(cursor, attrs)

    def on_properties(_attrs):
        nonlocal properties
        properties = parse_properties(cursor)

    parse_tag(cursor, "imagelayer", {
        "image": on_image,
        "properties": on_properties,
    })

    return ImageLayer(
        name=name,
        opacity=opacity if opacity is not None else 1.0,
        visible=visible if visible is not None else True,
        offset_x=offset_x if offset_x is not None else 0.0,
        offset_y=offset_y if offset_y is not None else 0.0,
        image=image,
        properties=properties,
        layer_index=layer_index,
    )
