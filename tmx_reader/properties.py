"""
Custom properties: <properties><property name=".." type=".." value=".."/></properties>

Tiled lets users attach typed key/value metadata to maps, layers, tiles
and objects. Values are converted to Python types here:

    <property name="solid"  type="bool"  value="true"/>     -> BOOL True
    <property name="health" type="int"   value="100"/>      -> INT 100
    <property name="speed"  type="float" value="2.5"/>      -> FLOAT 2.5
    <property name="tint"   type="color" value="#112233"/>  -> COLOR 0x112233
    <property name="label"  value="A wooden door"/>         -> STRING (default)

Unlike most attributes, a bad property value is an error: the user typed
it on purpose, so silently dropping it would hide a broken map.
"""

from typing import Dict

from .attributes import AttributeSchema, as_str
from .cursor import TagCursor, close_tag, parse_tag
from .errors import PropertyValueParseFailure, UnknownPropertyType
from .model import Properties, PropertyType, PropertyValue

DEFAULT_PROPERTY_TYPE = "string"

_HEX_DIGITS = set("0123456789abcdefABCDEF")

PROPERTY_ATTRS = AttributeSchema(
    optionals=[("type", as_str)],
    required=[("name", as_str), ("value", as_str)],
    error="property must have a name and a value",
)


def _parse_bool(value: str) -> bool:
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"expected true or false, got {value!r}")


def _parse_color(value: str) -> int:
    """#RRGGBB, or Tiled's #AARRGGBB with the alpha byte dropped."""
    digits = value[1:]
    if not value.startswith('#') or len(digits) not in (6, 8) or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"expected #RRGGBB or #AARRGGBB, got {value!r}")
    return int(digits[-6:], 16)


_PARSERS = {
    PropertyType.BOOL: _parse_bool,
    PropertyType.FLOAT: float,
    PropertyType.INT: int,
    PropertyType.COLOR: _parse_color,
    PropertyType.STRING: str,
}


def coerce_property(property_type: str, value: str) -> PropertyValue:
    """
    Convert a raw property value to its declared type.

    Raises:
    -------
    UnknownPropertyType : property_type is not one of bool, float, int,
                          color or string
    PropertyValueParseFailure : value does not parse as property_type
    """
    try:
        kind = PropertyType(property_type)
    except ValueError:
        raise UnknownPropertyType(property_type) from None

    try:
        return PropertyValue(kind, _PARSERS[kind](value))
    except ValueError as e:
        raise PropertyValueParseFailure(
            f"Property value {value!r} is not a valid {property_type}: {e}") from e


def parse_properties(cursor: TagCursor) -> Properties:
    """Read a <properties> block; the cursor sits just after its start tag."""
    properties: Dict[str, PropertyValue] = {}

    def on_property(attrs):
        (property_type,), (name, value) = PROPERTY_ATTRS.extract(attrs)
        properties[name] = coerce_property(property_type or DEFAULT_PROPERTY_TYPE, value)
        close_tag(cursor, "property")

    parse_tag(cursor, "properties", {"property": on_property})
    return properties
