import io

import pytest

from tmx_reader.cursor import TagCursor
from tmx_reader.errors import (
    MalformedAttributes, PropertyValueParseFailure, UnknownPropertyType,
)
from tmx_reader.model import PropertyType, PropertyValue
from tmx_reader.properties import coerce_property, parse_properties


@pytest.mark.parametrize("kind, raw, expected", [
    ("int", "123", PropertyValue(PropertyType.INT, 123)),
    ("int", "-7", PropertyValue(PropertyType.INT, -7)),
    ("float", "2.5", PropertyValue(PropertyType.FLOAT, 2.5)),
    ("bool", "true", PropertyValue(PropertyType.BOOL, True)),
    ("bool", "false", PropertyValue(PropertyType.BOOL, False)),
    ("color", "#112233", PropertyValue(PropertyType.COLOR, 0x112233)),
    ("color", "#80112233", PropertyValue(PropertyType.COLOR, 0x112233)),
    ("string", " spaced ", PropertyValue(PropertyType.STRING, " spaced ")),
])
def test_coerce_property(kind, raw, expected):
    assert coerce_property(kind, raw) == expected


@pytest.mark.parametrize("kind, raw", [
    ("int", "1.5"),
    ("float", "fast"),
    ("bool", "True"),
    ("bool", "1"),
    ("color", "112233"),
    ("color", "#11223"),
    ("color", "#gg2233"),
    ("color", "X112233"),
    ("color", "#1122334"),
])
def test_bad_values(kind, raw):
    with pytest.raises(PropertyValueParseFailure):
        coerce_property(kind, raw)


def test_unknown_type_names_the_type():
    with pytest.raises(UnknownPropertyType, match='"bogus"') as excinfo:
        coerce_property("bogus", "x")
    assert excinfo.value.property_type == "bogus"


def read(document: bytes):
    cursor = TagCursor(io.BytesIO(document))
    cursor.find_root("properties")
    return parse_properties(cursor)


def test_parse_properties_defaults_to_string():
    properties = read(
        b'<properties>'
        b'<property name="label" value="door"/>'
        b'<property name="speed" type="float" value="1.5"/>'
        b'</properties>')
    assert properties == {
        "label": PropertyValue(PropertyType.STRING, "door"),
        "speed": PropertyValue(PropertyType.FLOAT, 1.5),
    }


def test_property_without_value_is_malformed():
    with pytest.raises(MalformedAttributes, match="name and a value"):
        read(b'<properties><property name="label"/></properties>')
