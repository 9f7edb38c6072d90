import io

import pytest

from tmx_reader.cursor import TagCursor, close_tag, local_name, parse_tag, read_text
from tmx_reader.errors import PrematureEnd, TokenizerFailure


def cursor_at(document: bytes, root: str) -> TagCursor:
    cursor = TagCursor(io.BytesIO(document))
    cursor.find_root(root)
    return cursor


def test_dispatches_known_children_and_skips_unknown():
    cursor = cursor_at(
        b'<root><item a="1"/><unknown><item a="x"/></unknown><item a="2"/></root>', "root")
    seen = []

    def on_item(attrs):
        seen.append(dict(attrs)["a"])
        close_tag(cursor, "item")

    parse_tag(cursor, "root", {"item": on_item})
    # handlers are called for every start tag with a registered name,
    # including ones nested inside skipped elements
    assert seen == ["1", "x", "2"]


def test_unknown_child_with_scope_name_does_not_close_scope():
    cursor = cursor_at(
        b'<root><unknown><root/></unknown><item a="after"/></root>', "root")
    seen = []

    def on_item(attrs):
        seen.append(dict(attrs)["a"])
        close_tag(cursor, "item")

    parse_tag(cursor, "root", {"item": on_item})
    assert seen == ["after"]


def test_handler_errors_propagate():
    cursor = cursor_at(b'<root><item/></root>', "root")

    def on_item(attrs):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        parse_tag(cursor, "root", {"item": on_item})


def test_read_text_returns_character_data():
    cursor = cursor_at(b'<layer><data encoding="csv">\n1,2\n</data></layer>', "layer")
    texts = []
    parse_tag(cursor, "layer", {"data": lambda attrs: texts.append(read_text(cursor, "data"))})
    assert texts == ["\n1,2\n"]


def test_namespaced_names_are_local():
    assert local_name("{http://example.com/ns}map") == "map"
    cursor = TagCursor(io.BytesIO(b'<t:map xmlns:t="urn:x" t:version="1"/>'))
    token = cursor.find_root("map")
    assert token.attrs == [("version", "1")]


def test_missing_root_is_premature_end():
    cursor = TagCursor(io.BytesIO(b'<tileset name="x"/>'))
    with pytest.raises(PrematureEnd):
        cursor.find_root("map")


def test_truncated_document_is_premature_end():
    cursor = cursor_at(b'<root><item>', "root")
    with pytest.raises(PrematureEnd):
        parse_tag(cursor, "root", {})


def test_malformed_markup_is_tokenizer_failure():
    cursor = TagCursor(io.BytesIO(b'<root><item></root>'))
    with pytest.raises(TokenizerFailure):
        for _ in cursor:
            pass
