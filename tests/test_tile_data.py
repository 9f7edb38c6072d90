import base64
import gzip
import logging
import struct
import zlib

import pytest
import zstandard

from conftest import GRID, WIDTH, tile_bytes
from tmx_reader.errors import (
    DecompressionFailure, EncodingFailure, MalformedAttributes, UnsupportedEncoding,
)
from tmx_reader.tile_data import bytes_to_rows, decode_csv, decode_tile_data


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode('ascii')


def test_csv_rows_follow_lines():
    assert decode_csv("\n1,2,3,\r\n\n4,5,6\n") == ((1, 2, 3), (4, 5, 6))


def test_csv_rejects_garbage():
    with pytest.raises(MalformedAttributes):
        decode_csv("1,x,3")


def test_bytes_are_little_endian():
    raw = b'\x01\x00\x00\x00' + b'\x00\x01\x00\x00'
    assert bytes_to_rows(raw, 2) == ((1, 256),)


def test_zlib_payload_has_width_by_height_shape():
    raw = tile_bytes(GRID)
    assert len(raw) == WIDTH * 10 * 4

    tiles = decode_tile_data(b64(zlib.compress(raw)), "base64", "zlib", WIDTH)

    assert len(tiles) == 10
    assert all(len(row) == WIDTH for row in tiles)
    assert tiles == tuple(tuple(row) for row in GRID)


def test_flags_survive_decoding():
    tiles = decode_tile_data(b64(struct.pack('<I', 0x80000005)), "base64", None, 1)
    assert tiles == ((0x80000005,),)


def test_partial_row_is_dropped_with_warning(caplog):
    raw = struct.pack('<7I', *range(1, 8))
    with caplog.at_level(logging.WARNING, logger="tmx_reader.tile_data"):
        tiles = bytes_to_rows(raw, 3)
    assert tiles == ((1, 2, 3), (4, 5, 6))
    assert "trailing bytes" in caplog.text


def test_empty_payload():
    assert decode_tile_data("", "base64", None, 4) == ()
    assert decode_tile_data("\n  \n", "csv", None, 4) == ()


@pytest.mark.parametrize("encoding, compression", [
    (None, None),
    (None, "zlib"),
    ("csv", "zlib"),
    ("base64", "lzma"),
    ("hex", None),
])
def test_unsupported_combinations(encoding, compression):
    with pytest.raises(UnsupportedEncoding):
        decode_tile_data("AAAA", encoding, compression, 1)


def test_invalid_base64():
    with pytest.raises(EncodingFailure):
        decode_tile_data("not base64!!", "base64", None, 1)


COMPRESSORS = {
    "zlib": zlib.compress,
    "gzip": gzip.compress,
    "zstd": zstandard.ZstdCompressor().compress,
}


@pytest.mark.parametrize("compression", ["zlib", "gzip", "zstd"])
def test_corrupt_compressed_stream(compression):
    with pytest.raises(DecompressionFailure):
        decode_tile_data(b64(b"definitely not compressed"), "base64", compression, 1)


@pytest.mark.parametrize("compression", sorted(COMPRESSORS))
def test_truncated_compressed_stream(compression):
    packed = COMPRESSORS[compression](tile_bytes(GRID))
    with pytest.raises(DecompressionFailure):
        decode_tile_data(b64(packed[:len(packed) // 2]), "base64", compression, WIDTH)
