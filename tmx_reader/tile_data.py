"""
Decoding of a tile layer's <data> element.

=============================================================================
DATA ENCODINGS
=============================================================================

1. CSV:
   <data encoding="csv">
   1,2,3,4,
   5,6,7,8
   </data>
   One line per row. Blank lines and empty tokens (trailing commas) are
   skipped.

2. Base64:
   <data encoding="base64">AQAAAAIAAAADAAAABAAAAA==</data>
   Little-endian unsigned 32-bit values, 4 bytes per tile.

3. Base64 + compression:
   <data encoding="base64" compression="zlib">eJxjZGBgYAIAABgACQ==</data>
   The base64 bytes are inflated with zlib, gzip or zstd first.

The old XML encoding (<tile gid=".."/> children, no encoding attribute)
is not supported.

=============================================================================
ROWS
=============================================================================

Byte payloads are cut into rows of `width` tiles:

    bytes:  [t0 t0 t0 t0][t1 t1 t1 t1] ... [tN ...]
    rows:   len(bytes) // (width * 4)

A trailing partial row cannot be placed on the grid. It is dropped and a
warning is logged.

=============================================================================
"""

import base64
import binascii
import gzip
import io
import logging
import zlib
from typing import Callable, Dict, Optional, Tuple

import numpy as np
import zstandard

from .attributes import AttributeSchema, as_str, as_uint
from .cursor import TagCursor, read_text
from .errors import (
    DecompressionFailure, EncodingFailure, MalformedAttributes, UnsupportedEncoding,
)

logger = logging.getLogger(__name__)

TileMatrix = Tuple[Tuple[int, ...], ...]

# Tiles are stored as little-endian uint32
TILE_DTYPE = np.dtype('<u4')

DATA_ATTRS = AttributeSchema(
    optionals=[("encoding", as_str), ("compression", as_str)],
)


# =============================================================================
# DECOMPRESSION
# =============================================================================

def _inflate_zlib(raw: bytes) -> bytes:
    return zlib.decompress(raw)


def _inflate_gzip(raw: bytes) -> bytes:
    with gzip.GzipFile(fileobj=io.BytesIO(raw)) as stream:
        return stream.read()


def _inflate_zstd(raw: bytes) -> bytes:
    # decompressobj copes with frames that do not record their content size,
    # but hands back whatever it decoded from a cut-off frame
    inflater = zstandard.ZstdDecompressor().decompressobj()
    inflated = inflater.decompress(raw)
    if not inflater.eof:
        raise zstandard.ZstdError("truncated zstd frame")
    return inflated


DECOMPRESSORS: Dict[str, Callable[[bytes], bytes]] = {
    "zlib": _inflate_zlib,
    "gzip": _inflate_gzip,
    "zstd": _inflate_zstd,
}


def decompress(raw: bytes, compression: str) -> bytes:
    try:
        return DECOMPRESSORS[compression](raw)
    except (zlib.error, OSError, EOFError, zstandard.ZstdError) as e:
        raise DecompressionFailure(f"Failed to inflate {compression} tile data: {e}") from e


# =============================================================================
# DECODERS
# =============================================================================

def decode_base64(text: str) -> bytes:
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingFailure(f"Tile data is not valid base64: {e}") from e


def decode_csv(text: str) -> TileMatrix:
    """Each non-blank line of `text` is one row of GIDs."""
    rows = []
    for line in text.split('\n'):
        if not line.strip():
            continue
        row = []
        for token in line.split(','):
            token = token.replace('\r', '').strip()
            if not token:
                continue
            gid = as_uint(token)
            if gid is None:
                raise MalformedAttributes(f"csv tile data contains an invalid gid: {token!r}")
            row.append(gid)
        rows.append(tuple(row))
    return tuple(rows)


def bytes_to_rows(raw: bytes, width: int) -> TileMatrix:
    """
    Reassemble little-endian uint32 tiles into rows of `width`.

    Parameters:
    -----------
    raw : bytes
        Decoded (and inflated) tile bytes
    width : int
        Tiles per row

    Returns:
    --------
    tuple of row tuples; a trailing partial row is dropped
    """
    row_bytes = width * TILE_DTYPE.itemsize
    if row_bytes == 0:
        return ()

    rows, remainder = divmod(len(raw), row_bytes)
    if remainder:
        logger.warning("Dropping %d trailing bytes of tile data that do not fill a row of %d tiles",
                       remainder, width)
    if not rows:
        return ()

    grid = np.frombuffer(raw, dtype=TILE_DTYPE, count=rows * width).reshape(rows, width)
    return tuple(tuple(row) for row in grid.tolist())


def decode_tile_data(text: str, encoding: Optional[str], compression: Optional[str],
                     width: int) -> TileMatrix:
    """
    Turn the character data of a <data> element into a GID matrix.

    Raises:
    -------
    UnsupportedEncoding : unknown or unsupported encoding/compression
    EncodingFailure : invalid base64
    DecompressionFailure : the compressed stream is corrupt
    """
    if encoding is None:
        if compression is None:
            raise UnsupportedEncoding("XML tile data (no encoding attribute) is not supported")
        raise UnsupportedEncoding(f"Compression {compression} given without an encoding")

    if encoding == "csv" and compression is None:
        return decode_csv(text)

    if encoding == "base64":
        if compression is None:
            return bytes_to_rows(decode_base64(text), width)
        if compression in DECOMPRESSORS:
            return bytes_to_rows(decompress(decode_base64(text), compression), width)
        raise UnsupportedEncoding(
            f"Unknown combination of {encoding} encoding and {compression} compression")

    if compression is None:
        raise UnsupportedEncoding(f"Unknown encoding format {encoding}")
    raise UnsupportedEncoding(
        f"Unknown combination of {encoding} encoding and {compression} compression")


def parse_data(cursor: TagCursor, attrs, width: int) -> TileMatrix:
    """Read a <data> element; the cursor sits just after its start tag."""
    (encoding, compression), _ = DATA_ATTRS.extract(attrs)
    text = read_text(cursor, "data")
    tiles = decode_tile_data(text, encoding, compression, width)
    logger.debug("Decoded %s/%s tile data into %d rows", encoding, compression or "raw", len(tiles))
    return tiles
