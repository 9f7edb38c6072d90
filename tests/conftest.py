from __future__ import annotations

import base64
import gzip
import struct
import zlib

import pytest
import zstandard

WIDTH = 10
HEIGHT = 10

# Distinct values per cell, with flip flags on a couple of tiles
GRID = [[(y * WIDTH + x) % 7 + 1 for x in range(WIDTH)] for y in range(HEIGHT)]
GRID[0][1] = 0x80000002
GRID[3][4] = 0xA0000003

TILESET_BODY = """
    <image source="tilesheet.png" width="448" height="192"/>
    <tile id="1">
        <properties>
            <property name="a tile property" value="123"/>
        </properties>
    </tile>
    <tile id="2" type="water" probability="0.5">
        <objectgroup draworder="index">
            <object id="1" x="0" y="0" width="32" height="16"/>
        </objectgroup>
        <animation>
            <frame tileid="2" duration="100"/>
            <frame tileid="3" duration="150"/>
        </animation>
    </tile>
"""

INLINE_TILESET = (
    '<tileset firstgid="1" name="tilesheet" tilewidth="32" tileheight="32" '
    'spacing="0" margin="0">' + TILESET_BODY + '</tileset>'
)

EXTERNAL_TILESET_REF = '<tileset firstgid="1" source="tilesheet.tsx"/>'

TSX_DOCUMENT = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<tileset version="1.10" name="tilesheet" tilewidth="32" tileheight="32">'
    + TILESET_BODY + '</tileset>\n'
)


def tile_bytes(grid) -> bytes:
    return b"".join(struct.pack('<I', gid) for row in grid for gid in row)


def encode_data(grid, encoding: str, compression: str | None = None) -> str:
    """Build a <data> element the way Tiled writes it."""
    if encoding == "csv":
        text = "\n" + ",\n".join(",".join(str(gid) for gid in row) for row in grid) + "\n"
        return f'<data encoding="csv">{text}</data>'

    raw = tile_bytes(grid)
    if compression == "zlib":
        raw = zlib.compress(raw)
    elif compression == "gzip":
        raw = gzip.compress(raw)
    elif compression == "zstd":
        raw = zstandard.ZstdCompressor().compress(raw)
    text = base64.b64encode(raw).decode('ascii')

    compression_attr = f' compression="{compression}"' if compression else ""
    return f'<data encoding="base64"{compression_attr}>\n   {text}\n  </data>'


def map_document(data: str, tileset: str = INLINE_TILESET, extra: str = "") -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<map version="1.0" orientation="orthogonal" width="{WIDTH}" height="{HEIGHT}"
     tilewidth="32" tileheight="32" backgroundcolor="#ff8000">
 <properties>
  <property name="difficulty" type="int" value="3"/>
 </properties>
 {tileset}
 <layer name="Tile Layer 1" width="{WIDTH}" height="{HEIGHT}">
  {data}
 </layer>
 {extra}
</map>
"""


@pytest.fixture
def csv_map() -> str:
    return map_document(encode_data(GRID, "csv"))


@pytest.fixture
def external_map_path(tmp_path):
    """A map referencing tilesheet.tsx next to it."""
    (tmp_path / "tilesheet.tsx").write_text(TSX_DOCUMENT, encoding="utf-8")
    path = tmp_path / "level.tmx"
    path.write_text(map_document(encode_data(GRID, "base64", "zlib"), EXTERNAL_TILESET_REF),
                    encoding="utf-8")
    return path
