#!/usr/bin/env python3

"""
TMX Reader - print the structure of a Tiled map

Usage:
    python -m tmx_reader <map.tmx> [-v]

    -v  Log debug output (tileset resolution, decoded layers)
"""

import logging
import sys

from . import TmxError, decode_gid, parse_file


def describe(tiled_map) -> str:
    lines = [
        f"Map {tiled_map.width}x{tiled_map.height} tiles of "
        f"{tiled_map.tile_width}x{tiled_map.tile_height}px, "
        f"{tiled_map.orientation.value}, version {tiled_map.version}",
    ]

    for tileset in tiled_map.tilesets:
        origin = f" from {tileset.source}" if tileset.source else ""
        lines.append(f"  tileset '{tileset.name}' firstgid={tileset.first_gid}{origin}, "
                     f"{len(tileset.images)} image(s), {len(tileset.tiles)} described tile(s)")

    for layer in tiled_map.all_layers():
        kind = type(layer).__name__
        lines.append(f"  [{layer.layer_index}] {kind} '{layer.name}'")
        if hasattr(layer, 'tiles'):
            used = {decode_gid(gid).id for row in layer.tiles for gid in row} - {0}
            lines.append(f"      {layer.height} rows x {layer.width} columns, {len(used)} distinct gid(s)")
        elif hasattr(layer, 'objects'):
            lines.append(f"      {len(layer.objects)} object(s)")

    for name, value in tiled_map.properties.items():
        lines.append(f"  property {name} = {value.value!r} ({value.type.value})")

    return "\n".join(lines)


def main():
    args = [arg for arg in sys.argv[1:] if arg != "-v"]
    if not args:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(level=logging.DEBUG if "-v" in sys.argv[1:] else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        tiled_map = parse_file(args[0])
    except TmxError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(describe(tiled_map))


if __name__ == "__main__":
    main()
