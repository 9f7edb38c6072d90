"""
Global Tile ID (GID) flip-flag codec.

=============================================================================
BIT LAYOUT
=============================================================================

Tiled stores orientation flags in the three highest bits of every 32-bit
value in a layer's tile grid:

    bit 31  0x80000000  flipped horizontally
    bit 30  0x40000000  flipped vertically
    bit 29  0x20000000  flipped diagonally (x/y swapped)
    bits 0-28           the GID itself

    raw = 0x80000005  ->  GID 5, mirrored left-right

=============================================================================
DIAGONAL FLIPS
=============================================================================

This model has no separate "diagonal" boolean for rendering. A diagonal
flip is folded into the axis flips:

    flip_h = horizontal XOR diagonal
    flip_v = vertical   XOR diagonal

The raw diagonal bit is still reported (flip_d) so encode_gid() can
rebuild the original value exactly.

=============================================================================
"""

from typing import NamedTuple

FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000
ALL_FLIP_FLAGS = (FLIPPED_HORIZONTALLY_FLAG
                  | FLIPPED_VERTICALLY_FLAG
                  | FLIPPED_DIAGONALLY_FLAG)


class DecodedGid(NamedTuple):
    id: int
    flip_h: bool
    flip_v: bool
    flip_d: bool


def strip_flags(raw: int) -> int:
    """GID with the three flag bits cleared."""
    return raw & ~ALL_FLIP_FLAGS & 0xFFFFFFFF


def decode_gid(raw: int) -> DecodedGid:
    """
    Split a raw 32-bit tile value into id and flip flags.

    Parameters:
    -----------
    raw : int
        Value as stored in the layer data (or a <tile id>)

    Returns:
    --------
    DecodedGid : (id, flip_h, flip_v, flip_d) with the diagonal flag
                 already folded into flip_h/flip_v
    """
    diagonal = bool(raw & FLIPPED_DIAGONALLY_FLAG)
    horizontal = bool(raw & FLIPPED_HORIZONTALLY_FLAG)
    vertical = bool(raw & FLIPPED_VERTICALLY_FLAG)
    return DecodedGid(
        id=strip_flags(raw),
        flip_h=horizontal ^ diagonal,
        flip_v=vertical ^ diagonal,
        flip_d=diagonal,
    )


def encode_gid(gid: int, flip_h: bool = False, flip_v: bool = False,
               flip_d: bool = False) -> int:
    """Inverse of decode_gid()."""
    raw = strip_flags(gid)
    # undo the XOR folding done by decode_gid
    if flip_h ^ flip_d:
        raw |= FLIPPED_HORIZONTALLY_FLAG
    if flip_v ^ flip_d:
        raw |= FLIPPED_VERTICALLY_FLAG
    if flip_d:
        raw |= FLIPPED_DIAGONALLY_FLAG
    return raw
