from tmx_reader.gid import (
    FLIPPED_DIAGONALLY_FLAG, FLIPPED_HORIZONTALLY_FLAG, FLIPPED_VERTICALLY_FLAG,
    decode_gid, encode_gid, strip_flags,
)


def test_plain_gid_has_no_flips():
    assert decode_gid(5) == (5, False, False, False)


def test_horizontal_flip():
    decoded = decode_gid(FLIPPED_HORIZONTALLY_FLAG | 5)
    assert decoded.id == 5
    assert decoded.flip_h is True
    assert decoded.flip_v is False


def test_diagonal_is_folded_into_axis_flips():
    decoded = decode_gid(FLIPPED_HORIZONTALLY_FLAG | FLIPPED_DIAGONALLY_FLAG | 5)
    assert decoded.id == 5
    assert decoded.flip_h is False
    assert decoded.flip_v is True
    assert decoded.flip_d is True


def test_all_flags():
    raw = FLIPPED_HORIZONTALLY_FLAG | FLIPPED_VERTICALLY_FLAG | FLIPPED_DIAGONALLY_FLAG | 7
    assert decode_gid(raw) == (7, False, False, True)


def test_encode_is_inverse_of_decode():
    for raw in (0, 5, 0x80000005, 0x40000005, 0xA0000005, 0xE0000005, 0x1FFFFFFF):
        decoded = decode_gid(raw)
        assert encode_gid(decoded.id, decoded.flip_h, decoded.flip_v, decoded.flip_d) == raw


def test_strip_flags():
    assert strip_flags(FLIPPED_VERTICALLY_FLAG | 42) == 42
