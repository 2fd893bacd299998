import random
from itertools import islice

import pytest

from redstore.bitmap import BitMap, from_bytes


def test_set_bit_random_offsets():
    offsets = set(random.sample(range(1000), 200))
    bm = BitMap()
    for offset in offsets:
        bm.set_bit(offset, 1)
    for offset in range(bm.bit_size()):
        assert (bm.get_bit(offset) > 0) == (offset in offsets)


def test_set_bit_grows_to_byte_boundary():
    bm = BitMap()
    bm.set_bit(15, 1)
    assert bm.get_bit(15) == 1
    assert bm.get_bit(16) == 0
    assert bm.bit_size() == 16
    assert bm.to_bytes() == b"\x00\x80"


def test_clear_bit():
    bm = BitMap()
    bm.set_bit(3, 1)
    bm.set_bit(3, 0)
    assert bm.get_bit(3) == 0
    assert bm.to_bytes() == b"\x00"


def test_negative_offset_raises():
    with pytest.raises(ValueError):
        BitMap().set_bit(-1, 1)


def test_from_bytes_shares_buffer():
    bs = bytearray(b"\xff\xff")
    bm = from_bytes(bs)
    bm.set_bit(8, 0)
    assert bs == b"\xff\xfe"
    assert bm.to_bytes() == b"\xff\xfe"


def test_from_immutable_bytes():
    bm = from_bytes(b"\x01")
    assert bm.get_bit(0) == 1
    bm.set_bit(9, 1)
    assert bm.to_bytes() == b"\x01\x02"


def test_iter_bits_range():
    bm = BitMap()
    for i in range(0, 1000, 2):
        bm.set_bit(i, 1)
    seen = list(bm.iter_bits(100, 201))
    assert [offset for offset, _ in seen] == list(range(100, 201))
    assert all(val == (1 if offset % 2 == 0 else 0) for offset, val in seen)


def test_iter_bits_to_end_matches_get_bit():
    offsets = set(random.sample(range(1000), 200))
    bm = BitMap()
    for offset in offsets:
        bm.set_bit(offset, 1)
    seen = list(bm.iter_bits(1000 // 20 + 1, 0))
    assert seen[0][0] == 51
    assert seen[-1][0] == bm.bit_size() - 1
    for offset, val in seen:
        assert (val > 0) == (offset in offsets)


def test_iter_bits_break_after_first():
    bm = BitMap()
    bm.set_bit(10, 1)
    assert list(islice(bm.iter_bits(0, 0), 1)) == [(0, 0)]


def _sixteen_step_bitmap():
    bm = BitMap()
    for i in range(0, 1000, 16):
        bm.set_bit(i, 1)
    return bm


@pytest.mark.parametrize("end", [0, 2000, 500])
def test_iter_bytes(end):
    bm = _sixteen_step_bitmap()
    seen = list(bm.iter_bytes(0, end))
    assert len(seen) == 125
    for index, val in seen:
        assert val == (1 if index % 2 == 0 else 0)


def test_iter_bytes_partial_and_break():
    bm = _sixteen_step_bitmap()
    assert list(bm.iter_bytes(2, 5)) == [(2, 1), (3, 0), (4, 1)]
    assert list(islice(bm.iter_bytes(0, 0), 1)) == [(0, 1)]