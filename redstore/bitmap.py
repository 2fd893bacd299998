"""A growable bitmap over a byte array, least significant bit first."""

from __future__ import annotations

from collections.abc import Iterator


def _byte_size(bit_size: int) -> int:
    return (bit_size + 7) // 8


class BitMap:
    """A bitmap backed by a bytearray; bit ``n`` is bit ``n % 8`` of byte ``n // 8``."""

    __slots__ = ("_data",)

    def __init__(self, data: bytearray | None = None) -> None:
        self._data = data if data is not None else bytearray()

    def _grow(self, bit_size: int) -> None:
        gap = _byte_size(bit_size) - len(self._data)
        if gap > 0:
            self._data.extend(bytes(gap))

    def bit_size(self) -> int:
        """Return the number of bits currently stored."""
        return len(self._data) * 8

    def to_bytes(self) -> bytes:
        """Return the underlying bytes."""
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def set_bit(self, offset: int, val: int) -> None:
        """Set the bit at ``offset`` if ``val`` is positive, else clear it."""
        if offset < 0:
            raise ValueError("bit offset must not be negative")
        byte_index, bit_offset = divmod(offset, 8)
        mask = 1 << bit_offset
        self._grow(offset + 1)
        if val > 0:
            self._data[byte_index] |= mask
        else:
            self._data[byte_index] &= ~mask & 0xFF

    def get_bit(self, offset: int) -> int:
        """Return the bit at ``offset``; bits beyond the end are 0."""
        if offset < 0:
            raise ValueError("bit offset must not be negative")
        byte_index, bit_offset = divmod(offset, 8)
        if byte_index >= len(self._data):
            return 0
        return (self._data[byte_index] >> bit_offset) & 1

    def iter_bits(self, begin: int = 0, end: int = 0) -> Iterator[tuple[int, int]]:
        """Yield ``(offset, bit)`` from ``begin`` up to ``end``; ``end`` 0 means to the end.

        The bit at ``begin`` is always yielded if it is stored.
        """
        if begin < 0:
            raise ValueError("bit offset must not be negative")
        total = self.bit_size()
        offset = begin
        while offset < total:
            yield offset, (self._data[offset // 8] >> (offset % 8)) & 1
            offset += 1
            if end and offset >= end:
                break

    def iter_bytes(self, begin: int = 0, end: int = 0) -> Iterator[tuple[int, int]]:
        """Yield ``(index, byte)`` within ``[begin, end)``; ``end`` 0 means to the end."""
        size = len(self._data)
        if end == 0 or end > size:
            end = size
        for index in range(begin, end):
            yield index, self._data[index]


def from_bytes(data: bytes | bytearray) -> BitMap:
    """Wrap bytes in a BitMap; a bytearray is shared, not copied."""
    if isinstance(data, bytearray):
        return BitMap(data)
    return BitMap(bytearray(data))