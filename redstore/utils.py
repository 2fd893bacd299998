"""Small helpers for command lines, index ranges and key hashing."""

from __future__ import annotations

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MASK32 = 0xFFFFFFFF


def to_cmd_line(*args: str) -> list[bytes]:
    """Encode string arguments as a command line."""
    return [arg.encode() for arg in args]


def to_cmd_line2(command_name: str, *args: str) -> list[bytes]:
    """Build a command line from a command name and string arguments."""
    return [command_name.encode(), *(arg.encode() for arg in args)]


def to_cmd_line3(command_name: str, *args: bytes) -> list[bytes]:
    """Build a command line from a command name and byte arguments."""
    return [command_name.encode(), *args]


def convert_range(start: int, end: int, size: int) -> tuple[int, int]:
    """Convert an inclusive, possibly negative index pair to a half-open slice.

    Returns ``(-1, -1)`` when the range is out of bounds or empty.
    """
    if start < -size:
        return -1, -1
    if start < 0:
        start = size + start
    elif start >= size:
        return -1, -1
    if end < -size:
        return -1, -1
    if end < 0:
        end = size + end + 1
    elif end < size:
        end = end + 1
    else:
        end = size
    if start > end:
        return -1, -1
    return start, end


def fnv32(key: str | bytes) -> int:
    """Return the 32-bit FNV-1 hash of a key."""
    data = key.encode() if isinstance(key, str) else key
    value = _FNV_OFFSET
    for byte in data:
        value = (value * _FNV_PRIME) & _MASK32
        value ^= byte
    return value