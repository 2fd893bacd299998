"""A consistent hash ring with virtual replicas and hash-tag support."""

from __future__ import annotations

import bisect
import zlib
from collections.abc import Callable

HashFunc = Callable[[bytes], int]


def get_partition_key(key: str) -> str:
    """Return the hash tag inside ``{...}`` if present and non-empty, else the key."""
    beg = key.find("{")
    if beg == -1:
        return key
    end = key.find("}")
    if end == -1 or end <= beg + 1:
        return key
    return key[beg + 1 : end]


class HashRing:
    """Picks a node for each key by position on a hash circle."""

    def __init__(self, replicas: int, hash_func: HashFunc | None = None) -> None:
        self._replicas = replicas
        self._hash = hash_func if hash_func is not None else zlib.crc32
        self._keys: list[int] = []
        self._hash_map: dict[int, str] = {}

    def is_empty(self) -> bool:
        """Return whether no node has been added."""
        return not self._keys

    def add_node(self, *keys: str) -> None:
        """Add nodes to the circle; empty names are skipped."""
        for key in keys:
            if not key:
                continue
            for i in range(self._replicas):
                value = self._hash(f"{i}{key}".encode())
                self._keys.append(value)
                self._hash_map[value] = key
        self._keys.sort()

    def pick_node(self, key: str) -> str | None:
        """Return the node closest to the key on the circle, or None if empty."""
        if self.is_empty():
            return None
        value = self._hash(get_partition_key(key).encode())
        idx = bisect.bisect_left(self._keys, value)
        if idx == len(self._keys):
            idx = 0
        return self._hash_map[self._keys[idx]]