"""Unique 64-bit identifiers in the snowflake layout."""

from __future__ import annotations

import threading
import time

EPOCH_MS = 1288834974657  # Nov 04 2010 01:42:54 UTC
TIME_LEFT = 22
NODE_LEFT = 10
MAX_SEQUENCE = (1 << NODE_LEFT) - 1
NODE_MASK = (1 << (TIME_LEFT - NODE_LEFT)) - 1

_FNV64_OFFSET = 14695981039346656037
_FNV64_PRIME = 1099511628211
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _fnv64(data: bytes) -> int:
    value = _FNV64_OFFSET
    for byte in data:
        value = (value * _FNV64_PRIME) & _MASK64
        value ^= byte
    return value


class IdGenerator:
    """Generates unique, increasing IDs from a timestamp, a node id and a sequence."""

    def __init__(self, node: str) -> None:
        self.node_id = _fnv64(node.encode()) & NODE_MASK
        self._lock = threading.Lock()
        self._last_stamp = -1
        self._sequence = 1
        self._base_ms = time.time_ns() // 1_000_000 - EPOCH_MS
        self._mono_start = time.monotonic_ns()

    def _now(self) -> int:
        return self._base_ms + (time.monotonic_ns() - self._mono_start) // 1_000_000

    def next_id(self) -> int:
        """Return the next unique ID."""
        with self._lock:
            timestamp = self._now()
            if timestamp < self._last_stamp:
                raise RuntimeError("can not generate id")
            if timestamp == self._last_stamp:
                self._sequence = (self._sequence + 1) & MAX_SEQUENCE
                if self._sequence == 0:
                    while timestamp <= self._last_stamp:
                        timestamp = self._now()
            else:
                self._sequence = 0
            self._last_stamp = timestamp
            return (timestamp << TIME_LEFT) | (self.node_id << NODE_LEFT) | self._sequence