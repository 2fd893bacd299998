"""Key-value dictionaries: a plain one and a thread-safe sharded one."""

from __future__ import annotations

import random
import threading
from collections.abc import Iterable, Iterator
from typing import Any

from redstore.lockmap import RWLock
from redstore.utils import fnv32

_MAX_INT32 = 2**31 - 1


def compute_capacity(param: int) -> int:
    """Return the shard count for a requested size: a power of two, at least 16."""
    if param <= 16:
        return 16
    capacity = 1 << (param - 1).bit_length()
    return min(capacity, _MAX_INT32)


class SimpleDict:
    """A dictionary wrapper that is not thread safe."""

    __slots__ = ("_m",)

    def __init__(self) -> None:
        self._m: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._m)

    def __contains__(self, key: object) -> bool:
        return key in self._m

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._m))

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value bound to the key, or the default."""
        return self._m.get(key, default)

    def put(self, key: str, val: Any) -> int:
        """Bind the value; return 1 if the key is new, else 0."""
        existed = key in self._m
        self._m[key] = val
        return 0 if existed else 1

    def put_if_absent(self, key: str, val: Any) -> int:
        """Bind the value only if the key is missing; return the number inserted."""
        if key in self._m:
            return 0
        self._m[key] = val
        return 1

    def put_if_exists(self, key: str, val: Any) -> int:
        """Bind the value only if the key exists; return the number updated."""
        if key in self._m:
            self._m[key] = val
            return 1
        return 0

    def remove(self, key: str) -> int:
        """Remove the key; return the number of keys removed."""
        if key in self._m:
            del self._m[key]
            return 1
        return 0

    def pop(self, key: str, default: Any = None) -> Any:
        """Remove the key and return its value, or the default if missing."""
        return self._m.pop(key, default)

    def keys(self) -> list[str]:
        """Return all keys."""
        return list(self._m)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over key-value pairs."""
        yield from list(self._m.items())

    def random_keys(self, limit: int) -> list[str]:
        """Return ``limit`` random keys, possibly with duplicates."""
        if not self._m:
            return []
        return random.choices(list(self._m), k=max(limit, 0))

    def random_distinct_keys(self, limit: int) -> list[str]:
        """Return up to ``limit`` random keys without duplicates."""
        size = max(0, min(limit, len(self._m)))
        return random.sample(list(self._m), size)

    def clear(self) -> None:
        """Remove all keys."""
        self._m = {}


class _Shard:
    __slots__ = ("data", "lock")

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.lock = RWLock()

    def random_key(self) -> str | None:
        self.lock.acquire_read()
        try:
            if not self.data:
                return None
            return random.choice(list(self.data))
        finally:
            self.lock.release_read()


class ConcurrentDict:
    """A thread-safe dictionary split into independently locked shards."""

    def __init__(self, shard_count: int = 16) -> None:
        self._shard_count = compute_capacity(shard_count)
        self._table = [_Shard() for _ in range(self._shard_count)]
        self._count = 0
        self._count_lock = threading.Lock()

    def _index(self, key: str) -> int:
        return (len(self._table) - 1) & fnv32(key)

    def _shard(self, key: str) -> _Shard:
        return self._table[self._index(key)]

    def _add_count(self, delta: int) -> None:
        with self._count_lock:
            self._count += delta

    def __len__(self) -> int:
        with self._count_lock:
            return self._count

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        shard = self._shard(key)
        shard.lock.acquire_read()
        try:
            return key in shard.data
        finally:
            shard.lock.release_read()

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self.items())

    # -- unlocked primitives ------------------------------------------------

    def _put(self, shard: _Shard, key: str, val: Any) -> int:
        if key in shard.data:
            shard.data[key] = val
            return 0
        shard.data[key] = val
        self._add_count(1)
        return 1

    def _put_if_absent(self, shard: _Shard, key: str, val: Any) -> int:
        if key in shard.data:
            return 0
        shard.data[key] = val
        self._add_count(1)
        return 1

    @staticmethod
    def _put_if_exists(shard: _Shard, key: str, val: Any) -> int:
        if key in shard.data:
            shard.data[key] = val
            return 1
        return 0

    def _remove(self, shard: _Shard, key: str) -> int:
        if key in shard.data:
            del shard.data[key]
            self._add_count(-1)
            return 1
        return 0

    def _write(self, key: str, op, *args: Any) -> Any:
        shard = self._shard(key)
        shard.lock.acquire_write()
        try:
            return op(shard, key, *args)
        finally:
            shard.lock.release_write()

    # -- public API ---------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value bound to the key, or the default."""
        shard = self._shard(key)
        shard.lock.acquire_read()
        try:
            return shard.data.get(key, default)
        finally:
            shard.lock.release_read()

    def get_with_lock(self, key: str, default: Any = None) -> Any:
        """Like :meth:`get`; the caller already holds the key's lock."""
        return self._shard(key).data.get(key, default)

    def put(self, key: str, val: Any) -> int:
        """Bind the value; return 1 if the key is new, else 0."""
        return self._write(key, self._put, val)

    def put_with_lock(self, key: str, val: Any) -> int:
        """Like :meth:`put`; the caller already holds the key's lock."""
        return self._put(self._shard(key), key, val)

    def put_if_absent(self, key: str, val: Any) -> int:
        """Bind the value only if the key is missing; return the number inserted."""
        return self._write(key, self._put_if_absent, val)

    def put_if_absent_with_lock(self, key: str, val: Any) -> int:
        """Like :meth:`put_if_absent`; the caller already holds the key's lock."""
        return self._put_if_absent(self._shard(key), key, val)

    def put_if_exists(self, key: str, val: Any) -> int:
        """Bind the value only if the key exists; return the number updated."""
        return self._write(key, self._put_if_exists, val)

    def put_if_exists_with_lock(self, key: str, val: Any) -> int:
        """Like :meth:`put_if_exists`; the caller already holds the key's lock."""
        return self._put_if_exists(self._shard(key), key, val)

    def remove(self, key: str) -> int:
        """Remove the key; return the number of keys removed."""
        return self._write(key, self._remove)

    def remove_with_lock(self, key: str) -> int:
        """Like :meth:`remove`; the caller already holds the key's lock."""
        return self._remove(self._shard(key), key)

    def pop(self, key: str, default: Any = None) -> Any:
        """Remove the key and return its value, or the default if missing."""
        shard = self._shard(key)
        shard.lock.acquire_write()
        try:
            if key not in shard.data:
                return default
            value = shard.data.pop(key)
            self._add_count(-1)
            return value
        finally:
            shard.lock.release_write()

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over key-value pairs, shard by shard.

        Entries inserted during the traversal may not be visited.
        """
        for shard in self._table:
            shard.lock.acquire_read()
            try:
                snapshot = list(shard.data.items())
            finally:
                shard.lock.release_read()
            yield from snapshot

    def keys(self) -> list[str]:
        """Return all keys."""
        return [key for key, _ in self.items()]

    def random_keys(self, limit: int) -> list[str]:
        """Return ``limit`` random keys, possibly with duplicates."""
        if limit >= len(self):
            return self.keys()
        result: list[str] = []
        while len(result) < limit:
            key = random.choice(self._table).random_key()
            if key is not None:
                result.append(key)
        return result

    def random_distinct_keys(self, limit: int) -> list[str]:
        """Return ``limit`` random keys without duplicates."""
        if limit >= len(self):
            return self.keys()
        result: set[str] = set()
        while len(result) < limit:
            key = random.choice(self._table).random_key()
            if key is not None:
                result.add(key)
        return list(result)

    def clear(self) -> None:
        """Remove all keys."""
        self._table = [_Shard() for _ in range(self._shard_count)]
        with self._count_lock:
            self._count = 0

    def _lock_plan(
        self, write_keys: Iterable[str], read_keys: Iterable[str], reverse: bool
    ) -> list[tuple[int, bool]]:
        write_keys = list(write_keys)
        write_set = {self._index(key) for key in write_keys}
        indices = {self._index(key) for key in (*write_keys, *read_keys)}
        return [(index, index in write_set) for index in sorted(indices, reverse=reverse)]

    def rw_locks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Lock the shards of write keys exclusively and read keys shared."""
        for index, write in self._lock_plan(write_keys, read_keys or (), reverse=False):
            lock = self._table[index].lock
            if write:
                lock.acquire_write()
            else:
                lock.acquire_read()

    def rw_unlocks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Release the locks taken by :meth:`rw_locks`."""
        for index, write in self._lock_plan(write_keys, read_keys or (), reverse=True):
            lock = self._table[index].lock
            if write:
                lock.release_write()
            else:
                lock.release_read()