"""Striped reader/writer locks keyed by string."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from redstore.utils import fnv32


class RWLock:
    """A reader/writer lock; waiting writers keep new readers out."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        """Obtain a shared lock."""
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        """Release a shared lock."""
        with self._cond:
            if self._readers == 0:
                raise RuntimeError("release of unlocked read lock")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Obtain an exclusive lock."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        """Release an exclusive lock."""
        with self._cond:
            if not self._writer:
                raise RuntimeError("release of unlocked write lock")
            self._writer = False
            self._cond.notify_all()


class LockMap:
    """A fixed table of RWLocks; each key maps to one slot by hash."""

    def __init__(self, table_size: int) -> None:
        if table_size <= 0:
            raise ValueError("table size must be positive")
        self._table = [RWLock() for _ in range(table_size)]

    def _spread(self, key: str) -> int:
        return (len(self._table) - 1) & fnv32(key)

    def _indices(self, keys: Iterable[str], reverse: bool) -> list[int]:
        return sorted({self._spread(key) for key in keys}, reverse=reverse)

    def lock(self, key: str) -> None:
        """Obtain the exclusive lock for a key."""
        self._table[self._spread(key)].acquire_write()

    def rlock(self, key: str) -> None:
        """Obtain the shared lock for a key."""
        self._table[self._spread(key)].acquire_read()

    def unlock(self, key: str) -> None:
        """Release the exclusive lock for a key."""
        self._table[self._spread(key)].release_write()

    def runlock(self, key: str) -> None:
        """Release the shared lock for a key."""
        self._table[self._spread(key)].release_read()

    def locks(self, *keys: str) -> None:
        """Obtain exclusive locks for several keys in a deadlock-free order."""
        for index in self._indices(keys, reverse=False):
            self._table[index].acquire_write()

    def rlocks(self, *keys: str) -> None:
        """Obtain shared locks for several keys in a deadlock-free order."""
        for index in self._indices(keys, reverse=False):
            self._table[index].acquire_read()

    def unlocks(self, *keys: str) -> None:
        """Release exclusive locks for several keys."""
        for index in self._indices(keys, reverse=True):
            self._table[index].release_write()

    def runlocks(self, *keys: str) -> None:
        """Release shared locks for several keys."""
        for index in self._indices(keys, reverse=True):
            self._table[index].release_read()

    def rw_locks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Lock write keys exclusively and read keys shared; duplicates allowed."""
        write_keys = list(write_keys)
        write_set = {self._spread(key) for key in write_keys}
        for index in self._indices([*write_keys, *read_keys], reverse=False):
            if index in write_set:
                self._table[index].acquire_write()
            else:
                self._table[index].acquire_read()

    def rw_unlocks(self, write_keys: Iterable[str], read_keys: Iterable[str]) -> None:
        """Release locks taken by :meth:`rw_locks`."""
        write_keys = list(write_keys)
        write_set = {self._spread(key) for key in write_keys}
        for index in self._indices([*write_keys, *read_keys], reverse=True):
            if index in write_set:
                self._table[index].release_write()
            else:
                self._table[index].release_read()

    @contextmanager
    def locked(self, *keys: str) -> Iterator[None]:
        """Hold exclusive locks for the keys for the duration of a block."""
        self.locks(*keys)
        try:
            yield
        finally:
            self.unlocks(*keys)