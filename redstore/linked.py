"""A doubly linked list with predicate-based removal."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from itertools import islice
from typing import Any

Expected = Callable[[Any], bool]


class _Node:
    __slots__ = ("val", "prev", "next")

    def __init__(self, val: Any) -> None:
        self.val = val
        self.prev: _Node | None = None
        self.next: _Node | None = None


class LinkedList:
    """A doubly linked list of arbitrary values."""

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._first: _Node | None = None
        self._last: _Node | None = None
        self._size = 0
        for value in values:
            self.add(value)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        node = self._first
        while node is not None:
            yield node.val
            node = node.next

    def __reversed__(self) -> Iterator[Any]:
        node = self._last
        while node is not None:
            yield node.val
            node = node.prev

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._size:
            raise IndexError("index out of bound")

    def _find(self, index: int) -> _Node:
        if index < self._size // 2:
            node = self._first
            for _ in range(index):
                node = node.next
        else:
            node = self._last
            for _ in range(self._size - 1 - index):
                node = node.prev
        return node

    def _unlink(self, node: _Node) -> None:
        if node.prev is None:
            self._first = node.next
        else:
            node.prev.next = node.next
        if node.next is None:
            self._last = node.prev
        else:
            node.next.prev = node.prev
        node.prev = None
        node.next = None
        self._size -= 1

    def add(self, val: Any) -> None:
        """Append a value to the tail."""
        node = _Node(val)
        if self._last is None:
            self._first = node
        else:
            node.prev = self._last
            self._last.next = node
        self._last = node
        self._size += 1

    def get(self, index: int) -> Any:
        """Return the value at the index."""
        self._check_index(index)
        return self._find(index).val

    def set(self, index: int, val: Any) -> None:
        """Replace the value at the index."""
        self._check_index(index)
        self._find(index).val = val

    def insert(self, index: int, val: Any) -> None:
        """Insert a value before the element at the index; the index may equal the length."""
        if not 0 <= index <= self._size:
            raise IndexError("index out of bound")
        if index == self._size:
            self.add(val)
            return
        pivot = self._find(index)
        node = _Node(val)
        node.prev = pivot.prev
        node.next = pivot
        if pivot.prev is None:
            self._first = node
        else:
            pivot.prev.next = node
        pivot.prev = node
        self._size += 1

    def remove(self, index: int) -> Any:
        """Remove the element at the index and return its value."""
        self._check_index(index)
        node = self._find(index)
        self._unlink(node)
        return node.val

    def remove_last(self) -> Any:
        """Remove the last element and return its value, or None if empty."""
        node = self._last
        if node is None:
            return None
        self._unlink(node)
        return node.val

    def remove_all_by_val(self, expected: Expected) -> int:
        """Remove every element matching the predicate; return how many."""
        return self.remove_by_val(expected, 0)

    def remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove up to ``count`` matches scanning from the head; ``count <= 0`` removes all."""
        removed = 0
        node = self._first
        while node is not None and (count <= 0 or removed < count):
            following = node.next
            if expected(node.val):
                self._unlink(node)
                removed += 1
            node = following
        return removed

    def reverse_remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove up to ``count`` matches scanning from the tail; ``count <= 0`` removes all."""
        removed = 0
        node = self._last
        while node is not None and (count <= 0 or removed < count):
            preceding = node.prev
            if expected(node.val):
                self._unlink(node)
                removed += 1
            node = preceding
        return removed

    def contains(self, expected: Expected) -> bool:
        """Return whether any element matches the predicate."""
        return any(expected(value) for value in self)

    def range(self, start: int, stop: int) -> list[Any]:
        """Return the values with index in ``[start, stop)``."""
        if not 0 <= start < self._size:
            raise IndexError("`start` out of range")
        if stop < start or stop > self._size:
            raise IndexError("`stop` out of range")
        return list(islice(self, start, stop))