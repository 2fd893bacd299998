"""A list stored as a sequence of fixed-capacity pages."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

PAGE_SIZE = 1024  # must be even

Expected = Callable[[Any], bool]


class QuickList:
    """A list of pages; cheap appends, ranges and memory use for long lists."""

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._pages: list[list[Any]] = []
        self._size = 0
        for value in values:
            self.add(value)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        for page in list(self._pages):
            yield from page

    def __reversed__(self) -> Iterator[Any]:
        for page in reversed(list(self._pages)):
            yield from reversed(page)

    def __repr__(self) -> str:
        return f"QuickList({list(self)!r})"

    def _find(self, index: int) -> tuple[int, int]:
        """Return the page index and in-page offset of an element."""
        if not 0 <= index < self._size:
            raise IndexError("index out of bound")
        if index < self._size // 2:
            begin = 0
            for page_index, page in enumerate(self._pages):
                if begin + len(page) > index:
                    return page_index, index - begin
                begin += len(page)
        else:
            begin = self._size
            for page_index in reversed(range(len(self._pages))):
                begin -= len(self._pages[page_index])
                if begin <= index:
                    return page_index, index - begin
        raise IndexError("index out of bound")

    def add(self, val: Any) -> None:
        """Append a value to the tail."""
        self._size += 1
        if not self._pages or len(self._pages[-1]) >= PAGE_SIZE:
            self._pages.append([val])
        else:
            self._pages[-1].append(val)

    def get(self, index: int) -> Any:
        """Return the value at the index."""
        page_index, offset = self._find(index)
        return self._pages[page_index][offset]

    def set(self, index: int, val: Any) -> None:
        """Replace the value at the index."""
        page_index, offset = self._find(index)
        self._pages[page_index][offset] = val

    def insert(self, index: int, val: Any) -> None:
        """Insert a value before the element at the index; the index may equal the length."""
        if index == self._size:
            self.add(val)
            return
        page_index, offset = self._find(index)
        page = self._pages[page_index]
        if len(page) < PAGE_SIZE:
            page.insert(offset, val)
        else:
            # split a full page into two halves rather than growing it
            half = PAGE_SIZE // 2
            first, second = page[:half], page[half:]
            if offset < half:
                first.insert(offset, val)
            else:
                second.insert(offset - half, val)
            self._pages[page_index : page_index + 1] = [first, second]
        self._size += 1

    def remove(self, index: int) -> Any:
        """Remove the element at the index and return its value."""
        page_index, offset = self._find(index)
        page = self._pages[page_index]
        value = page.pop(offset)
        if not page:
            del self._pages[page_index]
        self._size -= 1
        return value

    def remove_last(self) -> Any:
        """Remove the last element and return its value, or None if empty."""
        if not self._size:
            return None
        page = self._pages[-1]
        value = page.pop()
        if not page:
            self._pages.pop()
        self._size -= 1
        return value

    def _remove_matching(self, expected: Expected, count: int, reverse: bool) -> int:
        unlimited = count <= 0
        removed = 0
        order = reversed(range(len(self._pages))) if reverse else range(len(self._pages))
        for page_index in order:
            if not unlimited and removed >= count:
                break
            page = self._pages[page_index]
            kept = []
            for value in reversed(page) if reverse else page:
                if (unlimited or removed < count) and expected(value):
                    removed += 1
                else:
                    kept.append(value)
            if reverse:
                kept.reverse()
            self._pages[page_index] = kept
        self._pages = [page for page in self._pages if page]
        self._size -= removed
        return removed

    def remove_all_by_val(self, expected: Expected) -> int:
        """Remove every element matching the predicate; return how many."""
        return self._remove_matching(expected, 0, reverse=False)

    def remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove up to ``count`` matches scanning from the head; ``count <= 0`` removes all."""
        return self._remove_matching(expected, count, reverse=False)

    def reverse_remove_by_val(self, expected: Expected, count: int) -> int:
        """Remove up to ``count`` matches scanning from the tail; ``count <= 0`` removes all."""
        return self._remove_matching(expected, count, reverse=True)

    def contains(self, expected: Expected) -> bool:
        """Return whether any element matches the predicate."""
        return any(expected(value) for value in self)

    def range(self, start: int, stop: int) -> list[Any]:
        """Return the values with index in ``[start, stop)``."""
        if not 0 <= start < self._size:
            raise IndexError("`start` out of range")
        if stop < start or stop > self._size:
            raise IndexError("`stop` out of range")
        needed = stop - start
        result: list[Any] = []
        page_index, offset = self._find(start)
        for page in self._pages[page_index:]:
            if len(result) >= needed:
                break
            result.extend(page[offset : offset + needed - len(result)])
            offset = 0
        return result