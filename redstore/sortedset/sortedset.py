"""A set of members ordered by score, backed by a skip list."""

from __future__ import annotations

from collections.abc import Iterator

from redstore.sortedset.border import SCORE_POSITIVE_INF, Border, ScoreBorder
from redstore.sortedset.skiplist import Element, Skiplist


class SortedSet:
    """Members with scores, kept in ascending ``(score, member)`` order."""

    def __init__(self) -> None:
        self._dict: dict[str, Element] = {}
        self._skiplist = Skiplist()

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, member: object) -> bool:
        return member in self._dict

    def __iter__(self) -> Iterator[Element]:
        return iter(self._skiplist)

    def __repr__(self) -> str:
        return f"SortedSet({list(self)!r})"

    def add(self, member: str, score: float) -> bool:
        """Set the member's score; return whether the member is new."""
        element = self._dict.get(member)
        self._dict[member] = Element(member, score)
        if element is not None:
            if score != element.score:
                self._skiplist.remove(member, element.score)
                self._skiplist.insert(member, score)
            return False
        self._skiplist.insert(member, score)
        return True

    def get(self, member: str) -> Element | None:
        """Return the member's element, or None if absent."""
        return self._dict.get(member)

    def remove(self, member: str) -> bool:
        """Remove the member; return whether it was present."""
        element = self._dict.pop(member, None)
        if element is None:
            return False
        self._skiplist.remove(member, element.score)
        return True

    def get_rank(self, member: str, desc: bool = False) -> int:
        """Return the 0-based rank of the member, or -1 if absent."""
        element = self._dict.get(member)
        if element is None:
            return -1
        rank = self._skiplist.get_rank(member, element.score)
        if desc:
            return self._skiplist.length - rank
        return rank - 1

    def iter_by_rank(self, start: int, stop: int, desc: bool = False) -> Iterator[Element]:
        """Iterate over elements with 0-based rank in ``[start, stop)``."""
        size = len(self)
        if start < 0 or start >= size:
            raise IndexError(f"illegal start {start}")
        if stop < start or stop > size:
            raise IndexError(f"illegal end {stop}")
        if desc:
            node = self._skiplist.tail if start == 0 else self._skiplist.get_by_rank(size - start)
        else:
            node = self._skiplist.first if start == 0 else self._skiplist.get_by_rank(start + 1)
        return self._walk(node, stop - start, desc)

    @staticmethod
    def _walk(node, count: int, desc: bool) -> Iterator[Element]:
        while node is not None and count > 0:
            yield node.element
            node = node.backward if desc else node.forward
            count -= 1

    def range_by_rank(self, start: int, stop: int, desc: bool = False) -> list[Element]:
        """Return elements with 0-based rank in ``[start, stop)``."""
        return list(self.iter_by_rank(start, stop, desc))

    def range_count(self, min_border: Border, max_border: Border) -> int:
        """Return the number of elements between the borders."""
        count = 0
        for element in self._skiplist:
            if not min_border.less(element):
                continue
            if not max_border.greater(element):
                break
            count += 1
        return count

    def iter_range(
        self,
        min_border: Border,
        max_border: Border,
        offset: int = 0,
        limit: int = -1,
        desc: bool = False,
    ) -> Iterator[Element]:
        """Iterate over elements between the borders; a negative limit means no limit."""
        if desc:
            node = self._skiplist.get_last_in_range(min_border, max_border)
        else:
            node = self._skiplist.get_first_in_range(min_border, max_border)
        while node is not None and offset > 0:
            node = node.backward if desc else node.forward
            offset -= 1
        produced = 0
        while node is not None and (limit < 0 or produced < limit):
            if not min_border.less(node.element) or not max_border.greater(node.element):
                break
            yield node.element
            produced += 1
            node = node.backward if desc else node.forward

    def range(
        self,
        min_border: Border,
        max_border: Border,
        offset: int = 0,
        limit: int = -1,
        desc: bool = False,
    ) -> list[Element]:
        """Return elements between the borders; a negative limit means no limit."""
        if limit == 0 or offset < 0:
            return []
        return list(self.iter_range(min_border, max_border, offset, limit, desc))

    def _forget(self, removed: list[Element]) -> None:
        for element in removed:
            del self._dict[element.member]

    def remove_range(self, min_border: Border, max_border: Border) -> int:
        """Remove elements between the borders; return how many."""
        removed = self._skiplist.remove_range(min_border, max_border, 0)
        self._forget(removed)
        return len(removed)

    def pop_min(self, count: int = 1) -> list[Element]:
        """Remove and return up to ``count`` elements with the lowest order."""
        first = self._skiplist.first
        if first is None:
            return []
        border = ScoreBorder(value=first.element.score, exclude=False)
        removed = self._skiplist.remove_range(border, SCORE_POSITIVE_INF, count)
        self._forget(removed)
        return removed

    def remove_by_rank(self, start: int, stop: int) -> int:
        """Remove elements with 0-based rank in ``[start, stop)``; return how many."""
        removed = self._skiplist.remove_range_by_rank(start + 1, stop + 1)
        self._forget(removed)
        return len(removed)