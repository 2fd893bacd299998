"""A skip list ordered by score, then member, with span-based ranks."""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass

from redstore.sortedset.border import Border

MAX_LEVEL = 16


@dataclass(frozen=True)
class Element:
    """A member with its score."""

    member: str
    score: float


class _Level:
    __slots__ = ("forward", "span")

    def __init__(self) -> None:
        self.forward: _Node | None = None
        self.span = 0


class _Node:
    __slots__ = ("element", "backward", "levels")

    def __init__(self, level: int, score: float, member: str) -> None:
        self.element = Element(member, score)
        self.backward: _Node | None = None
        self.levels = [_Level() for _ in range(level)]

    @property
    def forward(self) -> _Node | None:
        """The next node on the base level."""
        return self.levels[0].forward


def random_level() -> int:
    """Return a level in ``[1, MAX_LEVEL]``; each level is half as likely as the one below."""
    total = (1 << MAX_LEVEL) - 1
    k = random.getrandbits(64) % total
    return MAX_LEVEL - (k + 1).bit_length() + 1


def _before(element: Element, score: float, member: str) -> bool:
    return element.score < score or (element.score == score and element.member < member)


class Skiplist:
    """Elements kept in ascending ``(score, member)`` order."""

    def __init__(self) -> None:
        self.header = _Node(MAX_LEVEL, 0, "")
        self.tail: _Node | None = None
        self.length = 0
        self.level = 1

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[Element]:
        node = self.header.forward
        while node is not None:
            yield node.element
            node = node.forward

    @property
    def first(self) -> _Node | None:
        """The node with the lowest order, or None if empty."""
        return self.header.forward

    def insert(self, member: str, score: float) -> _Node:
        """Insert a member; the caller ensures it is not already present."""
        update: list[_Node] = [self.header] * MAX_LEVEL
        rank = [0] * MAX_LEVEL
        node = self.header
        for i in range(self.level - 1, -1, -1):
            rank[i] = 0 if i == self.level - 1 else rank[i + 1]
            while True:
                fwd = node.levels[i].forward
                if fwd is None or not _before(fwd.element, score, member):
                    break
                rank[i] += node.levels[i].span
                node = fwd
            update[i] = node

        level = random_level()
        if level > self.level:
            for i in range(self.level, level):
                rank[i] = 0
                update[i] = self.header
                self.header.levels[i].span = self.length
            self.level = level

        node = _Node(level, score, member)
        for i in range(level):
            prev_level = update[i].levels[i]
            node.levels[i].forward = prev_level.forward
            prev_level.forward = node
            node.levels[i].span = prev_level.span - (rank[0] - rank[i])
            prev_level.span = rank[0] - rank[i] + 1

        for i in range(level, self.level):
            update[i].levels[i].span += 1

        node.backward = None if update[0] is self.header else update[0]
        if node.levels[0].forward is not None:
            node.levels[0].forward.backward = node
        else:
            self.tail = node
        self.length += 1
        return node

    def _remove_node(self, node: _Node, update: list[_Node]) -> None:
        for i in range(self.level):
            prev_level = update[i].levels[i]
            if prev_level.forward is node:
                prev_level.span += node.levels[i].span - 1
                prev_level.forward = node.levels[i].forward
            else:
                prev_level.span -= 1
        if node.levels[0].forward is not None:
            node.levels[0].forward.backward = node.backward
        else:
            self.tail = node.backward
        while self.level > 1 and self.header.levels[self.level - 1].forward is None:
            self.level -= 1
        self.length -= 1

    def remove(self, member: str, score: float) -> bool:
        """Remove the member with the given score; return whether it was found."""
        update: list[_Node] = [self.header] * MAX_LEVEL
        node = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = node.levels[i].forward
                if fwd is None or not _before(fwd.element, score, member):
                    break
                node = fwd
            update[i] = node
        target = node.levels[0].forward
        if target is not None and target.element.score == score and target.element.member == member:
            self._remove_node(target, update)
            return True
        return False

    def get_rank(self, member: str, score: float) -> int:
        """Return the 1-based rank of the member, or 0 if it is not present."""
        rank = 0
        node = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = node.levels[i].forward
                if fwd is None:
                    break
                e = fwd.element
                if not (e.score < score or (e.score == score and e.member <= member)):
                    break
                rank += node.levels[i].span
                node = fwd
            if node is not self.header and node.element.member == member:
                return rank
        return 0

    def get_by_rank(self, rank: int) -> _Node | None:
        """Return the node at a 1-based rank, or None if out of range."""
        if rank <= 0:
            return None
        i = 0
        node = self.header
        for level in range(self.level - 1, -1, -1):
            while node.levels[level].forward is not None and i + node.levels[level].span <= rank:
                i += node.levels[level].span
                node = node.levels[level].forward
            if i == rank:
                return node
        return None

    def has_in_range(self, min_border: Border, max_border: Border) -> bool:
        """Return whether any element lies between the borders."""
        if min_border.is_intersected(max_border):
            return False
        if self.tail is None or not min_border.less(self.tail.element):
            return False
        head = self.header.forward
        return head is not None and max_border.greater(head.element)

    def get_first_in_range(self, min_border: Border, max_border: Border) -> _Node | None:
        """Return the lowest node between the borders, or None."""
        if not self.has_in_range(min_border, max_border):
            return None
        node = self.header
        for level in range(self.level - 1, -1, -1):
            while True:
                fwd = node.levels[level].forward
                if fwd is None or min_border.less(fwd.element):
                    break
                node = fwd
        node = node.levels[0].forward
        if node is None or not max_border.greater(node.element):
            return None
        return node

    def get_last_in_range(self, min_border: Border, max_border: Border) -> _Node | None:
        """Return the highest node between the borders, or None."""
        if not self.has_in_range(min_border, max_border):
            return None
        node = self.header
        for level in range(self.level - 1, -1, -1):
            while True:
                fwd = node.levels[level].forward
                if fwd is None or not max_border.greater(fwd.element):
                    break
                node = fwd
        if node is self.header or not min_border.less(node.element):
            return None
        return node

    def remove_range(self, min_border: Border, max_border: Border, limit: int = 0) -> list[Element]:
        """Remove elements between the borders, at most ``limit`` if it is positive."""
        update: list[_Node] = [self.header] * MAX_LEVEL
        removed: list[Element] = []
        node = self.header
        for i in range(self.level - 1, -1, -1):
            while True:
                fwd = node.levels[i].forward
                if fwd is None or min_border.less(fwd.element):
                    break
                node = fwd
            update[i] = node

        current = node.levels[0].forward
        while current is not None:
            if not max_border.greater(current.element):
                break
            following = current.levels[0].forward
            removed.append(current.element)
            self._remove_node(current, update)
            if limit > 0 and len(removed) == limit:
                break
            current = following
        return removed

    def remove_range_by_rank(self, start: int, stop: int) -> list[Element]:
        """Remove elements with 1-based rank in ``[start, stop)``."""
        update: list[_Node] = [self.header] * MAX_LEVEL
        removed: list[Element] = []
        i = 0
        node = self.header
        for level in range(self.level - 1, -1, -1):
            while node.levels[level].forward is not None and i + node.levels[level].span < start:
                i += node.levels[level].span
                node = node.levels[level].forward
            update[level] = node

        i += 1
        current = node.levels[0].forward
        while current is not None and i < stop:
            following = current.levels[0].forward
            removed.append(current.element)
            self._remove_node(current, update)
            current = following
            i += 1
        return removed