"""A set of string members with random sampling and set algebra."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from redstore.dicts import SimpleDict


class Set:
    """A hash set of strings."""

    __slots__ = ("_dict",)

    def __init__(self, members: Iterable[str] = ()) -> None:
        self._dict = SimpleDict()
        for member in members:
            self.add(member)

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, member: object) -> bool:
        return member in self._dict

    def __iter__(self) -> Iterator[str]:
        return iter(self._dict)

    def __repr__(self) -> str:
        return f"Set({self.to_list()!r})"

    def add(self, val: str) -> int:
        """Add a member; return 1 if it is new, else 0."""
        return self._dict.put(val, None)

    def remove(self, val: str) -> int:
        """Remove a member; return 1 if it was present, else 0."""
        return self._dict.remove(val)

    def to_list(self) -> list[str]:
        """Return the members as a list."""
        return self._dict.keys()

    def copy(self) -> Set:
        """Return a shallow copy."""
        return Set(self)

    def random_members(self, limit: int) -> list[str]:
        """Return ``limit`` random members, possibly with duplicates."""
        return self._dict.random_keys(limit)

    def random_distinct_members(self, limit: int) -> list[str]:
        """Return up to ``limit`` random members without duplicates."""
        return self._dict.random_distinct_keys(limit)


def intersect(*sets: Set) -> Set:
    """Return the members present in every given set."""
    if not sets:
        return Set()
    counts = Counter(member for s in sets for member in s)
    return Set(member for member, count in counts.items() if count == len(sets))


def union(*sets: Set) -> Set:
    """Return the members present in any given set."""
    return Set(member for s in sets for member in s)


def diff(*sets: Set) -> Set:
    """Return the members of the first set absent from all the others."""
    if not sets:
        return Set()
    result = sets[0].copy()
    for other in sets[1:]:
        for member in other:
            result.remove(member)
        if not len(result):
            break
    return result