"""Range borders for score and lexicographic queries on a sorted set.

A score border accepts a number (``2``, ``-2.718``), an exclusive number
(``(2``), or an infinity (``+inf``, ``inf``, ``-inf``).  A lex border accepts
``[value`` (inclusive), ``(value`` (exclusive), ``+`` and ``-``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from redstore.protocol import StandardErrReply

if TYPE_CHECKING:
    from redstore.sortedset.skiplist import Element

NEGATIVE_INF = -1
NOT_INF = 0
POSITIVE_INF = 1

_NOT_A_FLOAT = "ERR min or max is not a float"
_NOT_A_LEX_ITEM = "ERR min or max not valid string range item"


class Border(ABC):
    """One end of a range.

    ``max_border.greater(e)`` tells whether ``e`` lies under the upper end;
    ``min_border.less(e)`` tells whether ``e`` lies above the lower end.
    """

    @abstractmethod
    def greater(self, element: Element) -> bool:
        """Return whether the element is within this border taken as the upper end."""

    @abstractmethod
    def less(self, element: Element) -> bool:
        """Return whether the element is within this border taken as the lower end."""

    @abstractmethod
    def is_intersected(self, other: Border) -> bool:
        """With self as lower and ``other`` as upper end, return whether the range is empty."""


@dataclass(frozen=True)
class ScoreBorder(Border):
    """A border on scores: <, <=, >, >=, +inf or -inf."""

    value: float = 0.0
    exclude: bool = False
    inf: int = NOT_INF

    def __post_init__(self) -> None:
        if self.inf == POSITIVE_INF:
            object.__setattr__(self, "value", math.inf)
        elif self.inf == NEGATIVE_INF:
            object.__setattr__(self, "value", -math.inf)

    def greater(self, element: Element) -> bool:
        if self.inf == NEGATIVE_INF:
            return False
        if self.inf == POSITIVE_INF:
            return True
        if self.exclude:
            return self.value > element.score
        return self.value >= element.score

    def less(self, element: Element) -> bool:
        if self.inf == NEGATIVE_INF:
            return True
        if self.inf == POSITIVE_INF:
            return False
        if self.exclude:
            return self.value < element.score
        return self.value <= element.score

    def is_intersected(self, other: Border) -> bool:
        if not isinstance(other, ScoreBorder):
            raise TypeError("a score border can only be paired with a score border")
        return self.value > other.value or (
            self.value == other.value and (self.exclude or other.exclude)
        )


@dataclass(frozen=True)
class LexBorder(Border):
    """A border on members: <, <=, >, >=, + or -."""

    value: str = ""
    exclude: bool = False
    inf: int = NOT_INF

    def greater(self, element: Element) -> bool:
        if self.inf == NEGATIVE_INF:
            return False
        if self.inf == POSITIVE_INF:
            return True
        if self.exclude:
            return self.value > element.member
        return self.value >= element.member

    def less(self, element: Element) -> bool:
        if self.inf == NEGATIVE_INF:
            return True
        if self.inf == POSITIVE_INF:
            return False
        if self.exclude:
            return self.value < element.member
        return self.value <= element.member

    def is_intersected(self, other: Border) -> bool:
        if not isinstance(other, LexBorder):
            raise TypeError("a lex border can only be paired with a lex border")
        if self.inf == POSITIVE_INF or other.inf == NEGATIVE_INF:
            return True
        if self.inf == NEGATIVE_INF or other.inf == POSITIVE_INF:
            return False
        return self.value > other.value or (
            self.value == other.value and (self.exclude or other.exclude)
        )


SCORE_POSITIVE_INF = ScoreBorder(inf=POSITIVE_INF)
SCORE_NEGATIVE_INF = ScoreBorder(inf=NEGATIVE_INF)
LEX_POSITIVE_INF = LexBorder(inf=POSITIVE_INF)
LEX_NEGATIVE_INF = LexBorder(inf=NEGATIVE_INF)


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise StandardErrReply(_NOT_A_FLOAT)
    try:
        return float(text)
    except ValueError:
        raise StandardErrReply(_NOT_A_FLOAT) from None


def parse_score_border(s: str) -> ScoreBorder:
    """Parse a ``min``/``max`` argument of ZRANGEBYSCORE."""
    if s in ("inf", "+inf"):
        return SCORE_POSITIVE_INF
    if s == "-inf":
        return SCORE_NEGATIVE_INF
    if s.startswith("("):
        return ScoreBorder(value=_parse_float(s[1:]), exclude=True)
    return ScoreBorder(value=_parse_float(s), exclude=False)


def parse_lex_border(s: str) -> LexBorder:
    """Parse a ``min``/``max`` argument of ZRANGEBYLEX."""
    if s == "+":
        return LEX_POSITIVE_INF
    if s == "-":
        return LEX_NEGATIVE_INF
    if s.startswith("("):
        return LexBorder(value=s[1:], exclude=True)
    if s.startswith("["):
        return LexBorder(value=s[1:], exclude=False)
    raise StandardErrReply(_NOT_A_LEX_ITEM)