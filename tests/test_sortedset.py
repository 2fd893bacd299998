import random

import pytest

from redstore.sortedset.border import (
    SCORE_NEGATIVE_INF,
    SCORE_POSITIVE_INF,
    parse_lex_border,
    parse_score_border,
)
from redstore.sortedset.sortedset import SortedSet


def _members(elements):
    return [e.member for e in elements]


@pytest.fixture
def abc():
    s = SortedSet()
    s.add("a", 1)
    s.add("b", 2)
    s.add("c", 3)
    return s


def test_pop_min():
    s = SortedSet()
    s.add("s1", 1)
    s.add("s2", 2)
    s.add("s3", 3)
    s.add("s4", 4)
    results = s.pop_min(2)
    assert _members(results) == ["s1", "s2"]
    assert len(s) == 2
    assert "s1" not in s


def test_pop_min_empty():
    assert SortedSet().pop_min(3) == []


def test_add_returns_new_and_updates(abc):
    assert abc.add("a", 10) is False
    assert abc.add("d", 0) is True
    assert _members(abc) == ["d", "b", "c", "a"]
    assert abc.get("a").score == 10


def test_get_missing(abc):
    assert abc.get("zzz") is None


def test_remove(abc):
    assert abc.remove("b") is True
    assert abc.remove("b") is False
    assert _members(abc) == ["a", "c"]


def test_get_rank(abc):
    assert abc.get_rank("a") == 0
    assert abc.get_rank("b") == 1
    assert abc.get_rank("a", desc=True) == 2
    assert abc.get_rank("c", desc=True) == 0
    assert abc.get_rank("nope") == -1


def test_range_by_rank(abc):
    assert _members(abc.range_by_rank(0, 3)) == ["a", "b", "c"]
    assert _members(abc.range_by_rank(1, 3)) == ["b", "c"]
    assert _members(abc.range_by_rank(0, 2, desc=True)) == ["c", "b"]
    assert _members(abc.range_by_rank(1, 3, desc=True)) == ["b", "a"]


@pytest.mark.parametrize("start,stop", [(-1, 1), (3, 3), (2, 1), (0, 4)])
def test_iter_by_rank_illegal(abc, start, stop):
    with pytest.raises(IndexError):
        abc.iter_by_rank(start, stop)


def test_range_by_score(abc):
    lo, hi = parse_score_border("(1"), parse_score_border("3")
    assert _members(abc.range(lo, hi)) == ["b", "c"]
    assert _members(abc.range(lo, hi, desc=True)) == ["c", "b"]
    assert _members(abc.range(lo, hi, offset=1, limit=1)) == ["c"]
    assert abc.range(lo, hi, limit=0) == []
    assert abc.range(lo, hi, offset=-1) == []


def test_range_all(abc):
    assert _members(abc.range(SCORE_NEGATIVE_INF, SCORE_POSITIVE_INF)) == ["a", "b", "c"]


def test_range_count(abc):
    assert abc.range_count(parse_score_border("2"), parse_score_border("+inf")) == 2
    assert abc.range_count(parse_score_border("(3"), parse_score_border("+inf")) == 0


def test_lex_range():
    s = SortedSet()
    for m in "abcde":
        s.add(m, 0)
    lo, hi = parse_lex_border("[b"), parse_lex_border("(d")
    assert _members(s.range(lo, hi)) == ["b", "c"]
    assert s.range_count(lo, hi) == 2
    assert _members(s.range(parse_lex_border("-"), parse_lex_border("+"), desc=True)) == list("edcba")


def test_remove_range(abc):
    assert abc.remove_range(parse_score_border("2"), parse_score_border("3")) == 2
    assert _members(abc) == ["a"]
    assert abc.get("b") is None


def test_remove_by_rank(abc):
    assert abc.remove_by_rank(0, 2) == 2
    assert _members(abc) == ["c"]
    assert len(abc) == 1


def test_order_invariant():
    s = SortedSet()
    rng = random.Random(7)
    pairs = {f"m{i}": rng.randint(0, 20) for i in range(200)}
    for member, score in pairs.items():
        s.add(member, score)
    got = [(e.score, e.member) for e in s.range_by_rank(0, 200)]
    assert got == sorted((score, member) for member, score in pairs.items())
    for rank, (_, member) in enumerate(got):
        assert s.get_rank(member) == rank