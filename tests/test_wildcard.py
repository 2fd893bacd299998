import pytest

from redstore.wildcard import WildcardError, compile_pattern


@pytest.mark.parametrize(
    "pattern, matching, not_matching",
    [
        ("", [""], []),
        ("a", ["a"], ["b"]),
        ("a?", ["ab"], ["a", "abb", "bb"]),
        ("a*", ["ab", "a", "abb"], ["bb"]),
        ("a[ab[]", ["ab", "aa", "a["], ["abb", "bb"]),
        ("h[a-c]llo", ["hallo", "hbllo", "hcllo"], ["hdllo", "hello"]),
        ("h[^ab]llo", ["hcllo"], ["hallo", "hbllo"]),
        ("[^ab]c", ["1c"], ["abc"]),
        ("1^2", ["1^2"], []),
        (r"\[^1]2", ["[^1]2"], []),
        ("^1", ["^1"], []),
        (r"\\\\", [r"\\"], []),
        ("\\*", ["*"], ["a"]),
    ],
)
def test_wildcard(pattern, matching, not_matching):
    compiled = compile_pattern(pattern)
    for s in matching:
        assert compiled.is_match(s), (pattern, s)
    for s in not_matching:
        assert not compiled.is_match(s), (pattern, s)


def test_end_with_escape():
    with pytest.raises(WildcardError) as info:
        compile_pattern("\\")
    assert str(info.value) == "end with escape \\"


def test_regex_metacharacters_are_literal():
    compiled = compile_pattern("a.b+c$d|e{1}")
    assert compiled.is_match("a.b+c$d|e{1}")
    assert not compiled.is_match("axbbc$d|e{1}")


def test_unbalanced_parenthesis_is_an_error():
    with pytest.raises(WildcardError):
        compile_pattern("a(")


def test_match_is_anchored_at_end():
    compiled = compile_pattern("abc")
    assert not compiled.is_match("abc\n")
    assert not compiled.is_match("xabc")