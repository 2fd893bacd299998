"""Glob-style patterns as used by KEYS and PSUBSCRIBE."""

from __future__ import annotations

import re

_REPLACEMENTS = {
    "+": r"\+",
    ")": r"\)",
    "$": r"\$",
    ".": r"\.",
    "{": r"\{",
    "}": r"\}",
    "|": r"\|",
    "*": ".*",
    "?": ".",
}

_END_WITH_ESCAPE = "end with escape \\"


class WildcardError(ValueError):
    """Raised when a wildcard pattern cannot be compiled."""


class Pattern:
    """A compiled wildcard pattern."""

    __slots__ = ("_regex",)

    def __init__(self, regex: re.Pattern[str]) -> None:
        self._regex = regex

    def is_match(self, s: str) -> bool:
        """Return whether the whole string matches the pattern."""
        return self._regex.fullmatch(s) is not None

    def __repr__(self) -> str:
        return f"Pattern({self._regex.pattern!r})"


def compile_pattern(src: str) -> Pattern:
    """Compile a wildcard string into a Pattern."""
    parts: list[str] = []
    prev = ""
    prev2 = ""
    chars = iter(src)
    for ch in chars:
        if ch == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise WildcardError(_END_WITH_ESCAPE)
            parts.append("\\" + escaped)
            prev2, prev = ch, escaped
            continue
        if ch == "^":
            # a caret opens a negated class only right after an unescaped '['
            parts.append("^" if prev == "[" and prev2 != "\\" else r"\^")
        else:
            parts.append(_REPLACEMENTS.get(ch, ch))
        prev2, prev = prev, ch
    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        raise WildcardError(str(exc)) from exc
    return Pattern(regex)