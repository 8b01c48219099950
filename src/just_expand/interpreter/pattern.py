"""Pattern matching for ${var/pat/repl} and ${var#pat} forms.

Only `?` (one character) and `*` (any run) are special. A backslash
makes the next character literal; quoted pattern text arrives escaped
that way. Bracket expressions are not recognised, so `[` is literal.

Patterns compile to a token list and are matched by stepping a set of
token positions across the text, so one pass from a start offset yields
every end offset at which the pattern matches. Matching follows bash:
start offsets are tried left to right, and at the first offset where the
pattern matches the longest match is taken.
"""

from __future__ import annotations

from typing import Optional

LITERAL = "literal"
ANY = "any"
STAR = "star"


def compile_pattern(pattern: str) -> list[tuple[str, str]]:
    """Compile pattern text to (kind, char) tokens."""
    tokens: list[tuple[str, str]] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "*":
            # Adjacent stars are equivalent to one
            if not tokens or tokens[-1][0] != STAR:
                tokens.append((STAR, ""))
        elif c == "?":
            tokens.append((ANY, ""))
        elif c == "\\" and i + 1 < len(pattern):
            i += 1
            tokens.append((LITERAL, pattern[i]))
        else:
            tokens.append((LITERAL, c))
        i += 1
    return tokens


class Pattern:
    """A compiled wildcard pattern."""

    def __init__(self, pattern: str):
        self.source = pattern
        self.tokens = compile_pattern(pattern)

    def __repr__(self) -> str:
        return f"Pattern({self.source!r})"

    def _closure(self, states: set[int]) -> set[int]:
        # A star may match nothing, so the token after it is reachable too
        result = set(states)
        for state in states:
            k = state
            while k < len(self.tokens) and self.tokens[k][0] == STAR:
                k += 1
                result.add(k)
        return result

    def _step(self, states: set[int], char: str) -> set[int]:
        following = set()
        for state in states:
            if state >= len(self.tokens):
                continue
            kind, value = self.tokens[state]
            if kind == STAR:
                following.add(state)
            elif kind == ANY or value == char:
                following.add(state + 1)
        return self._closure(following)

    def match_ends(self, text: str, start: int, end: Optional[int] = None):
        """Yield, in increasing order, every index e such that
        text[start:e] matches the pattern."""
        if end is None:
            end = len(text)
        accept = len(self.tokens)
        states = self._closure({0})
        if accept in states:
            yield start
        for i in range(start, end):
            states = self._step(states, text[i])
            if not states:
                return
            if accept in states:
                yield i + 1

    def fullmatch(self, text: str) -> bool:
        """True if the pattern matches all of text."""
        return self.match_longest(text, 0) == len(text)

    def match_longest(self, text: str, start: int, end: Optional[int] = None) -> int:
        """End index of the longest match beginning at start, or -1."""
        longest = -1
        for stop in self.match_ends(text, start, end):
            longest = stop
        return longest

    def match_shortest(self, text: str, start: int, end: Optional[int] = None) -> int:
        """End index of the shortest match beginning at start, or -1."""
        return next(self.match_ends(text, start, end), -1)

    def search(self, text: str, start: int = 0) -> Optional[tuple[int, int]]:
        """Leftmost-longest match beginning at or after start and before
        the end of text. Returns (start, end) or None."""
        for i in range(start, len(text)):
            stop = self.match_longest(text, i)
            if stop >= 0:
                return i, stop
        return None


def replace_first(value: str, pattern: str, replacement: str) -> str:
    """${value/pattern/replacement}"""
    if not value or not pattern:
        return value
    found = Pattern(pattern).search(value)
    if found is None:
        return value
    start, end = found
    return value[:start] + replacement + value[end:]


def replace_all(value: str, pattern: str, replacement: str) -> str:
    """${value//pattern/replacement}

    Matches are non-overlapping, scanning left to right and resuming
    after each replaced span. A zero-length match still inserts the
    replacement and then consumes one character unchanged.
    """
    if not value or not pattern:
        return value
    compiled = Pattern(pattern)
    out = []
    i = 0
    while i < len(value):
        stop = compiled.match_longest(value, i)
        if stop < 0:
            out.append(value[i])
            i += 1
        elif stop == i:
            out.append(replacement)
            out.append(value[i])
            i += 1
        else:
            out.append(replacement)
            i = stop
    return "".join(out)


def replace_prefix(value: str, pattern: str, replacement: str) -> str:
    """${value/#pattern/replacement}

    An empty pattern matches at the start, so the replacement is prepended.
    """
    if not pattern:
        return replacement + value
    if not value:
        return value
    stop = Pattern(pattern).match_longest(value, 0)
    if stop < 0:
        return value
    return replacement + value[stop:]


def replace_suffix(value: str, pattern: str, replacement: str) -> str:
    """${value/%pattern/replacement}

    An empty pattern matches at the end, so the replacement is appended.
    """
    if not pattern:
        return value + replacement
    if not value:
        return value
    compiled = Pattern(pattern)
    for start in range(len(value) + 1):
        if compiled.match_longest(value, start) == len(value):
            return value[:start] + replacement
    return value


def remove_prefix(value: str, pattern: str, greedy: bool) -> str:
    """${value#pattern} (shortest) or ${value##pattern} (longest)."""
    if not value or not pattern:
        return value
    compiled = Pattern(pattern)
    stop = compiled.match_longest(value, 0) if greedy else compiled.match_shortest(value, 0)
    return value if stop < 0 else value[stop:]


def remove_suffix(value: str, pattern: str, greedy: bool) -> str:
    """${value%pattern} (shortest) or ${value%%pattern} (longest)."""
    if not value or not pattern:
        return value
    compiled = Pattern(pattern)
    starts = range(len(value) + 1) if greedy else range(len(value), -1, -1)
    for start in starts:
        if compiled.match_longest(value, start) == len(value):
            return value[:start]
    return value
