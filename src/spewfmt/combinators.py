from __future__ import annotations

"""Backtracking parser combinators over a `Source`.

A parser is any callable `(src, pos) -> (ok, new_pos)`. A parser that fails
returns `(False, pos)` with the position it was given, so a caller can always
try something else from the same place.
"""

from collections.abc import Callable

from .lexer import Source, match_group
from .tokens import TokenKind


Result = tuple[bool, int]
ParseFn = Callable[[Source, int], Result]


def sequential(*parsers: ParseFn) -> ParseFn:
    def parse(src: Source, pos: int) -> Result:
        cur = pos
        for p in parsers:
            ok, cur = p(src, cur)
            if not ok:
                return False, pos
        return True, cur

    return parse


def alternative(*parsers: ParseFn) -> ParseFn:
    def parse(src: Source, pos: int) -> Result:
        for p in parsers:
            ok, cur = p(src, pos)
            if ok:
                return True, cur
        return False, pos

    return parse


def optional(parser: ParseFn) -> ParseFn:
    def parse(src: Source, pos: int) -> Result:
        ok, cur = parser(src, pos)
        return True, (cur if ok else pos)

    return parse


def multiple(parser: ParseFn) -> ParseFn:
    """One or more repetitions, greedy."""

    def parse(src: Source, pos: int) -> Result:
        ok, cur = parser(src, pos)
        if not ok:
            return False, pos
        while True:
            ok, nxt = parser(src, cur)
            # a zero-width success would repeat forever
            if not ok or nxt == cur:
                return True, cur
            cur = nxt

    return parse


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


def _run(kind: TokenKind) -> ParseFn:
    def parse(src: Source, pos: int) -> Result:
        end = src.skip(pos, kind)
        if end == pos:
            return False, pos
        return True, end

    return parse


symbol = _run(TokenKind.SYMBOL)
whitespace = _run(TokenKind.SPACE)


def literal(text: str) -> ParseFn:
    """Exactly `text` as a whole symbol run (not a prefix of a longer one)."""

    def parse(src: Source, pos: int) -> Result:
        end = src.skip(pos, TokenKind.SYMBOL)
        if src.text[pos:end] != text:
            return False, pos
        return True, end

    return parse


def one_of(*texts: str) -> ParseFn:
    return alternative(*(literal(t) for t in texts))


def keyword(text: str) -> ParseFn:
    """`text` followed by mandatory whitespace."""
    return sequential(literal(text), whitespace)


cv_qualifier = alternative(keyword("const"), keyword("volatile"))


def group(opener: str) -> ParseFn:
    """A balanced group starting with `opener`, taken whole."""

    def parse(src: Source, pos: int) -> Result:
        if pos >= len(src) or src.text[pos] != opener:
            return False, pos
        close = match_group(src, pos)
        if close is None:
            return False, pos
        return True, close + 1

    return parse


def prefixed_group(prefix: str) -> ParseFn:
    """A balanced group whose text starts with `prefix`, e.g. "[with "."""
    inner = group(prefix[0])

    def parse(src: Source, pos: int) -> Result:
        if not src.text.startswith(prefix, pos):
            return False, pos
        return inner(src, pos)

    return parse
