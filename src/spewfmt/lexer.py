from __future__ import annotations

import re
from dataclasses import dataclass

from .spans import Span
from .tokens import CLOSERS, OPENERS, PAIRS, Token, TokenKind


_PUNCT = ",;"
_SPACE = " \t\r\n"

# Spellings that contain delimiter characters but must read as one symbol.
_SPECIAL_RES: tuple[re.Pattern[str], ...] = (
    # char literals: '(' or ',' must not open groups or split lists
    re.compile(r"'(?:\\.|[^'\\])'"),
    re.compile(
        r"\boperator\s*(?:\(\)|\[\]|<=>|<<=|>>=|<<|>>|<=|>=|->\*|->|<|>|,"
        r"|(?:new|delete)\s*\[\])"
    ),
    # trailing return types
    re.compile(r"->\*?"),
    # gcc: main()::<lambda(int)>
    re.compile(r"<lambda\((?:[^()]|\([^()]*\))*\)>"),
    # gcc: {anonymous}::Foo, <unnamed struct>
    re.compile(r"\{anonymous\}|<(?:anonymous|unnamed)(?: (?:class|struct|union|enum))?>"),
    # clang: (lambda at a.cpp:3:9), (anonymous namespace)
    re.compile(
        r"\((?:lambda|(?:anonymous|unnamed)(?: (?:class|struct|union|enum))?) at [^()]*\)"
        r"|\(anonymous namespace\)"
    ),
)


def _base_class(ch: str) -> TokenKind:
    if ch in _PUNCT:
        return TokenKind.PUNCT
    if ch in OPENERS:
        return TokenKind.OPEN
    if ch in CLOSERS:
        return TokenKind.CLOSE
    if ch in _SPACE:
        return TokenKind.SPACE
    return TokenKind.SYMBOL


def classify(text: str) -> tuple[TokenKind, ...]:
    """Character class of every position in `text`.

    Special spellings are matched first against the raw text and forced to
    SYMBOL, so an operator name or lambda label never opens a group.
    """
    classes = [_base_class(ch) for ch in text]
    for rx in _SPECIAL_RES:
        for m in rx.finditer(text):
            for i in range(m.start(), m.end()):
                classes[i] = TokenKind.SYMBOL
    return tuple(classes)


@dataclass(frozen=True, slots=True)
class Source:
    text: str
    classes: tuple[TokenKind, ...]

    @classmethod
    def of(cls, text: str) -> "Source":
        return cls(text=text, classes=classify(text))

    def __len__(self) -> int:
        return len(self.text)

    def kind_at(self, i: int) -> TokenKind | None:
        if 0 <= i < len(self.text):
            return self.classes[i]
        return None

    def skip(self, i: int, kind: TokenKind, end: int | None = None) -> int:
        """Index of the first position at or after `i` not of class `kind`."""
        end = len(self.text) if end is None else end
        while i < end and self.classes[i] is kind:
            i += 1
        return i


def match_group(src: Source, open_pos: int, end: int | None = None) -> int | None:
    """Index of the delimiter closing the group opened at `open_pos`.

    Returns None when `open_pos` is not an opener or the group is unbalanced
    (or closed by the wrong kind of delimiter) before `end`.
    """
    end = len(src) if end is None else end
    if src.kind_at(open_pos) is not TokenKind.OPEN:
        return None
    expected: list[str] = []
    for i in range(open_pos, end):
        k = src.classes[i]
        if k is TokenKind.OPEN:
            expected.append(PAIRS[src.text[i]])
        elif k is TokenKind.CLOSE:
            if not expected or src.text[i] != expected.pop():
                return None
            if not expected:
                return i
    return None


def forward_sexp(src: Source, i: int, end: int | None = None) -> int:
    """Move over one balanced unit: a whole group from its opener, else a symbol run."""
    end = len(src) if end is None else end
    if src.kind_at(i) is TokenKind.OPEN:
        close = match_group(src, i, end)
        return i + 1 if close is None else close + 1
    j = src.skip(i, TokenKind.SYMBOL, end)
    return j if j > i else i + 1


def tokenize(src: Source, start: int = 0, end: int | None = None) -> list[Token]:
    """Split `src.text[start:end]` into contiguous, non-overlapping tokens."""
    end = len(src) if end is None else end
    tokens: list[Token] = []
    i = start
    while i < end:
        k = src.classes[i]
        if k is TokenKind.PUNCT:
            j = src.skip(i, TokenKind.PUNCT, end)
            j = src.skip(j, TokenKind.SPACE, end)
        elif k is TokenKind.OPEN:
            j = i + 1
        elif k is TokenKind.CLOSE:
            j = i + 1
            w = src.skip(j, TokenKind.SPACE, end)
            # "> >" closes cleanly; "> [with" keeps its space as a token.
            if w > j and src.kind_at(w) is TokenKind.CLOSE and w < end:
                j = w
        elif k is TokenKind.SPACE:
            j = src.skip(i, TokenKind.SPACE, end)
        else:
            j = forward_sexp(src, i, end)
        tokens.append(Token(k, Span(i, j)))
        i = j
    return tokens
