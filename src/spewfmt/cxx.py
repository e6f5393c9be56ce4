from __future__ import annotations

"""
The C++ dialect found in compiler diagnostics, in one place:

- **Keyword policy**: qualifiers, specifiers and member-function qualifiers
- **Grammar**: `type_` and `function` parsers built from the combinators
- **Recognition**: `recognize()` confirming a span as a function or a type

Nested groups are taken whole; nothing is decomposed into a tree.

This module is meant to be *human scannable*.
"""

from dataclasses import dataclass

from .combinators import (
    ParseFn,
    Result,
    alternative,
    group,
    keyword,
    literal,
    multiple,
    one_of,
    optional,
    prefixed_group,
    sequential,
    symbol,
    whitespace,
)
from .lexer import Source
from .spans import Span


# ---------------------------------------------------------------------------
# Keyword policy
# ---------------------------------------------------------------------------

# May precede a type name, each followed by whitespace ("const ", "unsigned ").
QUALIFIERS: tuple[str, ...] = (
    "const",
    "volatile",
    "unsigned",
    "signed",
    "long",
    "short",
    "struct",
    "class",
    "union",
    "enum",
    "typename",
)

SPECIFIERS: tuple[str, ...] = ("constexpr", "static", "virtual", "inline", "explicit")

MEMFN_QUALIFIERS: tuple[str, ...] = ("const", "volatile", "&&", "&", "noexcept")

REF_MODIFIERS: tuple[str, ...] = ("*", "&", "&&")

WITH_PREFIX = "[with "


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

cv_or_qual = alternative(*(keyword(q) for q in QUALIFIERS))

decltype_expr = sequential(
    optional(keyword("constexpr")),
    literal("decltype"),
    optional(whitespace),  # gcc prints "decltype (x)"
    group("("),
)

# std::vector<int>::iterator, A<int>::B<char>
template_suffix = multiple(sequential(group("<"), optional(symbol)))

type_ = alternative(
    decltype_expr,
    sequential(
        optional(multiple(cv_or_qual)),
        symbol,
        optional(template_suffix),
        optional(sequential(whitespace, one_of(*REF_MODIFIERS))),
    ),
)

template_preamble = sequential(literal("template"), optional(whitespace), group("<"), whitespace)

with_clause = prefixed_group(WITH_PREFIX)

memfn_qual = one_of(*MEMFN_QUALIFIERS)

trailing_return = sequential(literal("->"), whitespace, type_, optional(whitespace))

call_tail = sequential(
    group("("),
    optional(whitespace),
    optional(multiple(sequential(memfn_qual, optional(whitespace)))),
    optional(trailing_return),
    optional(with_clause),
)

# No return type for constructors: "Foo(int)" vs "void foo(int)".
function = sequential(
    optional(template_preamble),
    optional(multiple(alternative(*(keyword(s) for s in SPECIFIERS)))),
    optional(sequential(type_, whitespace)),
    alternative(
        sequential(type_, call_tail),
        # clang: "function template specialization 'foo<int>'"
        sequential(symbol, group("<")),
    ),
)


def parse_type(src: Source, pos: int = 0) -> Result:
    return type_(src, pos)


def parse_function(src: Source, pos: int = 0) -> Result:
    return function(src, pos)


# ---------------------------------------------------------------------------
# Recognition
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Match:
    kind: str  # "function" | "type"
    span: Span

    def is_complete(self, src: Source) -> bool:
        return self.span.start == 0 and self.span.end == len(src)


def _attempt(kind: str, parser: ParseFn, src: Source) -> Match | None:
    ok, end = parser(src, 0)
    if not ok or end == 0:
        return None
    return Match(kind=kind, span=Span(0, end))


def recognize(src: Source) -> Match | None:
    """Confirm the longest prefix of `src` that reads as a function, else a type."""
    fn = _attempt("function", function, src)
    if fn is not None and fn.is_complete(src):
        return fn
    ty = _attempt("type", type_, src)
    if ty is None:
        return fn
    if fn is None or len(ty.span) > len(fn.span):
        return ty
    return fn
