from __future__ import annotations

from collections.abc import Sequence

from .config import FormatConfig
from .cxx import WITH_PREFIX
from .lexer import Source, match_group, tokenize
from .printer import Hidden, print_span
from .spans import FormatInstruction, Span
from .tokens import TokenKind


def _source(src: Source | str) -> Source:
    return Source.of(src) if isinstance(src, str) else src


def _top_level(src: Source, start: int, end: int):
    """Tokens of `src[start:end]` outside any nested group."""
    depth = 0
    for tok in tokenize(src, start, end):
        if tok.kind is TokenKind.CLOSE:
            depth -= 1
        elif depth == 0:
            yield tok
        if tok.kind is TokenKind.OPEN:
            depth += 1


def find_with_clause(src: Source, span: Span) -> Span | None:
    """The `[with ...]` group of a function signature, brackets included."""
    for tok in _top_level(src, span.start, span.end):
        if tok.kind is TokenKind.OPEN and src.text.startswith(WITH_PREFIX, tok.start):
            close = match_group(src, tok.start, span.end)
            if close is not None:
                return Span(tok.start, close + 1)
    return None


def _substitutions(src: Source, start: int, end: int) -> list[Span]:
    out: list[Span] = []
    piece = start
    for tok in _top_level(src, start, end):
        if tok.kind is TokenKind.PUNCT and ";" in tok.text(src.text):
            out.append(Span(piece, tok.start))
            piece = tok.end
    if piece < end:
        out.append(Span(piece, end))
    return out


def _value_start(src: Source, sub: Span) -> int | None:
    """Offset just past "NAME = " in one substitution."""
    for tok in _top_level(src, sub.start, sub.end):
        if tok.kind is TokenKind.SYMBOL and tok.text(src.text) == "=":
            return src.skip(tok.end, TokenKind.SPACE, sub.end)
    return None


def format_type(
    src: Source | str,
    span: Span | None = None,
    *,
    indent: int = 0,
    config: FormatConfig | None = None,
    hidden: Sequence[Hidden] = (),
) -> list[FormatInstruction]:
    src = _source(src)
    config = config or FormatConfig()
    span = Span(0, len(src)) if span is None else span
    return print_span(
        src,
        span.start,
        span.end,
        width=config.fill_width,
        indent_unit=config.indent_unit,
        indent=indent,
        hidden=hidden,
    )


def format_function(
    src: Source | str,
    span: Span | None = None,
    *,
    indent: int = 0,
    config: FormatConfig | None = None,
    hidden: Sequence[Hidden] = (),
) -> list[FormatInstruction]:
    """Fill the signature, then put each with-clause substitution on its own line.

    A substitution value is filled as a type starting after its "NAME = " label.
    """
    src = _source(src)
    config = config or FormatConfig()
    span = Span(0, len(src)) if span is None else span

    clause = find_with_clause(src, span)
    folded = clause is not None and any(h.span.start == clause.start + 1 for h in hidden)
    if clause is None or folded:
        return format_type(src, span, indent=indent, config=config, hidden=hidden)

    out = format_type(src, Span(span.start, clause.start), indent=indent, config=config, hidden=hidden)
    sub_indent = indent + config.indent_unit
    for sub in _substitutions(src, clause.start + len(WITH_PREFIX), clause.end - 1):
        out.append(FormatInstruction(sub.start, sub_indent))
        value = _value_start(src, sub)
        if value is None:
            out.extend(format_type(src, sub, indent=sub_indent, config=config, hidden=hidden))
            continue
        label = value - sub.start
        out.extend(
            format_type(src, Span(value, sub.end), indent=sub_indent + label, config=config, hidden=hidden)
        )
    return out
