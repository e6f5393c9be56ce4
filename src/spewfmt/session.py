from __future__ import annotations

"""Diagnostic line coordination: find quoted C++ in compiler output, confirm it
with the grammar, and attach fill instructions and fold metadata."""

from dataclasses import dataclass, field

from .config import FormatConfig
from .cxx import Match, recognize
from .depth import FoldState, depth_regions, fold
from .errors import FoldError
from .format import format_function, format_type
from .lexer import Source
from .log import get_logger
from .spans import DepthRegion, FormatInstruction, Span


log = get_logger(__name__)

SMART_OPEN = "‘"
SMART_CLOSE = "’"

# a character literal's opening quote follows one of these
_LITERAL_LEAD = "<(,[{= "


@dataclass(frozen=True, slots=True)
class Note:
    kind: str  # "unparsed" | "partial"
    span: Span
    message: str


@dataclass(frozen=True, slots=True)
class FormattedExpression:
    quote: Span  # between the quote characters
    match: Span
    kind: str
    column: int
    leading_break: bool
    instructions: tuple[FormatInstruction, ...]
    regions: tuple[DepthRegion, ...]
    fold: FoldState


@dataclass(frozen=True, slots=True)
class LineResult:
    span: Span
    expressions: tuple[FormattedExpression, ...] = ()
    notes: tuple[Note, ...] = ()


def _plain_close(line: str, i: int) -> int | None:
    while i < len(line):
        if line[i] == "'":
            lead_ok = line[i - 1] in _LITERAL_LEAD
            if lead_ok and i + 2 < len(line) and line[i + 1] != "'" and line[i + 2] == "'":
                i += 3
                continue
            if lead_ok and line.startswith("\\", i + 1) and i + 3 < len(line) and line[i + 3] == "'":
                i += 4
                continue
            return i
        i += 1
    return None


def find_quoted(line: str) -> list[Span]:
    """Interiors of ‘smart’ or 'plain' quoted runs in one line."""
    out: list[Span] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == SMART_OPEN:
            j = line.find(SMART_CLOSE, i + 1)
        elif ch == "'" and not (i and line[i - 1].isalnum()):
            j = _plain_close(line, i + 1)
            if j is None:
                # a lone apostrophe in the message text
                i += 1
                continue
        else:
            i += 1
            continue
        if j < 0:
            break
        if j > i + 1:
            out.append(Span(i + 1, j))
        i = j + 1
    return out


def format_expression(
    text: str,
    match: Match,
    *,
    quote: Span,
    column: int,
    config: FormatConfig,
    level: int | None = None,
) -> FormattedExpression:
    """Fill one confirmed expression; `text` is the quoted interior, `quote` its place in the session."""
    src = Source.of(text)
    regions = depth_regions(src, match.span.start, match.span.end)
    state = fold(regions, level, config.placeholder)
    hidden = state.hidden_atoms()

    visible = len(match.span) - sum(len(h.span) - h.width for h in hidden)
    leading = column + visible > config.fill_width
    indent = 0 if leading else column
    fmt = format_function if match.kind == "function" else format_type
    instructions = fmt(src, match.span, indent=indent, config=config, hidden=hidden)
    if leading:
        instructions.insert(0, FormatInstruction(match.span.start, 0))

    delta = quote.start
    return FormattedExpression(
        quote=quote,
        match=match.span.shift(delta),
        kind=match.kind,
        column=column,
        leading_break=leading,
        instructions=tuple(i.shift(delta) for i in instructions),
        regions=tuple(r.shift(delta) for r in regions),
        fold=state.shift(delta),
    )


def process_line(line: str, *, base: int = 0, config: FormatConfig | None = None) -> LineResult:
    """Format every quoted expression of one complete line starting at offset `base`."""
    config = config or FormatConfig()
    span = Span(base, base + len(line))
    if not config.is_candidate_line(line):
        return LineResult(span=span)

    exprs: list[FormattedExpression] = []
    notes: list[Note] = []
    for q in find_quoted(line):
        text = q.slice(line)
        quote = q.shift(base)
        m = recognize(Source.of(text))
        if m is None:
            msg = f"not recognized as a function or type: {text!r}"
            log.info("%s: %s", quote.format(), msg)
            notes.append(Note("unparsed", quote, msg))
            continue
        if len(m.span) < len(text):
            msg = f"{m.kind} matched {len(m.span)} of {len(text)} characters: {text[m.span.end:]!r} left over"
            log.warning("%s: %s", quote.format(), msg)
            notes.append(Note("partial", quote, msg))
        exprs.append(format_expression(text, m, quote=quote, column=q.start, config=config))
    return LineResult(span=span, expressions=tuple(exprs), notes=tuple(notes))


@dataclass(slots=True)
class DiagnosticSession:
    """State of one compiler run, fed incrementally as output arrives.

    Only expressions on candidate lines that the grammar confirmed are kept;
    quotes on short lines or unrecognized quotes cannot be folded.
    """

    config: FormatConfig = field(default_factory=FormatConfig)
    cursor: int = field(default=0, init=False)
    expressions: list[FormattedExpression] = field(default_factory=list, init=False)
    # processed lines, newline included, and the unterminated remainder
    _lines: list[str] = field(default_factory=list, init=False, repr=False)
    _tail: list[str] = field(default_factory=list, init=False, repr=False)
    _joined: str | None = field(default=None, init=False, repr=False)

    @property
    def text(self) -> str:
        """All output fed so far."""
        if self._joined is None:
            self._joined = "".join(self._lines) + "".join(self._tail)
        return self._joined

    def reset(self) -> None:
        self.cursor = 0
        self.expressions = []
        self._lines = []
        self._tail = []
        self._joined = None

    def _advance(self, pos: int) -> None:
        if pos <= self.cursor:
            raise RuntimeError(f"diagnostic cursor would move back from {self.cursor} to {pos}")
        self.cursor = pos

    def feed(self, chunk: str) -> list[LineResult]:
        """Append output; process every newline-terminated line not yet seen."""
        self._joined = None
        if "\n" not in chunk:
            if chunk:
                self._tail.append(chunk)
            return []
        buf = "".join(self._tail) + chunk
        self._tail = []
        results: list[LineResult] = []
        start = 0
        while True:
            nl = buf.find("\n", start)
            if nl < 0:
                break
            res = process_line(buf[start:nl].rstrip("\r"), base=self.cursor, config=self.config)
            log.debug("line %s: %d expression(s)", res.span.format(), len(res.expressions))
            self._lines.append(buf[start : nl + 1])
            self._advance(self.cursor + nl + 1 - start)
            self.expressions.extend(res.expressions)
            results.append(res)
            start = nl + 1
        if start < len(buf):
            self._tail.append(buf[start:])
        return results

    def find(self, position: int) -> int:
        for i, e in enumerate(self.expressions):
            # the quote characters themselves count as inside
            if e.quote.start - 1 <= position <= e.quote.end:
                return i
        raise FoldError(
            position=position,
            message="not inside a formatted quoted expression",
            hint="only quotes on lines longer than the fill width that parse as a type"
            " or function can be folded",
        )

    def _recompute(self, e: FormattedExpression, config: FormatConfig, level: int | None) -> FormattedExpression:
        text = e.quote.slice(self.text)
        match = Match(kind=e.kind, span=e.match.shift(-e.quote.start))
        return format_expression(text, match, quote=e.quote, column=e.column, config=config, level=level)

    def fold(self, position: int, level: int | None = None) -> FormattedExpression:
        """Fold the expression around `position` to `level`, or unfold it when None.

        Instructions are recomputed from scratch for the expression.
        """
        i = self.find(position)
        new = self._recompute(self.expressions[i], self.config, level)
        self.expressions[i] = new
        return new

    def reconfigure(self, config: FormatConfig) -> list[FormattedExpression]:
        """Apply new settings to every line processed so far.

        Lines are selected again under the new width, so narrowing can add
        expressions and widening can drop them. Fold levels carry over by quote.
        """
        levels = {e.quote: e.fold.level for e in self.expressions if e.fold.level is not None}
        exprs: list[FormattedExpression] = []
        base = 0
        for raw in self._lines:
            res = process_line(raw[:-1].rstrip("\r"), base=base, config=config)
            for e in res.expressions:
                if e.quote in levels:
                    e = self._recompute(e, config, levels[e.quote])
                exprs.append(e)
            base += len(raw)
        self.config = config
        self.expressions = exprs
        return list(exprs)
