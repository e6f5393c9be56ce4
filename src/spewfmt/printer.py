from __future__ import annotations

"""Two-stage fill: a scanner turning a confirmed span into events, and a
printer turning events into `FormatInstruction`s against a width budget."""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .lexer import Source, match_group, tokenize
from .spans import FormatInstruction, Span
from .tokens import TokenKind


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Text:
    span: Span
    width: int


@dataclass(frozen=True, slots=True)
class Enter:
    length: int


@dataclass(frozen=True, slots=True)
class Exit:
    pass


@dataclass(frozen=True, slots=True)
class InternalBreak:
    pass


Event = Text | Enter | Exit | InternalBreak


@dataclass(frozen=True, slots=True)
class Hidden:
    """A folded range scanned as one atom of the placeholder's width."""

    span: Span
    width: int


def _visible_length(start: int, end: int, hidden: Sequence[Hidden]) -> int:
    n = end - start
    for h in hidden:
        if start <= h.span.start and h.span.end <= end:
            n -= len(h.span) - h.width
    return n


def scan(src: Source, start: int, end: int, hidden: Sequence[Hidden] = ()) -> Iterator[Event]:
    """Events for `src.text[start:end]`, which must hold only balanced groups.

    The length carried by `Enter` runs from just after the opener through the
    closer and still counts interior whitespace that a break would drop. It
    over-estimates on purpose; line breaking was tuned against it.
    """
    skips = {h.span.start: h for h in hidden}
    resume = start
    for tok in tokenize(src, start, end):
        if tok.start < resume:
            continue
        h = skips.get(tok.start)
        if h is not None:
            yield Text(h.span, h.width)
            resume = h.span.end
            # the closer still follows and is scanned normally
            continue

        yield Text(tok.span, len(tok.span))
        if tok.kind is TokenKind.PUNCT:
            yield InternalBreak()
        elif tok.kind is TokenKind.OPEN:
            close = match_group(src, tok.start, end)
            if close is None:
                raise RuntimeError(f"unbalanced group at offset {tok.start} in confirmed span {start}..{end}")
            yield Enter(_visible_length(tok.end, close + 1, hidden))
        elif tok.kind is TokenKind.CLOSE:
            yield Exit()


# ---------------------------------------------------------------------------
# Printer
# ---------------------------------------------------------------------------


class Mode(str, Enum):
    NO_BREAK = "no_break"
    BREAK = "break"


@dataclass(frozen=True, slots=True)
class Frame:
    mode: Mode
    indent: int


@dataclass(slots=True)
class Printer:
    width: int
    indent_unit: int
    frames: list[Frame]
    space: int
    insert_at: int
    instructions: list[FormatInstruction] = field(default_factory=list)

    @classmethod
    def start(cls, *, width: int, indent_unit: int, indent: int, at: int) -> "Printer":
        return cls(
            width=width,
            indent_unit=indent_unit,
            frames=[Frame(Mode.NO_BREAK, indent)],
            space=width - indent,
            insert_at=at,
        )

    @property
    def top(self) -> Frame:
        if not self.frames:
            raise RuntimeError("printer frame stack is empty")
        return self.frames[-1]

    def _break(self, indent: int) -> None:
        self.instructions.append(FormatInstruction(self.insert_at, indent))
        self.space = self.width - indent

    def feed(self, ev: Event) -> None:
        if isinstance(ev, Text):
            self.space -= ev.width
            self.insert_at = ev.span.end
        elif isinstance(ev, Enter):
            cur = self.top
            if ev.length <= self.space or ev.length == 1:
                self.frames.append(Frame(Mode.NO_BREAK, cur.indent))
            else:
                indent = cur.indent + self.indent_unit
                self.frames.append(Frame(Mode.BREAK, indent))
                self._break(indent)
        elif isinstance(ev, InternalBreak):
            cur = self.top
            if cur.mode is Mode.BREAK:
                self._break(cur.indent)
        elif isinstance(ev, Exit):
            if len(self.frames) < 2:
                raise RuntimeError("group closed with no open frame")
            self.frames.pop()
        else:
            raise TypeError(f"unknown printer event: {ev!r}")

    def finish(self) -> list[FormatInstruction]:
        if len(self.frames) != 1:
            raise RuntimeError(f"span ended inside {len(self.frames) - 1} open group(s)")
        return self.instructions


def print_events(
    events: Iterable[Event], *, width: int, indent_unit: int, indent: int, at: int
) -> list[FormatInstruction]:
    p = Printer.start(width=width, indent_unit=indent_unit, indent=indent, at=at)
    for ev in events:
        p.feed(ev)
    return p.finish()


def print_span(
    src: Source,
    start: int,
    end: int,
    *,
    width: int,
    indent_unit: int,
    indent: int = 0,
    hidden: Sequence[Hidden] = (),
) -> list[FormatInstruction]:
    return print_events(
        scan(src, start, end, hidden),
        width=width,
        indent_unit=indent_unit,
        indent=indent,
        at=start,
    )
