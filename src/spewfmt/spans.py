from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open span [start, end) of offsets into one immutable text."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, offset: object) -> bool:
        return isinstance(offset, int) and self.start <= offset < self.end

    def shift(self, delta: int) -> "Span":
        return Span(self.start + delta, self.end + delta)

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def format(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True, slots=True)
class FormatInstruction:
    """Insert a line break followed by `indent` spaces before `offset`."""

    offset: int
    indent: int

    def shift(self, delta: int) -> "FormatInstruction":
        return FormatInstruction(self.offset + delta, self.indent)


@dataclass(frozen=True, slots=True)
class DepthRegion:
    """Interior of one balanced group; depth 1 is the outermost group."""

    start: int
    end: int
    depth: int

    def shift(self, delta: int) -> "DepthRegion":
        return DepthRegion(self.start + delta, self.end + delta, self.depth)
