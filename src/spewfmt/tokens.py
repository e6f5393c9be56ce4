from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .spans import Span


class TokenKind(str, Enum):
    PUNCT = "punct"  # , ;
    OPEN = "open"  # ( < [ {
    CLOSE = "close"  # ) > ] }
    SPACE = "space"
    SYMBOL = "symbol"


OPENERS = "(<[{"
CLOSERS = ")>]}"
PAIRS: dict[str, str] = dict(zip(OPENERS, CLOSERS))


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    span: Span

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def text(self, src: str) -> str:
        return self.span.slice(src)

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.span.format()})"
