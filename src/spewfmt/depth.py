from __future__ import annotations

from dataclasses import dataclass

from .lexer import Source, tokenize
from .printer import Hidden
from .spans import DepthRegion, Span
from .tokens import TokenKind


def depth_regions(src: Source | str, start: int = 0, end: int | None = None) -> list[DepthRegion]:
    """Every balanced group in `src[start:end]` with its nesting depth, by start offset."""
    if isinstance(src, str):
        src = Source.of(src)
    end = len(src) if end is None else end
    opens: list[int] = []
    out: list[DepthRegion] = []
    for tok in tokenize(src, start, end):
        if tok.kind is TokenKind.OPEN:
            opens.append(tok.start)
        elif tok.kind is TokenKind.CLOSE:
            if not opens:
                raise RuntimeError(f"unmatched closer at offset {tok.start}")
            depth = len(opens)
            out.append(DepthRegion(opens.pop() + 1, tok.start, depth))
    if opens:
        raise RuntimeError(f"unclosed group at offset {opens[-1]}")
    out.sort(key=lambda r: (r.start, r.depth))
    return out


@dataclass(frozen=True, slots=True)
class RegionView:
    region: DepthRegion
    hidden: bool = False
    placeholder: str | None = None


@dataclass(frozen=True, slots=True)
class FoldState:
    level: int | None
    regions: tuple[RegionView, ...]

    def hidden_spans(self) -> tuple[tuple[Span, str], ...]:
        """Outermost hidden ranges with the text shown in their place."""
        return tuple(
            (Span(v.region.start, v.region.end), v.placeholder)
            for v in self.regions
            if v.placeholder is not None and v.region.end > v.region.start
        )

    def hidden_atoms(self) -> tuple[Hidden, ...]:
        return tuple(Hidden(sp, len(ph)) for sp, ph in self.hidden_spans())

    def shift(self, delta: int) -> "FoldState":
        return FoldState(
            level=self.level,
            regions=tuple(
                RegionView(v.region.shift(delta), v.hidden, v.placeholder) for v in self.regions
            ),
        )


def fold(regions: list[DepthRegion] | tuple[DepthRegion, ...], level: int | None, placeholder: str = "…") -> FoldState:
    """Hide every region at `level` or deeper; None shows everything again."""
    if level is None:
        return FoldState(level=None, regions=tuple(RegionView(r) for r in regions))
    if level < 1:
        raise ValueError(f"fold level must be at least 1, got {level}")
    views = []
    for r in regions:
        if r.depth < level:
            views.append(RegionView(r))
        elif r.depth == level:
            views.append(RegionView(r, hidden=True, placeholder=placeholder))
        else:
            views.append(RegionView(r, hidden=True))
    return FoldState(level=level, regions=tuple(views))
