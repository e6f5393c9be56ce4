from __future__ import annotations

from collections.abc import Iterable

from .spans import FormatInstruction, Span


def render(
    text: str,
    instructions: Iterable[FormatInstruction],
    hidden: Iterable[tuple[Span, str]] = (),
) -> str:
    """Apply breaks and folds to `text` as plain text.

    The core never rewrites its input; this is for terminals and tests.
    """
    breaks: dict[int, list[int]] = {}
    for ins in instructions:
        breaks.setdefault(ins.offset, []).append(ins.indent)
    skips = {sp.start: (sp.end, ph) for sp, ph in hidden}

    out: list[str] = []
    pos = 0
    for at in sorted(set(breaks) | set(skips)):
        if at < pos:
            continue  # inside a folded range
        out.append(text[pos:at])
        pos = at
        for indent in breaks.get(at, ()):
            out.append("\n" + " " * indent)
        if at in skips:
            pos, ph = skips[at]
            out.append(ph)
    out.append(text[pos:])
    return "".join(out)
