from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FoldError(Exception):
    """A fold request that does not point inside a formatted quoted expression."""

    position: int
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        base = f"{self.position}: {self.message}"
        if self.hint:
            return f"{base}\nhint: {self.hint}"
        return base
