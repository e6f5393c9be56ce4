from __future__ import annotations

import os
import re
from dataclasses import dataclass, field


DEFAULT_FILL_WIDTH = 100
DEFAULT_INDENT_UNIT = 2
DEFAULT_PLACEHOLDER = "…"

# Per compiler family: which output lines are diagnostics worth reformatting.
GCC_PATTERNS: tuple[str, ...] = (
    r"^[^\s:][^:\n]*:\d+(?::\d+)?: +(?:fatal error|error|warning|note):",
    r"^[^\s:][^:\n]*:(?:\d+(?::\d+)?:)? +(?:In (?:instantiation|substitution|member function"
    r"|static member function|function|constructor|destructor|lambda function)|required (?:from|by)"
    r"|recursively required)",
)
CLANG_PATTERNS: tuple[str, ...] = (
    r"^[^\s:][^:\n]*:\d+:\d+: (?:fatal error|error|warning|note):",
)
COMPILER_PATTERNS: dict[str, tuple[str, ...]] = {
    "gcc": GCC_PATTERNS,
    "clang": CLANG_PATTERNS,
    "any": tuple(dict.fromkeys(GCC_PATTERNS + CLANG_PATTERNS)),
}

STATIC_ASSERT_MARKERS: tuple[str, ...] = ("static_assert", "static assertion failed")


def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


@dataclass(frozen=True, slots=True)
class FormatConfig:
    """Settings shared by every line of one diagnostic session."""

    fill_width: int = DEFAULT_FILL_WIDTH
    indent_unit: int = DEFAULT_INDENT_UNIT
    placeholder: str = DEFAULT_PLACEHOLDER
    line_patterns: tuple[re.Pattern[str], ...] = field(
        default_factory=lambda: _compile(COMPILER_PATTERNS["any"])
    )
    static_assert_markers: tuple[str, ...] = STATIC_ASSERT_MARKERS

    def __post_init__(self) -> None:
        if self.fill_width <= 0:
            raise ValueError(f"fill_width must be positive, got {self.fill_width}")
        if self.indent_unit <= 0:
            raise ValueError(f"indent_unit must be positive, got {self.indent_unit}")

    @classmethod
    def for_compiler(cls, family: str, **kwargs) -> "FormatConfig":
        try:
            patterns = COMPILER_PATTERNS[family]
        except KeyError:
            known = ", ".join(sorted(COMPILER_PATTERNS))
            raise ValueError(f"unknown compiler family {family!r} (expected one of: {known})") from None
        return cls(line_patterns=_compile(patterns), **kwargs)

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None, **kwargs) -> "FormatConfig":
        """Build a config, taking widths from SPEWFMT_FILL_WIDTH / SPEWFMT_INDENT when set."""
        env = os.environ if env is None else env
        for key, name in (("fill_width", "SPEWFMT_FILL_WIDTH"), ("indent_unit", "SPEWFMT_INDENT")):
            raw = env.get(name)
            if raw and key not in kwargs:
                try:
                    kwargs[key] = int(raw)
                except ValueError:
                    raise ValueError(f"{name} must be an integer, got {raw!r}") from None
        return cls(**kwargs)

    def is_candidate_line(self, line: str) -> bool:
        if len(line) < self.fill_width:
            return False
        if any(m in line for m in self.static_assert_markers):
            return False
        return any(p.search(line) for p in self.line_patterns)
