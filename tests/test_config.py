from __future__ import annotations

import pytest

from spewfmt import FormatConfig
from spewfmt.config import DEFAULT_FILL_WIDTH


def test_defaults() -> None:
    cfg = FormatConfig()
    assert cfg.fill_width == DEFAULT_FILL_WIDTH
    assert cfg.indent_unit == 2


@pytest.mark.parametrize("kwargs", [{"fill_width": 0}, {"indent_unit": -1}])
def test_rejects_non_positive_sizes(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        FormatConfig(**kwargs)


def test_from_env_reads_widths() -> None:
    cfg = FormatConfig.from_env({"SPEWFMT_FILL_WIDTH": "72", "SPEWFMT_INDENT": "4"})
    assert (cfg.fill_width, cfg.indent_unit) == (72, 4)


def test_from_env_explicit_argument_wins() -> None:
    cfg = FormatConfig.from_env({"SPEWFMT_FILL_WIDTH": "72"}, fill_width=50)
    assert cfg.fill_width == 50


def test_from_env_rejects_garbage() -> None:
    with pytest.raises(ValueError) as e:
        FormatConfig.from_env({"SPEWFMT_FILL_WIDTH": "wide"})
    assert "SPEWFMT_FILL_WIDTH" in str(e.value)


def test_unknown_compiler_family() -> None:
    with pytest.raises(ValueError) as e:
        FormatConfig.for_compiler("msvc")
    assert "gcc" in str(e.value)


@pytest.mark.parametrize(
    "line, family, expected",
    [
        ("a.cpp:1:2: error: x", "clang", True),
        ("a.cpp: In instantiation of ‘void f() [with T = int]’:", "gcc", True),
        ("a.cpp:4:7:   required from here", "gcc", True),
        ("a.cpp: In instantiation of ‘void f() [with T = int]’:", "clang", False),
        ("    1 | std::vector<int> v;", "any", False),
    ],
)
def test_line_patterns(line: str, family: str, expected: bool) -> None:
    cfg = FormatConfig.for_compiler(family, fill_width=1)
    assert cfg.is_candidate_line(line) is expected
