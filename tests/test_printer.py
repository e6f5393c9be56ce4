from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from spewfmt import FormatConfig, FormatInstruction, Source, format_function, format_type, render
from spewfmt.printer import Enter, Exit, InternalBreak, Printer, Text, scan
from spewfmt.spans import Span
from spewfmt.testing import generate_type_names


def _lines(text: str, instructions: list[FormatInstruction]) -> list[str]:
    return render(text, instructions).split("\n")


def _strip_inserted(text: str, instructions: list[FormatInstruction]) -> str:
    lines = _lines(text, instructions)
    ordered = sorted(instructions, key=lambda i: i.offset)
    assert len(lines) == len(ordered) + 1
    out = lines[0]
    for line, ins in zip(lines[1:], ordered):
        assert line[: ins.indent] == " " * ins.indent
        out += line[ins.indent :]
    return out


def test_nested_type_breaks_outer_and_inner_groups() -> None:
    text = "std::vector<int, std::allocator<int>>"
    out = format_type(text, config=FormatConfig(fill_width=20, indent_unit=2))
    assert out == [
        FormatInstruction(12, 2),
        FormatInstruction(17, 2),
        FormatInstruction(32, 4),
    ]
    assert _lines(text, out) == [
        "std::vector<",
        "  int, ",
        "  std::allocator<",
        "    int>>",
    ]


def test_with_clause_puts_each_substitution_on_its_own_line() -> None:
    text = "void foo(int, double) [with T = int; U = double]"
    out = format_function(text)
    assert out == [FormatInstruction(28, 2), FormatInstruction(37, 2)]
    assert _lines(text, out) == [
        "void foo(int, double) [with ",
        "  T = int; ",
        "  U = double]",
    ]


def test_with_clause_value_is_indented_past_its_label() -> None:
    text = "void f(T) [with T = std::map<int, std::vector<double>>]"
    out = format_function(text, config=FormatConfig(fill_width=30, indent_unit=2))
    value_breaks = [i for i in out if i.offset >= text.index("T = ")]
    # "T = " is four columns wide and the substitution sits at indent 2
    assert value_breaks[0] == FormatInstruction(text.index("T = "), 2)
    assert value_breaks[1].indent == 2 + 4 + 2


def test_short_type_needs_no_instructions() -> None:
    assert format_type("std::pair<int, int>") == []


def test_empty_group_never_breaks() -> None:
    out = format_type("f()", config=FormatConfig(fill_width=2))
    assert out == []


def test_initial_indent_reduces_budget() -> None:
    text = "std::pair<int, int>"
    cfg = FormatConfig(fill_width=len(text))
    assert format_type(text, config=cfg) == []
    assert format_type(text, indent=4, config=cfg) != []


def test_scanner_events() -> None:
    src = Source.of("a<b, c>")
    events = list(scan(src, 0, len("a<b, c>")))
    assert events == [
        Text(Span(0, 1), 1),
        Text(Span(1, 2), 1),
        Enter(5),
        Text(Span(2, 3), 1),
        Text(Span(3, 5), 2),
        InternalBreak(),
        Text(Span(5, 6), 1),
        Text(Span(6, 7), 1),
        Exit(),
    ]


def test_scanner_rejects_unbalanced_span() -> None:
    with pytest.raises(RuntimeError):
        list(scan(Source.of("a<b"), 0, 3))


def test_printer_frame_underflow_is_an_error() -> None:
    p = Printer.start(width=10, indent_unit=2, indent=0, at=0)
    with pytest.raises(RuntimeError):
        p.feed(Exit())


def test_printer_finish_with_open_group_is_an_error() -> None:
    p = Printer.start(width=10, indent_unit=2, indent=0, at=0)
    p.feed(Text(Span(0, 1), 1))
    p.feed(Enter(3))
    with pytest.raises(RuntimeError):
        p.finish()


def test_oversized_token_is_never_split() -> None:
    name = "x" * 40
    out = format_type(f"{name}<int>", config=FormatConfig(fill_width=10))
    assert all(i.offset >= len(name) for i in out)


_CLOSING = " ,;>)]}"


@st.composite
def nested_types(draw, depth: int = 4) -> str:
    if depth == 0 or draw(st.booleans()):
        return draw(st.sampled_from(["int", "char", "Foo", "ns::Bar", "unsigned long"]))
    name = draw(st.sampled_from(["std::vector", "std::map", "boost::hana::basic_tuple", "W"]))
    args = draw(st.lists(nested_types(depth - 1), min_size=1, max_size=3))
    return f"{name}<{', '.join(args)}>"


@given(nested_types(), st.integers(min_value=40, max_value=90), st.sampled_from([2, 4]))
@settings(max_examples=300)
def test_filled_lines_fit_the_width(text: str, width: int, unit: int) -> None:
    out = format_type(text, config=FormatConfig(fill_width=width, indent_unit=unit))
    for line in _lines(text, out):
        # Enter length runs through the closer only, so trailing closers and
        # separators may overhang; everything before them fits
        assert len(line.rstrip(_CLOSING)) <= width, line


@given(nested_types(), st.integers(min_value=10, max_value=90))
@settings(max_examples=300)
def test_removing_inserted_breaks_restores_text(text: str, width: int) -> None:
    out = format_type(text, config=FormatConfig(fill_width=width))
    assert _strip_inserted(text, out) == text


@pytest.mark.parametrize("text", generate_type_names(seed=7, count=60))
def test_corpus_types_round_trip(text: str) -> None:
    cfg = FormatConfig(fill_width=40, indent_unit=2)
    out = format_type(text, config=cfg)
    assert _strip_inserted(text, out) == text
    assert [i.offset for i in out] == sorted({i.offset for i in out})
