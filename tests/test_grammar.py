from __future__ import annotations

import pytest

from spewfmt import Source, parse_function, parse_type, recognize


FUNCTIONS = [
    "void foo(int, double) [with T = int; U = double]",
    "Foo::Foo(int)",
    "template<class T> void foo(T)",
    "static constexpr int bar() noexcept",
    "std::basic_ostream<char>& operator<<(std::basic_ostream<char>&, const char*)",
    "auto Widget::size() const -> std::size_t",
    "(anonymous namespace)::Widget<int>::run(int)",
    "const std::string& Registry::name(std::size_t) const [with Key = std::pair<int, int>]",
    "foo<int>",
]

TYPES = [
    "int",
    "const std::string &",
    "unsigned long long",
    "std::map<int, std::vector<int> >::iterator",
    "decltype (std::declval<T>())",
    "{anonymous}::Impl",
    "std::vector<main()::<lambda(int)> >::value_type",
    "class std::tuple<int, char>",
]


@pytest.mark.parametrize("text", FUNCTIONS)
def test_functions_parse_completely(text: str) -> None:
    src = Source.of(text)
    assert parse_function(src) == (True, len(text))
    m = recognize(src)
    assert m is not None
    assert m.kind == "function"
    assert m.is_complete(src)


@pytest.mark.parametrize("text", TYPES)
def test_types_parse_completely(text: str) -> None:
    src = Source.of(text)
    assert parse_type(src) == (True, len(text))
    m = recognize(src)
    assert m is not None
    assert m.kind == "type"
    assert m.is_complete(src)


def test_template_specialization_dialect_needs_no_parameter_list() -> None:
    src = Source.of("foo<int>")
    ok, end = parse_function(src)
    assert ok and end == len("foo<int>")


def test_partial_match_reports_prefix() -> None:
    text = "std::vector<int> (*)(int)"
    m = recognize(Source.of(text))
    assert m is not None
    assert m.span.end == len("std::vector<int>")
    assert not m.is_complete(Source.of(text))


@pytest.mark.parametrize("text", ["<<", ", x", ")", ""])
def test_unrecognized_text(text: str) -> None:
    assert recognize(Source.of(text)) is None


def test_cv_keyword_requires_whitespace() -> None:
    src = Source.of("const")
    # "const" alone is read as a plain name
    assert parse_type(src) == (True, 5)
    src = Source.of("const ")
    assert parse_type(src) == (False, 0)


def test_plain_template_id_reads_as_specialization() -> None:
    # "function template specialization 'foo<int>'" and "class 'std::vector<int>'"
    # look the same; either way the text is filled identically.
    m = recognize(Source.of("std::vector<int>"))
    assert m is not None
    assert m.kind == "function"
