from __future__ import annotations

from .config import FormatConfig
from .cxx import Match, parse_function, parse_type, recognize
from .depth import FoldState, depth_regions, fold
from .errors import FoldError
from .format import format_function, format_type
from .lexer import Source
from .render import render
from .session import DiagnosticSession, FormattedExpression, LineResult, Note, process_line
from .spans import DepthRegion, FormatInstruction, Span

__all__ = [
    "DepthRegion",
    "DiagnosticSession",
    "FoldError",
    "FoldState",
    "FormatConfig",
    "FormatInstruction",
    "FormattedExpression",
    "LineResult",
    "Match",
    "Note",
    "Source",
    "Span",
    "depth_regions",
    "fold",
    "format_function",
    "format_type",
    "parse_function",
    "parse_type",
    "process_line",
    "recognize",
    "render",
]
