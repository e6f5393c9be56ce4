from __future__ import annotations

from .corpus import generate_diagnostic_lines, generate_type_names

__all__ = ["generate_diagnostic_lines", "generate_type_names"]
