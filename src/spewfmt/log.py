from __future__ import annotations

"""Logger naming and one-time handler setup for the `spewfmt` namespace.

Library modules only call `get_logger`; handlers are attached by the command
line through `setup_base_logger`.
"""

import logging
import sys
from typing import TextIO

BASE = "spewfmt"


def setup_base_logger(*, level: int = logging.WARNING, stream: TextIO | None = None) -> logging.Logger:
    """Configure the base 'spewfmt' logger once and return it."""
    base = logging.getLogger(BASE)
    if base.handlers:
        base.setLevel(level)
        return base

    base.setLevel(level)
    base.propagate = False
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    base.addHandler(handler)
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'spewfmt'."""
    if not name or name == BASE:
        return logging.getLogger(BASE)
    if name.startswith(BASE + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE}.{name}")
