from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass, replace

from .config import COMPILER_PATTERNS, FormatConfig
from .errors import FoldError
from .log import setup_base_logger
from .render import render
from .session import DiagnosticSession


def _to_jsonable(obj):
    if is_dataclass(obj):
        return {k: _to_jsonable(v) for k, v in asdict(obj).items()}
    if isinstance(obj, (tuple, list)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    return obj


def _read(paths: list[str]) -> list[str]:
    if not paths:
        return [sys.stdin.read()]
    out = []
    for p in paths:
        if p == "-":
            out.append(sys.stdin.read())
        else:
            with open(p, encoding="utf-8", errors="replace") as f:
                out.append(f.read())
    return out


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="spewfmt", description="Reformat C++ template spew in compiler output")
    ap.add_argument("files", nargs="*", help="Compiler output files ('-' or none for stdin)")
    ap.add_argument("-w", "--width", type=int, default=None, help="Fill width (default: $SPEWFMT_FILL_WIDTH or 100)")
    ap.add_argument("-i", "--indent", type=int, default=None, help="Columns per nesting level")
    ap.add_argument("--fold", type=int, default=None, metavar="LEVEL", help="Hide groups nested LEVEL deep or more")
    ap.add_argument("--compiler", choices=sorted(COMPILER_PATTERNS), default="any")
    ap.add_argument("--json", action="store_true", help="Print instructions and regions as JSON")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    setup_base_logger(level=getattr(logging, args.log_level))

    try:
        config = FormatConfig.from_env()
        config = replace(config, line_patterns=FormatConfig.for_compiler(args.compiler).line_patterns)
        if args.width is not None:
            config = replace(config, fill_width=args.width)
        if args.indent is not None:
            config = replace(config, indent_unit=args.indent)
    except ValueError as e:
        print(f"spewfmt: {e}", file=sys.stderr)
        return 2

    for text in _read(args.files):
        # each input is its own compiler run
        session = DiagnosticSession(config)
        if not text.endswith("\n"):
            text += "\n"
        session.feed(text)
        try:
            if args.fold is not None:
                for e in list(session.expressions):
                    session.fold(e.quote.start, args.fold)
        except (FoldError, ValueError) as e:
            print(f"spewfmt: {e}", file=sys.stderr)
            return 2

        if args.json:
            payload = {"expressions": [_to_jsonable(e) for e in session.expressions]}
            print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False))
            continue
        instructions = [i for e in session.expressions for i in e.instructions]
        hidden = [h for e in session.expressions for h in e.fold.hidden_spans()]
        sys.stdout.write(render(session.text, instructions, hidden))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
