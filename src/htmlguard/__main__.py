"""Command-line entry point: `python -m htmlguard` / `htmlguard`.

Reads an HTML fragment from a file (or stdin), runs it through the parse ->
allow-list -> render pipeline and prints the result as HTML or as the JSON
render tree.
"""

from __future__ import annotations

import argparse
import io
import json
import logging
import os
import sys
from typing import Any

from .render import render_html
from .serialize import to_html

logger = logging.getLogger("htmlguard")


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("HTMLGUARD_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def _print_report(msg: str, *, node: Any | None = None) -> None:
    print(f"htmlguard: {msg}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="htmlguard",
        description="Sanitize an HTML fragment and render it for a component framework",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="HTML file to read (default: stdin; '-' also means stdin)",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=["html", "json"],
        default="html",
        help="Output format (default: html)",
    )
    parser.add_argument(
        "--no-sanitize",
        action="store_true",
        help="Skip the allow-list stage (input is already filtered)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print every omitted tag, attribute or declaration to stderr",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        html = _read_input(args.path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"htmlguard: cannot read {args.path}: {exc}", file=sys.stderr)
        return 1

    kwargs: dict[str, Any] = {"report": _print_report if args.report else None}
    if args.no_sanitize:
        kwargs["sanitize_policy"] = None
    tree = render_html(html, **kwargs)
    logger.debug("rendered %d top-level children", len(tree.children))

    out = io.StringIO()
    if args.format == "json":
        json.dump(tree.to_dict(), out, ensure_ascii=False, indent=2)
    else:
        out.write(to_html(tree))
    out.write("\n")
    sys.stdout.write(out.getvalue())
    return 0


if __name__ == "__main__":
    sys.exit(main())
