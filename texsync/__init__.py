"""Bidirectional LaTeX <-> HTML document tree converter."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from texsync.compilers import (
    compile_latex,
    html_to_latex,
    html_to_tree,
    latex_to_html,
    latex_to_tree,
    tree_to_latex,
)
from texsync.console import ConsoleReporter
from texsync.core.escaping import escape, unescape
from texsync.core.math_adapter import MathMLRenderer, MathRenderer
from texsync.core.models import NodeKind, TreeNode, find_all

logger = logging.getLogger(__name__)

__all__ = [
    "compile_latex",
    "escape",
    "find_all",
    "html_to_latex",
    "html_to_tree",
    "latex_to_html",
    "latex_to_tree",
    "main",
    "NodeKind",
    "tree_to_latex",
    "TreeNode",
    "unescape",
]


def _read_source(source: str) -> str:
    """reads input from a path, or stdin for '-'."""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Source not found: {source}")
    return path.read_text(encoding="utf-8")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="texsync",
        description="Convert between LaTeX and HTML document trees",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="suppress informational messages (errors still shown)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    to_html = subparsers.add_parser("to-html", help="convert LaTeX to HTML")
    to_latex = subparsers.add_parser("to-latex", help="convert HTML to LaTeX")
    tree = subparsers.add_parser("tree", help="show the document tree of LaTeX input")

    for sub in (to_html, to_latex, tree):
        sub.add_argument("source", help="input file, or - for stdin")
    for sub in (to_html, tree):
        sub.add_argument(
            "--no-math",
            action="store_true",
            help="use placeholders instead of MathML previews",
        )
    for sub in (to_html, to_latex):
        sub.add_argument(
            "-o",
            "--output",
            help="write result to this file instead of stdout",
        )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    main entry point for texsync CLI.

    Args:
        argv: command line arguments (defaults to sys.argv[1:])

    Returns:
        exit code (0 success, 2 fatal error)
    """
    args = _build_parser().parse_args(argv)

    # configures logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )

    reporter = ConsoleReporter(quiet=args.quiet)

    try:
        text = _read_source(args.source)
    except (OSError, UnicodeDecodeError) as e:
        reporter.log_error(f"Cannot read input: {e}")
        return 2

    logger.debug("Read %d chars from %s", len(text), args.source)

    math_renderer: Optional[MathRenderer] = None
    if not getattr(args, "no_math", False):
        math_renderer = MathMLRenderer()

    if args.command == "tree":
        reporter.print_tree(latex_to_tree(text, math_renderer), title=args.source)
        return 0

    if args.command == "to-html":
        result = latex_to_html(text, math_renderer)
    else:
        result = html_to_latex(text)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result + "\n", encoding="utf-8")
        reporter.log_info(f"Wrote {output_path}")
    else:
        reporter.print_text(result)
    return 0
