"""console output for the texsync CLI."""

from typing import Optional

from rich.console import Console
from rich.markup import escape as markup_escape
from rich.tree import Tree

from texsync.core.models import MATH_KINDS, NodeKind, TreeNode


class ConsoleReporter:
    """prints converted documents, trees and errors."""

    def __init__(self, quiet: bool = False, console: Optional[Console] = None) -> None:
        self.quiet = quiet
        self._console = console or Console()
        self._err_console = Console(stderr=True) if console is None else console

    def print_text(self, text: str) -> None:
        """prints converted output verbatim (no rich markup or highlighting)."""
        self._console.print(text, markup=False, highlight=False, soft_wrap=True)

    def print_tree(self, forest: list[TreeNode], title: str = "document") -> None:
        """renders a document tree."""
        root = Tree(f"[bold]{markup_escape(title)}[/bold]")
        for node in forest:
            _add_node(root, node)
        self._console.print(root)

    def log_error(self, message: str) -> None:
        """prints error message (always shown, even in quiet mode)."""
        self._err_console.print(f"[red]ERROR:[/red] {markup_escape(message)}")

    def log_info(self, message: str) -> None:
        """prints info message unless quiet."""
        if self.quiet:
            return
        self._err_console.print(markup_escape(message))


def describe(node: TreeNode) -> str:
    """returns a one-line label for a node."""
    if node.kind == NodeKind.TEXT:
        return repr(node.text)
    label = node.kind.value
    if node.kind == NodeKind.HEADING:
        label += f" {node.level}"
    if node.kind in MATH_KINDS:
        label += f" {node.source!r}"
    elif node.kind in (NodeKind.CODE_BLOCK, NodeKind.INLINE_CODE):
        label += f" {node.text!r}"
    for name in ("href", "src"):
        if name in node.attrs:
            label += f" {name}={node.attrs[name]}"
    if not node.style.is_empty():
        label += f" {node.style}"
    return label


def _add_node(parent: Tree, node: TreeNode) -> None:
    # whitespace-only text between blocks is noise in the tree view
    if node.kind == NodeKind.TEXT and not node.text.strip():
        return
    branch = parent.add(markup_escape(describe(node)))
    for child in node.children:
        _add_node(branch, child)
