"""LaTeX <-> HTML tree compilers."""

from texsync.compilers.backward import html_to_latex, tree_to_latex
from texsync.compilers.dom import html_to_tree
from texsync.compilers.forward import (
    ForwardResult,
    compile_latex,
    latex_to_html,
    latex_to_tree,
)

__all__ = [
    "ForwardResult",
    "compile_latex",
    "html_to_latex",
    "html_to_tree",
    "latex_to_html",
    "latex_to_tree",
    "tree_to_latex",
]
