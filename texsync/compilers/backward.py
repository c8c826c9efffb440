"""Document tree to LaTeX conversion."""

import re
from typing import Callable

from texsync.compilers.dom import html_to_tree
from texsync.core.escaping import escape
from texsync.core.models import NodeKind, TreeNode
from texsync.core.protection import ProtectedBlockStore
from texsync.core.style import style_delta, style_wrappers

WHITESPACE_PATTERN = re.compile(r"\s+")
BLANK_LINES_PATTERN = re.compile(r"\n{3,}")

SECTION_COMMANDS = {1: "section", 2: "subsection", 3: "subsubsection", 4: "paragraph"}
WRAP_COMMANDS = {
    NodeKind.BOLD: "textbf",
    NodeKind.ITALIC: "textit",
    NodeKind.UNDERLINE: "underline",
}
LIST_ENVIRONMENTS = {
    NodeKind.UNORDERED_LIST: "itemize",
    NodeKind.ORDERED_LIST: "enumerate",
}


def tree_to_latex(forest: list[TreeNode]) -> str:
    """
    converts a document tree back to LaTeX.

    Args:
        forest: top-level tree nodes

    Returns:
        LaTeX source with blank-line runs collapsed and ends trimmed
    """
    # raw math and code content is shielded from the blank-line cleanup
    store = ProtectedBlockStore()
    latex = "".join(_render(node, [], store) for node in forest)
    latex = BLANK_LINES_PATTERN.sub("\n\n", latex).strip()
    return store.restore_all(latex, nested=False)


def html_to_latex(html: str) -> str:
    """converts an HTML fragment (e.g. editor content) to LaTeX."""
    if not html:
        return ""
    return tree_to_latex(html_to_tree(html))


def _render(
    node: TreeNode, ancestors: list[TreeNode], store: ProtectedBlockStore
) -> str:
    if node.kind == NodeKind.TEXT:
        return escape(WHITESPACE_PATTERN.sub(" ", node.text))

    # math is emitted from canonical source, never from the preview
    if node.kind == NodeKind.MATH_BLOCK:
        return f"\n\\[\n{store.protect(node.source or '')}\n\\]\n"
    if node.kind == NodeKind.MATH_INLINE:
        return f"${store.protect(node.source or '')}$"
    if node.kind == NodeKind.CODE_BLOCK:
        # the newlines after \begin{verbatim} and before \end{verbatim} are ours
        code = store.protect(node.text.removeprefix("\n").removesuffix("\n"))
        return f"\n\\begin{{verbatim}}\n{code}\n\\end{{verbatim}}\n"
    if node.kind == NodeKind.INLINE_CODE:
        return f"\\texttt{{{store.protect(node.text)}}}"

    chain = [*ancestors, node]
    content = "".join(_render(child, chain, store) for child in node.children)
    prefix, suffix = style_wrappers(style_delta(node, ancestors))

    emitter = EMITTERS.get(node.kind)
    if emitter is None:
        return prefix + content + suffix
    return emitter(node, content, prefix, suffix)


def _heading(node: TreeNode, content: str, prefix: str, suffix: str) -> str:
    command = SECTION_COMMANDS.get(node.level, "paragraph")
    return f"{prefix}\n\\{command}{{{content}}}\n{suffix}"


def _wrap(node: TreeNode, content: str, prefix: str, suffix: str) -> str:
    return f"{prefix}\\{WRAP_COMMANDS[node.kind]}{{{content}}}{suffix}"


def _anchor(node: TreeNode, content: str, prefix: str, suffix: str) -> str:
    return f"{prefix}\\href{{{node.attrs.get('href', '')}}}{{{content}}}{suffix}"


def _image(node: TreeNode, _content: str, prefix: str, suffix: str) -> str:
    src = node.attrs.get("src", "")
    return f"{prefix}\\includegraphics[width=\\linewidth]{{{src}}}{suffix}"


def _list(node: TreeNode, content: str, prefix: str, suffix: str) -> str:
    environment = LIST_ENVIRONMENTS[node.kind]
    return (
        f"{prefix}\n\\begin{{{environment}}}\n{content}\\end{{{environment}}}\n{suffix}"
    )


def _item(node: TreeNode, content: str, _prefix: str, _suffix: str) -> str:
    marker = "[$\\square$] " if node.kind == NodeKind.CHECKBOX_ITEM else " "
    return f"  \\item{marker}{content.lstrip()}\n"


def _suppressed(_node: TreeNode, _content: str, _prefix: str, _suffix: str) -> str:
    # soft breaks inserted by editors are not turned into \\
    return ""


def _container(_node: TreeNode, content: str, prefix: str, suffix: str) -> str:
    return f"{prefix}\n\n{content}\n\n{suffix}"


EMITTERS: dict[NodeKind, Callable[[TreeNode, str, str, str], str]] = {
    NodeKind.HEADING: _heading,
    NodeKind.BOLD: _wrap,
    NodeKind.ITALIC: _wrap,
    NodeKind.UNDERLINE: _wrap,
    NodeKind.ANCHOR: _anchor,
    NodeKind.IMAGE: _image,
    NodeKind.UNORDERED_LIST: _list,
    NodeKind.ORDERED_LIST: _list,
    NodeKind.LIST_ITEM: _item,
    NodeKind.CHECKBOX_ITEM: _item,
    NodeKind.CHECKBOX: _suppressed,
    NodeKind.LINE_BREAK: _suppressed,
    NodeKind.CONTAINER: _container,
}
