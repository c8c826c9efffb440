"""HTML fragment to document tree conversion."""

from typing import Any, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

from texsync.core.models import NodeKind, TreeNode
from texsync.core.style import parse_style

HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4}

TAG_KINDS = {
    "b": NodeKind.BOLD,
    "strong": NodeKind.BOLD,
    "i": NodeKind.ITALIC,
    "em": NodeKind.ITALIC,
    "u": NodeKind.UNDERLINE,
    "a": NodeKind.ANCHOR,
    "img": NodeKind.IMAGE,
    "ul": NodeKind.UNORDERED_LIST,
    "ol": NodeKind.ORDERED_LIST,
    "pre": NodeKind.CODE_BLOCK,
    "code": NodeKind.INLINE_CODE,
    "tt": NodeKind.INLINE_CODE,
    "br": NodeKind.LINE_BREAK,
    "div": NodeKind.CONTAINER,
    "p": NodeKind.CONTAINER,
}

KEPT_ATTRS = ("href", "src", "data-latex", "type", "checked", "disabled")


def html_to_tree(html: str) -> list[TreeNode]:
    """
    parses an HTML fragment into a forest of tree nodes.

    Args:
        html: HTML fragment, e.g. latex_to_html() output or editor content

    Returns:
        list of top-level nodes
    """
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    return _convert_children(soup)


def _convert_children(element: Any) -> list[TreeNode]:
    nodes = []
    for child in element.children:
        node = _convert(child)
        if node is not None:
            nodes.append(node)
    return nodes


def _convert(element: Any) -> Optional[TreeNode]:
    """converts one bs4 node, returning None for comments and other non-content."""
    if isinstance(element, Comment):
        return None
    if isinstance(element, NavigableString):
        return TreeNode(kind=NodeKind.TEXT, text=str(element))
    if not isinstance(element, Tag):
        return None

    tag = element.name.lower()
    attrs = {
        name: _attr_value(element.get(name))
        for name in KEPT_ATTRS
        if element.has_attr(name)
    }
    node = TreeNode(
        kind=_classify(element, tag),
        tag=tag,
        attrs=attrs,
        style=parse_style(_attr_value(element.get("style"))),
        level=HEADING_LEVELS.get(tag, 0),
    )

    if node.kind in (NodeKind.MATH_BLOCK, NodeKind.MATH_INLINE):
        # the preview is derived from data-latex, so it is kept as markup only
        node.preview = element.decode_contents()
        return node
    if node.kind in (NodeKind.CODE_BLOCK, NodeKind.INLINE_CODE):
        node.text = element.get_text()
        return node

    node.children = _convert_children(element)
    return node


def _attr_value(value: Any) -> str:
    # bs4 returns multi-valued attributes (class) as lists
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _classify(element: Tag, tag: str) -> NodeKind:
    classes = element.get("class") or []
    if "math-block" in classes:
        return NodeKind.MATH_BLOCK
    if "math-inline" in classes:
        return NodeKind.MATH_INLINE

    if tag in HEADING_LEVELS:
        return NodeKind.HEADING
    if tag == "li":
        checkbox = element.find("input", attrs={"type": "checkbox"})
        return NodeKind.CHECKBOX_ITEM if checkbox else NodeKind.LIST_ITEM
    if tag == "input" and element.get("type") == "checkbox":
        return NodeKind.CHECKBOX
    if tag == "span" and _is_sans_span(element):
        return NodeKind.SANS
    return TAG_KINDS.get(tag, NodeKind.SPAN)


def _is_sans_span(element: Tag) -> bool:
    style = parse_style(_attr_value(element.get("style")))
    return style.font_family == "sans" and (
        style.color,
        style.background,
        style.align,
        style.font_size,
    ) == (None, None, None, None)
