"""Data models for the document tree."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import unquote


class NodeKind(Enum):
    """kinds of tree nodes."""

    TEXT = "text"
    HEADING = "heading"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    SANS = "sans"
    ANCHOR = "anchor"
    IMAGE = "image"
    UNORDERED_LIST = "unordered-list"
    ORDERED_LIST = "ordered-list"
    LIST_ITEM = "list-item"
    CHECKBOX_ITEM = "checkbox-item"
    CHECKBOX = "checkbox"
    CODE_BLOCK = "code-block"
    INLINE_CODE = "inline-code"
    MATH_INLINE = "math-inline"
    MATH_BLOCK = "math-block"
    LINE_BREAK = "line-break"
    CONTAINER = "generic-container"
    SPAN = "span"


MATH_KINDS = (NodeKind.MATH_INLINE, NodeKind.MATH_BLOCK)


@dataclass
class StyleDescriptor:
    """inline style of a node; None means not set."""

    color: Optional[str] = None
    background: Optional[str] = None
    align: Optional[str] = None  # "left", "center", "right", "justify"
    font_family: Optional[str] = None  # "default" or "sans"
    font_size: Optional[float] = None

    def is_empty(self) -> bool:
        """returns True when no property is set."""
        return all(
            value is None
            for value in (
                self.color,
                self.background,
                self.align,
                self.font_family,
                self.font_size,
            )
        )


@dataclass
class ProtectedBlock:
    """rendered content hidden behind a placeholder token."""

    index: int
    rendered_content: str

    @property
    def token(self) -> str:
        return f"__PROTECTED_BLOCK_{self.index}__"


@dataclass
class TreeNode:
    """one element or text unit of the rendered document."""

    kind: NodeKind
    children: list["TreeNode"] = field(default_factory=list)
    text: str = ""  # text nodes and raw code content
    tag: str = ""  # source HTML tag, empty for text nodes
    level: int = 0  # heading level 1..4
    attrs: dict[str, str] = field(default_factory=dict)
    style: StyleDescriptor = field(default_factory=StyleDescriptor)
    preview: str = ""  # math only, derived from source

    @property
    def source(self) -> Optional[str]:
        """decoded canonical math source, None for non-math nodes."""
        if self.kind not in MATH_KINDS:
            return None
        return unquote(self.attrs.get("data-latex", ""))

    def text_content(self) -> str:
        """returns concatenated text of this node and its descendants."""
        if self.kind == NodeKind.TEXT:
            return self.text
        if self.kind in (NodeKind.CODE_BLOCK, NodeKind.INLINE_CODE):
            return self.text
        return "".join(child.text_content() for child in self.children)

    def find_all(self, kind: NodeKind) -> list["TreeNode"]:
        """returns descendants (and self) of the given kind, depth first."""
        found = [self] if self.kind == kind else []
        for child in self.children:
            found.extend(child.find_all(kind))
        return found


def find_all(forest: list[TreeNode], kind: NodeKind) -> list[TreeNode]:
    """returns all nodes of the given kind in a forest."""
    found: list[TreeNode] = []
    for node in forest:
        found.extend(node.find_all(kind))
    return found
