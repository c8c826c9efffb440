"""Inline style parsing, resolution and LaTeX style inference."""

import re
from dataclasses import fields, replace
from typing import Optional, Sequence

from texsync.core.models import StyleDescriptor, TreeNode

RGB_PATTERN = re.compile(
    r"^rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)
SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)")

BLACK_VALUES = ("black", "#000", "#000000")
ALIGNMENTS = ("left", "center", "right", "justify")

# only these properties inherit down the tree
INHERITED = ("color", "align", "font_family", "font_size")

# (upper bound, command) for small sizes, (lower bound, command) for large ones
SMALL_SIZES = ((6, "tiny"), (7, "scriptsize"), (8, "footnotesize"), (9, "small"))
LARGE_SIZES = ((24, "Huge"), (20, "huge"), (17, "LARGE"), (14, "Large"), (12, "large"))

ALIGN_ENVIRONMENTS = {"center": "center", "right": "flushright", "left": "flushleft"}


def parse_style(style_attr: Optional[str]) -> StyleDescriptor:
    """
    parses an inline CSS style attribute into a StyleDescriptor.

    Args:
        style_attr: value of the style attribute, may be None

    Returns:
        descriptor with recognized properties set
    """
    style = StyleDescriptor()
    if not style_attr:
        return style

    for declaration in style_attr.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if not value:
            continue

        if name == "color":
            style.color = value
        elif name in ("background-color", "background"):
            style.background = value
        elif name == "text-align":
            if value.lower() in ALIGNMENTS or value.lower() == "inherit":
                style.align = value.lower()
        elif name == "font-family":
            if value.lower() == "inherit":
                style.font_family = "inherit"
            else:
                style.font_family = "sans" if "sans" in value.lower() else "default"
        elif name == "font-size":
            style.font_size = parse_font_size(value)

    return style


def parse_font_size(value: str) -> Optional[float]:
    """returns the leading number of a CSS size (pt or px), None if there is none."""
    match = SIZE_PATTERN.match(value)
    return float(match.group(1)) if match else None


def font_size_command(size: float) -> str:
    """
    buckets a point/pixel size into a LaTeX size command name.

    The size is truncated to an integer first, so values between two
    boundaries fall into the lower bucket.

    Args:
        size: numeric font size

    Returns:
        one of the ten LaTeX size command names
    """
    s = int(size)
    for bound, command in SMALL_SIZES:
        if s <= bound:
            return command
    for bound, command in LARGE_SIZES:
        if s >= bound:
            return command
    return "normalsize"


def rgb_to_hex(color: str) -> str:
    """converts rgb()/rgba() to #rrggbb, other values are returned unchanged."""
    match = RGB_PATTERN.match(color.strip())
    if not match:
        return color.strip()
    channels = (max(0, min(255, int(match.group(i)))) for i in (1, 2, 3))
    return "#" + "".join(f"{c:02x}" for c in channels)


def is_transparent(color: str) -> bool:
    """checks for the transparent keyword or a zero alpha channel."""
    value = color.strip().lower()
    if value == "transparent":
        return True
    match = RGB_PATTERN.match(value)
    if not match or match.group(4) is None:
        return False
    alpha = match.group(4)
    if alpha.endswith("%"):
        return float(alpha[:-1]) == 0
    return float(alpha) == 0


def is_default_color(color: str) -> bool:
    """checks for the default text color (black)."""
    value = color.strip().lower()
    return value in BLACK_VALUES or rgb_to_hex(value) == "#000000"


def resolve_style(node: TreeNode, ancestors: Sequence[TreeNode]) -> StyleDescriptor:
    """
    resolves the effective style of a node from its ancestor chain.

    Inherited properties (color, alignment, font family and size) flow down
    from the nearest ancestor that sets them; "inherit" defers to the
    ancestors explicitly. Background is never inherited.

    Args:
        node: node to resolve
        ancestors: chain from the root down to the node's parent

    Returns:
        fully resolved descriptor
    """
    resolved = StyleDescriptor()
    for current in (*ancestors, node):
        own = current.style
        for f in fields(StyleDescriptor):
            value = getattr(own, f.name)
            if value is None or value == "inherit":
                continue
            setattr(resolved, f.name, value)
        if current is not node:
            resolved.background = None
    if node.style.background == "inherit" and ancestors:
        resolved.background = ancestors[-1].style.background
    return resolved


def style_delta(node: TreeNode, ancestors: Sequence[TreeNode]) -> StyleDescriptor:
    """returns the properties a node changes relative to its parent."""
    resolved = resolve_style(node, ancestors)
    if not ancestors:
        return resolved
    inherited = resolve_style(ancestors[-1], ancestors[:-1])
    delta = replace(resolved)
    for name in INHERITED:
        if getattr(resolved, name) == getattr(inherited, name):
            setattr(delta, name, None)
    return delta


def style_wrappers(style: StyleDescriptor) -> tuple[str, str]:
    """
    computes the LaTeX prefix and suffix expressing a style.

    Args:
        style: style to express (usually a style_delta)

    Returns:
        (prefix, suffix) tuple
    """
    prefix = ""
    suffix = ""

    color = style.color
    if color and color != "inherit" and not is_default_color(color):
        prefix += f"\\textcolor{{{rgb_to_hex(color)}}}{{"
        suffix = "}" + suffix

    background = style.background
    if background and background != "inherit" and not is_transparent(background):
        prefix += f"\\colorbox{{{rgb_to_hex(background)}}}{{"
        suffix = "}" + suffix

    environment = ALIGN_ENVIRONMENTS.get(style.align or "")
    if environment:
        prefix = f"\n\\begin{{{environment}}}\n{prefix}"
        suffix = f"{suffix}\n\\end{{{environment}}}\n"

    if style.font_family == "sans":
        prefix += "\\textsf{"
        suffix = "}" + suffix

    # size commands are declarations, so there is nothing to close
    if style.font_size is not None:
        prefix += f"\\{font_size_command(style.font_size)} "

    return prefix, suffix
