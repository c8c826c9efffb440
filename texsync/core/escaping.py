"""Escaping of LaTeX reserved characters."""

import re

ESCAPES: dict[str, str] = {
    "\\": "\\textbackslash{}",
    "{": "\\{",
    "}": "\\}",
    "$": "\\$",
    "&": "\\&",
    "#": "\\#",
    "%": "\\%",
    "_": "\\_",
    "^": "\\textasciicircum{}",
    "~": "\\textasciitilde{}",
}
UNESCAPES: dict[str, str] = {escaped: raw for raw, escaped in ESCAPES.items()}

# one pass each way, so inserted escapes are never rewritten again
RESERVED_PATTERN = re.compile(r"[\\{}$&#%_^~]")
ESCAPED_PATTERN = re.compile(
    r"\\textbackslash\{\}|\\textasciicircum\{\}|\\textasciitilde\{\}|\\[{}$&#%_]"
)


def escape(text: str) -> str:
    """
    escapes reserved LaTeX characters in literal text.

    Args:
        text: literal text

    Returns:
        markup-safe text
    """
    return RESERVED_PATTERN.sub(lambda m: ESCAPES[m.group(0)], text)


def unescape(text: str) -> str:
    """
    reverses escape() in a single left-to-right pass.

    Args:
        text: markup-safe text

    Returns:
        literal text
    """
    return ESCAPED_PATTERN.sub(lambda m: UNESCAPES[m.group(0)], text)
