"""LaTeX to HTML conversion as an ordered list of text stages."""

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Union
from urllib.parse import quote

from texsync.compilers.dom import html_to_tree
from texsync.core.escaping import unescape
from texsync.core.math_adapter import MathRenderer, render_preview
from texsync.core.models import TreeNode
from texsync.core.protection import PLACEHOLDER_PATTERN, ProtectedBlockStore

logger = logging.getLogger(__name__)

DOCUMENT_PATTERN = re.compile(r"\\begin\{document\}([\s\S]*?)\\end\{document\}")

VERBATIM_PATTERN = re.compile(r"\\begin\{verbatim\}([\s\S]*?)\\end\{verbatim\}")
CHECKBOX_MARKER = "\\item[$\\square$]"
CHECKBOX_LIST_PATTERN = re.compile(
    r"\\begin\{itemize\}\s*(\\item\[\$\\square\$\][\s\S]*?)\\end\{itemize\}"
)
BRACKET_MATH_PATTERN = re.compile(r"\\\[([\s\S]*?)\\\]")
DOLLAR_MATH_PATTERN = re.compile(r"\$\$([\s\S]*?)\$\$")
INLINE_MATH_PATTERN = re.compile(r"(?<!\\)\$([^$]+?)\$")
INLINE_CODE_PATTERN = re.compile(r"\\texttt\{([\s\S]*?)\}")
TOKEN_SPLIT_PATTERN = re.compile(r"(__PROTECTED_BLOCK_\d+__)")

# characters encodeURIComponent leaves alone
URI_SAFE = "-_.!~*'()"

# (command, point size) for article class at 10pt
FONT_SIZES = (
    ("tiny", "5"),
    ("scriptsize", "7"),
    ("footnotesize", "8"),
    ("small", "9"),
    ("normalsize", "10"),
    ("large", "12"),
    ("Large", "14.4"),
    ("LARGE", "17.28"),
    ("huge", "20.74"),
    ("Huge", "24.88"),
)

COLOR_VALUE = r"([a-zA-Z]+|#[0-9a-fA-F]{6})"


@dataclass
class ConversionContext:
    """per-call state shared by the stages of one conversion."""

    math_renderer: Optional[MathRenderer] = None
    store: ProtectedBlockStore = field(default_factory=ProtectedBlockStore)


@dataclass
class ForwardResult:
    """HTML fragment and the tree parsed from it."""

    html: str
    tree: list[TreeNode]


Stage = Callable[[str, ConversionContext], str]
Replacement = Union[str, Callable[[re.Match[str]], str]]


def encode_source(math: str) -> str:
    """percent-encodes math source for the data-latex attribute."""
    return quote(math, safe=URI_SAFE)


def extract_body(latex: str) -> str:
    """returns the text between begin/end document markers, or all of it."""
    match = DOCUMENT_PATTERN.search(latex)
    body = match.group(1) if match else latex
    return body.replace("\r\n", "\n")


def _escape_raw(text: str) -> str:
    # underscores as character references keep literal placeholder text inert
    return html.escape(text, quote=False).replace("_", "&#95;")


def protect_verbatim(text: str, ctx: ConversionContext) -> str:
    """replaces verbatim environments with protected <pre> blocks."""

    def replacer(match: re.Match[str]) -> str:
        code = _escape_raw(match.group(1))
        return ctx.store.protect(f'<pre contenteditable="false">{code}</pre>')

    return VERBATIM_PATTERN.sub(replacer, text)


def protect_checkbox_lists(text: str, ctx: ConversionContext) -> str:
    """
    replaces itemize lists using the square marker with checkbox lists.

    Runs before math detection, otherwise the $\\square$ marker would be
    taken for inline math.
    """

    def replacer(match: re.Match[str]) -> str:
        items = [
            item.strip() for item in match.group(1).split(CHECKBOX_MARKER)
        ]
        rendered = "".join(
            '<li><input type="checkbox" disabled> '
            f"{html.escape(unescape(item), quote=False)}</li>"
            for item in items
            if item
        )
        return ctx.store.protect(
            f'<ul style="list-style-type: none;">{rendered}</ul>'
        )

    return CHECKBOX_LIST_PATTERN.sub(replacer, text)


def _math_container(ctx: ConversionContext, math: str, display_mode: bool) -> str:
    preview = render_preview(ctx.math_renderer, math, display_mode)
    tag, css_class = ("div", "math-block") if display_mode else ("span", "math-inline")
    return ctx.store.protect(
        f'<{tag} class="{css_class}" contenteditable="false" '
        f'data-latex="{encode_source(math)}">{preview}</{tag}>'
    )


def protect_display_math(text: str, ctx: ConversionContext) -> str:
    """replaces \\[...\\] and $$...$$ with protected math blocks."""

    def replacer(match: re.Match[str]) -> str:
        return _math_container(ctx, match.group(1), True)

    text = BRACKET_MATH_PATTERN.sub(replacer, text)
    return DOLLAR_MATH_PATTERN.sub(replacer, text)


def protect_inline_math(text: str, ctx: ConversionContext) -> str:
    """replaces unescaped $...$ with protected inline math."""

    def replacer(match: re.Match[str]) -> str:
        return _math_container(ctx, match.group(1), False)

    return INLINE_MATH_PATTERN.sub(replacer, text)


def protect_inline_code(text: str, ctx: ConversionContext) -> str:
    """replaces \\texttt{...} with protected <code> spans."""
    # only tokens issued by the earlier stages are live inside code
    issued = len(ctx.store)

    def is_live(piece: str) -> bool:
        token = PLACEHOLDER_PATTERN.fullmatch(piece)
        return token is not None and int(token.group(1)) < issued

    def replacer(match: re.Match[str]) -> str:
        code = "".join(
            piece if is_live(piece) else _escape_raw(piece)
            for piece in TOKEN_SPLIT_PATTERN.split(match.group(1))
        )
        return ctx.store.protect(f"<code>{code}</code>")

    return INLINE_CODE_PATTERN.sub(replacer, text)


def escape_html(text: str, _ctx: ConversionContext) -> str:
    """escapes HTML-significant characters left in the markup."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _attribute(value: str) -> str:
    # &, < and > were escaped by escape_html, only the delimiter is left
    return value.replace('"', "&quot;")


def _render_anchor(match: re.Match[str]) -> str:
    return f'<a href="{_attribute(match.group(1))}">{match.group(2)}</a>'


def _render_image(match: re.Match[str]) -> str:
    return f'<img src="{_attribute(match.group(1))}" style="max-width:100%" />'


def _render_list(tag: str) -> Callable[[re.Match[str]], str]:
    def replacer(match: re.Match[str]) -> str:
        items = [item.strip() for item in match.group(1).split("\\item")]
        return f"<{tag}>" + "".join(f"<li>{i}</li>" for i in items if i) + f"</{tag}>"

    return replacer


def _build_formatting_rules() -> list[tuple[re.Pattern[str], Replacement]]:
    arg = r"\{([\s\S]*?)\}"
    rules: list[tuple[re.Pattern[str], Replacement]] = [
        (re.compile(r"\\section\s*" + arg), r"<h1>\1</h1>"),
        (re.compile(r"\\subsection\s*" + arg), r"<h2>\1</h2>"),
        (re.compile(r"\\subsubsection\s*" + arg), r"<h3>\1</h3>"),
        (re.compile(r"\\paragraph\s*" + arg), r"<h4>\1</h4>"),
        (re.compile(r"\\textbf" + arg), r"<b>\1</b>"),
        (re.compile(r"\\textit" + arg), r"<i>\1</i>"),
        (re.compile(r"\\underline" + arg), r"<u>\1</u>"),
        (
            re.compile(r"\\textsf" + arg),
            r'<span style="font-family: sans-serif">\1</span>',
        ),
    ]
    # size declarations run to the next command, newline or end of text
    for command, points in FONT_SIZES:
        rules.append(
            (
                re.compile(rf"\\{command}\s+([\s\S]*?)(?=\\|\n|\Z)"),
                rf'<span style="font-size: {points}pt">\1</span>',
            )
        )
    rules += [
        (
            re.compile(r"\\textcolor\{" + COLOR_VALUE + r"\}" + arg),
            r'<span style="color: \1">\2</span>',
        ),
        (
            re.compile(r"\\colorbox\{" + COLOR_VALUE + r"\}" + arg),
            r'<span style="background-color: \1">\2</span>',
        ),
    ]
    for environment, align in (
        ("center", "center"),
        ("flushright", "right"),
        ("flushleft", "left"),
    ):
        rules.append(
            (
                re.compile(
                    rf"\\begin\{{{environment}\}}([\s\S]*?)\\end\{{{environment}\}}"
                ),
                rf'<div style="text-align: {align}">\1</div>',
            )
        )
    rules += [
        (re.compile(r"\\href" + arg + arg), _render_anchor),
        (re.compile(r"\\includegraphics\[.*?\]" + arg), _render_image),
        (re.compile(r"\\includegraphics" + arg), _render_image),
        (
            re.compile(r"\\begin\{itemize\}([\s\S]*?)\\end\{itemize\}"),
            _render_list("ul"),
        ),
        (
            re.compile(r"\\begin\{enumerate\}([\s\S]*?)\\end\{enumerate\}"),
            _render_list("ol"),
        ),
    ]
    return rules


FORMATTING_RULES = _build_formatting_rules()


def apply_formatting(text: str, _ctx: ConversionContext) -> str:
    """rewrites structural and formatting commands to HTML."""
    for pattern, replacement in FORMATTING_RULES:
        text = pattern.sub(replacement, text)
    return text


def fix_line_breaks(text: str, _ctx: ConversionContext) -> str:
    """turns \\\\ into <br/> and reflows remaining newlines into spaces."""
    return text.replace("\\\\", "<br/>").replace("\n", " ")


def unescape_text(text: str, _ctx: ConversionContext) -> str:
    """resolves escaped reserved characters."""
    return unescape(text)


def restore_protected(text: str, ctx: ConversionContext) -> str:
    """puts protected fragments back in place of their placeholders."""
    return ctx.store.restore_all(text)


# protection must precede formatting and unescaping, restoration comes last
FORWARD_STAGES: tuple[tuple[str, Stage], ...] = (
    ("protect_verbatim", protect_verbatim),
    ("protect_checkbox_lists", protect_checkbox_lists),
    ("protect_display_math", protect_display_math),
    ("protect_inline_math", protect_inline_math),
    ("protect_inline_code", protect_inline_code),
    ("escape_html", escape_html),
    ("apply_formatting", apply_formatting),
    ("fix_line_breaks", fix_line_breaks),
    ("unescape_text", unescape_text),
    ("restore_protected", restore_protected),
)


def run_stages(
    text: str,
    ctx: ConversionContext,
    stages: tuple[tuple[str, Stage], ...] = FORWARD_STAGES,
) -> str:
    """applies stages in order, each to the whole text."""
    for name, stage in stages:
        text = stage(text, ctx)
        logger.debug(
            "Stage %s: %d chars, %d protected", name, len(text), len(ctx.store)
        )
    return text


def latex_to_html(latex: str, math_renderer: Optional[MathRenderer] = None) -> str:
    """
    converts a LaTeX document (or fragment) to an HTML fragment.

    Args:
        latex: LaTeX source; only the document body is converted
        math_renderer: renderer for math previews, None for placeholders

    Returns:
        HTML fragment
    """
    if not latex:
        return ""
    ctx = ConversionContext(math_renderer=math_renderer)
    return run_stages(extract_body(latex), ctx)


def compile_latex(
    latex: str, math_renderer: Optional[MathRenderer] = None
) -> ForwardResult:
    """
    converts LaTeX to both an HTML fragment and a document tree.

    Args:
        latex: LaTeX source
        math_renderer: renderer for math previews, None for placeholders

    Returns:
        ForwardResult with html and tree
    """
    fragment = latex_to_html(latex, math_renderer)
    return ForwardResult(html=fragment, tree=html_to_tree(fragment))


def latex_to_tree(
    latex: str, math_renderer: Optional[MathRenderer] = None
) -> list[TreeNode]:
    """converts LaTeX to a document tree (forest of top-level nodes)."""
    return compile_latex(latex, math_renderer).tree
