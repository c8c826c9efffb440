"""Math rendering capability used for math previews."""

import html
import logging
from typing import Optional, Protocol

from latex2mathml.converter import convert as latex2mathml_convert

logger = logging.getLogger(__name__)

ERROR_FRAGMENT = '<span class="math-error">Error</span>'


class MathRenderError(Exception):
    """raised when a math expression cannot be typeset."""


class MathRenderer(Protocol):  # pylint: disable=too-few-public-methods
    """protocol for math renderers."""

    def render(self, expression: str, display_mode: bool) -> str:
        """renders a math expression to an HTML fragment."""


class MathMLRenderer:  # pylint: disable=too-few-public-methods
    """renders math to MathML using latex2mathml."""

    def render(self, expression: str, display_mode: bool) -> str:
        """
        renders a math expression to MathML.

        Args:
            expression: LaTeX math source without delimiters
            display_mode: True for display math, False for inline

        Returns:
            MathML fragment

        Raises:
            MathRenderError: if latex2mathml rejects the expression
        """
        try:
            return latex2mathml_convert(
                expression, display="block" if display_mode else "inline"
            )
        except Exception as e:  # latex2mathml has no common exception base
            raise MathRenderError(str(e)) from e


def placeholder(expression: str, display_mode: bool) -> str:
    """returns the textual stand-in used when no renderer is available."""
    escaped = html.escape(expression)
    if display_mode:
        return f'<div class="math-placeholder">\\[{escaped}\\]</div>'
    return f'<span class="math-placeholder">${escaped}$</span>'


def render_preview(
    renderer: Optional[MathRenderer], expression: str, display_mode: bool
) -> str:
    """
    renders a math preview, degrading to a placeholder or error marker.

    Args:
        renderer: math renderer, None when the capability is unavailable
        expression: LaTeX math source without delimiters
        display_mode: True for display math, False for inline

    Returns:
        HTML fragment, never raises
    """
    if renderer is None:
        logger.debug("No math renderer, using placeholder for %r", expression)
        return placeholder(expression, display_mode)

    try:
        return renderer.render(expression, display_mode)
    except MathRenderError as e:
        logger.warning("Failed to render math %r: %s", expression, e)
        return ERROR_FRAGMENT
