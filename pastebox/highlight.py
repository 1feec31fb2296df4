"""
Syntax highlighting via Pygments.
"""
import html
import logging
from typing import List, Optional, Tuple

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_all_lexers, get_lexer_by_name, get_lexer_for_filename
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

THEMES = {
    "light": "default",
    "dark": "monokai",
}

_formatter = HtmlFormatter(cssclass="highlight", linenos="table", wrapcode=True)


def _lexer_for(extension: Optional[str]):
    if not extension:
        return None
    try:
        return get_lexer_by_name(extension)
    except ClassNotFound:
        pass
    try:
        return get_lexer_for_filename(f"paste.{extension}")
    except ClassNotFound:
        return None


def plain(text: str) -> str:
    """Render text without highlighting."""
    return f'<div class="highlight"><pre><code>{html.escape(text)}</code></pre></div>'


def highlight(text: str, extension: Optional[str] = None) -> str:
    """
    Render text as highlighted HTML.

    Unknown extensions and lexer failures fall back to escaped plain text,
    this function never raises for bad input.
    """
    lexer = _lexer_for(extension)
    if lexer is None:
        return plain(text)

    try:
        return pygments_highlight(text, lexer, _formatter)
    except Exception as e:
        logger.warning(f"Highlighting as {extension!r} failed, rendering plain text: {e}")
        return plain(text)


def stylesheet(theme: str) -> str:
    """CSS rules for one of the supported themes."""
    style = THEMES[theme]
    return HtmlFormatter(style=style, cssclass="highlight").get_style_defs(".highlight")


def syntaxes() -> List[Tuple[str, str]]:
    """(name, extension) pairs offered in the paste form."""
    choices = []
    for name, aliases, filenames, _ in get_all_lexers():
        if not aliases:
            continue
        choices.append((name, aliases[0]))
    return sorted(choices, key=lambda choice: choice[0].lower())
