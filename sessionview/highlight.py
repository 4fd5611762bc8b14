"""ANSI highlighting of classified line spans via Pygments formatters.

Spans from :func:`sessionview.lexer.classify_line` are mapped onto Pygments
token types and passed through a terminal formatter. The ``ansi`` style uses
a fixed 16-color scheme; any other name selects a Pygments style rendered
with 256 colors.
"""

from __future__ import annotations

from pygments import format as pygments_format
from pygments.formatter import Formatter
from pygments.formatters import Terminal256Formatter, TerminalFormatter
from pygments.styles import get_style_by_name
from pygments.token import (
    Comment,
    Generic,
    Keyword,
    Literal,
    Name,
    Number,
    String,
    Text,
    Token,
)
from pygments.util import ClassNotFound

from .lexer import DiffStyle, Span, SpanStyle, TokenKind, classify_line

ANSI_STYLE = "ansi"
FALLBACK_STYLE = "monokai"

SPAN_TOKEN_TYPES: dict[SpanStyle, object] = {
    TokenKind.KEYWORD: Keyword,
    TokenKind.STRING: String,
    TokenKind.COMMENT: Comment,
    TokenKind.LITERAL: Literal,
    TokenKind.ELEMENT: Name.Tag,
    TokenKind.PROPERTY: Name.Attribute,
    TokenKind.TYPE_NAME: Name.Class,
    TokenKind.PARAM: Name.Variable,
    TokenKind.PLAIN: Text,
    DiffStyle.ADDED: Generic.Inserted,
    DiffStyle.REMOVED: Generic.Deleted,
    DiffStyle.REMOVED_TEXT: Comment.Special,
}

# (light background, dark background) pairs for TerminalFormatter.
ANSI_COLOR_SCHEME = {
    Token: ("", ""),
    Keyword: ("brightmagenta", "brightmagenta"),
    String: ("red", "red"),
    Comment: ("brightblack", "brightblack"),
    Literal: ("cyan", "cyan"),
    Number: ("cyan", "cyan"),
    Name.Tag: ("yellow", "yellow"),
    Name.Attribute: ("blue", "blue"),
    Name.Class: ("yellow", "yellow"),
    Name.Variable: ("cyan", "cyan"),
    Generic.Inserted: ("brightgreen", "brightgreen"),
    Generic.Deleted: ("brightred", "brightred"),
}

_FORMATTERS: dict[str, Formatter] = {}
_VALID_STYLES: set[str] = {ANSI_STYLE}
_INVALID_STYLES: set[str] = set()


def normalize_style(style: str | None) -> str:
    """Return ``style`` if Pygments knows it, else the fallback style."""
    if not style:
        return ANSI_STYLE
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return FALLBACK_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return FALLBACK_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    if style == ANSI_STYLE:
        formatter = TerminalFormatter(bg="dark", colorscheme=ANSI_COLOR_SCHEME)
    else:
        formatter = Terminal256Formatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def format_spans(spans: list[Span], style: str | None = ANSI_STYLE) -> str:
    formatter = _formatter_for_style(normalize_style(style))
    token_stream = [(SPAN_TOKEN_TYPES[span.style], span.text) for span in spans]
    return pygments_format(token_stream, formatter)


def highlight_line(line: str, style: str | None = ANSI_STYLE, *, no_color: bool = False) -> str:
    """Return ``line`` with ANSI colors for its classified spans."""
    if no_color or not line:
        return line
    return format_spans(classify_line(line), style)
