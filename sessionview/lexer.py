"""Regex tokenizer for code and diff lines shown in session output.

There is no real grammar here. One combined pattern with named groups is
tried left to right; groups are ordered by priority and matches never
overlap, so gaps between matches become ``PLAIN`` tokens and the token texts
always concatenate back to the input.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import NamedTuple, Union

KEYWORDS = (
    "const",
    "let",
    "var",
    "function",
    "return",
    "export",
    "import",
    "if",
    "else",
    "for",
    "while",
    "class",
    "interface",
    "type",
    "extends",
    "implements",
    "new",
    "this",
    "super",
    "async",
    "await",
    "from",
    "default",
)
LITERAL_WORDS = ("true", "false", "null", "undefined")


class TokenKind(enum.Enum):
    KEYWORD = "keyword"
    STRING = "string"
    COMMENT = "comment"
    LITERAL = "literal"
    ELEMENT = "element"
    PROPERTY = "property"
    TYPE_NAME = "type_name"
    PARAM = "param"
    PLAIN = "plain"


class DiffStyle(enum.Enum):
    """Fixed styles for the line-number/marker prefix of numbered lines."""

    ADDED = "added"
    REMOVED = "removed"
    REMOVED_TEXT = "removed_text"


class Token(NamedTuple):
    kind: TokenKind
    text: str


SpanStyle = Union[TokenKind, DiffStyle]


class Span(NamedTuple):
    style: SpanStyle
    text: str


_TOKEN_RE = re.compile(
    r"(?P<comment>//.*$|/\*[\s\S]*?\*/)"
    r"|(?P<string>\"[^\"]*\"|'[^']*'|`[^`]*`)"
    r"|(?P<element></?[A-Z][a-zA-Z0-9]*)"
    r"|(?P<property>\b[a-z][a-zA-Z]*(?==))"
    rf"|(?P<keyword>\b(?:{'|'.join(KEYWORDS)})\b)"
    rf"|(?P<literal>\b(?:{'|'.join(LITERAL_WORDS)})\b)"
    r"|(?P<number>\b\d+(?:\.\d+)?\b)"
    r"|(?P<type_name>\b[A-Z][a-zA-Z0-9]*\b)"
    r"|(?P<param>\b[a-z][a-zA-Z0-9]*\b)",
    re.ASCII,
)

_GROUP_KINDS = {
    "comment": TokenKind.COMMENT,
    "string": TokenKind.STRING,
    "element": TokenKind.ELEMENT,
    "property": TokenKind.PROPERTY,
    "keyword": TokenKind.KEYWORD,
    "literal": TokenKind.LITERAL,
    "number": TokenKind.LITERAL,
    "type_name": TokenKind.TYPE_NAME,
    "param": TokenKind.PARAM,
}

_DIFF_LINE_RE = re.compile(r"(\s*)(\d+)(\s*)([+-])?(.*)", re.ASCII)


@dataclass(frozen=True)
class DiffLine:
    """A line-numbered line, optionally carrying a ``+``/``-`` marker."""

    indent: str
    number: str
    gap: str
    marker: str | None
    rest: str


def tokenize(code: str) -> list[Token]:
    tokens: list[Token] = []
    cursor = 0
    for match in _TOKEN_RE.finditer(code):
        if match.start() > cursor:
            tokens.append(Token(TokenKind.PLAIN, code[cursor : match.start()]))
        tokens.append(Token(_GROUP_KINDS[match.lastgroup], match.group(0)))
        cursor = match.end()
    if cursor < len(code):
        tokens.append(Token(TokenKind.PLAIN, code[cursor:]))
    return tokens


def parse_diff_line(line: str) -> DiffLine | None:
    """Split ``line`` into number/marker prefix and remainder, if it has one."""
    match = _DIFF_LINE_RE.fullmatch(line)
    if match is None:
        return None
    indent, number, gap, marker, rest = match.groups()
    return DiffLine(indent=indent, number=number, gap=gap, marker=marker, rest=rest)


def classify_line(line: str) -> list[Span]:
    """Return styled spans for one display line.

    Added lines style the number and ``+`` and tokenize the rest. Removed
    lines style the number and ``-`` and mute the whole rest as one span.
    Unmarked numbered lines and plain lines are tokenized normally.
    """
    diff = parse_diff_line(line)
    if diff is None:
        return [Span(token.kind, token.text) for token in tokenize(line)]

    if diff.marker == "+":
        prefix_style: SpanStyle = DiffStyle.ADDED
    elif diff.marker == "-":
        prefix_style = DiffStyle.REMOVED
    else:
        prefix_style = TokenKind.PLAIN

    spans = [
        Span(TokenKind.PLAIN, diff.indent),
        Span(prefix_style, diff.number),
        Span(TokenKind.PLAIN, diff.gap),
    ]
    if diff.marker is not None:
        spans.append(Span(prefix_style, diff.marker))
    if diff.marker == "-":
        spans.append(Span(DiffStyle.REMOVED_TEXT, diff.rest))
    else:
        spans.extend(Span(token.kind, token.text) for token in tokenize(diff.rest))
    return [span for span in spans if span.text]
