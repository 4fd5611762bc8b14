"""Screen composition for the viewer.

Draws the visible slice of the current session, then the overview list (when
open) and a one-line status row. Lines are clipped to the terminal width by
display columns; escape sequences pass through without counting.
"""

from __future__ import annotations

import re
import unicodedata

from .highlight import highlight_line
from .navigation import overview_rows
from .state import AppState
from .ui_theme import UITheme

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
CLEAR_LINE = "\x1b[2K"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal columns used by ``ch`` when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_styled_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` display columns, expanding tabs to spaces."""
    if max_cols <= 0:
        return ""
    out: list[str] = []
    col = 0
    i = 0
    while i < len(text):
        match = ANSI_ESCAPE_RE.match(text, i) if text[i] == "\x1b" else None
        if match is not None:
            out.append(match.group(0))
            i = match.end()
            continue
        ch = text[i]
        width = char_display_width(ch, col)
        if col + width > max_cols:
            break
        out.append(" " * width if ch == "\t" else ch)
        col += width
        i += 1
    return "".join(out)


def _move_to(row: int) -> str:
    return f"\x1b[{row};1H{CLEAR_LINE}"


def format_status(state: AppState, theme: UITheme) -> str:
    """Build the status row text with theme colors applied."""
    session = state.current_session
    scroll = state.scroll
    total = session.line_count
    start, stop = scroll.visible_window()
    if scroll.max_scroll:
        percent = f"{round(start * 100 / scroll.max_scroll)}%"
    else:
        percent = "all"
    if scroll.at_bottom:
        position = f"{theme.status_follow}FOLLOW"
    else:
        position = f"{theme.status_scrolled}↑{scroll.offset_from_bottom}"
    first = start + 1 if stop > start else 0
    counter = f"[{state.selected_idx + 1}/{len(state.sessions)}]"
    return (
        f"{theme.status_bar} {theme.status_name}{session.name}{theme.reset}{theme.status_bar}"
        f" {theme.status_dim}{counter} {first}-{stop}/{total} {percent} step {scroll.step}"
        f" {position}{theme.reset}"
    )


def render_screen(state: AppState, theme: UITheme, style: str | None, *, no_color: bool = False) -> str:
    """Return the full frame for the current state as one string."""
    out: list[str] = []
    start, stop = state.scroll.visible_window()
    lines = state.current_session.lines(start, stop - start)
    for row in range(state.viewport_height):
        out.append(_move_to(row + 1))
        if row < len(lines):
            out.append(clip_styled_line(highlight_line(lines[row], style, no_color=no_color), state.width))
            out.append(theme.reset)

    next_row = state.viewport_height + 1
    visible_items = overview_rows(state)
    if visible_items:
        first_item = max(0, min(state.selected_idx - visible_items + 1, len(state.sessions) - visible_items))
        for idx in range(first_item, first_item + visible_items):
            session = state.sessions[idx]
            marker = ">" if idx == state.selected_idx else " "
            color = theme.overview_selected if idx == state.selected_idx else theme.overview_item
            label = f"{marker} {idx + 1}. {session.name} ({session.line_count} lines)"
            out.append(_move_to(next_row))
            out.append(f"{color}{clip_styled_line(label, state.width)}{theme.reset}")
            next_row += 1

    out.append(_move_to(next_row))
    out.append(clip_styled_line(format_status(state, theme), state.width))
    out.append(theme.reset)
    return "".join(out)


def render_plain(lines: list[str], style: str | None, *, no_color: bool = False) -> str:
    """Render whole buffers for non-interactive output."""
    return "".join(highlight_line(line, style, no_color=no_color) + "\n" for line in lines)
