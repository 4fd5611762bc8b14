"""Main interactive event loop and viewer wiring.

One thread owns all state. Each loop iteration polls sessions for new
output, resizes the viewport, renders when dirty, then reads one input chunk
and processes it to completion.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import signal
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from . import config
from .input import read_chunk, split_keys
from .keys import handle_key
from .mouse import MouseEventDecoder
from .navigation import apply_scroll_event, resize_viewport
from .render import render_plain, render_screen
from .scroll import ScrollController
from .session import Session
from .state import AppState
from .terminal import TerminalController
from .ui_theme import UITheme, resolve_theme

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100


@dataclass(frozen=True)
class ViewerOptions:
    style: str
    theme_name: str | None
    no_color: bool
    scroll_step: int


def dispatch_input(
    state: AppState,
    decoder: MouseEventDecoder,
    chunk: bytes,
    save_step: Callable[[int], None],
) -> None:
    """Apply wheel events, then key presses, from one input chunk.

    Keys after an overview toggle in the same chunk are dropped; wheel
    events still apply. The toggle guard never outlives the chunk.
    """
    for event in decoder.feed(chunk):
        apply_scroll_event(state, event)

    keys = split_keys(decoder.strip(chunk))
    for idx, key in enumerate(keys):
        handle_key(state, key, save_step)
        if state.quit_requested:
            break
        if state.toggle_guard:
            logger.debug("dropped %d key(s) after mode toggle", len(keys) - idx - 1)
            break
    state.toggle_guard = False


def refresh_sessions(state: AppState) -> None:
    for idx, session in enumerate(state.sessions):
        if session.refresh() and idx == state.selected_idx:
            state.dirty = True


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    decoder: MouseEventDecoder,
    theme: UITheme,
    options: ViewerOptions,
    *,
    poll_interval_ms: int = POLL_INTERVAL_MS,
) -> None:
    """Run the interactive loop until a quit key is pressed."""
    with terminal.raw_mode(), decoder.tracking():
        while not state.quit_requested:
            refresh_sessions(state)
            term = shutil.get_terminal_size((80, 24))
            resize_viewport(state, term.lines, term.columns)
            if state.dirty:
                frame = render_screen(state, theme, options.style, no_color=options.no_color)
                terminal.write(frame.encode("utf-8", errors="replace"))
                state.dirty = False

            chunk = read_chunk(terminal.stdin_fd, poll_interval_ms)
            if chunk:
                dispatch_input(state, decoder, chunk, config.save_scroll_step)


@contextlib.contextmanager
def _sigterm_as_exit() -> Iterator[None]:
    """Turn SIGTERM into ``SystemExit`` so cleanup in ``finally`` blocks runs."""

    def _raise_exit(signum, _frame) -> None:
        raise SystemExit(128 + signum)

    previous = signal.signal(signal.SIGTERM, _raise_exit)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def load_sessions(paths: list[Path]) -> list[Session]:
    sessions = [Session(path) for path in paths]
    for session in sessions:
        session.refresh()
    return sessions


def print_sessions(sessions: list[Session], options: ViewerOptions, write: Callable[[str], object]) -> None:
    """Write every session's full content, highlighted, for non-interactive use."""
    for session in sessions:
        if len(sessions) > 1:
            write(f"==> {session.name} <==\n")
        write(render_plain(session.lines(0, session.line_count), options.style, no_color=options.no_color))


def run_viewer(paths: list[Path], options: ViewerOptions) -> None:
    """Open ``paths`` as sessions in the interactive viewer.

    Falls back to plain printing when stdin or stdout is not a terminal.
    """
    sessions = load_sessions(paths)
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        print_sessions(sessions, options, sys.stdout.write)
        return

    scroll = ScrollController(step=options.scroll_step)
    state = AppState(sessions=sessions, scroll=scroll)
    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    decoder = MouseEventDecoder(terminal.write)
    theme = resolve_theme(options.theme_name, no_color=options.no_color)
    logger.debug("starting viewer with %d session(s)", len(sessions))
    with _sigterm_as_exit():
        run_main_loop(state, terminal, decoder, theme, options)
