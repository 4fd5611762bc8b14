"""Session selection and scroll binding.

Every change of the selected session or of the viewport rebinds the scroll
controller in the same call, so the next render never pairs an offset with
the wrong buffer.
"""

from __future__ import annotations

import logging

from .mouse import MouseScrollEvent
from .state import AppState

logger = logging.getLogger(__name__)

STATUS_ROWS = 1
MAX_OVERVIEW_ROWS = 8


def overview_rows(state: AppState) -> int:
    if not state.show_overview:
        return 0
    return min(len(state.sessions), MAX_OVERVIEW_ROWS)


def content_rows(state: AppState, terminal_rows: int) -> int:
    """Rows left for session content after the status row and overview."""
    return max(0, terminal_rows - STATUS_ROWS - overview_rows(state))


def sync_scroll(state: AppState) -> bool:
    """Bind the scroll controller to the current session. Returns whether it reset."""
    session = state.current_session
    changed = state.scroll.bind(session.identity, session.line_count, state.viewport_height)
    if changed:
        logger.debug("scroll rebound to %s (generation %d)", session.name, session.generation)
        state.dirty = True
    return changed


def resize_viewport(state: AppState, terminal_rows: int, terminal_columns: int) -> None:
    height = content_rows(state, terminal_rows)
    if height != state.viewport_height or terminal_columns != state.width:
        state.viewport_height = height
        state.width = terminal_columns
        state.dirty = True
    sync_scroll(state)


def select_session(state: AppState, idx: int) -> bool:
    """Select session ``idx`` (clamped). Returns whether the selection changed."""
    idx = max(0, min(idx, len(state.sessions) - 1))
    if idx == state.selected_idx:
        return False
    state.selected_idx = idx
    logger.debug("selected session %s", state.current_session.name)
    sync_scroll(state)
    state.dirty = True
    return True


def cycle_session(state: AppState, direction: int) -> bool:
    if len(state.sessions) < 2:
        return False
    return select_session(state, (state.selected_idx + direction) % len(state.sessions))


def apply_scroll_event(state: AppState, event: MouseScrollEvent) -> bool:
    if event is MouseScrollEvent.UP:
        moved = state.scroll.scroll_up()
    else:
        moved = state.scroll.scroll_down()
    if moved:
        state.dirty = True
    return moved
