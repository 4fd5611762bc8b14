"""Keyboard dispatch for normal and overview modes."""

from __future__ import annotations

from collections.abc import Callable

from .config import clamp_scroll_step
from .navigation import cycle_session, select_session
from .state import AppState

QUIT_KEYS = frozenset({"q", "CTRL_C"})
OVERVIEW_TOGGLE_KEYS = frozenset({"o", "ALT_a"})
OVERVIEW_CLOSE_KEYS = frozenset({"ENTER", "ESC"})


def toggle_overview(state: AppState) -> None:
    """Flip the session overview and arm the toggle guard.

    While the guard is armed, the remaining keys of the chunk that carried
    the toggle are dropped. The guard is disarmed when that chunk is done.
    """
    state.show_overview = not state.show_overview
    state.toggle_guard = True
    state.dirty = True


def _handle_overview_key(state: AppState, key: str) -> bool:
    if key in ("UP", "ALT_UP", "k"):
        select_session(state, state.selected_idx - 1)
        return True
    if key in ("DOWN", "ALT_DOWN", "j"):
        select_session(state, state.selected_idx + 1)
        return True
    if key in OVERVIEW_CLOSE_KEYS:
        state.show_overview = False
        state.dirty = True
        return True
    return False


def _adjust_step(state: AppState, delta: int, save_step: Callable[[int], None]) -> None:
    step = clamp_scroll_step(state.scroll.step + delta)
    if step == state.scroll.step:
        return
    state.scroll.step = step
    save_step(step)
    state.dirty = True


def handle_key(state: AppState, key: str, save_step: Callable[[int], None]) -> bool:
    """Apply one key token. Returns ``False`` when the key is not bound."""
    if key in QUIT_KEYS:
        state.quit_requested = True
        return True
    if key in OVERVIEW_TOGGLE_KEYS:
        toggle_overview(state)
        return True
    if state.show_overview and _handle_overview_key(state, key):
        return True

    scroll = state.scroll
    if key in ("UP", "k"):
        moved = scroll.scroll_up()
    elif key in ("DOWN", "j"):
        moved = scroll.scroll_down()
    elif key in ("PAGE_UP", "b"):
        moved = scroll.page_up()
    elif key in ("PAGE_DOWN", " "):
        moved = scroll.page_down()
    elif key in ("HOME", "g"):
        moved = scroll.scroll_to_top()
    elif key in ("END", "G"):
        moved = not scroll.at_bottom
        scroll.reset()
    elif key == "TAB":
        cycle_session(state, 1)
        return True
    elif key == "SHIFT_TAB":
        cycle_session(state, -1)
        return True
    elif key in ("+", "="):
        _adjust_step(state, 1, save_step)
        return True
    elif key == "-":
        _adjust_step(state, -1, save_step)
        return True
    else:
        return False

    if moved:
        state.dirty = True
    return True
