from __future__ import annotations

from dataclasses import dataclass

from .scroll import ScrollController
from .session import Session


@dataclass
class AppState:
    sessions: list[Session]
    scroll: ScrollController
    selected_idx: int = 0
    viewport_height: int = 0
    width: int = 80
    show_overview: bool = False
    toggle_guard: bool = False
    dirty: bool = True
    quit_requested: bool = False

    @property
    def current_session(self) -> Session:
        return self.sessions[self.selected_idx]
