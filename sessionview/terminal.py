"""Terminal control helpers for the viewer session.

Owns raw-mode lifecycle, alternate-screen switching, and cursor visibility.
Mouse tracking is a separate scoped resource owned by
:class:`sessionview.mouse.MouseEventDecoder`.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l"
LEAVE_SCREEN = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Manage terminal mode transitions for one viewer run."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Remember the current tty attributes so they can be restored."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def write(self, data: bytes) -> None:
        """Write all of ``data`` to the output descriptor."""
        view = memoryview(data)
        while view:
            written = os.write(self.stdout_fd, view)
            view = view[written:]

    def enable_tui_mode(self) -> None:
        """Enter raw mode on the alternate screen with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self.write(ENTER_SCREEN)

    def disable_tui_mode(self) -> None:
        """Restore the main screen, cursor, and saved tty attributes."""
        self.write(LEAVE_SCREEN)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Keep the terminal in viewer mode for the body of the block."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
