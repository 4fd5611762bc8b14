"""Tests for the interactive loop and viewer entry.

The loop is driven with a fake terminal and scripted input chunks; the
important contract is that terminal modes are always restored in reverse
order of setup, including when the loop fails.
"""

from __future__ import annotations

import contextlib
import io
import os
import signal
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sessionview.mouse import MOUSE_SGR_OFF, MOUSE_SGR_ON, MOUSE_TRACKING_OFF, MOUSE_TRACKING_ON, MouseEventDecoder
from sessionview.navigation import resize_viewport
from sessionview.runtime import ViewerOptions, _sigterm_as_exit, refresh_sessions, run_main_loop, run_viewer
from sessionview.scroll import ScrollController
from sessionview.state import AppState
from sessionview.ui_theme import PLAIN_THEME

OPTIONS = ViewerOptions(style="ansi", theme_name=None, no_color=True, scroll_step=2)


class FakeSession:
    def __init__(self, name: str, line_count: int) -> None:
        self.name = name
        self.generation = 0
        self.line_count = line_count
        self.pending = 0

    @property
    def identity(self) -> tuple[str, int]:
        return (self.name, self.generation)

    def lines(self, start: int, count: int) -> list[str]:
        stop = min(self.line_count, start + count)
        return [f"line {idx}" for idx in range(start, stop)]

    def refresh(self) -> bool:
        if not self.pending:
            return False
        self.line_count += self.pending
        self.pending = 0
        return True


class FakeTerminal:
    stdin_fd = 0

    def __init__(self, events: list) -> None:
        self.events = events
        self.frames: list[bytes] = []

    def write(self, data: bytes) -> None:
        self.frames.append(data)

    @contextlib.contextmanager
    def raw_mode(self):
        self.events.append("raw_on")
        try:
            yield
        finally:
            self.events.append("raw_off")


class MainLoopTests(unittest.TestCase):
    def setUp(self) -> None:
        self.events: list = []
        self.terminal = FakeTerminal(self.events)
        self.decoder = MouseEventDecoder(self.events.append)
        self.session = FakeSession("s.log", 100)
        self.state = AppState(sessions=[self.session], scroll=ScrollController(step=2))
        size_patch = mock.patch(
            "sessionview.runtime.shutil.get_terminal_size",
            return_value=os.terminal_size((80, 11)),
        )
        size_patch.start()
        self.addCleanup(size_patch.stop)

    def run_loop(self, chunks) -> None:
        with mock.patch("sessionview.runtime.read_chunk", side_effect=chunks):
            run_main_loop(self.state, self.terminal, self.decoder, PLAIN_THEME, OPTIONS)

    def test_modes_are_entered_and_left_in_nested_order(self) -> None:
        self.run_loop([b"q"])

        self.assertEqual(
            self.events,
            ["raw_on", MOUSE_TRACKING_ON, MOUSE_SGR_ON, MOUSE_SGR_OFF, MOUSE_TRACKING_OFF, "raw_off"],
        )
        self.assertFalse(self.decoder.enabled)

    def test_modes_are_restored_when_loop_fails(self) -> None:
        with self.assertRaises(RuntimeError):
            self.run_loop(RuntimeError("read failed"))

        self.assertEqual(self.events[-3:], [MOUSE_SGR_OFF, MOUSE_TRACKING_OFF, "raw_off"])

    def test_renders_only_when_state_changes(self) -> None:
        self.run_loop([b"", b"", b"k", b"q"])

        self.assertEqual(len(self.terminal.frames), 2)
        self.assertIn(b"line 99", self.terminal.frames[0])
        self.assertIn(b"\xe2\x86\x912", self.terminal.frames[1])

    def test_new_output_rerenders_and_follows_tail(self) -> None:
        def chunks():
            yield b""
            self.session.pending = 5
            yield b""
            yield b"q"

        self.run_loop(chunks())

        self.assertEqual(len(self.terminal.frames), 2)
        self.assertIn(b"line 104", self.terminal.frames[1])
        self.assertEqual(self.state.scroll.visible_window(), (95, 105))

    def test_wheel_input_scrolls(self) -> None:
        self.run_loop([b"\x1b[<64;5;5M", b"q"])
        self.assertEqual(self.state.scroll.offset_from_bottom, 2)


class RefreshSessionsTests(unittest.TestCase):
    def test_only_selected_session_marks_dirty(self) -> None:
        first, second = FakeSession("a", 10), FakeSession("b", 10)
        state = AppState(sessions=[first, second], scroll=ScrollController())
        resize_viewport(state, 11, 80)
        state.dirty = False

        second.pending = 3
        refresh_sessions(state)
        self.assertFalse(state.dirty)
        self.assertEqual(second.line_count, 13)

        first.pending = 1
        refresh_sessions(state)
        self.assertTrue(state.dirty)


class SigtermTests(unittest.TestCase):
    def test_sigterm_raises_system_exit_inside_block(self) -> None:
        previous = signal.getsignal(signal.SIGTERM)
        with self.assertRaises(SystemExit) as raised:
            with _sigterm_as_exit():
                os.kill(os.getpid(), signal.SIGTERM)
        self.assertEqual(raised.exception.code, 128 + signal.SIGTERM)
        self.assertEqual(signal.getsignal(signal.SIGTERM), previous)


class RunViewerTests(unittest.TestCase):
    def test_non_tty_output_prints_sessions(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "s.log"
            path.write_text("one\ntwo\n", encoding="utf-8")
            with mock.patch("sessionview.runtime.sys.stdout", new_callable=io.StringIO) as stdout, mock.patch(
                "sessionview.runtime.run_main_loop"
            ) as loop_mock:
                run_viewer([path], OPTIONS)

        loop_mock.assert_not_called()
        self.assertEqual(stdout.getvalue(), "one\ntwo\n")


if __name__ == "__main__":
    unittest.main()
