"""Tests for file-backed sessions that grow, shrink and disappear."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from sessionview.session import Session, sanitize_terminal_text


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "agent.log"

    def write(self, data: bytes) -> None:
        self.path.write_bytes(data)

    def append(self, data: bytes) -> None:
        with self.path.open("ab") as handle:
            handle.write(data)


class SessionGrowthTests(SessionTestCase):
    def test_initial_load_splits_lines(self) -> None:
        self.write(b"one\ntwo\nthree\n")
        session = Session(self.path)

        self.assertTrue(session.refresh())
        self.assertEqual(session.line_count, 3)
        self.assertEqual(session.lines(0, 10), ["one", "two", "three"])
        self.assertEqual(session.name, "agent.log")

    def test_unchanged_file_reports_no_change(self) -> None:
        self.write(b"one\n")
        session = Session(self.path)
        session.refresh()

        self.assertFalse(session.refresh())

    def test_appended_output_is_read_incrementally(self) -> None:
        self.write(b"one\n")
        session = Session(self.path)
        session.refresh()

        self.append(b"two\nthree\n")

        self.assertTrue(session.refresh())
        self.assertEqual(session.lines(0, 10), ["one", "two", "three"])
        self.assertEqual(session.generation, 0)

    def test_partial_line_is_visible_and_completed_later(self) -> None:
        self.write(b"one\ntw")
        session = Session(self.path)
        session.refresh()

        self.assertEqual(session.line_count, 2)
        self.assertEqual(session.lines(1, 5), ["tw"])
        self.assertEqual(session.lines(0, 1), ["one"])

        self.append(b"o\n")
        session.refresh()

        self.assertEqual(session.line_count, 2)
        self.assertEqual(session.lines(0, 5), ["one", "two"])

    def test_crlf_line_endings_are_stripped(self) -> None:
        self.write(b"a\r\nb\r\nc\r")
        session = Session(self.path)
        session.refresh()

        self.assertEqual(session.lines(0, 5), ["a", "b", "c"])

    def test_carriage_return_keeps_text_after_it(self) -> None:
        self.write(b"progress 10%\rprogress 100% done\nstep 1\rstep 2")
        session = Session(self.path)
        session.refresh()

        self.assertEqual(session.lines(0, 5), ["progress 100% done", "step 2"])

    def test_multibyte_character_split_across_writes(self) -> None:
        self.write(b"caf\xc3")
        session = Session(self.path)
        session.refresh()

        self.append(b"\xa9\n")
        session.refresh()

        self.assertEqual(session.lines(0, 5), ["café"])

    def test_lines_out_of_range_are_empty(self) -> None:
        self.write(b"one\n")
        session = Session(self.path)
        session.refresh()

        self.assertEqual(session.lines(5, 3), [])
        self.assertEqual(session.lines(0, 0), [])


class SessionRestartTests(SessionTestCase):
    def test_truncation_reloads_under_new_generation(self) -> None:
        self.write(b"first run line one\nfirst run line two\n")
        session = Session(self.path)
        session.refresh()
        identity = session.identity

        self.write(b"fresh\n")

        self.assertTrue(session.refresh())
        self.assertEqual(session.generation, 1)
        self.assertNotEqual(session.identity, identity)
        self.assertEqual(session.lines(0, 5), ["fresh"])

    def test_replaced_file_reloads_under_new_generation(self) -> None:
        self.write(b"old\n")
        session = Session(self.path)
        session.refresh()

        replacement = self.path.with_name("agent.log.new")
        replacement.write_bytes(b"old\nnew content\n")
        os.replace(replacement, self.path)

        self.assertTrue(session.refresh())
        self.assertEqual(session.generation, 1)
        self.assertEqual(session.lines(0, 5), ["old", "new content"])

    def test_missing_file_starts_empty(self) -> None:
        session = Session(self.path)

        self.assertFalse(session.refresh())
        self.assertEqual(session.line_count, 0)
        self.assertEqual(session.lines(0, 10), [])

    def test_deleted_file_clears_buffer(self) -> None:
        self.write(b"one\n")
        session = Session(self.path)
        session.refresh()

        self.path.unlink()

        self.assertTrue(session.refresh())
        self.assertEqual(session.line_count, 0)
        self.assertEqual(session.generation, 1)

        self.write(b"back\n")
        self.assertTrue(session.refresh())
        self.assertEqual(session.lines(0, 5), ["back"])


class SanitizeTests(unittest.TestCase):
    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x07b\x1b[2Jc"), "a\\x07b\\x1b[2Jc")

    def test_carriage_return_is_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\rb"), "a\\x0db")

    def test_tabs_are_kept(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\tb"), "a\tb")

    def test_session_lines_are_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "s.log"
            path.write_bytes(b"bell\x07\nescape\x1b")
            session = Session(path)
            session.refresh()

            self.assertEqual(session.lines(0, 5), ["bell\\x07", "escape\\x1b"])


if __name__ == "__main__":
    unittest.main()
