"""File-backed session buffers that grow as new output is written.

A session polls a cheap stat signature and reads only the bytes appended
since the last refresh. Truncated or replaced files are reloaded from the
start under a new generation, which gives the buffer a new identity.
"""

from __future__ import annotations

import codecs
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def _display_line(raw: str) -> str:
    """Return the text a terminal leaves visible after writing ``raw``.

    A carriage return sends the cursor back to column one, so a progress line
    that rewrites itself shows only the text after its last carriage return.
    """
    return sanitize_terminal_text(raw.rstrip("\r").rpartition("\r")[2])


def _stat_signature(path: Path) -> tuple[str, int, int, int]:
    """Return ``(status, mtime_ns, size, inode)`` for change polling."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_ino)


class Session:
    """Line buffer for one file, refreshed by polling."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = path.name or str(path)
        self.generation = 0
        self._resolved = path.resolve()
        self._lines: list[str] = []
        self._partial = ""
        self._offset = 0
        self._inode = 0
        self._signature: tuple[str, int, int, int] | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def identity(self) -> tuple[Path, int]:
        return (self._resolved, self.generation)

    @property
    def line_count(self) -> int:
        return len(self._lines) + (1 if self._partial else 0)

    def lines(self, start: int, count: int) -> list[str]:
        """Return up to ``count`` display lines beginning at ``start``."""
        start = max(0, start)
        stop = start + max(0, count)
        out = self._lines[start:stop]
        if self._partial and start <= len(self._lines) < stop:
            out.append(_display_line(self._partial))
        return out

    def _restart(self) -> None:
        self._lines = []
        self._partial = ""
        self._offset = 0
        self._decoder.reset()
        self.generation += 1

    def refresh(self) -> bool:
        """Pull newly written content. Returns whether the buffer changed."""
        signature = _stat_signature(self.path)
        if signature == self._signature:
            return False
        self._signature = signature
        status, _mtime_ns, size, inode = signature
        if status != "ok":
            if self._offset or self._lines or self._partial:
                logger.warning("session file unavailable: %s (%s)", self.path, status)
                self._restart()
                return True
            return False

        changed = False
        replaced = bool(self._inode) and inode != self._inode
        self._inode = inode
        if size < self._offset or replaced:
            logger.debug("session file truncated or replaced, reloading: %s", self.path)
            self._restart()
            changed = True

        try:
            with self.path.open("rb") as handle:
                handle.seek(self._offset)
                data = handle.read()
        except OSError as exc:
            logger.warning("cannot read session file %s: %s", self.path, exc)
            return changed
        if not data:
            return changed

        self._offset += len(data)
        text = self._partial + self._decoder.decode(data)
        parts = text.split("\n")
        self._partial = parts.pop()
        self._lines.extend(_display_line(part) for part in parts)
        return True
