"""SGR mouse-wheel decoding and mouse-tracking lifecycle.

Recognizes ``ESC [ < Cb ; Cx ; Cy (M|m)`` reports in raw input chunks and
turns wheel buttons into scroll events. Anything else in the chunk belongs to
keystroke handling and is ignored here.

Each chunk is scanned on its own: a report split across two reads is not
reassembled.
"""

from __future__ import annotations

import contextlib
import enum
import logging
import re
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

MOUSE_TRACKING_ON = b"\x1b[?1000h"
MOUSE_SGR_ON = b"\x1b[?1006h"
MOUSE_SGR_OFF = b"\x1b[?1006l"
MOUSE_TRACKING_OFF = b"\x1b[?1000l"

WHEEL_UP_BUTTON = 64
WHEEL_DOWN_BUTTON = 65

SGR_MOUSE_RE = re.compile(rb"\x1b\[<(\d+);(\d+);(\d+)([Mm])")


class MouseScrollEvent(enum.Enum):
    UP = "up"
    DOWN = "down"


_WHEEL_EVENTS = {
    WHEEL_UP_BUTTON: MouseScrollEvent.UP,
    WHEEL_DOWN_BUTTON: MouseScrollEvent.DOWN,
}


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8", errors="replace")
    return bytes(data)


class MouseEventDecoder:
    """Decode wheel reports and own the terminal's mouse-tracking mode.

    ``write`` receives the raw control sequences; the runtime binds it to the
    terminal's output descriptor.
    """

    def __init__(self, write: Callable[[bytes], object]) -> None:
        self._write = write
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        """Turn on button tracking, then SGR extended coordinates."""
        if self._enabled:
            return
        self._write(MOUSE_TRACKING_ON)
        self._write(MOUSE_SGR_ON)
        self._enabled = True
        logger.debug("mouse tracking enabled")

    def disable(self) -> None:
        """Undo ``enable`` in reverse order."""
        if not self._enabled:
            return
        self._enabled = False
        self._write(MOUSE_SGR_OFF)
        self._write(MOUSE_TRACKING_OFF)
        logger.debug("mouse tracking disabled")

    @contextlib.contextmanager
    def tracking(self) -> Iterator[MouseEventDecoder]:
        """Context manager that keeps mouse tracking on for its body."""
        try:
            self.enable()
            yield self
        finally:
            self.disable()

    def feed(self, data: bytes | str) -> list[MouseScrollEvent]:
        """Return one scroll event per wheel report found in ``data``."""
        events: list[MouseScrollEvent] = []
        for match in SGR_MOUSE_RE.finditer(_as_bytes(data)):
            button = match.group(1)
            # int() refuses very long digit strings; no wheel code is that long.
            if len(button) > 9:
                continue
            event = _WHEEL_EVENTS.get(int(button))
            if event is not None:
                events.append(event)
        return events

    def strip(self, data: bytes | str) -> bytes:
        """Return ``data`` with every SGR mouse report removed."""
        return SGR_MOUSE_RE.sub(b"", _as_bytes(data))
