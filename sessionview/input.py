"""Low-level terminal input reading and key classification.

Input is read in chunks so mouse reports can be decoded from the same bytes.
After mouse reports are stripped, the remaining bytes are translated into
normalized key tokens.
"""

from __future__ import annotations

import os
import re
import select

READ_CHUNK_SIZE = 4096

_CSI_RE = re.compile(rb"\x1b\[[0-?]*[ -/]*[@-~]")
_SS3_RE = re.compile(rb"\x1bO[@-~]")

_SEQUENCE_KEYS = {
    b"\x1b[A": "UP",
    b"\x1b[B": "DOWN",
    b"\x1b[C": "RIGHT",
    b"\x1b[D": "LEFT",
    b"\x1bOA": "UP",
    b"\x1bOB": "DOWN",
    b"\x1bOC": "RIGHT",
    b"\x1bOD": "LEFT",
    b"\x1b[5~": "PAGE_UP",
    b"\x1b[6~": "PAGE_DOWN",
    b"\x1b[H": "HOME",
    b"\x1b[1~": "HOME",
    b"\x1bOH": "HOME",
    b"\x1b[F": "END",
    b"\x1b[4~": "END",
    b"\x1bOF": "END",
    b"\x1b[Z": "SHIFT_TAB",
    b"\x1b[1;3A": "ALT_UP",
    b"\x1b[1;3B": "ALT_DOWN",
    b"\x1b[1;9A": "ALT_UP",
    b"\x1b[1;9B": "ALT_DOWN",
}

_CONTROL_KEYS = {
    0x03: "CTRL_C",
    0x09: "TAB",
    0x0D: "ENTER",
    0x0A: "ENTER",
    0x08: "BACKSPACE",
    0x7F: "BACKSPACE",
}


def read_chunk(fd: int, timeout_ms: int | None = None) -> bytes:
    """Return whatever input is ready on ``fd``, or ``b""`` on timeout/EOF."""
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return b""
    try:
        return os.read(fd, READ_CHUNK_SIZE)
    except InterruptedError:
        return b""


def _escape_key(data: bytes, i: int) -> tuple[str | None, int]:
    """Classify the escape sequence at ``data[i]``; return ``(key, next_index)``."""
    for pattern in (_CSI_RE, _SS3_RE):
        match = pattern.match(data, i)
        if match is not None:
            return _SEQUENCE_KEYS.get(match.group(0)), match.end()
    if i + 1 >= len(data):
        return "ESC", i + 1
    follower = data[i + 1]
    if follower == 0x1B:
        return "ESC", i + 1
    if 0x20 < follower < 0x7F:
        return f"ALT_{chr(follower)}", i + 2
    return "ESC", i + 1


def split_keys(data: bytes) -> list[str]:
    """Translate one input chunk into key tokens.

    Recognized escape sequences map to names like ``UP`` or ``PAGE_DOWN``;
    unknown CSI/SS3 sequences are dropped whole. Printable text is decoded as
    UTF-8 and yields one token per character.
    """
    keys: list[str] = []
    text = bytearray()

    def flush_text() -> None:
        if text:
            keys.extend(text.decode("utf-8", errors="replace"))
            text.clear()

    i = 0
    while i < len(data):
        byte = data[i]
        if byte == 0x1B:
            flush_text()
            key, i = _escape_key(data, i)
            if key is not None:
                keys.append(key)
            continue
        if byte in _CONTROL_KEYS:
            flush_text()
            keys.append(_CONTROL_KEYS[byte])
        elif byte >= 0x20:
            text.append(byte)
        i += 1
    flush_text()
    return keys
