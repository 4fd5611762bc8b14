"""Viewport scroll state measured from the newest line of a growing buffer.

Position is stored as an offset from the bottom, so appending lines never
moves a reader who has scrolled up, while an idle reader (offset ``0``) stays
pinned to the live tail. The first visible line index is derived on read.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

SCROLL_STEP = 2


@dataclass
class ScrollState:
    """Sizes and scroll position for one content association."""

    content_length: int = 0
    viewport_height: int = 0
    offset_from_bottom: int = 0

    @property
    def max_scroll(self) -> int:
        return max(0, self.content_length - self.viewport_height)

    @property
    def visible_offset(self) -> int:
        max_scroll = self.max_scroll
        return max_scroll - min(self.offset_from_bottom, max_scroll)


class ScrollController:
    """Translate scroll steps and content changes into a clamped visible window.

    Every mutator leaves ``offset_from_bottom`` inside ``[0, max_scroll]``,
    so ``visible_offset()`` is valid immediately after any call.
    """

    def __init__(
        self,
        step: int = SCROLL_STEP,
        *,
        content_length: int = 0,
        viewport_height: int = 0,
        identity: Hashable | None = None,
    ) -> None:
        self.step = max(1, step)
        self.state = ScrollState()
        self._identity = identity
        self.set_content(content_length, viewport_height)

    @property
    def identity(self) -> Hashable | None:
        return self._identity

    @property
    def max_scroll(self) -> int:
        return self.state.max_scroll

    @property
    def offset_from_bottom(self) -> int:
        return min(self.state.offset_from_bottom, self.state.max_scroll)

    @property
    def at_bottom(self) -> bool:
        return self.offset_from_bottom == 0

    def set_content(self, length: int, viewport_height: int) -> None:
        """Apply new buffer/viewport sizes, clamping the offset down only."""
        self.state.content_length = max(0, length)
        self.state.viewport_height = max(0, viewport_height)
        self.state.offset_from_bottom = min(self.state.offset_from_bottom, self.state.max_scroll)

    def bind(self, identity: Hashable, length: int, viewport_height: int) -> bool:
        """Associate the controller with ``identity`` and apply sizes.

        A different identity resets to the bottom before the new sizes are
        applied, in the same call, so no frame pairs an old offset with a new
        buffer. Returns whether the identity changed.
        """
        changed = identity != self._identity
        if changed:
            self._identity = identity
            self.reset()
        self.set_content(length, viewport_height)
        return changed

    def _resolve_step(self, step: int | None) -> int:
        return self.step if step is None else max(0, step)

    def scroll_up(self, step: int | None = None) -> bool:
        """Reveal older lines. Returns whether the offset changed."""
        prev = self.state.offset_from_bottom
        self.state.offset_from_bottom = min(self.state.max_scroll, prev + self._resolve_step(step))
        return self.state.offset_from_bottom != prev

    def scroll_down(self, step: int | None = None) -> bool:
        """Reveal newer lines, re-anchoring at the bottom eventually."""
        prev = self.state.offset_from_bottom
        self.state.offset_from_bottom = max(0, prev - self._resolve_step(step))
        return self.state.offset_from_bottom != prev

    def page_up(self) -> bool:
        return self.scroll_up(max(1, self.state.viewport_height - 1))

    def page_down(self) -> bool:
        return self.scroll_down(max(1, self.state.viewport_height - 1))

    def scroll_to_top(self) -> bool:
        prev = self.state.offset_from_bottom
        self.state.offset_from_bottom = self.state.max_scroll
        return self.state.offset_from_bottom != prev

    def reset(self) -> None:
        self.state.offset_from_bottom = 0

    def visible_offset(self) -> int:
        """Index of the first visible line, counted from the buffer start."""
        return self.state.visible_offset

    def visible_window(self) -> tuple[int, int]:
        """Return ``(start, stop)`` line indices of the visible slice."""
        start = self.visible_offset()
        stop = min(self.state.content_length, start + self.state.viewport_height)
        return start, stop
