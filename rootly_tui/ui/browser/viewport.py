"""Scrollable text region for the detail pane."""

import logging
from typing import Hashable, List, Optional

from rich.cells import cell_len

from ...utils.text_formatting import wrap_text

logger = logging.getLogger(__name__)


class ScrollViewport:
    """Holds the detail text, its wrapped lines, and a scroll offset.

    Invariant: 0 <= scroll_offset <= max_scroll, re-established after every
    content change and every resize.
    """

    def __init__(self, width: int = 80, height: int = 10) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.content = ""
        self.scroll_offset = 0
        self.displayed_identity: Optional[Hashable] = None
        self._lines: List[str] = []

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    def set_content(self, text: str) -> None:
        """Replace the text for the same item. The scroll offset is kept (re-clamped)."""
        self.content = text
        self._rewrap()
        self._clamp()

    def reset_to(self, text: str, identity: Optional[Hashable]) -> None:
        """Show a different item: new text, new identity, back to the top."""
        self.content = text
        self.displayed_identity = identity
        self.scroll_offset = 0
        self._rewrap()

    def clear(self) -> None:
        self.reset_to("", None)

    def _rewrap(self) -> None:
        lines: List[str] = []
        if self.content:
            for line in self.content.split("\n"):
                if cell_len(line) <= self.width:
                    lines.append(line)
                else:
                    lines.extend(wrap_text(line, self.width))
        self._lines = lines

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def total_lines(self) -> int:
        return len(self._lines)

    @property
    def max_scroll(self) -> int:
        return max(0, self.total_lines - self.height)

    @property
    def scrollable(self) -> bool:
        return self.total_lines > self.height

    @property
    def scroll_percent(self) -> float:
        """Fraction scrolled in [0, 1]; 1.0 when everything fits."""
        if self.max_scroll == 0:
            return 1.0
        return self.scroll_offset / self.max_scroll

    def resize(self, width: int, height: int) -> None:
        width = max(1, width)
        height = max(1, height)
        if width != self.width:
            self.width = width
            self._rewrap()
        self.height = height
        self._clamp()

    def _clamp(self) -> None:
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll))

    # -------------------------------------------------------------------------
    # Scrolling
    # -------------------------------------------------------------------------

    def scroll_by(self, delta: int) -> None:
        self.scroll_offset += delta
        self._clamp()

    def half_page_down(self) -> None:
        self.scroll_by(max(1, self.height // 2))

    def half_page_up(self) -> None:
        self.scroll_by(-max(1, self.height // 2))

    page_down = half_page_down
    page_up = half_page_up

    def goto_top(self) -> None:
        self.scroll_offset = 0

    def goto_bottom(self) -> None:
        self.scroll_offset = self.max_scroll

    def visible_lines(self) -> List[str]:
        return self._lines[self.scroll_offset : self.scroll_offset + self.height]

    def __repr__(self) -> str:
        return (
            f"ScrollViewport(identity={self.displayed_identity!r}, "
            f"offset={self.scroll_offset}/{self.max_scroll}, lines={self.total_lines})"
        )
