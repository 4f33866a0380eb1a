"""Pane geometry for the list/detail split."""

from dataclasses import dataclass

from ...config.constants import LAYOUT_VERTICAL

LIST_WIDTH_RATIO = 0.35
LIST_HEIGHT_RATIO = 0.4
PANE_GAP = 2
LIST_CHROME_LINES = 4  # title, blank, blank, page footer
MIN_VIEWPORT_WIDTH = 20


@dataclass(frozen=True)
class PaneLayout:
    list_width: int
    list_height: int
    detail_width: int
    detail_height: int
    vertical: bool = False

    @property
    def list_rows(self) -> int:
        """Item rows that fit in the list pane."""
        return max(1, self.list_height - LIST_CHROME_LINES)

    @property
    def viewport_width(self) -> int:
        return max(MIN_VIEWPORT_WIDTH, self.detail_width)

    @property
    def viewport_height(self) -> int:
        # One line is kept for the scroll footer
        return max(1, self.detail_height - 1)


def compute_layout(width: int, height: int, orientation: str = "horizontal") -> PaneLayout:
    """Split a width x height area into list and detail panes."""
    width = max(1, width)
    height = max(1, height)

    if orientation == LAYOUT_VERTICAL:
        list_height = max(5, int(height * LIST_HEIGHT_RATIO))
        detail_height = max(3, height - list_height - 1)
        return PaneLayout(
            list_width=width,
            list_height=list_height,
            detail_width=width,
            detail_height=detail_height,
            vertical=True,
        )

    content_height = max(5, height)
    list_width = int(width * LIST_WIDTH_RATIO)
    detail_width = max(MIN_VIEWPORT_WIDTH, width - list_width - PANE_GAP)
    return PaneLayout(
        list_width=list_width,
        list_height=content_height,
        detail_width=detail_width,
        detail_height=content_height,
    )
