"""Page number and next/prev availability for one collection."""

import logging

from ...models import PaginationInfo

logger = logging.getLogger(__name__)


class PaginationTracker:
    """Tracks the current page and whether moving off it is allowed.

    The API sometimes reports a next page past the last one, so when
    total_pages is known it caps `advance()` regardless of has_next.
    """

    def __init__(self) -> None:
        self.current_page = 1
        self.has_next = False
        self.has_prev = False
        self.total_pages = 0  # 0 when unknown
        self.total_count = 0

    def can_advance(self) -> bool:
        if not self.has_next:
            return False
        return self.total_pages <= 0 or self.current_page < self.total_pages

    def can_retreat(self) -> bool:
        return self.has_prev and self.current_page > 1

    def advance(self) -> bool:
        """Move to the next page. Returns True if the page changed."""
        if not self.can_advance():
            return False
        self.current_page += 1
        logger.debug("Advanced to page %d", self.current_page)
        return True

    def retreat(self) -> bool:
        """Move to the previous page. Returns True if the page changed."""
        if not self.can_retreat():
            return False
        self.current_page -= 1
        logger.debug("Retreated to page %d", self.current_page)
        return True

    def apply(self, info: PaginationInfo) -> None:
        """Replace all metadata from a fetch result."""
        self.current_page = max(1, info.current_page)
        self.has_next = info.has_next
        self.has_prev = info.has_prev
        self.total_pages = max(0, info.total_pages)
        self.total_count = max(0, info.total_count)

    def reset(self) -> None:
        """Back to page 1 (new sort order). Availability is unknown until the next apply."""
        self.current_page = 1
        self.has_next = False
        self.has_prev = False

    def __repr__(self) -> str:
        return (
            f"PaginationTracker(page={self.current_page}, next={self.has_next}, "
            f"prev={self.has_prev}, total_pages={self.total_pages})"
        )
