"""List vs. detail focus and the key routing that depends on it."""

import logging
from enum import Enum

from .events import Key

logger = logging.getLogger(__name__)


class FocusMode(Enum):
    LIST = "list"
    DETAIL = "detail"


class KeyRoute(Enum):
    """Where a key goes once focus is taken into account."""

    SELECTION = "selection"
    PAGINATION = "pagination"
    OPEN_DETAIL = "open_detail"
    SORT = "sort"
    OPEN_URL = "open_url"
    SCROLL = "scroll"
    CLOSE_DETAIL = "close_detail"
    UNHANDLED = "unhandled"


LIST_ROUTES = {
    Key.UP: KeyRoute.SELECTION,
    Key.DOWN: KeyRoute.SELECTION,
    Key.TOP: KeyRoute.SELECTION,
    Key.BOTTOM: KeyRoute.SELECTION,
    Key.NEXT_PAGE: KeyRoute.PAGINATION,
    Key.PREV_PAGE: KeyRoute.PAGINATION,
    Key.ENTER: KeyRoute.OPEN_DETAIL,
    Key.SORT: KeyRoute.SORT,
    Key.OPEN_URL: KeyRoute.OPEN_URL,
}

# Same physical keys, scrolling the detail pane instead of moving the cursor
DETAIL_ROUTES = {
    Key.UP: KeyRoute.SCROLL,
    Key.DOWN: KeyRoute.SCROLL,
    Key.TOP: KeyRoute.SCROLL,
    Key.BOTTOM: KeyRoute.SCROLL,
    Key.HALF_PAGE_UP: KeyRoute.SCROLL,
    Key.HALF_PAGE_DOWN: KeyRoute.SCROLL,
    Key.ESCAPE: KeyRoute.CLOSE_DETAIL,
    Key.QUIT: KeyRoute.CLOSE_DETAIL,
    Key.OPEN_URL: KeyRoute.OPEN_URL,
}


class FocusDispatcher:
    """Two-state focus machine: LIST (initial) and DETAIL."""

    def __init__(self) -> None:
        self.mode = FocusMode.LIST

    @property
    def detail_focused(self) -> bool:
        return self.mode is FocusMode.DETAIL

    def focus_detail(self, has_selection: bool) -> bool:
        """Enter DETAIL. Refused when nothing is selected."""
        if not has_selection:
            return False
        if self.mode is not FocusMode.DETAIL:
            logger.debug("Focus -> detail")
        self.mode = FocusMode.DETAIL
        return True

    def focus_list(self) -> None:
        if self.mode is not FocusMode.LIST:
            logger.debug("Focus -> list")
        self.mode = FocusMode.LIST

    def route(self, key: Key) -> KeyRoute:
        routes = DETAIL_ROUTES if self.detail_focused else LIST_ROUTES
        return routes.get(key, KeyRoute.UNHANDLED)
