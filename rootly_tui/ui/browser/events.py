"""Events consumed and effects emitted by the browser controller.

Events are what happened (a key, a resize, a fetch result). Effects are
requests for the outside world (fetch a page, fetch a detail, open a URL);
the caller runs them asynchronously and feeds the results back in as
events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from ...models import PaginationInfo


class Key(Enum):
    """Normalized keys understood by the browser."""

    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
    NEXT_PAGE = "next_page"
    PREV_PAGE = "prev_page"
    ENTER = "enter"
    ESCAPE = "escape"
    QUIT = "quit"
    HALF_PAGE_UP = "half_page_up"
    HALF_PAGE_DOWN = "half_page_down"
    SORT = "sort"
    OPEN_URL = "open_url"


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class KeyPressed:
    key: Key


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class PageLoaded:
    """Result of a FetchPage effect. Exactly one of items/error is meaningful."""

    seq: int
    items: Sequence[Any] = ()
    pagination: Optional[PaginationInfo] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class DetailLoaded:
    """Result of a FetchDetail effect."""

    item_id: str
    item: Any = None
    error: Optional[str] = None


@dataclass(frozen=True)
class RefreshRequested:
    """Re-issue the current page (manual refresh or retry after an error)."""


Event = Union[KeyPressed, Resized, PageLoaded, DetailLoaded, RefreshRequested]


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class FetchPage:
    seq: int
    page: int
    sort: Optional[str] = None


@dataclass(frozen=True)
class FetchDetail:
    item_id: str
    item: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class OpenUrl:
    url: str


Effect = Union[FetchPage, FetchDetail, OpenUrl]


@dataclass
class Dispatch:
    """Outcome of dispatching one event.

    `handled` is False only for keys the browser does not consume, so the
    enclosing app may act on them (tab switch, help, quit).
    """

    effects: List[Effect] = field(default_factory=list)
    handled: bool = True
