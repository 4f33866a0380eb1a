"""Generic list/detail browser core.

No Textual or network code lives here: the controller consumes events and
returns effects, so it can be driven directly from tests.
"""

from .adapter import ItemAdapter
from .controller import BrowserController
from .detail_loading import DetailLoadTracker
from .events import (
    DetailLoaded,
    Dispatch,
    FetchDetail,
    FetchPage,
    Key,
    KeyPressed,
    OpenUrl,
    PageLoaded,
    RefreshRequested,
    Resized,
)
from .focus import FocusDispatcher, FocusMode, KeyRoute
from .layout import PaneLayout, compute_layout
from .pagination import PaginationTracker
from .selection import SelectionCursor
from .sorting import SortDirection, SortOption, SortOverlay, SortState
from .viewport import ScrollViewport

__all__ = [
    "BrowserController",
    "DetailLoadTracker",
    "DetailLoaded",
    "Dispatch",
    "FetchDetail",
    "FetchPage",
    "FocusDispatcher",
    "FocusMode",
    "ItemAdapter",
    "Key",
    "KeyPressed",
    "KeyRoute",
    "OpenUrl",
    "PageLoaded",
    "PaginationTracker",
    "PaneLayout",
    "RefreshRequested",
    "Resized",
    "ScrollViewport",
    "SelectionCursor",
    "SortDirection",
    "SortOption",
    "SortOverlay",
    "SortState",
    "compute_layout",
]
