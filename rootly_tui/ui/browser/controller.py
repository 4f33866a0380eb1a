"""List/detail browser state machine.

`BrowserController.dispatch()` takes one event at a time and returns the
effects the caller should run. The controller never does I/O itself:
fetch results come back later as PageLoaded/DetailLoaded events.

Key priority: sort menu (when open) > detail focus > list focus.
"""

import logging
from typing import Generic, List, Optional, TypeVar

from ...config.constants import DETAIL_SCROLL_STEP, LAYOUT_HORIZONTAL
from ...utils.text_formatting import join_horizontal, truncate
from ..rendering import RenderContext
from .adapter import ItemAdapter
from .detail_loading import DetailLoadTracker
from .events import (
    DetailLoaded,
    Dispatch,
    Event,
    FetchDetail,
    FetchPage,
    Key,
    KeyPressed,
    OpenUrl,
    PageLoaded,
    RefreshRequested,
    Resized,
)
from .focus import FocusDispatcher, KeyRoute
from .layout import PaneLayout, compute_layout
from .pagination import PaginationTracker
from .selection import SelectionCursor
from .sorting import SortOverlay, SortState
from .viewport import ScrollViewport

logger = logging.getLogger(__name__)

T = TypeVar("T")

ROW_MARKER = "▶ "
ROW_BLANK = "  "


class BrowserController(Generic[T]):
    """Paginated list with a lazily loaded, scrollable detail pane."""

    def __init__(
        self,
        adapter: ItemAdapter[T],
        *,
        context: Optional[RenderContext] = None,
        width: int = 80,
        height: int = 24,
        orientation: str = LAYOUT_HORIZONTAL,
    ) -> None:
        self.adapter = adapter
        self.context = context or RenderContext()
        self.orientation = orientation

        self.items: List[T] = []
        self.pagination = PaginationTracker()
        self.cursor = SelectionCursor()
        self.detail_loads = DetailLoadTracker()
        self.focus = FocusDispatcher()
        self.sort_state = SortState()
        options = list(adapter.sort_options(self.context))
        self.sort_overlay: Optional[SortOverlay] = SortOverlay(options) if options else None

        self.loading = False
        self.error: Optional[str] = None

        self._seq = 0
        self._list_offset = 0

        self.layout: PaneLayout = compute_layout(width, height, orientation)
        self.viewport = ScrollViewport(self.layout.viewport_width, self.layout.viewport_height)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def selected_item(self) -> Optional[T]:
        index = self.cursor.index
        if index is None or index >= len(self.items):
            return None
        return self.items[index]

    @property
    def selected_id(self) -> Optional[str]:
        item = self.selected_item
        return self.adapter.item_id(item) if item is not None else None

    @property
    def detail_focused(self) -> bool:
        return self.focus.detail_focused

    @property
    def sort_menu_visible(self) -> bool:
        return self.sort_overlay is not None and self.sort_overlay.visible

    def find_index(self, item_id: str) -> Optional[int]:
        for i, item in enumerate(self.items):
            if self.adapter.item_id(item) == item_id:
                return i
        return None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> Dispatch:
        """Request the current page (first load)."""
        return Dispatch([self._request_page()])

    def deactivate(self) -> None:
        """The view lost the screen (tab switch): back to list focus, forget the in-flight detail."""
        self.focus.focus_list()
        self.detail_loads.clear()
        if self.sort_overlay is not None:
            self.sort_overlay.cancel()
        self._refresh_detail()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, event: Event) -> Dispatch:
        if isinstance(event, KeyPressed):
            return self._on_key(event.key)
        if isinstance(event, Resized):
            self._on_resize(event.width, event.height)
            return Dispatch()
        if isinstance(event, PageLoaded):
            self._on_page_loaded(event)
            return Dispatch()
        if isinstance(event, DetailLoaded):
            self._on_detail_loaded(event)
            return Dispatch()
        if isinstance(event, RefreshRequested):
            return Dispatch([self._request_page()])
        logger.warning("Ignoring unknown event %r", event)
        return Dispatch(handled=False)

    def _on_key(self, key: Key) -> Dispatch:
        if self.sort_menu_visible:
            return self._on_sort_key(key)

        route = self.focus.route(key)

        # Items on screen belong to the page being replaced
        if self.loading and route in (KeyRoute.SELECTION, KeyRoute.OPEN_DETAIL, KeyRoute.OPEN_URL):
            return Dispatch()

        if route is KeyRoute.SCROLL:
            self._scroll(key)
        elif route is KeyRoute.CLOSE_DETAIL:
            self.focus.focus_list()
        elif route is KeyRoute.SELECTION:
            self._move_selection(key)
        elif route is KeyRoute.PAGINATION:
            return self._change_page(key)
        elif route is KeyRoute.OPEN_DETAIL:
            return self._open_detail()
        elif route is KeyRoute.SORT:
            if self.sort_overlay is None:
                return Dispatch(handled=False)
            self.sort_overlay.open()
        elif route is KeyRoute.OPEN_URL:
            return self._open_url()
        else:
            return Dispatch(handled=False)
        return Dispatch()

    def _on_sort_key(self, key: Key) -> Dispatch:
        assert self.sort_overlay is not None
        value = self.sort_overlay.handle_key(key)
        if value is None:
            return Dispatch()

        self.sort_state.toggle(value)
        self.pagination.reset()
        self.cursor.first()
        self._list_offset = 0
        self.focus.focus_list()
        return Dispatch([self._request_page()])

    def _scroll(self, key: Key) -> None:
        viewport = self.viewport
        if key is Key.DOWN:
            viewport.scroll_by(DETAIL_SCROLL_STEP)
        elif key is Key.UP:
            viewport.scroll_by(-DETAIL_SCROLL_STEP)
        elif key is Key.TOP:
            viewport.goto_top()
        elif key is Key.BOTTOM:
            viewport.goto_bottom()
        elif key is Key.HALF_PAGE_DOWN:
            viewport.half_page_down()
        elif key is Key.HALF_PAGE_UP:
            viewport.half_page_up()

    def _move_selection(self, key: Key) -> None:
        if key is Key.DOWN:
            moved = self.cursor.move_down()
        elif key is Key.UP:
            moved = self.cursor.move_up()
        elif key is Key.TOP:
            moved = self.cursor.first()
        else:
            moved = self.cursor.last()
        if moved:
            self._show_selected()

    def _change_page(self, key: Key) -> Dispatch:
        changed = self.pagination.advance() if key is Key.NEXT_PAGE else self.pagination.retreat()
        if not changed:
            return Dispatch()

        self.cursor.first()
        self._list_offset = 0
        self.viewport.clear()
        return Dispatch([self._request_page()])

    def _open_detail(self) -> Dispatch:
        item = self.selected_item
        if item is None:
            return Dispatch()

        if self.adapter.detail_loaded(item):
            self.focus.focus_detail(has_selection=True)
            return Dispatch()

        if self.detail_loads.busy:
            # One detail request at a time
            logger.debug("Detail load already in flight for %s", self.detail_loads.loading_id)
            return Dispatch()

        item_id = self.adapter.item_id(item)
        self.detail_loads.begin_load(item_id)
        self._refresh_detail()
        logger.info("Loading detail for %s", item_id)
        return Dispatch([FetchDetail(item_id=item_id, item=item)])

    def _open_url(self) -> Dispatch:
        item = self.selected_item
        if item is None:
            return Dispatch()
        url = self.adapter.url(item)
        return Dispatch([OpenUrl(url)] if url else [])

    def _on_resize(self, width: int, height: int) -> None:
        self.layout = compute_layout(width, height, self.orientation)
        self.viewport.resize(self.layout.viewport_width, self.layout.viewport_height)
        self._clamp_list_offset()

    def _on_page_loaded(self, event: PageLoaded) -> None:
        if event.seq != self._seq:
            logger.debug("Discarding stale page result seq=%d (latest %d)", event.seq, self._seq)
            return

        self.loading = False
        if event.error is not None:
            logger.warning("Page %d failed: %s", self.pagination.current_page, event.error)
            self.error = event.error
            return

        self.error = None
        self.items = list(event.items)
        if event.pagination is not None:
            self.pagination.apply(event.pagination)
        self.cursor.reconcile(len(self.items))
        self._clamp_list_offset()
        if not self.items:
            self.focus.focus_list()
        self._show_selected()

    def _on_detail_loaded(self, event: DetailLoaded) -> None:
        self.detail_loads.complete(event.item_id)
        selected = event.item_id == self.selected_id

        if event.error is not None or event.item is None:
            logger.warning("Detail load for %s failed: %s", event.item_id, event.error)
            if selected:
                self._refresh_detail()
            return

        index = self.find_index(event.item_id)
        if index is None:
            logger.debug("Detail for %s arrived after its page was replaced", event.item_id)
            return

        self.items[index] = self.adapter.merge_detail(self.items[index], event.item)
        if selected:
            self._refresh_detail()
            # A page replacing this one is on its way
            if not self.loading:
                self.focus.focus_detail(has_selection=True)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _request_page(self) -> FetchPage:
        self._seq += 1
        self.loading = True
        self.error = None
        self.focus.focus_list()
        return FetchPage(
            seq=self._seq,
            page=self.pagination.current_page,
            sort=self.sort_state.sort_param,
        )

    def _detail_text(self, item: T) -> str:
        loading = self.detail_loads.is_loading(self.adapter.item_id(item))
        return self.adapter.detail_text(item, self.context, loading)

    def _show_selected(self) -> None:
        """Point the viewport at the selected item, scrolled to the top."""
        item = self.selected_item
        if item is None:
            self.viewport.clear()
            return
        self.viewport.reset_to(self._detail_text(item), self.adapter.item_id(item))
        self._clamp_list_offset()

    def _refresh_detail(self) -> None:
        """Regenerate the displayed item's text in place, keeping the scroll offset."""
        item = self.selected_item
        if item is None or self.viewport.displayed_identity != self.adapter.item_id(item):
            return
        self.viewport.set_content(self._detail_text(item))

    def _clamp_list_offset(self) -> None:
        rows = self.layout.list_rows
        index = self.cursor.index or 0
        if index < self._list_offset:
            self._list_offset = index
        elif index >= self._list_offset + rows:
            self._list_offset = index - rows + 1
        self._list_offset = max(0, min(self._list_offset, max(0, len(self.items) - rows)))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> str:
        """The whole browser as one text buffer."""
        ctx = self.context
        if self.loading and not self.error:
            loading = ctx.t("common.loading_page", page=self.pagination.current_page)
            list_lines = [self._title(), "", loading]
            return self._join(list_lines, [])

        if self.error:
            return f"{ctx.t('common.error')}: {self.error}"

        if not self.items:
            return ctx.t(self.adapter.empty_key)

        return self._join(self.render_list(), self.render_detail())

    def _title(self) -> str:
        title = self.context.t(self.adapter.title_key)
        if self.sort_state.enabled:
            title += f" {self.sort_state.indicator}"
        return title

    def render_list(self) -> List[str]:
        width = self.layout.list_width
        rows = self.layout.list_rows
        index = self.cursor.index

        lines = [truncate(self._title(), width), ""]
        visible = self.items[self._list_offset : self._list_offset + rows]
        for offset, item in enumerate(visible):
            marker = ROW_MARKER if self._list_offset + offset == index else ROW_BLANK
            row = self.adapter.list_row(item, self.context)
            lines.append(truncate(marker + row, width))
        lines.append("")
        lines.append(truncate(self._page_footer(), width))
        return lines

    def _page_footer(self) -> str:
        pagination = self.pagination
        parts = ["← [" if pagination.can_retreat() else "  "]
        page = f" {self.context.t('common.page')} {pagination.current_page}"
        if pagination.total_pages:
            page += f"/{pagination.total_pages}"
        parts.append(page + " ")
        if pagination.can_advance():
            parts.append("] →")
        if self.items and self.cursor.index is not None:
            parts.append(f"  ({self.cursor.index + 1}-{len(self.items)})")
        return "".join(parts)

    def render_detail(self) -> List[str]:
        if self.sort_menu_visible:
            assert self.sort_overlay is not None
            return self.sort_overlay.render(self.sort_state, self.context)

        if self.selected_item is None:
            return [self.context.t(self.adapter.select_prompt_key)]

        lines = list(self.viewport.visible_lines())
        if self.viewport.scrollable:
            percent = int(self.viewport.scroll_percent * 100)
            key = "common.scroll_focused" if self.detail_focused else "common.scroll_hint"
            lines.append(self.context.t(key, percent=percent))
        return lines

    def _join(self, list_lines: List[str], detail_lines: List[str]) -> str:
        if self.layout.vertical:
            return "\n".join(list_lines + [""] + detail_lines)
        return "\n".join(join_horizontal(list_lines, detail_lines, self.layout.list_width))

    @property
    def status_text(self) -> str:
        if self.loading:
            return self.context.t("common.loading_page", page=self.pagination.current_page)
        if self.error:
            return f"{self.context.t('common.error')}: {self.error}"
        total = self.pagination.total_count
        count = f"{len(self.items)}" if not total else f"{len(self.items)} of {total}"
        return f"{count} {self.context.t(self.adapter.title_key).lower()}"

    def __repr__(self) -> str:
        return (
            f"BrowserController(items={len(self.items)}, cursor={self.cursor.index}, "
            f"page={self.pagination.current_page}, focus={self.focus.mode.value})"
        )

