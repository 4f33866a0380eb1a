"""Textual widget hosting one BrowserController.

The widget is the event loop glue: keys and resizes go into
`controller.dispatch()`, returned effects run as workers, and worker results
come back as messages that are dispatched in turn. Textual processes one
message at a time, so the controller never sees interleaved mutations.
"""

import logging
import webbrowser
from typing import Any, Awaitable, Callable, Optional

from textual import events
from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from ..exceptions import RootlyTuiError
from ..models import PageResult
from .browser import (
    BrowserController,
    DetailLoaded,
    Dispatch,
    FetchDetail,
    FetchPage,
    KeyPressed,
    OpenUrl,
    PageLoaded,
    RefreshRequested,
    Resized,
)
from .browser.events import Effect, Event
from .keys import map_key

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, Optional[str]], Awaitable[PageResult]]
DetailFetcher = Callable[[Any], Awaitable[Any]]


def describe_error(error: Exception) -> str:
    """Plain message for the UI."""
    if isinstance(error, RootlyTuiError):
        return error.message
    return str(error) or error.__class__.__name__


class BrowserView(Widget, can_focus=True):
    """List/detail browser for one collection."""

    DEFAULT_CSS = """
    BrowserView {
        height: 1fr;
        width: 100%;
        padding: 0 1;
    }

    BrowserView #browser-body {
        height: 100%;
        width: 100%;
    }
    """

    class PageFetched(Message):
        """A page request finished (successfully or not)."""

        def __init__(self, seq: int, result: Optional[PageResult] = None, error: Optional[str] = None) -> None:
            self.seq = seq
            self.result = result
            self.error = error
            super().__init__()

    class DetailFetched(Message):
        """A detail request finished (successfully or not)."""

        def __init__(self, item_id: str, item: Any = None, error: Optional[str] = None) -> None:
            self.item_id = item_id
            self.item = item
            self.error = error
            super().__init__()

    class StateChanged(Message):
        """The controller state changed; the app refreshes its status bar."""

        def __init__(self, view: "BrowserView") -> None:
            self.view = view
            super().__init__()

    def __init__(
        self,
        controller: BrowserController[Any],
        fetch_page: PageFetcher,
        fetch_detail: DetailFetcher,
        *,
        open_url: Callable[[str], Any] = webbrowser.open,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self._fetch_page = fetch_page
        self._fetch_detail = fetch_detail
        self._open_url = open_url

    def compose(self) -> ComposeResult:
        yield Static("", id="browser-body", markup=False)

    def on_mount(self) -> None:
        self._paint()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, event: Event) -> Dispatch:
        result = self.controller.dispatch(event)
        for effect in result.effects:
            self._run_effect(effect)
        self._paint()
        return result

    def load(self) -> None:
        """Fetch the current page (first load)."""
        result = self.controller.start()
        for effect in result.effects:
            self._run_effect(effect)
        self._paint()

    def refresh_data(self) -> None:
        self.dispatch(RefreshRequested())

    def deactivate(self) -> None:
        self.controller.deactivate()
        self._paint()

    def on_key(self, event: events.Key) -> None:
        menu_open = self.controller.sort_menu_visible
        key = map_key(event)
        handled = False
        if key is not None:
            handled = self.dispatch(KeyPressed(key)).handled
        # The sort menu swallows every key, mapped or not
        if handled or menu_open:
            event.stop()
            event.prevent_default()

    def on_resize(self, event: events.Resize) -> None:
        size = self.content_size
        self.dispatch(Resized(size.width, size.height))

    # -------------------------------------------------------------------------
    # Effects
    # -------------------------------------------------------------------------

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, FetchPage):
            self.run_worker(self._load_page(effect), group="pages", exit_on_error=False)
        elif isinstance(effect, FetchDetail):
            self.run_worker(self._load_detail(effect), group="details", exit_on_error=False)
        elif isinstance(effect, OpenUrl):
            self._open(effect.url)

    async def _load_page(self, effect: FetchPage) -> None:
        try:
            result = await self._fetch_page(effect.page, effect.sort)
        except Exception as e:
            logger.error(f"Failed to load page {effect.page}: {e}", exc_info=True)
            self.post_message(self.PageFetched(effect.seq, error=describe_error(e)))
            return
        self.post_message(self.PageFetched(effect.seq, result=result))

    async def _load_detail(self, effect: FetchDetail) -> None:
        try:
            item = await self._fetch_detail(effect.item)
        except Exception as e:
            logger.error(f"Failed to load detail for {effect.item_id}: {e}", exc_info=True)
            self.post_message(self.DetailFetched(effect.item_id, error=describe_error(e)))
            return
        self.post_message(self.DetailFetched(effect.item_id, item=item))

    def _open(self, url: str) -> None:
        logger.info(f"Opening {url}")
        try:
            self._open_url(url)
        except Exception as e:
            logger.error(f"Failed to open {url}: {e}", exc_info=True)
            self.notify(f"Could not open {url}", severity="error")

    def on_browser_view_page_fetched(self, message: "BrowserView.PageFetched") -> None:
        message.stop()
        if message.result is not None:
            event = PageLoaded(
                seq=message.seq,
                items=message.result.items,
                pagination=message.result.pagination,
            )
        else:
            event = PageLoaded(seq=message.seq, error=message.error or "unknown error")
        self.dispatch(event)

    def on_browser_view_detail_fetched(self, message: "BrowserView.DetailFetched") -> None:
        message.stop()
        self.dispatch(DetailLoaded(message.item_id, item=message.item, error=message.error))

    # -------------------------------------------------------------------------
    # Painting
    # -------------------------------------------------------------------------

    def _paint(self) -> None:
        if not self.is_mounted:
            return
        try:
            body = self.query_one("#browser-body", Static)
        except Exception as e:
            logger.error(f"Browser body missing: {e}", exc_info=True)
            return
        body.update(self.controller.render())
        self.post_message(self.StateChanged(self))
