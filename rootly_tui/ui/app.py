"""Main Textual application: incidents and alerts tabs over one Rootly client."""

import logging
import webbrowser
from typing import Any, Callable, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import ContentSwitcher, Static

from .. import __version__
from ..config import Config
from ..models import Alert, Incident
from ..services.persistent_cache import open_persistent_cache
from ..services.rootly_client import RootlyClient
from ..utils.logging_utils import get_log_buffer
from .alerts import AlertAdapter
from .browser import BrowserController
from .browser_view import BrowserView
from .incidents import IncidentAdapter
from .rendering import RenderContext
from .screens import AboutScreen, HelpScreen, LogsScreen

logger = logging.getLogger(__name__)

TABS = ("incidents", "alerts")
OVERLAYS = (AboutScreen, HelpScreen, LogsScreen)


def _updated_param(item: Any) -> Optional[str]:
    updated = getattr(item, "updated_at", None)
    return updated.isoformat() if updated is not None else None


class RootlyApp(App[None]):
    """Incident and alert dashboard."""

    TITLE = "rootly-tui"

    CSS = """
    Screen {
        layout: vertical;
    }

    #tabs {
        height: 1;
        padding: 0 1;
        background: $primary-background;
        text-style: bold;
    }

    #views {
        height: 1fr;
    }

    #status-bar {
        height: 1;
        padding: 0 1;
        background: $surface;
    }

    #key-bar {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("tab", "switch_tab", "Switch", priority=True),
        Binding("r", "refresh", "Refresh"),
        Binding("question_mark", "help", "Help"),
        Binding("l", "logs", "Logs"),
        Binding("A", "about", "About"),
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
    ]

    def __init__(
        self,
        config: Config,
        client: Optional[RootlyClient] = None,
        *,
        open_url: Callable[[str], Any] = webbrowser.open,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.config = config
        self.client = client or RootlyClient(config, disk_cache=open_persistent_cache())
        self.context = RenderContext.create(config.timezone, config.language)
        self.active_tab = TABS[0]
        self._open_url = open_url
        self.views: Dict[str, BrowserView] = {}

    def compose(self) -> ComposeResult:
        client = self.client

        async def fetch_incident(item: Incident) -> Incident:
            return await client.get_incident(item.id, _updated_param(item))

        async def fetch_alert(item: Alert) -> Alert:
            return await client.get_alert(item.id, _updated_param(item))

        self.views = {
            "incidents": BrowserView(
                BrowserController(IncidentAdapter(), context=self.context, orientation=self.config.layout),
                client.list_incidents,
                fetch_incident,
                open_url=self._open_url,
                id="incidents",
            ),
            "alerts": BrowserView(
                BrowserController(AlertAdapter(), context=self.context, orientation=self.config.layout),
                client.list_alerts,
                fetch_alert,
                open_url=self._open_url,
                id="alerts",
            ),
        }

        yield Static(self._tabs_text(), id="tabs", markup=False)
        with ContentSwitcher(initial=self.active_tab, id="views"):
            for view in self.views.values():
                yield view
        yield Static("", id="status-bar", markup=False)
        yield Static(self.context.t("app.key_hints"), id="key-bar", markup=False)

    def on_mount(self) -> None:
        logger.info(f"rootly-tui {__version__} starting against {self.config.base_url}")
        for view in self.views.values():
            view.load()
        self.current_view.focus()

    @property
    def current_view(self) -> BrowserView:
        return self.views[self.active_tab]

    def _tabs_text(self) -> str:
        parts = []
        for tab in TABS:
            label = self.context.t(f"{tab}.title")
            parts.append(f"[ {label} ]" if tab == self.active_tab else f"  {label}  ")
        return " ".join(parts)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _input_captured(self) -> bool:
        """An overlay screen or the sort menu owns the keyboard."""
        return isinstance(self.screen, OVERLAYS) or self.current_view.controller.sort_menu_visible

    def action_switch_tab(self) -> None:
        if self._input_captured():
            return
        self.current_view.deactivate()
        index = TABS.index(self.active_tab)
        self.active_tab = TABS[(index + 1) % len(TABS)]
        logger.debug(f"Switched to {self.active_tab}")

        self.query_one("#views", ContentSwitcher).current = self.active_tab
        self.query_one("#tabs", Static).update(self._tabs_text())
        self.current_view.focus()
        self._update_status(self.current_view)

    def action_refresh(self) -> None:
        if self._input_captured():
            return
        cleared = self.client.clear_cache()
        logger.info(f"Refresh requested, cleared {cleared} cached responses")
        for view in self.views.values():
            view.refresh_data()

    async def action_quit(self) -> None:
        """Close the API client and exit."""
        await self.client.aclose()
        self.exit()

    def action_help(self) -> None:
        if self._input_captured():
            return
        self.push_screen(HelpScreen(self.context))

    def action_logs(self) -> None:
        if self._input_captured():
            return
        self.push_screen(LogsScreen(get_log_buffer(), context=self.context))

    def action_about(self) -> None:
        if self._input_captured():
            return
        self.push_screen(AboutScreen(self.context, self.config))

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def on_browser_view_state_changed(self, message: BrowserView.StateChanged) -> None:
        if message.view is self.views.get(self.active_tab):
            self._update_status(message.view)

    def _update_status(self, view: BrowserView) -> None:
        try:
            status = self.query_one("#status-bar", Static)
        except Exception as e:
            logger.debug(f"Status bar not ready: {e}")
            return
        status.update(view.controller.status_text)
