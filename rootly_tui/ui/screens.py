"""Modal overlays: help, about and the live log viewer."""

import logging
import platform
from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import RichLog, Static

from .. import __version__
from ..config import Config, get_config_path
from ..utils.logging_utils import LogRingBuffer, get_log_file
from .rendering import RenderContext, detail_row

logger = logging.getLogger(__name__)


class HelpScreen(ModalScreen):
    """Keyboard reference."""

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-container {
        width: 64;
        height: auto;
        max-height: 90%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=True),
        Binding("question_mark", "close", "Close", show=False),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, context: Optional[RenderContext] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.context = context or RenderContext()

    def compose(self) -> ComposeResult:
        with Vertical(id="help-container"):
            yield Static(f"rootly-tui {__version__}", id="help-title", markup=False)
            yield Static(self.context.t("help.body"), id="help-body", markup=False)

    def action_close(self) -> None:
        self.dismiss()


class LogsScreen(ModalScreen):
    """Tail of the in-memory log buffer, refreshed every second."""

    CSS = """
    LogsScreen {
        align: center middle;
    }

    #logs-container {
        width: 95%;
        height: 90%;
        background: $surface;
        border: solid $primary;
    }

    #logs-header {
        height: 1;
        padding: 0 1;
        background: $surface-darken-1;
        text-style: bold;
    }

    #logs-body {
        height: 1fr;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=True),
        Binding("l", "close", "Close", show=False),
        Binding("q", "close", "Close", show=False),
        Binding("j", "scroll_down", "Down", show=False),
        Binding("k", "scroll_up", "Up", show=False),
        Binding("g", "scroll_top", "Top", show=False),
        Binding("G", "scroll_bottom", "Bottom", show=False),
        Binding("c", "clear_logs", "Clear", show=False),
    ]

    def __init__(
        self,
        buffer: LogRingBuffer,
        refresh_interval: Optional[float] = 1.0,
        context: Optional[RenderContext] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.context = context or RenderContext()
        self.buffer = buffer
        self.refresh_interval = refresh_interval
        self._seen = 0

    def compose(self) -> ComposeResult:
        with Vertical(id="logs-container"):
            yield Static(self.context.t("logs.header"), id="logs-header", markup=False)
            yield RichLog(id="logs-body", wrap=True, markup=False, highlight=False)

    def on_mount(self) -> None:
        self.poll_buffer()
        if self.refresh_interval:
            self.set_interval(self.refresh_interval, self.poll_buffer)

    def poll_buffer(self) -> None:
        """Append lines logged since the last poll."""
        total, lines = self.buffer.snapshot()
        new = total - self._seen
        if new <= 0:
            return

        log = self.query_one("#logs-body", RichLog)
        if new > len(lines) or self._seen == 0:
            log.clear()
            new = len(lines)
        for line in lines[len(lines) - new:]:
            log.write(line)
        self._seen = total

    def action_close(self) -> None:
        self.dismiss()

    def action_scroll_down(self) -> None:
        self.query_one("#logs-body", RichLog).scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#logs-body", RichLog).scroll_up()

    def action_scroll_top(self) -> None:
        self.query_one("#logs-body", RichLog).scroll_home()

    def action_scroll_bottom(self) -> None:
        self.query_one("#logs-body", RichLog).scroll_end()

    def action_clear_logs(self) -> None:
        self.buffer.clear()
        self.query_one("#logs-body", RichLog).clear()
        logger.debug("Log view cleared")


class AboutScreen(ModalScreen):
    """Version, runtime and file locations."""

    CSS = """
    AboutScreen {
        align: center middle;
    }

    #about-container {
        width: 72;
        height: auto;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    #about-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=True),
        Binding("A", "close", "Close", show=False),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, context: Optional[RenderContext] = None, config: Optional[Config] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.context = context or RenderContext()
        self.config = config or Config()

    def about_lines(self) -> list[str]:
        t = self.context.t
        return [
            f"rootly-tui v{__version__}",
            t("about.description"),
            "",
            t("about.system"),
            detail_row(t("about.python"), platform.python_version()),
            detail_row(t("about.platform"), f"{platform.system().lower()}/{platform.machine()}"),
            detail_row(t("about.endpoint"), self.config.base_url),
            detail_row(t("about.config_file"), str(get_config_path())),
            detail_row(t("about.log_file"), str(get_log_file())),
            "",
            t("about.links"),
            detail_row(t("about.docs"), "https://rootly.com/docs/tui/tui"),
            detail_row("GitHub", "https://github.com/rootlyhq/rootly-tui"),
            "",
            t("about.close"),
        ]

    def compose(self) -> ComposeResult:
        with Vertical(id="about-container"):
            yield Static(self.context.t("about.title"), id="about-title", markup=False)
            yield Static("\n".join(self.about_lines()), id="about-body", markup=False)

    def action_close(self) -> None:
        self.dismiss()
