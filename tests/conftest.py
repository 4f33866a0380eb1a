"""Shared pytest fixtures for rootly-tui tests."""

import pytest

from rootly_tui.ui.browser import BrowserController
from rootly_tui.ui.incidents import IncidentAdapter
from rootly_tui.ui.rendering import RenderContext

from .factories import FIXED_NOW, load_page, make_incidents, make_page


@pytest.fixture
def ctx() -> RenderContext:
    return RenderContext(now=FIXED_NOW)


@pytest.fixture
def controller(ctx: RenderContext) -> BrowserController:
    """Incident controller with a 100x30 area and no page loaded yet."""
    return BrowserController(IncidentAdapter(), context=ctx, width=100, height=30)


@pytest.fixture
def loaded_controller(controller: BrowserController) -> BrowserController:
    """Controller showing page 1 of 3 with five incidents."""
    start = controller.start()
    load_page(controller, start.effects[0], make_page(make_incidents(5), page=1, total_pages=3))
    return controller


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """Point config loading at a temp file and clear credential env vars."""
    path = tmp_path / "config.yaml"
    monkeypatch.setenv("ROOTLY_TUI_CONFIG", str(path))
    monkeypatch.delenv("ROOTLY_API_KEY", raising=False)
    monkeypatch.delenv("ROOTLY_API_ENDPOINT", raising=False)
    return path
