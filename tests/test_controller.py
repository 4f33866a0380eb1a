"""Scenario tests for the browser controller state machine."""

import pytest

from rootly_tui.ui.alerts import AlertAdapter
from rootly_tui.ui.browser import (
    BrowserController,
    DetailLoaded,
    FetchDetail,
    FetchPage,
    Key,
    KeyPressed,
    OpenUrl,
    PageLoaded,
    RefreshRequested,
    Resized,
)

from .factories import load_page, make_alert, make_incident, make_incidents, make_page

LONG_SUMMARY = "\n".join(f"Investigation note {i}" for i in range(80))


def press(controller: BrowserController, key: Key):
    return controller.dispatch(KeyPressed(key))


def only_effect(result, kind):
    assert len(result.effects) == 1
    effect = result.effects[0]
    assert isinstance(effect, kind)
    return effect


def load_long(controller: BrowserController, count: int = 3) -> None:
    """Load a page whose items have detail text longer than the viewport."""
    items = [
        make_incident(id=f"inc-{i}", seq=i, title=f"Incident {i}", summary=LONG_SUMMARY)
        for i in range(1, count + 1)
    ]
    fetch = only_effect(controller.start(), FetchPage)
    load_page(controller, fetch, make_page(items))


class TestStartup:
    def test_start_requests_first_page(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        assert fetch.page == 1
        assert fetch.sort is None
        assert controller.loading

    def test_loading_message(self, controller: BrowserController):
        controller.start()
        assert "Loading page 1..." in controller.render()
        assert controller.status_text == "Loading page 1..."

    def test_page_loaded(self, loaded_controller: BrowserController):
        c = loaded_controller
        assert not c.loading
        assert len(c.items) == 5
        assert c.cursor.index == 0
        assert c.viewport.displayed_identity == "inc-1"
        assert c.viewport.scroll_offset == 0
        assert c.pagination.total_pages == 3

    def test_empty_page(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page([]))

        assert controller.selected_item is None
        assert controller.render() == "No incidents found"


class TestSelection:
    def test_move_down_resets_viewport_to_new_item(self, controller: BrowserController):
        load_long(controller)
        controller.viewport.scroll_by(5)

        press(controller, Key.DOWN)

        assert controller.cursor.index == 1
        assert controller.viewport.displayed_identity == "inc-2"
        assert controller.viewport.scroll_offset == 0

    def test_bottom_and_top(self, loaded_controller: BrowserController):
        press(loaded_controller, Key.BOTTOM)
        assert loaded_controller.selected_id == "inc-5"
        press(loaded_controller, Key.TOP)
        assert loaded_controller.selected_id == "inc-1"

    def test_cursor_stays_in_bounds(self, loaded_controller: BrowserController):
        for _ in range(10):
            press(loaded_controller, Key.DOWN)
        assert loaded_controller.cursor.index == 4
        for _ in range(10):
            press(loaded_controller, Key.UP)
        assert loaded_controller.cursor.index == 0

    def test_selection_marker_rendered(self, loaded_controller: BrowserController):
        press(loaded_controller, Key.DOWN)
        lines = loaded_controller.render_list()
        marked = [line for line in lines if line.startswith("▶ ")]
        assert len(marked) == 1
        assert "INC-2" in marked[0]


class TestPagination:
    def test_next_page_scenario(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(
            controller,
            fetch,
            make_page(make_incidents(25), page=1, total_pages=0, has_next=True, has_prev=False),
        )
        press(controller, Key.DOWN)
        press(controller, Key.DOWN)

        result = press(controller, Key.NEXT_PAGE)

        next_fetch = only_effect(result, FetchPage)
        assert next_fetch.page == 2
        assert controller.pagination.current_page == 2
        assert controller.cursor.index == 0

    def test_next_page_blocked_on_last_page(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page(make_incidents(3), page=3, total_pages=3, has_next=True))

        result = press(controller, Key.NEXT_PAGE)

        assert result.effects == []
        assert controller.pagination.current_page == 3

    def test_prev_page(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page(make_incidents(3), page=2, total_pages=3))
        press(controller, Key.BOTTOM)

        prev_fetch = only_effect(press(controller, Key.PREV_PAGE), FetchPage)

        assert prev_fetch.page == 1
        assert controller.cursor.index == 0

    def test_prev_page_blocked_on_first_page(self, loaded_controller: BrowserController):
        assert press(loaded_controller, Key.PREV_PAGE).effects == []

    def test_stale_page_result_discarded(self, loaded_controller: BrowserController):
        c = loaded_controller
        first = only_effect(press(c, Key.NEXT_PAGE), FetchPage)
        second = only_effect(c.dispatch(RefreshRequested()), FetchPage)
        assert second.seq > first.seq

        load_page(c, first, make_page(make_incidents(2, start=50), page=2, total_pages=3))
        assert c.loading
        assert c.items[0].id == "inc-1"

        load_page(c, second, make_page(make_incidents(4, start=10), page=2, total_pages=3))
        assert not c.loading
        assert [i.id for i in c.items] == ["inc-10", "inc-11", "inc-12", "inc-13"]

    def test_keys_ignored_while_page_loading(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.NEXT_PAGE)

        assert press(c, Key.ENTER).effects == []
        assert press(c, Key.OPEN_URL).effects == []
        press(c, Key.DOWN)
        assert c.cursor.index == 0

    def test_page_footer(self, loaded_controller: BrowserController):
        footer = loaded_controller.render_list()[-1]
        assert "Page 1/3" in footer
        assert "] →" in footer
        assert "← [" not in footer


class TestPageErrors:
    def test_error_replaces_panes_and_keeps_items(self, loaded_controller: BrowserController):
        c = loaded_controller
        fetch = only_effect(c.dispatch(RefreshRequested()), FetchPage)

        c.dispatch(PageLoaded(seq=fetch.seq, error="Invalid API key"))

        assert c.render() == "Error: Invalid API key"
        assert c.status_text == "Error: Invalid API key"
        assert len(c.items) == 5

    def test_refresh_retries_same_page(self, loaded_controller: BrowserController):
        c = loaded_controller
        fetch = only_effect(press(c, Key.NEXT_PAGE), FetchPage)
        c.dispatch(PageLoaded(seq=fetch.seq, error="timeout"))

        retry = only_effect(c.dispatch(RefreshRequested()), FetchPage)

        assert retry.page == 2
        assert c.error is None


class TestDetailLoading:
    def test_enter_requests_detail(self, loaded_controller: BrowserController):
        c = loaded_controller
        fetch = only_effect(press(c, Key.ENTER), FetchDetail)

        assert fetch.item_id == "inc-1"
        assert fetch.item is c.items[0]
        assert c.detail_loads.is_loading("inc-1")
        assert "Loading details..." in c.viewport.content
        assert not c.detail_focused

    def test_one_detail_request_in_flight(self, loaded_controller: BrowserController):
        c = loaded_controller
        only_effect(press(c, Key.ENTER), FetchDetail)
        assert c.detail_loads.is_loading("inc-1")
        assert not c.detail_loads.is_loading("inc-2")

        press(c, Key.DOWN)
        result = press(c, Key.ENTER)

        assert result.effects == []
        assert c.detail_loads.loading_id == "inc-1"

        c.dispatch(DetailLoaded("inc-1", item=make_incident(id="inc-1", detail_loaded=True)))
        assert not c.detail_loads.busy
        retry = only_effect(press(c, Key.ENTER), FetchDetail)
        assert retry.item_id == "inc-2"

    def test_detail_for_selected_item_keeps_scroll(self, controller: BrowserController):
        load_long(controller)
        press(controller, Key.ENTER)
        controller.viewport.scroll_by(7)

        detail = make_incident(
            id="inc-1", seq=1, title="Incident 1", summary=LONG_SUMMARY, causes=["Bad deploy"], detail_loaded=True
        )
        controller.dispatch(DetailLoaded("inc-1", item=detail))

        assert controller.items[0].detail_loaded
        assert controller.items[0].causes == ["Bad deploy"]
        assert "Bad deploy" in controller.viewport.content
        assert controller.viewport.scroll_offset == 7
        assert controller.detail_focused

    def test_detail_for_deselected_item_updates_record_only(self, controller: BrowserController):
        load_long(controller)
        press(controller, Key.ENTER)
        press(controller, Key.DOWN)
        controller.viewport.scroll_by(4)
        content_before = controller.viewport.content

        controller.dispatch(
            DetailLoaded("inc-1", item=make_incident(id="inc-1", causes=["Bad deploy"], detail_loaded=True))
        )

        assert controller.items[0].detail_loaded
        assert controller.viewport.displayed_identity == "inc-2"
        assert controller.viewport.content == content_before
        assert controller.viewport.scroll_offset == 4
        assert not controller.detail_focused

    def test_detail_merge_keeps_summary_fields(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.ENTER)
        c.dispatch(DetailLoaded("inc-1", item=make_incident(id="inc-1", title="", status="", detail_loaded=True)))

        assert c.items[0].title == "Incident 1"
        assert c.items[0].status == "started"

    def test_failed_detail_is_recoverable(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.ENTER)

        c.dispatch(DetailLoaded("inc-1", error="API returned status 500"))

        assert not c.detail_loads.is_loading("inc-1")
        assert not c.items[0].detail_loaded
        assert "Press Enter to load details" in c.viewport.content
        assert "Loading details" not in c.viewport.content
        only_effect(press(c, Key.ENTER), FetchDetail)

    def test_enter_on_loaded_item_focuses_detail(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page([make_incident(detail_loaded=True)]))

        result = press(controller, Key.ENTER)

        assert result.effects == []
        assert controller.detail_focused

    def test_detail_during_page_fetch_keeps_list_focus(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.ENTER)
        fetch = only_effect(press(c, Key.NEXT_PAGE), FetchPage)

        c.dispatch(DetailLoaded("inc-1", item=make_incident(id="inc-1", detail_loaded=True)))
        assert not c.detail_focused

        load_page(c, fetch, make_page(make_incidents(3, start=20), page=2, total_pages=3))
        assert not c.detail_focused
        retry = only_effect(press(c, Key.ENTER), FetchDetail)
        assert retry.item_id == "inc-20"

    def test_refresh_returns_focus_to_list(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.ENTER)
        c.dispatch(DetailLoaded("inc-1", item=make_incident(id="inc-1", detail_loaded=True)))
        assert c.detail_focused

        only_effect(c.dispatch(RefreshRequested()), FetchPage)
        assert not c.detail_focused

    def test_detail_after_page_replaced_is_dropped(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.ENTER)
        fetch = only_effect(press(c, Key.NEXT_PAGE), FetchPage)
        load_page(c, fetch, make_page(make_incidents(3, start=20), page=2, total_pages=3))

        c.dispatch(DetailLoaded("inc-1", item=make_incident(id="inc-1", detail_loaded=True)))

        assert not c.detail_loads.busy
        assert all(not i.detail_loaded for i in c.items)


class TestDetailFocus:
    @pytest.fixture
    def focused(self, controller: BrowserController) -> BrowserController:
        fetch = only_effect(controller.start(), FetchPage)
        items = [
            make_incident(id=f"inc-{i}", seq=i, summary=LONG_SUMMARY, detail_loaded=True) for i in range(1, 4)
        ]
        load_page(controller, fetch, make_page(items))
        press(controller, Key.ENTER)
        assert controller.detail_focused
        return controller

    def test_navigation_keys_scroll(self, focused: BrowserController):
        press(focused, Key.DOWN)
        assert focused.viewport.scroll_offset == 3
        assert focused.cursor.index == 0

        press(focused, Key.HALF_PAGE_DOWN)
        assert focused.viewport.scroll_offset == 3 + focused.viewport.height // 2

        press(focused, Key.BOTTOM)
        assert focused.viewport.scroll_offset == focused.viewport.max_scroll

        press(focused, Key.TOP)
        assert focused.viewport.scroll_offset == 0

    @pytest.mark.parametrize("key", [Key.ESCAPE, Key.QUIT])
    def test_close_keys_return_to_list(self, focused: BrowserController, key):
        result = press(focused, key)
        assert result.handled
        assert not focused.detail_focused

    def test_unhandled_keys_bubble(self, focused: BrowserController):
        assert press(focused, Key.NEXT_PAGE).handled is False
        assert focused.pagination.current_page == 1

    def test_scroll_footer(self, focused: BrowserController):
        footer = focused.render_detail()[-1]
        assert "j/k scroll, Esc to exit" in footer
        focused.dispatch(KeyPressed(Key.ESCAPE))
        assert "Enter to scroll" in focused.render_detail()[-1]

    def test_deactivate(self, focused: BrowserController):
        focused.detail_loads.begin_load("inc-2")
        focused.deactivate()
        assert not focused.detail_focused
        assert not focused.detail_loads.busy


class TestResize:
    def test_taller_window_clamps_scroll(self, controller: BrowserController):
        load_long(controller)
        controller.viewport.goto_bottom()
        before = controller.viewport.scroll_offset

        controller.dispatch(Resized(100, 120))

        assert controller.viewport.height == 119
        assert controller.viewport.scroll_offset == controller.viewport.max_scroll
        assert controller.viewport.scroll_offset < before

    def test_narrower_window_keeps_offset_in_range(self, controller: BrowserController):
        load_long(controller)
        controller.viewport.goto_bottom()

        controller.dispatch(Resized(40, 10))

        assert 0 <= controller.viewport.scroll_offset <= controller.viewport.max_scroll

    def test_resize_updates_layout(self, loaded_controller: BrowserController):
        loaded_controller.dispatch(Resized(60, 12))
        assert loaded_controller.layout.list_width == 21
        assert loaded_controller.viewport.height == 11


class TestSorting:
    def test_sort_overlay_owns_keys(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.SORT)
        assert c.sort_menu_visible

        press(c, Key.DOWN)
        assert c.cursor.index == 0
        assert c.sort_overlay.highlight == 1
        assert press(c, Key.NEXT_PAGE).effects == []
        assert c.pagination.current_page == 1

    def test_confirm_reloads_first_page(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page(make_incidents(5), page=2, total_pages=3))
        press(controller, Key.BOTTOM)

        press(controller, Key.SORT)
        press(controller, Key.DOWN)
        reload = only_effect(press(controller, Key.ENTER), FetchPage)

        assert reload.page == 1
        assert reload.sort == "-updated_at"
        assert controller.cursor.index == 0
        assert not controller.sort_menu_visible

    def test_same_field_flips_direction(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.SORT)
        only_effect(press(c, Key.ENTER), FetchPage)
        press(c, Key.SORT)
        reload = only_effect(press(c, Key.ENTER), FetchPage)
        assert reload.sort == "created_at"

    def test_escape_cancels(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.SORT)
        result = press(c, Key.ESCAPE)
        assert result.effects == []
        assert not c.sort_menu_visible
        assert c.sort_state.sort_param is None

    def test_menu_rendered_in_detail_pane(self, loaded_controller: BrowserController):
        press(loaded_controller, Key.SORT)
        assert loaded_controller.render_detail()[0] == "Sort by"

    def test_sort_indicator_in_title(self, loaded_controller: BrowserController):
        c = loaded_controller
        press(c, Key.SORT)
        press(c, Key.ENTER)
        assert c.render_list()[0] == "Incidents ↓"

    def test_alerts_have_no_sort(self, ctx):
        c = BrowserController(AlertAdapter(), context=ctx)
        fetch = only_effect(c.start(), FetchPage)
        load_page(c, fetch, make_page([make_alert()]))

        result = press(c, Key.SORT)

        assert result.handled is False
        assert c.sort_overlay is None


class TestOpenUrl:
    def test_open_selected_item(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page([make_incident(short_url="https://rootly.com/i/abc")]))

        effect = only_effect(press(controller, Key.OPEN_URL), OpenUrl)

        assert effect.url == "https://rootly.com/i/abc"

    def test_nothing_selected(self, controller: BrowserController):
        fetch = only_effect(controller.start(), FetchPage)
        load_page(controller, fetch, make_page([]))
        assert press(controller, Key.OPEN_URL).effects == []
