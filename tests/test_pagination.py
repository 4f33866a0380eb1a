"""Tests for the pagination tracker."""

from rootly_tui.models import PaginationInfo
from rootly_tui.ui.browser import PaginationTracker


class TestPaginationTracker:
    def test_initial_state(self):
        tracker = PaginationTracker()
        assert tracker.current_page == 1
        assert not tracker.can_advance()
        assert not tracker.can_retreat()

    def test_advance_when_next_page_exists(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=1, has_next=True, total_pages=3))

        assert tracker.advance() is True
        assert tracker.current_page == 2

    def test_advance_capped_by_total_pages(self):
        """has_next is ignored once the last page is reached."""
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=3, has_next=True, has_prev=True, total_pages=3))

        assert tracker.advance() is False
        assert tracker.current_page == 3

    def test_advance_with_unknown_total(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=7, has_next=True, total_pages=0))

        assert tracker.advance() is True
        assert tracker.current_page == 8

    def test_retreat_never_below_one(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=1, has_prev=True))

        assert tracker.retreat() is False
        assert tracker.current_page == 1

    def test_retreat(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=2, has_prev=True, total_pages=2))

        assert tracker.retreat() is True
        assert tracker.current_page == 1

    def test_apply_replaces_everything(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=4, has_next=True, has_prev=True, total_pages=9, total_count=220))

        assert tracker.current_page == 4
        assert tracker.has_next and tracker.has_prev
        assert tracker.total_pages == 9
        assert tracker.total_count == 220

    def test_reset_returns_to_first_page(self):
        tracker = PaginationTracker()
        tracker.apply(PaginationInfo(current_page=4, has_next=True, has_prev=True, total_pages=9))
        tracker.reset()

        assert tracker.current_page == 1
        assert not tracker.can_advance()
        assert not tracker.can_retreat()
