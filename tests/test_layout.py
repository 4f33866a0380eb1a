"""Tests for pane geometry."""

from rootly_tui.ui.browser import compute_layout


class TestComputeLayout:
    def test_horizontal_split(self):
        layout = compute_layout(100, 30)
        assert not layout.vertical
        assert layout.list_width == 35
        assert layout.detail_width == 63
        assert layout.list_height == 30
        assert layout.list_rows == 26
        assert layout.viewport_height == 29

    def test_horizontal_minimums(self):
        layout = compute_layout(10, 2)
        assert layout.viewport_width >= 20
        assert layout.list_height == 5
        assert layout.list_rows >= 1

    def test_vertical_split(self):
        layout = compute_layout(100, 40, "vertical")
        assert layout.vertical
        assert layout.list_width == 100
        assert layout.detail_width == 100
        assert layout.list_height == 16
        assert layout.detail_height == 23

    def test_vertical_minimums(self):
        layout = compute_layout(30, 4, "vertical")
        assert layout.list_height == 5
        assert layout.detail_height == 3
        assert layout.viewport_height == 2
