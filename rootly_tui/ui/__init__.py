"""Textual user interface for rootly-tui."""
