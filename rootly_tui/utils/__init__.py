"""Utility modules for rootly-tui."""
