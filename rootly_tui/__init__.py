"""
rootly-tui - Terminal dashboard for Rootly incidents and alerts
"""

__version__ = "0.3.0"
