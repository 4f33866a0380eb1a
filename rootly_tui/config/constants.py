"""
Centralized constants for rootly-tui.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

ROOTLY_TUI_CONFIG_DIR = Path.home() / ".rootly-tui"
CONFIG_FILE_NAME = "config.yaml"
LOG_FILE_NAME = "rootly-tui.log"
CACHE_FILE_NAME = "cache.db"

# =============================================================================
# API
# =============================================================================

DEFAULT_ENDPOINT = "api.rootly.com"
DEFAULT_PAGE_SIZE = 25
REQUEST_TIMEOUT_SECONDS = 30.0
CACHE_TTL_SECONDS = 30  # Lists and details; manual refresh clears it
CACHE_MAX_ENTRIES = 200

# =============================================================================
# DISPLAY
# =============================================================================

DEFAULT_TIMEZONE = "UTC"
DEFAULT_LANGUAGE = "en_US"

LAYOUT_HORIZONTAL = "horizontal"
LAYOUT_VERTICAL = "vertical"
VALID_LAYOUTS = (LAYOUT_HORIZONTAL, LAYOUT_VERTICAL)

DETAIL_SCROLL_STEP = 3  # Lines per j/k while the detail pane has focus
LOG_BUFFER_SIZE = 1000

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_API_KEY = "ROOTLY_API_KEY"
ENV_ENDPOINT = "ROOTLY_API_ENDPOINT"
ENV_CONFIG_PATH = "ROOTLY_TUI_CONFIG"
