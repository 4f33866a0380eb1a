"""Configuration file handling for rootly-tui.

Config is stored in ~/.rootly-tui/config.yaml:

    api_key: rootly_xxx
    endpoint: api.rootly.com
    timezone: America/New_York
    language: en_US
    layout: horizontal
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import ConfigurationError
from .constants import (
    CACHE_FILE_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_ENDPOINT,
    DEFAULT_LANGUAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEZONE,
    ENV_API_KEY,
    ENV_CONFIG_PATH,
    ENV_ENDPOINT,
    LAYOUT_HORIZONTAL,
    ROOTLY_TUI_CONFIG_DIR,
    VALID_LAYOUTS,
)

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """User configuration."""

    api_key: str = ""
    endpoint: str = DEFAULT_ENDPOINT
    timezone: str = DEFAULT_TIMEZONE
    language: str = DEFAULT_LANGUAGE
    layout: str = LAYOUT_HORIZONTAL
    page_size: int = DEFAULT_PAGE_SIZE

    def is_valid(self) -> bool:
        """A config is usable once it has both a key and an endpoint."""
        return bool(self.api_key) and bool(self.endpoint)

    @property
    def base_url(self) -> str:
        return normalize_endpoint(self.endpoint)

    @property
    def masked_api_key(self) -> str:
        if not self.api_key:
            return ""
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        layout = str(data.get("layout") or LAYOUT_HORIZONTAL)
        if layout not in VALID_LAYOUTS:
            logger.warning("Unknown layout %r in config, using %s", layout, LAYOUT_HORIZONTAL)
            layout = LAYOUT_HORIZONTAL

        try:
            page_size = int(data.get("page_size") or DEFAULT_PAGE_SIZE)
        except (TypeError, ValueError):
            page_size = DEFAULT_PAGE_SIZE

        return cls(
            api_key=str(data.get("api_key") or ""),
            endpoint=str(data.get("endpoint") or DEFAULT_ENDPOINT),
            timezone=str(data.get("timezone") or DEFAULT_TIMEZONE),
            language=str(data.get("language") or DEFAULT_LANGUAGE),
            layout=layout,
            page_size=max(1, page_size),
        )


def normalize_endpoint(endpoint: str) -> str:
    """Prefix a bare host with https:// and strip any trailing slash."""
    endpoint = endpoint.strip()
    if not endpoint:
        return ""
    if not endpoint.startswith(("http://", "https://")):
        endpoint = f"https://{endpoint}"
    return endpoint.rstrip("/")


def get_config_path() -> Path:
    """Get path to the config file.

    ROOTLY_TUI_CONFIG points at an alternate file; tests use it to keep
    the real ~/.rootly-tui untouched.
    """
    override = os.environ.get(ENV_CONFIG_PATH)
    if override:
        return Path(override)
    return ROOTLY_TUI_CONFIG_DIR / CONFIG_FILE_NAME


def get_cache_path() -> Path:
    """Response cache database, kept beside the config file."""
    return get_config_path().parent / CACHE_FILE_NAME


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from disk, then apply environment overrides.

    A missing file yields defaults. A file that exists but cannot be read
    or parsed raises ConfigurationError.
    """
    path = path or get_config_path()
    data: dict[str, Any] = {}

    if path.exists():
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError("Failed to read config file", path=str(path)) from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError("Config file must contain a mapping", path=str(path))
        data = loaded or {}

    config = Config.from_dict(data)

    env_key = os.environ.get(ENV_API_KEY)
    if env_key:
        config.api_key = env_key
    env_endpoint = os.environ.get(ENV_ENDPOINT)
    if env_endpoint:
        config.endpoint = env_endpoint

    return config


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """
    Save configuration to disk.

    The directory is created with mode 0700 and the file written with mode
    0600 since it holds the API key.
    """
    path = path or get_config_path()
    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
        os.chmod(path, 0o600)
    except OSError as e:
        raise ConfigurationError("Failed to write config file", path=str(path)) from e

    logger.info(f"Saved config to {path}")
    return path
