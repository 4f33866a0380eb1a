"""Configuration for rootly-tui."""

from .settings import Config, get_config_path, load_config, save_config

__all__ = ["Config", "get_config_path", "load_config", "save_config"]
