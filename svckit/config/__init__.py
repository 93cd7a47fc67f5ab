"""Configuration module for svckit."""

from svckit.config.loader import get_config_path, load_config, save_config
from svckit.config.schema import Settings

__all__ = ["Settings", "load_config", "save_config", "get_config_path"]
