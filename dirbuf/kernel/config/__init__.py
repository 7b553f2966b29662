"""Configuration loading and management for dirbuf."""

from dirbuf.kernel.config.loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
)
from dirbuf.kernel.config.models import DirbufConfig, FilesConfig, LoggingConfig

__all__ = [
    "ConfigLoader",
    "DirbufConfig",
    "FilesConfig",
    "LoggingConfig",
    "clear_config_cache",
    "get_default_config",
    "load_config",
]
