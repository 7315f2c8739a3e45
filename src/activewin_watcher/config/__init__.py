"""Configuration module for the active-window watcher."""

from .logger_config import setup_logging
from .settings import WatcherConfig, load_config

__all__ = ["WatcherConfig", "load_config", "setup_logging"]
