"""Active-window watcher - reports application switches to a collector."""

from .app import AppSwitchWatcher, create_watcher
from .config import WatcherConfig, load_config

__version__ = "1.0.0"

__all__ = ["AppSwitchWatcher", "WatcherConfig", "create_watcher", "load_config"]
