"""Configuration management for the active-window watcher.

This module provides the watcher configuration with defaults and
environment variable overrides. Invalid numeric values are logged and the
default is kept.
"""

from __future__ import annotations

import math
import os
import platform
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from loguru import logger

DEFAULT_POLL_MS = 5000.0
DEFAULT_DEBOUNCE_MS = 600.0
DEFAULT_SERVER_HOST = "localhost"
DEFAULT_SERVER_PORT = 3000
DEFAULT_SERVER_PATH = "/app-switch"
DEFAULT_REQUEST_TIMEOUT_MS = 5000.0
DEFAULT_WATCHER_ID = "activewin-watcher-improved"


def _parse_positive(name: str, raw: str, default: float) -> float:
    """Parse a finite positive number, falling back to ``default``."""
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}: {raw!r}, using default {default}")
        return default

    if not math.isfinite(value) or value <= 0:
        logger.warning(f"Invalid {name}: {raw!r} (must be a finite positive number), using default {default}")
        return default

    return value


def _parse_log_level(raw: str, default: str) -> str:
    """Accept only level names loguru knows, falling back to ``default``."""
    level = raw.strip().upper()
    try:
        logger.level(level)
    except ValueError:
        logger.warning(f"Invalid LOG_LEVEL: {raw!r}, using default {default}")
        return default
    return level


@dataclass
class WatcherConfig:
    """Complete watcher configuration."""

    # Polling cadence and debounce window (milliseconds)
    poll_ms: float = DEFAULT_POLL_MS
    debounce_ms: float = DEFAULT_DEBOUNCE_MS

    # Collector endpoint
    server_host: str = DEFAULT_SERVER_HOST
    server_port: int = DEFAULT_SERVER_PORT
    server_path: str = DEFAULT_SERVER_PATH
    request_timeout_ms: float = DEFAULT_REQUEST_TIMEOUT_MS

    # Event source identification
    watcher_id: str = DEFAULT_WATCHER_ID
    host_id: str = field(default_factory=socket.gethostname)
    platform: str = field(default_factory=lambda: platform.system().lower())

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    @property
    def endpoint_url(self) -> str:
        """Full URL of the collector endpoint."""
        return f"http://{self.server_host}:{self.server_port}{self.server_path}"

    @property
    def poll_seconds(self) -> float:
        return self.poll_ms / 1000.0

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000.0

    def _apply_env_overrides(self, environ: Mapping[str, str]) -> None:
        """Apply configuration overrides from environment variables."""
        # Timing
        if poll_ms := environ.get("POLL_MS"):
            self.poll_ms = _parse_positive("POLL_MS", poll_ms, DEFAULT_POLL_MS)

        if debounce_ms := environ.get("DEBOUNCE_MS"):
            self.debounce_ms = _parse_positive("DEBOUNCE_MS", debounce_ms, DEFAULT_DEBOUNCE_MS)

        if request_timeout_ms := environ.get("REQUEST_TIMEOUT_MS"):
            self.request_timeout_ms = _parse_positive("REQUEST_TIMEOUT_MS", request_timeout_ms, DEFAULT_REQUEST_TIMEOUT_MS)

        # Server settings
        if server_host := environ.get("SERVER_HOST"):
            self.server_host = server_host.strip()

        if server_port := environ.get("SERVER_PORT"):
            port = _parse_positive("SERVER_PORT", server_port, DEFAULT_SERVER_PORT)
            if port != int(port) or port > 65535:
                logger.warning(f"Invalid SERVER_PORT: {server_port!r}, using default {DEFAULT_SERVER_PORT}")
                port = DEFAULT_SERVER_PORT
            self.server_port = int(port)

        if server_path := environ.get("SERVER_PATH"):
            server_path = server_path.strip()
            self.server_path = server_path if server_path.startswith("/") else f"/{server_path}"

        # Identification
        if watcher_id := environ.get("WATCHER_ID"):
            self.watcher_id = watcher_id

        # Logging
        if log_level := environ.get("LOG_LEVEL"):
            self.log_level = _parse_log_level(log_level, self.log_level)

        if log_file := environ.get("LOG_FILE"):
            self.log_file = Path(log_file)

    def validate(self) -> tuple[bool, list[str]]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.server_host:
            errors.append("Server host is required")

        if not 0 < self.server_port <= 65535:
            errors.append("Server port must be between 1 and 65535")

        if not self.server_path.startswith("/"):
            errors.append("Server path must start with '/'")

        for name, value in (("Poll interval", self.poll_ms), ("Debounce interval", self.debounce_ms), ("Request timeout", self.request_timeout_ms)):
            if not math.isfinite(value) or value <= 0:
                errors.append(f"{name} must be a finite positive number")

        return len(errors) == 0, errors


def load_config(environ: Optional[Mapping[str, str]] = None) -> WatcherConfig:
    """Build a configuration from defaults and the environment.

    Args:
        environ: Mapping to read overrides from (defaults to ``os.environ``)

    Returns:
        Configured WatcherConfig instance
    """
    config = WatcherConfig()
    config._apply_env_overrides(os.environ if environ is None else environ)
    return config
