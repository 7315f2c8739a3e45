"""Graceful shutdown for the watcher process.

The watcher polls forever on the main thread, so termination comes from
SIGINT (Ctrl-C), SIGTERM (service manager stop) or SIGHUP (session end).
On the first such signal the registered cleanup callbacks run, which for
the watcher logs the final sender statistics, and the process exits with
status 0. A second signal during cleanup exits immediately.
"""

from __future__ import annotations

import os
import signal
import sys
from types import FrameType
from typing import Callable

from loguru import logger

# Type alias for handler callbacks
CleanupFn = Callable[[], None]


class SignalHandler:
    """Install exit-related signal handlers and coordinate graceful shutdown."""

    #: Exit signals we *always* hook
    _BASE_SIGNALS = [signal.SIGINT, signal.SIGTERM]

    if hasattr(signal, "SIGHUP"):
        _BASE_SIGNALS.append(signal.SIGHUP)

    #: Windows-specific mapping (Ctrl-Break)
    if os.name == "nt" and hasattr(signal, "SIGBREAK"):
        _BASE_SIGNALS.append(signal.SIGBREAK)  # type: ignore[attr-defined]

    def __init__(self, install: bool = True) -> None:
        """Initialize the handler.

        Args:
            install: Hook the exit signals now. With False the handler only
                collects cleanup callbacks and leaves process signals alone.
        """
        self._cleanup_fns: list[CleanupFn] = []
        self.signal_received = False
        self.received_signal: str | None = None
        if install:
            self._install_handlers()

    def register_cleanup(self, fn: CleanupFn) -> None:
        """Run ``fn`` on shutdown, in registration order."""
        self._cleanup_fns.append(fn)

    def _install_handlers(self) -> None:
        for sig in self._BASE_SIGNALS:
            try:
                signal.signal(sig, self._handle_exit)  # type: ignore[arg-type]
            except (ValueError, OSError):  # not allowed in threads / rare OSes
                logger.warning(f"Could not hook signal {sig}")

    def _handle_exit(self, signum: int, frame: FrameType | None) -> None:  # noqa: ANN001
        if self.signal_received:
            sys.exit(0)
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name}, shutting down watcher")
        self.signal_received = True
        self.received_signal = signal_name

        for fn in self._cleanup_fns:
            try:
                fn()
            except Exception:  # noqa: BLE001
                logger.exception(f"Cleanup function {fn} raised")

        sys.exit(0)

    def is_signal_received(self) -> bool:
        return self.signal_received
