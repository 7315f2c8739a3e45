"""Stability tracking and debounce for normalized focus observations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger


class Observation(str, Enum):
    """Outcome of feeding one observation to the tracker."""

    CANDIDATE = "candidate"  # new (app, title) pair recorded
    PENDING = "pending"  # same pair, debounce not yet elapsed
    ELIGIBLE = "eligible"  # same pair, ready to emit


@dataclass
class StabilityState:
    """Last distinct observation and last successful emission.

    Timestamps are epoch milliseconds. A fresh state has no observation.
    """

    last_app: Optional[str] = None
    last_title: Optional[str] = None
    last_seen_at: float = 0
    last_sent_at: float = 0

    @property
    def is_empty(self) -> bool:
        return self.last_app is None


class StabilityTracker:
    """Decides per tick whether a stable observation should be reported.

    A changed ``(app, title)`` pair only becomes a candidate. Once the same
    pair has been seen for ``debounce_ms`` and nothing was sent within the
    last ``debounce_ms``, the observation is eligible. ``last_seen_at`` is not
    refreshed while the pair stays the same, so a stable window becomes
    eligible again every ``debounce_ms``.
    """

    def __init__(self, debounce_ms: float, state: Optional[StabilityState] = None):
        self.debounce_ms = debounce_ms
        self.state = state or StabilityState()

    def observe(self, app: str, title: Optional[str], now: float) -> Observation:
        """Feed one normalized observation.

        Args:
            app: Canonical app label
            title: Window title
            now: Current time in epoch milliseconds

        Returns:
            Whether the observation is a new candidate, pending or eligible
        """
        state = self.state

        if state.last_app == app and state.last_title == title:
            if now - state.last_seen_at >= self.debounce_ms and now - state.last_sent_at >= self.debounce_ms:
                return Observation.ELIGIBLE
            return Observation.PENDING

        state.last_app = app
        state.last_title = title
        state.last_seen_at = now
        return Observation.CANDIDATE

    def mark_sent(self, now: float) -> None:
        """Record a successful emission."""
        self.state.last_sent_at = now
        logger.debug(f"Marked emission at {now}")
