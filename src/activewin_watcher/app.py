"""Active-window watcher application.

Per poll tick the watcher samples the focused window, normalizes the owner
to a canonical app label, feeds the stability tracker and, when the
observation is eligible, posts an ``appSwitch`` event to the collector.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from loguru import logger

from .config import WatcherConfig
from .core import AppNormalizer, NormalizationResult, Observation, RawSample, SignalHandler, StabilityTracker
from .models import AppSwitchEvent, EventSource, FocusedWindow, SwitchContext, WindowRef
from .providers import SampleProvider, WmClassResolver, create_sample_provider, create_wmclass_resolver
from .sender import HTTPSender, create_default_sender

DETECTOR_REASON = "active-win-improved"

# Candidates for these apps are logged without raw owner details
WELL_KNOWN_APPS = frozenset({"Chrome", "Brave", "VS Code", "Firefox"})


def now_ms() -> int:
    return int(time.time() * 1000)


class AppSwitchWatcher:
    """Single-threaded polling loop that reports application switches."""

    def __init__(
        self,
        config: WatcherConfig,
        sampler: Optional[SampleProvider] = None,
        resolver: Optional[WmClassResolver] = None,
        sender: Optional[HTTPSender] = None,
        clock: Callable[[], int] = now_ms,
        sleep: Callable[[float], None] = time.sleep,
        signal_handler: Optional[SignalHandler] = None,
    ) -> None:
        """Initialize the watcher.

        Args:
            config: Watcher configuration
            sampler: Active window sampler (platform default when omitted)
            resolver: WM-class resolver (platform default when omitted)
            sender: Event sender (posts to ``config.endpoint_url`` when omitted)
            clock: Returns the current time in epoch milliseconds
            sleep: Sleeps for the given number of seconds
            signal_handler: Runs :meth:`shutdown` on exit signals when given
        """
        self.config = config
        self.sampler = sampler or create_sample_provider(config.platform)
        self.normalizer = AppNormalizer(resolver or create_wmclass_resolver(config.platform))
        self.sender = sender or create_default_sender(config.endpoint_url, config.request_timeout_seconds)
        self.tracker = StabilityTracker(config.debounce_ms)
        self._clock = clock
        self._sleep = sleep

        self.signal_handler = signal_handler
        if signal_handler is not None:
            signal_handler.register_cleanup(self.shutdown)

    def tick(self) -> bool:
        """Run one poll iteration.

        Returns:
            True if an event was posted successfully
        """
        try:
            sample = self.sampler.sample()
            if sample is None:
                logger.debug("No active window sample")
                return False

            result = self.normalizer.normalize_sample(sample)
            now = self._clock()

            # Stored state equals the current pair on the eligible branch
            state = self.tracker.state
            prev = None if state.is_empty else WindowRef(app=state.last_app, title=state.last_title)
            observation = self.tracker.observe(result.app, sample.title, now)

            if observation == Observation.CANDIDATE:
                self._log_candidate(result, sample)
                return False

            if observation == Observation.PENDING:
                return False

            event = self.build_event(result, sample, now, prev)
            success, error_msg = self.sender.emit(event)
            if success:
                self.tracker.mark_sent(now)
                title_suffix = f" ({sample.title})" if sample.title else ""
                logger.info(f"Posted -> {result.app}{title_suffix} via {result.reason.value}")
            else:
                logger.warning(f"Post failed: {error_msg}")
            return success

        except Exception:
            logger.exception("Error in watcher tick")
            return False

    def run(self) -> None:
        """Poll forever. Only process termination or a fatal error ends the loop."""
        logger.info(f"Starting watcher; POST -> {self.config.endpoint_url}")
        logger.info(f"Polling every {self.config.poll_ms:g} ms, debounce {self.config.debounce_ms:g} ms")

        while True:
            self.tick()
            self._sleep(self.config.poll_seconds)

    def build_event(
        self,
        result: NormalizationResult,
        sample: RawSample,
        now: int,
        prev: Optional[WindowRef],
    ) -> AppSwitchEvent:
        """Build the wire envelope for an eligible observation."""
        return AppSwitchEvent(
            timestamp=now,
            prev=prev,
            next=FocusedWindow(id=f"{result.app}-{now}", app=result.app, title=sample.title or None, pid=sample.pid),
            context=SwitchContext(reason=DETECTOR_REASON, confidence=1.0, heuristic=result.reason.value),
            source=EventSource(watcher_id=self.config.watcher_id, host_id=self.config.host_id),
        )

    def shutdown(self) -> None:
        """Log final statistics."""
        stats = self.sender.get_stats()
        logger.info(f"Watcher stopped; sent {stats['total_sent']} events, {stats['total_failed']} failed")

    def _log_candidate(self, result: NormalizationResult, sample: RawSample) -> None:
        title = sample.title or ""
        if result.app in WELL_KNOWN_APPS:
            logger.info(f"Candidate -> {result.app} {title}")
        else:
            logger.info(f"Candidate -> {result.app} {title} raw owner: {sample.owner_dict()}")


def create_watcher(config: WatcherConfig, install_signal_handlers: bool = True) -> AppSwitchWatcher:
    """Create a watcher with platform collaborators and shutdown handling.

    Args:
        config: Watcher configuration
        install_signal_handlers: Hook SIGINT/SIGTERM for graceful shutdown

    Returns:
        Configured watcher
    """
    signal_handler = SignalHandler() if install_signal_handlers else None
    return AppSwitchWatcher(config, signal_handler=signal_handler)
