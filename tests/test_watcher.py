"""Tests for the watcher polling loop."""

from typing import Iterable, List, Optional

import pytest

from activewin_watcher.app import AppSwitchWatcher
from activewin_watcher.config import WatcherConfig
from activewin_watcher.core import RawSample, SignalHandler
from activewin_watcher.models import AppSwitchEvent
from activewin_watcher.providers import NullWmClassResolver

T0 = 1_700_000_000_000

FIREFOX = RawSample(owner_name="firefox", owner_path="/usr/lib/firefox/firefox", title="Docs", window_id=None, pid=4242)
TERMINAL = RawSample(owner_name="gnome-terminal-server", title="zsh", pid=77)


class FakeSampler:
    """Returns queued samples; exceptions in the queue are raised."""

    def __init__(self, samples: Iterable):
        self.samples = list(samples)

    def sample(self) -> Optional[RawSample]:
        item = self.samples.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeSender:
    """Records events and answers with queued results."""

    def __init__(self, results: Iterable[bool] = ()):
        self.results = list(results)
        self.events: List[AppSwitchEvent] = []

    def emit(self, event: AppSwitchEvent):
        self.events.append(event)
        success = self.results.pop(0) if self.results else True
        return success, "" if success else "status 503: unavailable"

    def get_stats(self):
        return {"total_sent": len(self.events), "total_failed": 0}


class FakeClock:
    def __init__(self, times: Iterable[int]):
        self.times = list(times)

    def __call__(self) -> int:
        return self.times.pop(0)


class StopWatcher(Exception):
    pass


def make_watcher(samples, times, sender=None, **kwargs) -> AppSwitchWatcher:
    config = WatcherConfig(debounce_ms=600, poll_ms=250, host_id="test-host", platform="linux")
    return AppSwitchWatcher(
        config,
        sampler=FakeSampler(samples),
        resolver=NullWmClassResolver(),
        sender=sender or FakeSender(),
        clock=FakeClock(times),
        **kwargs,
    )


def test_stable_focus_posts_after_debounce():
    """Test a stable window is posted once the debounce window elapses."""
    sender = FakeSender()
    watcher = make_watcher([FIREFOX] * 3, [T0, T0 + 300, T0 + 600], sender=sender)

    assert watcher.tick() is False, "First sample is only a candidate"
    assert watcher.tick() is False, "Debounce not elapsed"
    assert watcher.tick() is True, "Third sample should be posted"

    assert len(sender.events) == 1
    body = sender.events[0].to_dict()
    assert body["event"] == "appSwitch"
    assert body["timestamp"] == T0 + 600
    assert body["prev"] == {"app": "Firefox", "title": "Docs"}
    assert body["next"] == {"id": f"Firefox-{T0 + 600}", "app": "Firefox", "title": "Docs", "pid": 4242}
    assert body["context"] == {"reason": "active-win-improved", "confidence": 1.0, "heuristic": "owner-map"}
    assert body["source"] == {"watcherId": "activewin-watcher-improved", "hostId": "test-host"}
    assert watcher.tracker.state.last_sent_at == T0 + 600


def test_switch_does_not_post():
    """Test switching apps records a candidate without posting."""
    sender = FakeSender()
    watcher = make_watcher([FIREFOX, FIREFOX, TERMINAL], [T0, T0 + 700, T0 + 1400], sender=sender)

    watcher.tick()
    assert watcher.tick() is True
    assert watcher.tick() is False, "Switch tick must not post"

    assert len(sender.events) == 1
    assert watcher.tracker.state.last_app == "Terminal"
    assert watcher.tracker.state.last_seen_at == T0 + 1400


def test_missing_sample_leaves_state_untouched():
    """Test an unavailable sample skips the tick."""
    watcher = make_watcher([FIREFOX, None], [T0])

    watcher.tick()
    state_before = (watcher.tracker.state.last_app, watcher.tracker.state.last_seen_at)
    assert watcher.tick() is False
    assert (watcher.tracker.state.last_app, watcher.tracker.state.last_seen_at) == state_before


def test_failed_post_keeps_last_sent_at():
    """Test a transport failure drops the event and retries on the next eligible tick."""
    sender = FakeSender(results=[False, True])
    watcher = make_watcher([TERMINAL] * 3, [T0, T0 + 600, T0 + 850], sender=sender)

    watcher.tick()
    assert watcher.tick() is False, "Failed post reports failure"
    assert watcher.tracker.state.last_sent_at == 0, "Failure must not update last_sent_at"

    assert watcher.tick() is True, "Next eligible tick posts again"
    assert len(sender.events) == 2
    assert watcher.tracker.state.last_sent_at == T0 + 850


def test_tick_errors_are_contained():
    """Test an exception inside a tick is logged, not raised."""
    watcher = make_watcher([RuntimeError("sampler exploded")], [])
    assert watcher.tick() is False


def test_run_continues_after_errors():
    """Test the loop keeps polling after a failing tick and sleeps between ticks."""
    sleeps: List[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) == 3:
            raise StopWatcher()

    watcher = make_watcher([RuntimeError("boom"), FIREFOX, FIREFOX], [T0, T0 + 100], sleep=fake_sleep)

    with pytest.raises(StopWatcher):
        watcher.run()

    assert sleeps == [0.25, 0.25, 0.25], "Loop should sleep the poll interval after every tick"
    assert watcher.tracker.state.last_app == "Firefox"


def test_shutdown_registered_with_signal_handler():
    """Test the watcher registers its shutdown with the signal handler."""
    handler = SignalHandler(install=False)
    watcher = make_watcher([], [], signal_handler=handler)

    assert handler._cleanup_fns == [watcher.shutdown]
    watcher.shutdown()


def test_separator_only_title_is_posted():
    """Test a window whose title is only separators still posts with a derived label."""
    sender = FakeSender()
    untitled = RawSample(title="-")
    watcher = make_watcher([untitled] * 3, [T0, T0 + 600, T0 + 1200], sender=sender)

    results = [watcher.tick() for _ in range(3)]

    assert results == [False, True, True], f"Unexpected tick results: {results}"
    assert len(sender.events) == 2
    body = sender.events[0].to_dict()
    assert body["next"]["app"] == "Unknown"
    assert body["next"]["title"] == "-"
    assert body["context"]["heuristic"] == "fallback"


def test_first_observation_has_no_prev():
    """Test the envelope omits prev while the tracker has no stored observation."""
    watcher = make_watcher([], [])
    event = watcher.build_event(watcher.normalizer.normalize_sample(TERMINAL), TERMINAL, T0, None)
    assert event.to_dict()["prev"] is None
