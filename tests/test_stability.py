"""Tests for the stability / debounce tracker."""

from loguru import logger

from activewin_watcher.core.stability import Observation, StabilityState, StabilityTracker

DEBOUNCE_MS = 600
T0 = 1_700_000_000_000


def test_empty_state():
    """Test a fresh tracker starts without observations."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    assert tracker.state.is_empty
    assert tracker.state.last_seen_at == 0
    assert tracker.state.last_sent_at == 0


def test_first_observation_is_candidate():
    """Test the first observation is only recorded."""
    tracker = StabilityTracker(DEBOUNCE_MS)

    assert tracker.observe("Firefox", "Docs", T0) == Observation.CANDIDATE
    assert tracker.state == StabilityState(last_app="Firefox", last_title="Docs", last_seen_at=T0, last_sent_at=0)


def test_no_emission_before_debounce():
    """Test a stable pair is not eligible before the debounce window elapses."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    tracker.observe("Firefox", "Docs", T0)

    for offset in (100, 300, 599):
        assert tracker.observe("Firefox", "Docs", T0 + offset) == Observation.PENDING, f"Should not emit after {offset} ms"
    assert tracker.state.last_seen_at == T0, "Matching observations must not refresh last_seen_at"


def test_emits_once_debounce_elapsed():
    """Test the first eligible tick and periodic re-emission."""
    logger.info("Testing periodic re-emission...")
    tracker = StabilityTracker(DEBOUNCE_MS)
    tracker.observe("Terminal", "zsh", T0)

    assert tracker.observe("Terminal", "zsh", T0 + 600) == Observation.ELIGIBLE
    tracker.mark_sent(T0 + 600)
    assert tracker.state.last_sent_at == T0 + 600

    assert tracker.observe("Terminal", "zsh", T0 + 900) == Observation.PENDING, "Too soon after the last emission"
    assert tracker.observe("Terminal", "zsh", T0 + 1200) == Observation.ELIGIBLE, "Stable focus re-emits every debounce interval"
    tracker.mark_sent(T0 + 1200)
    assert tracker.observe("Terminal", "zsh", T0 + 1500) == Observation.PENDING


def test_switch_never_emits_on_switch_tick():
    """Test a changed pair only replaces the candidate."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    tracker.observe("Terminal", "zsh", T0)
    assert tracker.observe("Terminal", "zsh", T0 + 5000) == Observation.ELIGIBLE
    tracker.mark_sent(T0 + 5000)

    assert tracker.observe("Firefox", "Docs", T0 + 10000) == Observation.CANDIDATE
    assert tracker.state.last_app == "Firefox"
    assert tracker.state.last_title == "Docs"
    assert tracker.state.last_seen_at == T0 + 10000
    assert tracker.state.last_sent_at == T0 + 5000, "Switching must not touch last_sent_at"

    assert tracker.observe("Firefox", "Docs", T0 + 10600) == Observation.ELIGIBLE


def test_title_change_is_a_switch():
    """Test the same app with another title is a new candidate."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    tracker.observe("Firefox", "Docs", T0)

    assert tracker.observe("Firefox", "Mail", T0 + 700) == Observation.CANDIDATE
    assert tracker.observe("Firefox", "Mail", T0 + 1000) == Observation.PENDING


def test_missing_title_matches_missing_title():
    """Test observations without a title still stabilize."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    assert tracker.observe("Settings", None, T0) == Observation.CANDIDATE
    assert tracker.observe("Settings", None, T0 + 600) == Observation.ELIGIBLE


def test_failed_emission_retries_next_tick():
    """Test that without mark_sent the next matching tick is eligible again."""
    tracker = StabilityTracker(DEBOUNCE_MS)
    tracker.observe("Files", "Home", T0)

    assert tracker.observe("Files", "Home", T0 + 600) == Observation.ELIGIBLE
    # Emission failed: last_sent_at unchanged
    assert tracker.state.last_sent_at == 0
    assert tracker.observe("Files", "Home", T0 + 700) == Observation.ELIGIBLE
