"""Core watcher components: normalization, stability tracking and shutdown."""

from .events import NormalizationReason, NormalizationResult, RawSample
from .normalizer import AppNormalizer, normalize, title_case
from .signal_handler import SignalHandler
from .stability import Observation, StabilityState, StabilityTracker

__all__ = [
    # Samples and results
    "RawSample",
    "NormalizationReason",
    "NormalizationResult",
    # Normalization
    "AppNormalizer",
    "normalize",
    "title_case",
    # Debounce
    "Observation",
    "StabilityState",
    "StabilityTracker",
    # Shutdown
    "SignalHandler",
]
