"""Wire models package."""

from .event_models import AppSwitchEvent, EventSource, FocusedWindow, SwitchContext, WindowRef

__all__ = [
    "AppSwitchEvent",
    "EventSource",
    "FocusedWindow",
    "SwitchContext",
    "WindowRef",
]
