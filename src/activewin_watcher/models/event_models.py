"""Pydantic models for the app-switch wire envelope."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for envelope parts, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class WindowRef(WireModel):
    """Previously observed window."""

    app: str = Field(..., min_length=1, description="Canonical app label")
    title: Optional[str] = Field(None, description="Window title")


class FocusedWindow(WireModel):
    """Window that currently holds focus."""

    id: str = Field(..., min_length=1, description="Locally distinguishing id, '<app>-<timestamp>'")
    app: str = Field(..., min_length=1, description="Canonical app label")
    title: Optional[str] = Field(None, description="Window title")
    pid: Optional[int] = Field(None, description="Owner process id")


class SwitchContext(WireModel):
    """How the switch was detected."""

    reason: str = Field(..., min_length=1, description="Detector tag")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="Detection confidence")
    heuristic: Optional[str] = Field(None, description="Normalization heuristic that produced the app label")


class EventSource(WireModel):
    """Which watcher on which host produced the event."""

    watcher_id: str = Field(..., min_length=1, description="Watcher identifier")
    host_id: str = Field(..., min_length=1, description="Host name")


class AppSwitchEvent(WireModel):
    """Application switch event posted to the collector."""

    event: Literal["appSwitch"] = "appSwitch"
    timestamp: int = Field(..., ge=0, description="Epoch milliseconds")
    prev: Optional[WindowRef] = None
    next: FocusedWindow
    context: SwitchContext
    source: EventSource

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON body sent to the collector."""
        return self.model_dump(mode="json", by_alias=True)
