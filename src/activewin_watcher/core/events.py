"""Sample and normalization models for the watcher.

Data flows through the watcher as:
Sample Provider → Normalizer → Stability Tracker → Sender
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class NormalizationReason(str, Enum):
    """Which heuristic produced a canonical app label."""

    OWNER_MAP = "owner-map"
    OWNER_TITLECASE = "owner-titlecase"
    OWNER_PATH = "ownerpath"
    OWNER_PATH_FALLBACK = "ownerpath-fallback"
    XPROP_WMCLASS = "xprop-wmclass"
    TITLE_CONTAINS = "title-contains"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RawSample:
    """One focus sample as reported by the platform."""

    owner_name: Optional[str] = None
    owner_path: Optional[str] = None
    title: Optional[str] = None
    window_id: Optional[int] = None
    pid: Optional[int] = None

    def owner_dict(self) -> Dict[str, Any]:
        """Owner details for diagnostics."""
        return {"name": self.owner_name, "path": self.owner_path, "processId": self.pid}


@dataclass(frozen=True)
class NormalizationResult:
    """Canonical app label and the heuristic that produced it."""

    app: str
    reason: NormalizationReason
