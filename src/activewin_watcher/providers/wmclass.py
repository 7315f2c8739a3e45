"""WM-class resolvers.

A WM-class resolver asks the window manager for a window's class string.
Lookups are best-effort: every failure (bad id, missing utility, timeout)
answers ``None``.
"""

from __future__ import annotations

import re
import subprocess
from typing import Optional, Protocol

from loguru import logger

_WM_CLASS_LINE = re.compile(r"WM_CLASS\([^)]+\)\s*=\s*(.+)")


class WmClassResolver(Protocol):
    """Protocol for best-effort WM-class lookups."""

    def resolve(self, window_id: int) -> Optional[str]:
        """Return the window class for ``window_id`` or ``None``."""
        ...


class NullWmClassResolver:
    """Resolver for platforms without a WM-class concept."""

    def resolve(self, window_id: int) -> Optional[str]:
        return None


def parse_wm_class(output: str) -> Optional[str]:
    """Extract the class from ``xprop WM_CLASS`` output.

    ``WM_CLASS(STRING) = "instance", "Class"`` yields ``Class``.
    """
    match = _WM_CLASS_LINE.search(output)
    if not match:
        return None

    entries = [entry.strip().strip('"') for entry in match.group(1).split(",")]
    return entries[-1] or entries[0] or None


class XpropWmClassResolver:
    """Looks up WM_CLASS on X11 / XWayland using ``xprop``."""

    def __init__(self, timeout: float = 1.0):
        self.timeout = timeout

    def resolve(self, window_id: int) -> Optional[str]:
        try:
            id_num = int(window_id)
            if id_num <= 0:
                return None

            result = subprocess.run(["xprop", "-id", hex(id_num), "WM_CLASS"], capture_output=True, text=True, timeout=self.timeout)
            if result.returncode != 0:
                return None

            return parse_wm_class(result.stdout.strip())

        except Exception as e:
            logger.debug(f"WM_CLASS lookup failed for window {window_id}: {e}")
            return None


def create_wmclass_resolver(system: str, timeout: float = 1.0) -> WmClassResolver:
    """Create the WM-class resolver for a platform.

    Args:
        system: Lower-cased ``platform.system()`` name
        timeout: Lookup timeout in seconds

    Returns:
        An xprop resolver on Linux, a null resolver elsewhere
    """
    if system == "linux":
        return XpropWmClassResolver(timeout=timeout)
    return NullWmClassResolver()
