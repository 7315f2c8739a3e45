"""Active window samplers.

Each sampler reports the currently focused window as a :class:`RawSample`,
or ``None`` when nothing can be determined. Samplers never raise; every
platform call is bounded by a short timeout.
"""

from __future__ import annotations

import ctypes
import subprocess
from typing import Optional, Protocol, Tuple

import psutil
from loguru import logger

from ..core.events import RawSample

_MACOS_FRONT_WINDOW_SCRIPT = """
tell application "System Events"
    set frontProc to first application process whose frontmost is true
    set procName to name of frontProc
    set procId to unix id of frontProc
    set winTitle to ""
    try
        set winTitle to name of front window of frontProc
    end try
end tell
return procName & linefeed & procId & linefeed & winTitle
"""


class SampleProvider(Protocol):
    """Protocol for active window samplers."""

    def sample(self) -> Optional[RawSample]:
        """Return the focused window or ``None``."""
        ...


def process_owner(pid: Optional[int]) -> Tuple[Optional[str], Optional[str]]:
    """Get the process name and executable path for ``pid``."""
    if not pid:
        return None, None

    try:
        process = psutil.Process(pid)
        name = process.name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None, None

    try:
        path = process.exe() or None
    except (psutil.AccessDenied, psutil.ZombieProcess, psutil.NoSuchProcess):
        path = None

    return name, path


def _run(args: list[str], timeout: float) -> Optional[str]:
    """Run a command and return its stripped stdout, or ``None`` on failure."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip()


class XdotoolSampleProvider:
    """Samples the focused X11 window with ``xdotool``."""

    def __init__(self, timeout: float = 1.0):
        self.timeout = timeout

    def sample(self) -> Optional[RawSample]:
        try:
            win_id = _run(["xdotool", "getactivewindow"], self.timeout)
            if not win_id:
                return None

            title = _run(["xdotool", "getwindowname", win_id], self.timeout) or None
            pid_text = _run(["xdotool", "getwindowpid", win_id], self.timeout)
            pid = int(pid_text) if pid_text and pid_text.isdigit() else None
            owner_name, owner_path = process_owner(pid)

            return RawSample(owner_name=owner_name, owner_path=owner_path, title=title, window_id=int(win_id), pid=pid)

        except Exception as e:
            logger.debug(f"xdotool sample failed: {e}")
            return None


class MacOSSampleProvider:
    """Samples the frontmost application with ``osascript``."""

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout

    def sample(self) -> Optional[RawSample]:
        try:
            output = _run(["osascript", "-e", _MACOS_FRONT_WINDOW_SCRIPT], self.timeout)
            if not output:
                return None

            lines = output.split("\n", 2)
            proc_name = lines[0].strip() or None
            pid = int(lines[1]) if len(lines) > 1 and lines[1].strip().isdigit() else None
            title = lines[2].strip() if len(lines) > 2 else ""
            _, owner_path = process_owner(pid)

            return RawSample(owner_name=proc_name, owner_path=owner_path, title=title or None, pid=pid)

        except Exception as e:
            logger.debug(f"osascript sample failed: {e}")
            return None


class WindowsSampleProvider:
    """Samples the foreground window through user32."""

    def sample(self) -> Optional[RawSample]:
        try:
            user32 = ctypes.windll.user32
            hwnd = user32.GetForegroundWindow()
            if not hwnd:
                return None

            title = None
            length = user32.GetWindowTextLengthW(hwnd)
            if length > 0:
                buffer = ctypes.create_unicode_buffer(length + 1)
                user32.GetWindowTextW(hwnd, buffer, length + 1)
                title = buffer.value or None

            pid_value = ctypes.c_ulong()
            user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid_value))
            pid = pid_value.value or None
            owner_name, owner_path = process_owner(pid)

            return RawSample(owner_name=owner_name, owner_path=owner_path, title=title, window_id=int(hwnd), pid=pid)

        except Exception as e:
            logger.debug(f"user32 sample failed: {e}")
            return None


class NullSampleProvider:
    """Sampler for unsupported platforms."""

    def sample(self) -> Optional[RawSample]:
        return None


def create_sample_provider(system: str) -> SampleProvider:
    """Create the active window sampler for a platform.

    Args:
        system: Lower-cased ``platform.system()`` name

    Returns:
        The platform sampler, or a null sampler for unsupported systems
    """
    if system == "linux":
        return XdotoolSampleProvider()
    elif system == "darwin":
        return MacOSSampleProvider()
    elif system == "windows":
        return WindowsSampleProvider()

    logger.warning(f"Unsupported system: {system}, no windows will be sampled")
    return NullSampleProvider()
