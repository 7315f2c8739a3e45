"""HTTP sender for posting app-switch events to the collector.

Each event is sent once with a bounded timeout. There is no retry, backoff
or queue: a failed event is dropped and the caller moves on to the next
poll tick.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from loguru import logger

from ..models import AppSwitchEvent


@dataclass
class SenderConfig:
    """Configuration for the HTTP sender."""

    endpoint_url: str = "http://localhost:3000/app-switch"
    timeout_seconds: float = 5.0  # Request timeout
    user_agent: str = "activewin-watcher"


class HTTPSender:
    """HTTP sender for app-switch events."""

    def __init__(self, config: Optional[SenderConfig] = None):
        """Initialize the HTTP sender.

        Args:
            config: Sender configuration
        """
        self.config = config or SenderConfig()

        # Statistics
        self._total_sent = 0
        self._total_failed = 0
        self._total_send_time = 0.0
        self._last_successful_send: Optional[datetime] = None
        self._last_error: Optional[str] = None

    def emit(self, event: AppSwitchEvent) -> Tuple[bool, str]:
        """Post one event to the collector.

        Args:
            event: Event to send

        Returns:
            Tuple of (success, error_message)
        """
        start_time = time.time()

        try:
            success, error_msg = self._send_request(event.to_dict())
        except Exception as e:
            success, error_msg = False, f"Unexpected error sending event: {e}"

        self._total_send_time += time.time() - start_time

        if success:
            self._total_sent += 1
            self._last_successful_send = datetime.now()
            self._last_error = None
        else:
            self._total_failed += 1
            self._last_error = error_msg

        return success, error_msg

    def get_stats(self) -> Dict[str, Any]:
        """Get sender statistics.

        Returns:
            Dictionary with sender statistics
        """
        attempts = self._total_sent + self._total_failed

        return {
            "total_sent": self._total_sent,
            "total_failed": self._total_failed,
            "success_rate": self._total_sent / max(1, attempts),
            "average_send_time_seconds": self._total_send_time / max(1, attempts),
            "last_successful_send": self._last_successful_send.isoformat() if self._last_successful_send else None,
            "last_error": self._last_error,
        }

    def _send_request(self, payload: Dict[str, Any]) -> Tuple[bool, str]:
        """Send a single HTTP request.

        Args:
            payload: JSON payload to send

        Returns:
            Tuple of (success, error_message)
        """
        body = json.dumps(payload).encode("utf-8")
        req = Request(
            self.config.endpoint_url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Content-Length": str(len(body)),
                "User-Agent": self.config.user_agent,
            },
        )

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                if 200 <= response.status < 300:
                    logger.debug(f"Successful response: {response.status}")
                    return True, ""

                raw = response.read().decode("utf-8", errors="replace")
                return False, f"status {response.status}: {raw}"

        except HTTPError as e:
            return False, f"HTTP error: {e.code} {e.reason}"

        except URLError as e:
            return False, f"Network error: {e.reason}"

        except TimeoutError:
            return False, f"Request timed out after {self.config.timeout_seconds}s"


def create_default_sender(endpoint_url: str, timeout_seconds: float = 5.0) -> HTTPSender:
    """Create an HTTP sender for a collector endpoint.

    Args:
        endpoint_url: Full URL of the collector endpoint
        timeout_seconds: Request timeout

    Returns:
        Configured HTTP sender
    """
    return HTTPSender(SenderConfig(endpoint_url=endpoint_url, timeout_seconds=timeout_seconds))
