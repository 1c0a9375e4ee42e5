"""
core/activity.py -- In-process request counter and recent activity log.

Backs GET /stats and GET /system-events. One ActivityMonitor lives on the
AppContext; request middleware and route handlers share it across worker
threads, so every mutation happens under a single lock.

The event log is a bounded deque: once it holds max_events entries the oldest
is dropped on each append, which caps memory no matter how long the process
runs. Readers get a copy, never the live deque.

Layer rule: core/ is the kernel -- no imports from api/, auth/, or directory/.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class SystemEvent:
    """One entry in the recent-activity log (e.g. "business_created")."""

    type: str
    message: str
    data: Optional[dict[str, Any]] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ActivityMonitor:
    """Thread-safe request counter, uptime clock, and bounded event log.

    Usage:
        monitor = ActivityMonitor(max_events=100)
        monitor.record_request()
        monitor.log_event("business_created", "Business Coffee Corner added", {...})
        monitor.snapshot()        # {"total_requests": ..., "uptime_seconds": ..., "start_time": ...}
        monitor.recent_events()   # oldest first
    """

    def __init__(self, max_events: int = 100) -> None:
        self._lock = threading.Lock()
        self._request_count = 0
        self._events: deque[SystemEvent] = deque(maxlen=max_events)
        self._started = time.monotonic()
        self.start_time = datetime.now(timezone.utc)

    def record_request(self) -> None:
        with self._lock:
            self._request_count += 1

    def log_event(self, event_type: str, message: str, data: Optional[dict[str, Any]] = None) -> None:
        event = SystemEvent(type=event_type, message=message, data=data)
        with self._lock:
            self._events.append(event)

    def recent_events(self) -> list[SystemEvent]:
        with self._lock:
            return list(self._events)

    def snapshot(self) -> dict[str, Any]:
        """Return request count, uptime and start time as a plain dict."""
        with self._lock:
            count = self._request_count
        return {
            "total_requests": count,
            "uptime_seconds": time.monotonic() - self._started,
            "start_time": self.start_time.isoformat(),
        }
