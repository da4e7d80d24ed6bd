"""
Thread-timer expiry scheduler.

Implements ExpiryPort with one ``threading.Timer`` per notification id.
The scheduler lock only guards the timer table; callbacks run without
it so they can call back into the registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ThreadingExpiryScheduler:
    def __init__(self) -> None:
        self._timers: dict[int, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule(self, notification_id: int, timeout_ms: int, callback: Callable[[], None]) -> None:
        timer = threading.Timer(timeout_ms / 1000.0, self._fire, args=(notification_id, callback))
        timer.daemon = True
        with self._lock:
            previous = self._timers.pop(notification_id, None)
            self._timers[notification_id] = timer
        if previous is not None:
            previous.cancel()
        timer.start()

    def _fire(self, notification_id: int, callback: Callable[[], None]) -> None:
        current = threading.current_thread()
        with self._lock:
            if self._timers.get(notification_id) is current:
                del self._timers[notification_id]
        try:
            callback()
        except Exception:
            logger.exception("Expiry callback failed for notification %d", notification_id)

    def cancel(self, notification_id: int) -> None:
        with self._lock:
            timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()

    def pending(self) -> list[int]:
        with self._lock:
            return sorted(self._timers)

    def shutdown(self) -> None:
        """Cancel every pending timer."""
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
