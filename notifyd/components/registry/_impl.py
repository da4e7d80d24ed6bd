"""
Notification registry.

Owns the id counter and the set of active notifications. All state
changes happen under one re-entrant lock, so allocation, replacement and
closing are linearizable; collaborator calls are made while holding it so
display, history and signals see events for one id in order.

Key behaviors:
- Ids start at 1, increase by one and wrap from ``max_id`` back to 1,
  skipping ids that are still active
- replaces_id naming an active notification updates it in place; any
  other replaces_id gets a fresh id
- Transient notifications go to the display but never to history
- Closing an unknown id is a no-op; close reasons outside 1..4 become 4
- Each record carries a generation; expiry callbacks from an older
  generation (replaced or closed since) are ignored
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from functools import partial

from notifyd.domain.entities import (
    UINT32_MAX,
    CloseReason,
    NotificationContent,
    ValidatedNotification,
)

from .models import RegistryError
from .ports import DisplayPort, ExpiryPort, HistoryPort, SignalPort

logger = logging.getLogger(__name__)

DEFAULT_ACTION_ID = "default"


@dataclass(frozen=True)
class _Record:
    notification: ValidatedNotification
    generation: int


class NotificationRegistry:
    """Identifier allocation and lifecycle of active notifications."""

    def __init__(
        self,
        *,
        display: DisplayPort,
        history: HistoryPort,
        signals: SignalPort,
        expiry: ExpiryPort | None = None,
        max_id: int = UINT32_MAX,
        last_id: int = 0,
    ) -> None:
        if not 1 <= max_id <= UINT32_MAX:
            raise ValueError(f"max_id must be in 1..{UINT32_MAX}")
        if not 0 <= last_id <= max_id:
            raise ValueError("last_id must be in 0..max_id")

        self._display = display
        self._history = history
        self._signals = signals
        self._expiry = expiry
        self._max_id = max_id
        self._last_id = last_id
        self._generation = 0
        self._active: dict[int, _Record] = {}
        self._lock = threading.RLock()

    # --- Queries ---

    def get(self, notification_id: int) -> ValidatedNotification | None:
        with self._lock:
            record = self._active.get(notification_id)
            return record.notification if record else None

    def active_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._active)

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)

    def __contains__(self, notification_id: object) -> bool:
        with self._lock:
            return notification_id in self._active

    def __iter__(self) -> Iterator[ValidatedNotification]:
        with self._lock:
            records = list(self._active.values())
        return iter(record.notification for record in records)

    # --- Allocation ---

    def _allocate(self) -> int | None:
        """Next free id after the counter, wrapping to 1. Caller holds the lock."""
        attempts = min(len(self._active) + 1, self._max_id)
        candidate = self._last_id
        for _ in range(attempts):
            candidate = candidate + 1 if candidate < self._max_id else 1
            if candidate not in self._active:
                self._last_id = candidate
                return candidate
        return None

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    # --- Lifecycle ---

    def submit(
        self,
        content: NotificationContent,
        replaces_id: int = 0,
    ) -> tuple[ValidatedNotification | None, list[RegistryError]]:
        """
        Register a notification, replacing an active one when asked.

        Args:
            content: Pipeline output for the request.
            replaces_id: Id of the notification to replace; 0 for a new one.

        Returns:
            Tuple of (registered notification or None, errors).
        """
        with self._lock:
            replaced = replaces_id != 0 and replaces_id in self._active
            if replaced:
                notification_id = replaces_id
            else:
                allocated = self._allocate()
                if allocated is None:
                    logger.error("Notification id space exhausted (%d active)", len(self._active))
                    return None, [
                        RegistryError(
                            code="ids_exhausted",
                            message="No free notification id is available",
                        )
                    ]
                notification_id = allocated
                if replaces_id:
                    logger.debug(
                        "replaces_id %d is not active; allocated %d", replaces_id, notification_id
                    )

            notification = ValidatedNotification.from_content(notification_id, content)
            generation = self._next_generation()
            self._active[notification_id] = _Record(notification, generation)

            if self._expiry is not None:
                if replaced:
                    self._expiry.cancel(notification_id)
                if notification.expire_timeout > 0:
                    self._expiry.schedule(
                        notification_id,
                        notification.expire_timeout,
                        partial(self._expire, notification_id, generation),
                    )

            self._display.show(notification, replaced=replaced)
            if not notification.transient:
                self._history.record(notification)

            logger.info(
                "%s notification %d from %r",
                "Replaced" if replaced else "Registered",
                notification_id,
                notification.app_name[:64],
            )
            return notification, []

    def suppress(self, replaces_id: int = 0) -> tuple[int | None, list[RegistryError]]:
        """
        Account for a notification that will not be shown.

        The caller still gets an id and a NotificationClosed(id, 4) signal.
        An active notification named by ``replaces_id`` is closed instead.
        """
        with self._lock:
            if replaces_id != 0 and replaces_id in self._active:
                self.close(replaces_id, CloseReason.UNDEFINED)
                return replaces_id, []

            notification_id = self._allocate()
            if notification_id is None:
                return None, [
                    RegistryError(code="ids_exhausted", message="No free notification id is available")
                ]
            self._signals.notification_closed(notification_id, CloseReason.UNDEFINED)
            return notification_id, []

    def close(self, notification_id: int, reason: object = CloseReason.CLOSED) -> bool:
        """
        Close an active notification.

        ``reason`` is validated; anything outside 1..4 becomes UNDEFINED.
        Closing an unknown id changes nothing and returns False.
        """
        close_reason = CloseReason.coerce(reason)
        with self._lock:
            record = self._active.pop(notification_id, None)
            if record is None:
                return False
            if self._expiry is not None:
                self._expiry.cancel(notification_id)
            self._display.remove(notification_id)
            self._signals.notification_closed(notification_id, close_reason)
            logger.debug("Closed notification %d (%s)", notification_id, close_reason.name)
            return True

    def dismiss(self, notification_id: int) -> bool:
        """User dismissed the notification."""
        return self.close(notification_id, CloseReason.DISMISSED)

    def _expire(self, notification_id: int, generation: int) -> None:
        with self._lock:
            record = self._active.get(notification_id)
            if record is None or record.generation != generation:
                return
            self.close(notification_id, CloseReason.EXPIRED)

    def invoke_action(
        self,
        notification_id: int,
        action_id: str,
        activation_token: str | None = None,
    ) -> bool:
        """
        Deliver a user action to the sending application.

        Emits ActivationToken (when a token is given) then ActionInvoked,
        and closes the notification unless it is resident.
        """
        with self._lock:
            record = self._active.get(notification_id)
            if record is None:
                return False
            notification = record.notification
            known = action_id == DEFAULT_ACTION_ID or any(
                action.id == action_id for action in notification.actions
            )
            if not known:
                logger.debug("Ignored unknown action %r on %d", action_id[:64], notification_id)
                return False

            if activation_token:
                self._signals.activation_token(notification_id, activation_token)
            self._signals.action_invoked(notification_id, action_id)
            if not notification.resident:
                self.close(notification_id, CloseReason.DISMISSED)
            return True
