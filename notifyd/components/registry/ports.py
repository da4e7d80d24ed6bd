"""
Registry component port definitions.

The registry drives four collaborators: the on-screen display, history
persistence, the outbound signal channel and the expiry scheduler.
Implementations must not block and must not call back into the registry
synchronously from another thread while waiting on it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from notifyd.domain.entities import CloseReason, ValidatedNotification


class DisplayPort(Protocol):
    """Renders notifications on screen."""

    def show(self, notification: ValidatedNotification, *, replaced: bool) -> None:
        """Show a new notification, or update one in place when replaced."""
        ...

    def remove(self, notification_id: int) -> None:
        """Take a notification off screen."""
        ...


class HistoryPort(Protocol):
    """Persists non-transient notifications."""

    def record(self, notification: ValidatedNotification) -> None:
        """Persist a notification (at creation and at each replacement)."""
        ...


class SignalPort(Protocol):
    """Outbound signals toward the sending applications."""

    def action_invoked(self, notification_id: int, action_id: str) -> None: ...

    def activation_token(self, notification_id: int, token: str) -> None: ...

    def notification_closed(self, notification_id: int, reason: CloseReason) -> None: ...


class ExpiryPort(Protocol):
    """Schedules expiration callbacks."""

    def schedule(self, notification_id: int, timeout_ms: int, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``timeout_ms``, replacing any pending timer for the id."""
        ...

    def cancel(self, notification_id: int) -> None:
        """Cancel the pending timer for the id, if any."""
        ...
