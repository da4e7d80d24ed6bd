"""
Dev collaborator adapters.

In-memory and logging implementations of the registry and image ports,
used by the CLI and by tests.

Key behaviors:
- LoggingDisplay logs show/remove and keeps what is on screen
- InMemoryHistory stores every persisted record in order
- RecordingSignals stores every emitted signal for assertions
- NullIconTheme never resolves; MappingIconTheme resolves from a dict
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from notifyd.domain.entities import CloseReason, ValidatedNotification

logger = logging.getLogger(__name__)


@dataclass
class LoggingDisplay:
    """DisplayPort that logs instead of rendering."""

    shown: dict[int, ValidatedNotification] = field(default_factory=dict)
    events: list[tuple[str, int]] = field(default_factory=list)
    log_level: int = logging.INFO
    summary_preview_length: int = 60

    def show(self, notification: ValidatedNotification, *, replaced: bool) -> None:
        self.shown[notification.id] = notification
        self.events.append(("replace" if replaced else "show", notification.id))
        logger.log(
            self.log_level,
            "[DISPLAY] %s #%d %s: %s",
            "update" if replaced else ("show" if notification.popup else "hold"),
            notification.id,
            notification.app_name[:40],
            notification.summary[: self.summary_preview_length],
        )

    def remove(self, notification_id: int) -> None:
        self.shown.pop(notification_id, None)
        self.events.append(("remove", notification_id))
        logger.log(self.log_level, "[DISPLAY] remove #%d", notification_id)


@dataclass
class InMemoryHistory:
    """HistoryPort keeping records in memory."""

    records: list[ValidatedNotification] = field(default_factory=list)

    def record(self, notification: ValidatedNotification) -> None:
        self.records.append(notification)

    def ids(self) -> list[int]:
        return [record.id for record in self.records]


@dataclass(frozen=True)
class SignalEvent:
    """One emitted signal."""

    name: str
    notification_id: int
    value: str | int


@dataclass
class RecordingSignals:
    """SignalPort that records emitted signals."""

    events: list[SignalEvent] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _emit(self, name: str, notification_id: int, value: str | int) -> None:
        with self._lock:
            self.events.append(SignalEvent(name, notification_id, value))
        logger.debug("[SIGNAL] %s(%d, %r)", name, notification_id, value)

    def action_invoked(self, notification_id: int, action_id: str) -> None:
        self._emit("ActionInvoked", notification_id, action_id)

    def activation_token(self, notification_id: int, token: str) -> None:
        self._emit("ActivationToken", notification_id, token)

    def notification_closed(self, notification_id: int, reason: CloseReason) -> None:
        self._emit("NotificationClosed", notification_id, int(reason))

    def closed(self) -> list[tuple[int, int]]:
        """(id, reason) pairs of NotificationClosed signals."""
        with self._lock:
            return [
                (e.notification_id, int(e.value))
                for e in self.events
                if e.name == "NotificationClosed"
            ]


class NullIconTheme:
    """IconThemePort that resolves nothing."""

    def resolve(self, name: str) -> Path | None:
        return None


@dataclass
class MappingIconTheme:
    """IconThemePort backed by a name -> path mapping."""

    icons: dict[str, Path] = field(default_factory=dict)

    def resolve(self, name: str) -> Path | None:
        return self.icons.get(name)
