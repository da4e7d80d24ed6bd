from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from notifyd.adapters.dev_sinks import (
    InMemoryHistory,
    LoggingDisplay,
    MappingIconTheme,
    RecordingSignals,
)
from notifyd.components.ingest import NotificationService
from notifyd.components.registry import NotificationRegistry
from notifyd.domain.entities import NotificationContent
from notifyd.rules.models import NotificationRules


class ManualExpiry:
    """ExpiryPort that fires only when the test says so."""

    def __init__(self) -> None:
        self.pending: dict[int, tuple[int, Callable[[], None]]] = {}
        self.cancelled: list[int] = []

    def schedule(self, notification_id: int, timeout_ms: int, callback: Callable[[], None]) -> None:
        self.pending[notification_id] = (timeout_ms, callback)

    def cancel(self, notification_id: int) -> None:
        self.cancelled.append(notification_id)
        self.pending.pop(notification_id, None)

    def fire(self, notification_id: int) -> None:
        _, callback = self.pending.pop(notification_id)
        callback()


@pytest.fixture
def display() -> LoggingDisplay:
    return LoggingDisplay()


@pytest.fixture
def history() -> InMemoryHistory:
    return InMemoryHistory()


@pytest.fixture
def signals() -> RecordingSignals:
    return RecordingSignals()


@pytest.fixture
def expiry() -> ManualExpiry:
    return ManualExpiry()


@pytest.fixture
def registry(
    display: LoggingDisplay,
    history: InMemoryHistory,
    signals: RecordingSignals,
    expiry: ManualExpiry,
) -> NotificationRegistry:
    return NotificationRegistry(display=display, history=history, signals=signals, expiry=expiry)


@pytest.fixture
def rules() -> NotificationRules:
    return NotificationRules()


@pytest.fixture
def icon_dir(tmp_path: Path) -> Path:
    """A theme directory holding one 64x64 PNG icon."""
    path = tmp_path / "icons"
    path.mkdir()
    Image.new("RGBA", (64, 64), (0, 128, 255, 255)).save(path / "mail-unread.png")
    return path


@pytest.fixture
def icons(icon_dir: Path) -> MappingIconTheme:
    return MappingIconTheme(icons={"mail-unread": icon_dir / "mail-unread.png"})


@pytest.fixture
def service(
    rules: NotificationRules,
    registry: NotificationRegistry,
    icons: MappingIconTheme,
) -> NotificationService:
    return NotificationService(rules=rules, registry=registry, icons=icons)


@pytest.fixture
def make_content() -> Callable[..., NotificationContent]:
    def _make(**overrides: object) -> NotificationContent:
        fields: dict[str, object] = {"app_name": "test-app", "summary": "Hello"}
        fields.update(overrides)
        return NotificationContent(**fields)

    return _make
