from __future__ import annotations

from dataclasses import dataclass

from notifyd.adapters.dev_sinks import (
    InMemoryHistory,
    LoggingDisplay,
    NullIconTheme,
    RecordingSignals,
)
from notifyd.adapters.timer_expiry import ThreadingExpiryScheduler
from notifyd.components.images import IconThemePort
from notifyd.components.ingest import NotificationService
from notifyd.components.registry import NotificationRegistry
from notifyd.rules.models import NotificationRules


@dataclass
class ServiceContext:
    rules: NotificationRules
    service: NotificationService
    registry: NotificationRegistry
    display: LoggingDisplay
    history: InMemoryHistory
    signals: RecordingSignals
    icons: IconThemePort
    expiry: ThreadingExpiryScheduler | None = None

    @classmethod
    def create(
        cls,
        rules: NotificationRules,
        *,
        icons: IconThemePort | None = None,
        with_timers: bool = False,
    ) -> ServiceContext:
        # Adapters
        display = LoggingDisplay()
        history = InMemoryHistory()
        signals = RecordingSignals()
        expiry = ThreadingExpiryScheduler() if with_timers else None
        icon_theme = icons if icons is not None else NullIconTheme()

        registry = NotificationRegistry(
            display=display,
            history=history,
            signals=signals,
            expiry=expiry,
        )
        service = NotificationService(rules=rules, registry=registry, icons=icon_theme)

        return cls(
            rules=rules,
            service=service,
            registry=registry,
            display=display,
            history=history,
            signals=signals,
            icons=icon_theme,
            expiry=expiry,
        )

    def shutdown(self) -> None:
        if self.expiry is not None:
            self.expiry.shutdown()
