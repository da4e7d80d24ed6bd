"""
Ingest component - Notify, CloseNotification and action entry points.

Shell Layer - the single transport boundary. Results from
NotificationService, which delegates lifecycle changes to the
NotificationRegistry, are converted into output models.
"""

from __future__ import annotations

from notifyd.domain.entities import CloseReason

from ._impl import NotificationService
from .models import (
    CloseNotificationInput,
    CloseNotificationOutput,
    InvokeActionInput,
    InvokeActionOutput,
    NotifyInput,
    NotifyOutput,
)


def run_notify(input_data: NotifyInput, service: NotificationService) -> NotifyOutput:
    """Create or replace a notification."""
    notification_id, notification, warnings, errors = service.notify(input_data.request)

    return NotifyOutput(
        notification_id=notification_id,
        notification=notification,
        warnings=tuple(warnings),
        errors=tuple(errors),
        success=not errors,
        suppressed=not errors and notification is None,
    )


def run_close(
    input_data: CloseNotificationInput, service: NotificationService
) -> CloseNotificationOutput:
    """Close a notification. Unknown ids succeed without effect."""
    reason = CloseReason.coerce(input_data.reason)
    closed = service.close(input_data.notification_id, reason)
    return CloseNotificationOutput(closed=closed, reason=int(reason), success=True)


def run_invoke_action(
    input_data: InvokeActionInput, service: NotificationService
) -> InvokeActionOutput:
    """Deliver a user-activated action to the sender."""
    invoked = service.invoke_action(
        input_data.notification_id,
        input_data.action_id,
        activation_token=input_data.activation_token,
    )
    return InvokeActionOutput(invoked=invoked, success=True)
