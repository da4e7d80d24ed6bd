"""
Ingest component - The ordered notification pipeline and its service.
"""

from ._impl import NotificationService, compute_expire_timeout, prepare_notification
from .component import run_close, run_invoke_action, run_notify
from .models import (
    CloseNotificationInput,
    CloseNotificationOutput,
    IngestError,
    InvokeActionInput,
    InvokeActionOutput,
    NotifyInput,
    NotifyOutput,
    PreparedNotification,
)

__all__ = [
    # Entry points
    "run_close",
    "run_invoke_action",
    "run_notify",
    # Service
    "NotificationService",
    # Input models
    "CloseNotificationInput",
    "InvokeActionInput",
    "NotifyInput",
    # Output models
    "CloseNotificationOutput",
    "IngestError",
    "InvokeActionOutput",
    "NotifyOutput",
    "PreparedNotification",
    # Functions
    "compute_expire_timeout",
    "prepare_notification",
]
