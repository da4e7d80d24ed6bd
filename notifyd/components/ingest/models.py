"""
Ingest component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from notifyd.domain.entities import (
    CloseReason,
    NotificationContent,
    NotificationRequest,
    ValidatedNotification,
)

# --- Errors ---


@dataclass(frozen=True)
class IngestError:
    """
    A problem found while processing a request.

    ``stage`` names the pipeline step (hints, body, image, actions,
    registry). Only registry errors fail the request; the rest are
    warnings about fields that fell back to their defaults.
    """

    stage: str
    code: str
    message: str


# --- Pipeline result ---


@dataclass(frozen=True)
class PreparedNotification:
    """Pipeline output for one request, before registration."""

    content: NotificationContent | None
    warnings: tuple[IngestError, ...] = ()
    enabled: bool = True


# --- Input Models ---


@dataclass(frozen=True)
class NotifyInput:
    """A create/replace request from the transport."""

    request: NotificationRequest


@dataclass(frozen=True)
class CloseNotificationInput:
    notification_id: int
    reason: object = CloseReason.CLOSED


@dataclass(frozen=True)
class InvokeActionInput:
    notification_id: int
    action_id: str
    activation_token: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class NotifyOutput:
    """
    Result of a Notify call.

    ``notification`` is None when the request was suppressed by an app
    rule or failed. ``notification_id`` is set whenever ``success`` is.
    """

    notification_id: int | None
    notification: ValidatedNotification | None
    warnings: tuple[IngestError, ...] = ()
    errors: tuple[IngestError, ...] = ()
    success: bool = True
    suppressed: bool = False


@dataclass(frozen=True)
class CloseNotificationOutput:
    closed: bool
    reason: int
    success: bool = True


@dataclass(frozen=True)
class InvokeActionOutput:
    invoked: bool
    success: bool = True
