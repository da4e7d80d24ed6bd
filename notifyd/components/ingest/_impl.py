"""
Notification ingestion pipeline.

Runs every request through the same ordered, side-effect-free stages and
hands the result to the registry:

    hints -> app rule -> body (decode, sanitize, links) -> summary/app name
    -> image -> actions -> urgency/sound/timeout policy -> registry

Key behaviors:
- Stages are pure and may run concurrently across requests; only the
  registry call at the end touches shared state
- Malformed fields degrade to defaults and are reported as warnings
- A disabled application still gets an id, but its notification is
  neither shown nor stored
- Only id exhaustion fails a request
"""

from __future__ import annotations

import logging
from dataclasses import replace

from notifyd.components.actions import parse_actions
from notifyd.components.hints import parse_hints
from notifyd.components.images import IconThemePort, decode_image
from notifyd.components.registry import NotificationRegistry
from notifyd.components.richtext import (
    DEFAULT_CONFIG,
    RichTextConfig,
    sanitize_body,
    strip_html,
)
from notifyd.domain.entities import (
    CloseReason,
    NotificationContent,
    NotificationRequest,
    Urgency,
    ValidatedNotification,
)
from notifyd.rules.models import AppRule, NotificationRules

from .models import IngestError, PreparedNotification

logger = logging.getLogger(__name__)


def compute_expire_timeout(
    requested: int,
    urgency: Urgency,
    *,
    resident: bool,
    rules: NotificationRules,
    app_rule: AppRule | None = None,
) -> int:
    """
    Effective expiry in milliseconds; 0 means the notification never expires.

    Resident notifications never expire. An app timeout override wins over
    the request. A positive request is capped by the per-urgency maximum;
    a negative one ("server default") uses that maximum.
    """
    if resident:
        return 0
    if app_rule is not None and app_rule.timeout_override is not None:
        return app_rule.timeout_override
    if requested == 0:
        return 0
    cap = rules.max_timeout_for(urgency)
    if requested > 0:
        return min(requested, cap) if cap is not None else requested
    return cap if cap is not None else 0


def _warnings(stage: str, errors: list) -> list[IngestError]:
    return [IngestError(stage=stage, code=e.code, message=e.message) for e in errors]


def prepare_notification(
    request: NotificationRequest,
    rules: NotificationRules,
    *,
    icons: IconThemePort | None = None,
    richtext: RichTextConfig = DEFAULT_CONFIG,
) -> PreparedNotification:
    """
    Run the pipeline stages for one request.

    Args:
        request: Immutable request snapshot.
        rules: Active configuration.
        icons: Icon theme for icon-name images.
        richtext: Sanitizer configuration; ``enable_links`` comes from rules.

    Returns:
        PreparedNotification. ``content`` is None when the app is disabled.
    """
    warnings: list[IngestError] = []

    hints, hint_errors = parse_hints(request.hints, app_icon=request.app_icon)
    warnings.extend(_warnings("hints", hint_errors))

    app_name = strip_html(request.app_name)
    app_rule = rules.find_app_rule(app_name, hints.desktop_entry)
    if app_rule is not None and not app_rule.enabled:
        logger.info("Suppressed notification from disabled app %r", app_name[:64])
        return PreparedNotification(content=None, warnings=tuple(warnings), enabled=False)

    if richtext.enable_links != rules.enable_links:
        richtext = replace(richtext, enable_links=rules.enable_links)
    body, body_errors = sanitize_body(request.body, richtext)
    warnings.extend(_warnings("body", body_errors))

    image = None
    if rules.show_images and hints.image_source is not None:
        image, image_errors = decode_image(
            hints.image_source,
            rules.effective_max_image_size,
            enable_animations=rules.enable_animations,
            icons=icons,
        )
        warnings.extend(_warnings("image", image_errors))

    actions = ()
    if rules.show_actions:
        actions, action_errors = parse_actions(request.actions, action_icons=hints.action_icons)
        warnings.extend(_warnings("actions", action_errors))

    urgency = hints.urgency
    if app_rule is not None and app_rule.urgency_override is not None:
        urgency = app_rule.urgency_override

    sound = hints.sound
    if app_rule is not None and not app_rule.sound_enabled:
        sound = None

    content = NotificationContent(
        app_name=app_name,
        app_icon=request.app_icon.strip(),
        summary=strip_html(request.summary),
        body=body,
        urgency=urgency,
        category=hints.category,
        desktop_entry=hints.desktop_entry,
        transient=hints.transient,
        resident=hints.resident,
        sender_pid=hints.sender_pid,
        sound=sound,
        progress=hints.progress,
        position=hints.position,
        image=image,
        actions=actions,
        popup=rules.allows_popup(urgency),
        expire_timeout=compute_expire_timeout(
            request.expire_timeout,
            urgency,
            resident=hints.resident,
            rules=rules,
            app_rule=app_rule,
        ),
        hints=dict(hints.extra),
    )
    return PreparedNotification(content=content, warnings=tuple(warnings), enabled=True)


class NotificationService:
    """Entry point for the transport: Notify, CloseNotification and actions."""

    def __init__(
        self,
        *,
        rules: NotificationRules,
        registry: NotificationRegistry,
        icons: IconThemePort | None = None,
    ) -> None:
        self.rules = rules
        self.registry = registry
        self.icons = icons

    def notify(
        self, request: NotificationRequest
    ) -> tuple[int | None, ValidatedNotification | None, list[IngestError], list[IngestError]]:
        """
        Process a Notify request.

        Returns:
            Tuple of (id, notification, warnings, errors). The notification
            is None when suppressed; id is None only on failure.
        """
        prepared = prepare_notification(request, self.rules, icons=self.icons)
        warnings = list(prepared.warnings)

        if prepared.content is None:
            notification_id, registry_errors = self.registry.suppress(request.replaces_id)
            return notification_id, None, warnings, _warnings("registry", registry_errors)

        notification, registry_errors = self.registry.submit(
            prepared.content, replaces_id=request.replaces_id
        )
        if notification is None:
            return None, None, warnings, _warnings("registry", registry_errors)

        if warnings:
            logger.debug(
                "Notification %d registered with %d warning(s)", notification.id, len(warnings)
            )
        return notification.id, notification, warnings, []

    def close(self, notification_id: int, reason: object = CloseReason.CLOSED) -> bool:
        return self.registry.close(notification_id, reason)

    def invoke_action(
        self, notification_id: int, action_id: str, activation_token: str | None = None
    ) -> bool:
        return self.registry.invoke_action(
            notification_id, action_id, activation_token=activation_token
        )
