"""
Action list parser.

The request carries actions as a flat list ``[id1, label1, id2, label2, ...]``.

Key behaviors:
- Odd length or any non-string element rejects the whole list
- Pairs are read in order; the id "default" is the body-click action and
  is never rendered as a button
- Labels are reduced to plain text
- With the action-icons hint every non-default entry gets show_icon
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from notifyd.components.richtext import strip_html
from notifyd.domain.entities import ActionEntry

from .models import DEFAULT_ACTION_ID, ActionValidationError

logger = logging.getLogger(__name__)


def parse_actions(
    actions: Sequence[Any],
    *,
    action_icons: bool = False,
) -> tuple[tuple[ActionEntry, ...], list[ActionValidationError]]:
    """
    Parse the flat action list into ActionEntry pairs.

    Returns:
        Tuple of (entries, errors). Entries is empty when the list is rejected.
    """
    if isinstance(actions, (str, bytes)) or not isinstance(actions, Sequence):
        return (), [
            ActionValidationError(code="invalid_type", message="Actions must be a list of strings")
        ]
    if len(actions) % 2 != 0:
        logger.info("Rejected action list of odd length %d", len(actions))
        return (), [
            ActionValidationError(
                code="odd_length",
                message=f"Actions must come in (id, label) pairs, got {len(actions)} items",
            )
        ]
    if not all(isinstance(item, str) for item in actions):
        return (), [
            ActionValidationError(code="invalid_type", message="Action ids and labels must be strings")
        ]

    entries: list[ActionEntry] = []
    errors: list[ActionValidationError] = []
    seen: set[str] = set()

    for index in range(0, len(actions), 2):
        action_id, label = actions[index], actions[index + 1]
        if not action_id:
            errors.append(ActionValidationError(code="empty_id", message="Action with empty id skipped"))
            continue
        if action_id in seen:
            errors.append(
                ActionValidationError(code="duplicate_id", message=f"Duplicate action id {action_id!r} skipped")
            )
            continue
        seen.add(action_id)

        is_default = action_id == DEFAULT_ACTION_ID
        entries.append(
            ActionEntry(
                id=action_id,
                label=strip_html(label),
                is_default=is_default,
                show_icon=action_icons and not is_default,
            )
        )

    return tuple(entries), errors


def visible_actions(entries: Sequence[ActionEntry]) -> tuple[ActionEntry, ...]:
    """Entries rendered as buttons, in order."""
    return tuple(entry for entry in entries if not entry.is_default)


def default_action(entries: Sequence[ActionEntry]) -> ActionEntry | None:
    """The body-click action, if any."""
    return next((entry for entry in entries if entry.is_default), None)
