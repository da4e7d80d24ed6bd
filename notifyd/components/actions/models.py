"""
Actions component - Data models.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from notifyd.domain.entities import ActionEntry

DEFAULT_ACTION_ID = "default"

# --- Validation Errors ---


@dataclass(frozen=True)
class ActionValidationError:
    """Why the action list (or one pair of it) was discarded."""

    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class ParseActionsInput:
    """Input for parsing the flat (id, label) action list."""

    actions: Sequence[Any]
    action_icons: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class ParseActionsOutput:
    """Output from action parsing."""

    actions: tuple[ActionEntry, ...]
    errors: tuple[ActionValidationError, ...]
    success: bool = True

    @property
    def visible(self) -> tuple[ActionEntry, ...]:
        return tuple(a for a in self.actions if not a.is_default)
