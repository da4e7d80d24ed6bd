"""
Hints component - Data models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from notifyd.domain.entities import (
    ImageSource,
    Position,
    SoundDirective,
    TypedHint,
    Urgency,
)

# --- Validation Errors ---


@dataclass(frozen=True)
class HintValidationError:
    """A hint that was ignored in favour of its default."""

    code: str
    message: str
    key: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ParseHintsInput:
    """Input for interpreting a request's hint map."""

    hints: Mapping[str, TypedHint]
    app_icon: str = ""


# --- Output Models ---


@dataclass(frozen=True)
class ParsedHints:
    """Typed, defaulted view of the recognized hints."""

    urgency: Urgency = Urgency.NORMAL
    category: str | None = None
    desktop_entry: str | None = None
    transient: bool = False
    resident: bool = False
    action_icons: bool = False
    suppress_sound: bool = False
    sender_pid: int | None = None
    sound: SoundDirective | None = None
    progress: int | None = None
    position: Position | None = None
    image_source: ImageSource | None = None
    extra: Mapping[str, TypedHint] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class ParseHintsOutput:
    """Output from hint parsing."""

    hints: ParsedHints
    errors: tuple[HintValidationError, ...]
    success: bool = True
