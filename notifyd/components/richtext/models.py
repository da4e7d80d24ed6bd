"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from notifyd.domain.entities import SanitizedBody

# --- Validation Error ---


@dataclass(frozen=True)
class RichTextValidationError:
    """Something the sanitizer removed or refused."""

    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class SanitizeBodyInput:
    """Input for sanitizing a raw notification body."""

    body: str
    enable_links: bool = True


@dataclass(frozen=True)
class StripTextInput:
    """Input for reducing a field to plain text."""

    text: str


# --- Output Models ---


@dataclass(frozen=True)
class SanitizeOutput:
    """Output for a sanitized body."""

    body: SanitizedBody
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class StripTextOutput:
    """Output for plain-text reduction."""

    text: str
    success: bool = True


# --- Styled Segments ---


@dataclass(frozen=True)
class TextStyle:
    """Style flags for a text segment."""

    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class StyledSegment:
    """A run of text with one style and at most one link target."""

    text: str
    style: TextStyle = field(default_factory=TextStyle)
    link: str | None = None
