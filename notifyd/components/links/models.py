"""
Links component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from notifyd.domain.entities import Link

# --- Validation Errors ---


@dataclass(frozen=True)
class LinkValidationError:
    """A link candidate that was found but not admitted."""

    code: str
    message: str
    candidate: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ScanLinksInput:
    """Input for scanning plain text for URLs and email addresses."""

    text: str


# --- Output Models ---


@dataclass(frozen=True)
class TextSpan:
    """A run of plain text, hyperlinked when ``link`` is set."""

    text: str
    link: Link | None = None


@dataclass(frozen=True)
class ScanLinksOutput:
    """Output from a plain-text scan."""

    spans: tuple[TextSpan, ...]
    links: tuple[Link, ...]
    errors: tuple[LinkValidationError, ...]
    success: bool = True
