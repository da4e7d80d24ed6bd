"""
URL safety component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckUrlInput:
    """Input for checking a single URL."""

    url: str
    allow_file: bool = False


@dataclass(frozen=True)
class UrlVerdict:
    """Outcome of a URL safety check."""

    accepted: bool
    url: str
    scheme: str | None = None
    reason: str | None = None
