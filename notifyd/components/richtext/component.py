"""
Richtext component - Notification body sanitization.

Provides the decode-then-sanitize pipeline for bodies and the plain-text
reduction used for summaries, labels and application names.

Invariants:
- Entities are decoded before any tag or URL decision
- Only b, i, u, a, br, p reach the output; only href on a
- Every emitted anchor carries rel="noopener noreferrer"
- No Link is emitted for a URL outside http, https, mailto
"""

from __future__ import annotations

from dataclasses import replace

from ._impl import DEFAULT_CONFIG, RichTextConfig, sanitize_body
from .markup import strip_html
from .models import (
    SanitizeBodyInput,
    SanitizeOutput,
    StripTextInput,
    StripTextOutput,
)


def _build_config(enable_links: bool, config: RichTextConfig | None) -> RichTextConfig:
    base = config or DEFAULT_CONFIG
    if base.enable_links == enable_links:
        return base
    return replace(base, enable_links=enable_links)


# --- Component Entry Points ---


def run_sanitize(
    inp: SanitizeBodyInput,
    *,
    config: RichTextConfig | None = None,
) -> SanitizeOutput:
    """
    Sanitize a raw body.

    Args:
        inp: Input containing the raw body and the links toggle.
        config: Optional sanitizer configuration.

    Returns:
        SanitizeOutput with safe markup, extracted links and removals.
    """
    body, errors = sanitize_body(inp.body, _build_config(inp.enable_links, config))
    return SanitizeOutput(body=body, errors=errors, success=True)


def run_strip(inp: StripTextInput) -> StripTextOutput:
    """Reduce text to plain text."""
    return StripTextOutput(text=strip_html(inp.text), success=True)
