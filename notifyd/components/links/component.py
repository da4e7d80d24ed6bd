"""
Links component - Plain-text URL and email detection.

Invariants:
- Every emitted Link passed the URL safety check
- Rejected candidates are left as plain text, never hyperlinked
- Emails are normalized to mailto: URLs
"""

from __future__ import annotations

from ._impl import split_links
from .models import ScanLinksInput, ScanLinksOutput


def run_scan(inp: ScanLinksInput) -> ScanLinksOutput:
    """
    Scan plain text for links.

    Args:
        inp: Input containing the text to scan.

    Returns:
        ScanLinksOutput with spans, admitted links and rejected candidates.
    """
    spans, errors = split_links(inp.text)
    return ScanLinksOutput(
        spans=tuple(spans),
        links=tuple(span.link for span in spans if span.link is not None),
        errors=tuple(errors),
        success=True,
    )
