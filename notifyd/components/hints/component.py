"""
Hints component - Typed interpretation of the request hint map.

Invariants:
- A malformed hint never fails the request
- Fields fall back to documented defaults
- Unknown keys pass through untouched
"""

from __future__ import annotations

from ._impl import parse_hints
from .models import ParseHintsInput, ParseHintsOutput


def run_parse(inp: ParseHintsInput) -> ParseHintsOutput:
    """
    Parse request hints.

    Args:
        inp: Input containing the raw hint map and the request app_icon.

    Returns:
        ParseHintsOutput with typed hints and ignored-hint errors.
    """
    hints, errors = parse_hints(inp.hints, app_icon=inp.app_icon)
    return ParseHintsOutput(hints=hints, errors=tuple(errors), success=True)
