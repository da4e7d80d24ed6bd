"""
Actions component - Parsing of the notification action list.
"""

from __future__ import annotations

from ._impl import parse_actions
from .models import ParseActionsInput, ParseActionsOutput


def run_parse(inp: ParseActionsInput) -> ParseActionsOutput:
    """Parse an action list. Rejected lists produce no entries."""
    entries, errors = parse_actions(inp.actions, action_icons=inp.action_icons)
    return ParseActionsOutput(actions=entries, errors=tuple(errors), success=True)
