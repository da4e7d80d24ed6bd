"""
Actions component - (id, label) action pairs and the default action.
"""

from ._impl import default_action, parse_actions, visible_actions
from .component import run_parse
from .models import (
    DEFAULT_ACTION_ID,
    ActionValidationError,
    ParseActionsInput,
    ParseActionsOutput,
)

__all__ = [
    # Entry points
    "run_parse",
    # Input models
    "ParseActionsInput",
    # Output models
    "ParseActionsOutput",
    "ActionValidationError",
    # Functions
    "default_action",
    "parse_actions",
    "visible_actions",
    # Constants
    "DEFAULT_ACTION_ID",
]
