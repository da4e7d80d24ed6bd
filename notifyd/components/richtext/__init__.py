"""
Richtext component - Body sanitization, link extraction and markup parsing.
"""

from ._impl import (
    DEFAULT_CONFIG,
    RichTextConfig,
    sanitize_body,
    sanitize_html,
)
from .component import run_sanitize, run_strip
from .markup import (
    has_rich_content,
    merge_segments,
    parse_markup,
    segments_to_plain_text,
    strip_html,
)
from .models import (
    RichTextValidationError,
    SanitizeBodyInput,
    SanitizeOutput,
    StripTextInput,
    StripTextOutput,
    StyledSegment,
    TextStyle,
)

__all__ = [
    # Entry points
    "run_sanitize",
    "run_strip",
    # Input models
    "SanitizeBodyInput",
    "StripTextInput",
    # Output models
    "SanitizeOutput",
    "StripTextOutput",
    "RichTextValidationError",
    "StyledSegment",
    "TextStyle",
    # Configuration
    "DEFAULT_CONFIG",
    "RichTextConfig",
    # Functions
    "has_rich_content",
    "merge_segments",
    "parse_markup",
    "sanitize_body",
    "sanitize_html",
    "segments_to_plain_text",
    "strip_html",
]
