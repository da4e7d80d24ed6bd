"""
Hints component - Hint type-checking, coercion and image source selection.
"""

from ._impl import (
    PATH_IMAGE_KEYS,
    RAW_IMAGE_KEYS,
    RECOGNIZED_KEYS,
    classify_image_path,
    parse_hints,
    select_image_source,
)
from .component import run_parse
from .models import (
    HintValidationError,
    ParsedHints,
    ParseHintsInput,
    ParseHintsOutput,
)

__all__ = [
    # Entry points
    "run_parse",
    # Input models
    "ParseHintsInput",
    # Output models
    "ParseHintsOutput",
    "ParsedHints",
    "HintValidationError",
    # Functions
    "classify_image_path",
    "parse_hints",
    "select_image_source",
    # Constants
    "PATH_IMAGE_KEYS",
    "RAW_IMAGE_KEYS",
    "RECOGNIZED_KEYS",
]
