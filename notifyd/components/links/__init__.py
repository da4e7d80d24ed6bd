"""
Links component - Plain-text link scanning.
"""

from ._impl import scan_links, split_links, trim_candidate
from .component import run_scan
from .models import (
    LinkValidationError,
    ScanLinksInput,
    ScanLinksOutput,
    TextSpan,
)

__all__ = [
    # Entry points
    "run_scan",
    # Input models
    "ScanLinksInput",
    # Output models
    "ScanLinksOutput",
    "TextSpan",
    "LinkValidationError",
    # Functions
    "scan_links",
    "split_links",
    "trim_candidate",
]
