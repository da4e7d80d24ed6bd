"""
URL safety component - the single authority on which URLs may be surfaced.
"""

from .component import (
    IMAGE_SCHEMES,
    SAFE_SCHEMES,
    check_url,
    file_url_to_path,
    is_safe_url,
    parse_scheme,
    run_check,
)
from .models import CheckUrlInput, UrlVerdict

__all__ = [
    # Entry points
    "run_check",
    # Functions
    "check_url",
    "file_url_to_path",
    "is_safe_url",
    "parse_scheme",
    # Constants
    "IMAGE_SCHEMES",
    "SAFE_SCHEMES",
    # Models
    "CheckUrlInput",
    "UrlVerdict",
]
