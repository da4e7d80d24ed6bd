"""
Images component - Raw, file and themed-icon image decoding with clamping.
"""

from ._impl import (
    decode_file,
    decode_image,
    decode_raw,
    fit_dimensions,
    resolve_icon,
    validate_raw,
)
from .component import run_decode
from .models import (
    DEFAULT_FRAME_DURATION_MS,
    DEFAULT_MAX_SIZE,
    MAX_ANIMATION_MS,
    MAX_FRAMES,
    DecodeImageInput,
    DecodeImageOutput,
    ImageValidationError,
)
from .ports import IconThemePort

__all__ = [
    # Entry points
    "run_decode",
    # Input models
    "DecodeImageInput",
    # Output models
    "DecodeImageOutput",
    "ImageValidationError",
    # Ports
    "IconThemePort",
    # Functions
    "decode_file",
    "decode_image",
    "decode_raw",
    "fit_dimensions",
    "resolve_icon",
    "validate_raw",
    # Limits
    "DEFAULT_FRAME_DURATION_MS",
    "DEFAULT_MAX_SIZE",
    "MAX_ANIMATION_MS",
    "MAX_FRAMES",
]
