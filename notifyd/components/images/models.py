"""
Images component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from notifyd.domain.entities import DecodedImage, ImageSource

DEFAULT_MAX_SIZE = 128
MAX_FRAMES = 100
MAX_ANIMATION_MS = 30_000
DEFAULT_FRAME_DURATION_MS = 100

# --- Validation Errors ---


@dataclass(frozen=True)
class ImageValidationError:
    """Why a source produced no image."""

    code: str
    message: str


# --- Input Models ---


@dataclass(frozen=True)
class DecodeImageInput:
    """Input for decoding one image source."""

    source: ImageSource
    max_size: int = DEFAULT_MAX_SIZE
    enable_animations: bool = True


# --- Output Models ---


@dataclass(frozen=True)
class DecodeImageOutput:
    """Output from image decoding. ``image`` is None when decoding failed."""

    image: DecodedImage | None
    errors: tuple[ImageValidationError, ...]
    success: bool
