"""
Image decoding and resizing.

Turns an ImageSource into an RGBA8 DecodedImage no larger than the
configured maximum dimension.

Key behaviors:
- Raw pixel structs are validated before decode: positive dimensions,
  8 bits per sample, 3 or 4 channels, enough bytes for rowstride x height
- file:// URLs are admitted through the URL safety check (file allowed
  for image loading only) and converted to a local path
- Icon names are resolved through the IconThemePort; resolver failures
  count as "unresolved"
- Images larger than the maximum are scaled down with Lanczos, keeping
  the aspect ratio; smaller images are never upscaled
- Animations keep at most 100 frames and at most 30 seconds of playback;
  extra frames are dropped silently
- Every failure yields no image plus an error; nothing is raised

Functional Core - decoding is pure given the filesystem.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageSequence

from notifyd.components.url_safety import file_url_to_path
from notifyd.domain.entities import (
    AnimationFrame,
    DecodedImage,
    FilePath,
    FileUrl,
    IconName,
    ImageData,
    ImageSource,
    RawPixels,
)

from .models import (
    DEFAULT_FRAME_DURATION_MS,
    MAX_ANIMATION_MS,
    MAX_FRAMES,
    ImageValidationError,
)
from .ports import IconThemePort

logger = logging.getLogger(__name__)

# Frame durations at or below this are treated as unset (browser behaviour)
MIN_FRAME_DURATION_MS = 10

DECODE_ERRORS = (OSError, ValueError, EOFError, SyntaxError, Image.DecompressionBombError)


def fit_dimensions(width: int, height: int, max_size: int) -> tuple[int, int]:
    """
    Scale (width, height) so the larger side is at most ``max_size``.

    The aspect ratio is preserved and the image is never enlarged.
    """
    if width <= max_size and height <= max_size:
        return width, height
    if width >= height:
        return max_size, max(1, round(height * max_size / width))
    return max(1, round(width * max_size / height)), max_size


def _resize(image: Image.Image, max_size: int) -> Image.Image:
    size = fit_dimensions(image.width, image.height, max_size)
    if size == image.size:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def _frame_duration(frame: Image.Image) -> int:
    duration = frame.info.get("duration")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        return DEFAULT_FRAME_DURATION_MS
    if duration <= MIN_FRAME_DURATION_MS:
        return DEFAULT_FRAME_DURATION_MS
    return int(duration)


# --- Raw pixel data ---


def validate_raw(data: ImageData) -> ImageValidationError | None:
    """Check a raw pixel struct before decoding it."""
    if data.width <= 0 or data.height <= 0:
        return ImageValidationError(
            code="invalid_dimensions",
            message=f"Raw image dimensions must be positive, got {data.width}x{data.height}",
        )
    if data.bits_per_sample != 8:
        return ImageValidationError(
            code="unsupported_format",
            message=f"Only 8 bits per sample are supported, got {data.bits_per_sample}",
        )
    if data.channels not in (3, 4) or data.has_alpha != (data.channels == 4):
        return ImageValidationError(
            code="unsupported_format",
            message=f"Unsupported channel layout: {data.channels} channels, alpha={data.has_alpha}",
        )
    if data.rowstride < data.width * data.channels:
        return ImageValidationError(
            code="invalid_rowstride",
            message=f"Rowstride {data.rowstride} is shorter than one row of pixels",
        )
    if Image.MAX_IMAGE_PIXELS and data.width * data.height > Image.MAX_IMAGE_PIXELS:
        return ImageValidationError(
            code="too_many_pixels",
            message="Raw image exceeds the decoder pixel limit",
        )
    if len(data.data) < data.rowstride * data.height:
        return ImageValidationError(
            code="insufficient_data",
            message=(
                f"Raw image needs {data.rowstride * data.height} bytes, "
                f"got {len(data.data)}"
            ),
        )
    return None


def decode_raw(data: ImageData, max_size: int) -> tuple[DecodedImage | None, list[ImageValidationError]]:
    """Decode an (iiibiiay) pixel struct to RGBA8."""
    error = validate_raw(data)
    if error is not None:
        return None, [error]

    mode = "RGBA" if data.channels == 4 else "RGB"
    buffer = data.data[: data.rowstride * data.height]
    try:
        image = Image.frombytes(
            mode, (data.width, data.height), buffer, "raw", mode, data.rowstride
        )
        image = _resize(image.convert("RGBA"), max_size)
    except DECODE_ERRORS as e:
        logger.debug("Raw image decode failed: %s", e)
        return None, [ImageValidationError(code="decode_failed", message=str(e))]

    return DecodedImage(width=image.width, height=image.height, pixels=image.tobytes()), []


# --- Files ---


def _read_frames(
    image: Image.Image, max_size: int, enable_animations: bool
) -> list[AnimationFrame]:
    frames: list[AnimationFrame] = []
    elapsed = 0

    for frame in ImageSequence.Iterator(image):
        duration = _frame_duration(frame)
        if frames and (len(frames) >= MAX_FRAMES or elapsed + duration > MAX_ANIMATION_MS):
            logger.debug("Animation truncated after %d frames (%d ms)", len(frames), elapsed)
            break
        duration = min(duration, MAX_ANIMATION_MS)
        rgba = _resize(frame.convert("RGBA"), max_size)
        frames.append(
            AnimationFrame(
                width=rgba.width,
                height=rgba.height,
                pixels=rgba.tobytes(),
                duration_ms=duration,
            )
        )
        elapsed += duration
        if not enable_animations:
            break

    return frames


def decode_file(
    path: Path, max_size: int, enable_animations: bool = True
) -> tuple[DecodedImage | None, list[ImageValidationError]]:
    """Decode an image file from local disk with Pillow."""
    try:
        is_file = path.is_file()
    except (OSError, ValueError) as e:
        # ENAMETOOLONG, EACCES and friends are not swallowed by pathlib
        logger.debug("Image path not accessible: %s", e)
        is_file = False
    if not is_file:
        return None, [
            ImageValidationError(code="file_not_found", message=f"No image file at {str(path)[:256]}")
        ]

    try:
        with Image.open(path) as image:
            frames = _read_frames(image, max_size, enable_animations)
    except DECODE_ERRORS as e:
        logger.debug("Image decode failed for %s: %s", path, e)
        return None, [ImageValidationError(code="decode_failed", message=str(e))]

    if not frames:
        return None, [ImageValidationError(code="decode_failed", message="Image has no frames")]

    first = frames[0]
    return (
        DecodedImage(
            width=first.width,
            height=first.height,
            pixels=first.pixels,
            frames=tuple(frames) if len(frames) > 1 else (),
        ),
        [],
    )


def resolve_icon(name: str, icons: IconThemePort | None) -> Path | None:
    """Ask the icon theme for ``name``; any resolver failure means unresolved."""
    if icons is None:
        return None
    try:
        resolved = icons.resolve(name)
    except Exception:
        logger.warning("Icon theme lookup failed for %r", name[:64], exc_info=True)
        return None
    if not resolved:
        return None
    return Path(resolved)


# --- Dispatch ---


def decode_image(
    source: ImageSource,
    max_size: int,
    *,
    enable_animations: bool = True,
    icons: IconThemePort | None = None,
) -> tuple[DecodedImage | None, list[ImageValidationError]]:
    """
    Decode any image source.

    Args:
        source: The selected image source.
        max_size: Maximum width/height of the result.
        enable_animations: Keep animation frames (otherwise first frame only).
        icons: Icon theme used for IconName sources.

    Returns:
        Tuple of (decoded image or None, errors).
    """
    if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size < 1:
        return None, [
            ImageValidationError(
                code="invalid_max_size", message="Maximum image size must be a positive integer"
            )
        ]

    if isinstance(source, RawPixels):
        return decode_raw(source.data, max_size)

    if isinstance(source, FileUrl):
        path = file_url_to_path(source.url)
        if path is None:
            return None, [
                ImageValidationError(
                    code="unsafe_url", message="Image URL is not a local file:// URL"
                )
            ]
        return decode_file(path, max_size, enable_animations)

    if isinstance(source, FilePath):
        path = Path(source.path)
        if not path.is_absolute():
            return None, [
                ImageValidationError(code="relative_path", message="Image path must be absolute")
            ]
        return decode_file(path, max_size, enable_animations)

    if isinstance(source, IconName):
        resolved = resolve_icon(source.name, icons)
        if resolved is None:
            return None, [
                ImageValidationError(
                    code="icon_unresolved", message="Icon name could not be resolved"
                )
            ]
        return decode_file(resolved, max_size, enable_animations)

    return None, [ImageValidationError(code="unknown_source", message="Unknown image source")]
