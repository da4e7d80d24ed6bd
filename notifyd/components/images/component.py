"""
Images component - Image source decoding for notifications.

Invariants:
- Output is RGBA8 with width/height <= max_size
- Aspect ratio preserved; never upscaled
- At most 100 frames and 30 s of animation
- A decode failure yields no image, never an exception
"""

from __future__ import annotations

from ._impl import decode_image
from .models import DecodeImageInput, DecodeImageOutput
from .ports import IconThemePort


def run_decode(
    inp: DecodeImageInput,
    *,
    icons: IconThemePort | None = None,
) -> DecodeImageOutput:
    """
    Decode an image source.

    Args:
        inp: Input with the source, maximum size and animation toggle.
        icons: Icon theme used for icon-name sources.

    Returns:
        DecodeImageOutput; ``image`` is None if nothing could be decoded.
    """
    image, errors = decode_image(
        inp.source,
        inp.max_size,
        enable_animations=inp.enable_animations,
        icons=icons,
    )
    return DecodeImageOutput(image=image, errors=tuple(errors), success=image is not None)
