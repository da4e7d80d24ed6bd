"""
Hint parser.

Type-checks every recognized hint against the type the notification
protocol declares for it and coerces it into ParsedHints.

Key behaviors:
- A hint of the wrong type, or out of range, is ignored and its field
  keeps the default; the rest of the request is unaffected
- Booleans are only taken from real boolean values
- urgency: byte 0..2, otherwise Normal
- value (progress): int32 clamped to 0..100
- sender-pid: uint32 only
- Image source chosen by fixed priority; the first present, well-typed
  hint wins and lower ones are ignored
- Unrecognized keys are kept opaquely in ``extra``

Functional Core - pure business logic.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from notifyd.components.url_safety import file_url_to_path, parse_scheme
from notifyd.domain.entities import (
    INT32_MAX,
    INT32_MIN,
    UINT32_MAX,
    FilePath,
    FileUrl,
    HintType,
    IconName,
    ImageData,
    ImageSource,
    Position,
    RawPixels,
    SoundDirective,
    TypedHint,
    Urgency,
)

from .models import HintValidationError, ParsedHints

logger = logging.getLogger(__name__)

RAW_IMAGE_KEYS: tuple[str, ...] = ("image-data", "image_data", "icon_data")
PATH_IMAGE_KEYS: tuple[str, ...] = ("image-path", "image_path")

SOUND_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")
CONTROL_PATTERN = re.compile(r"[\x00-\x1f\x7f]")

RECOGNIZED_KEYS: frozenset[str] = frozenset(
    [
        "urgency",
        "category",
        "desktop-entry",
        "transient",
        "resident",
        "action-icons",
        "suppress-sound",
        "sender-pid",
        "sound-file",
        "sound-name",
        "value",
        "x",
        "y",
        *RAW_IMAGE_KEYS,
        *PATH_IMAGE_KEYS,
    ]
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- Typed accessors ---
# Each returns the coerced value or None when the hint does not conform.


def _as_byte(hint: TypedHint) -> int | None:
    if hint.type is HintType.BYTE and _is_int(hint.value) and 0 <= hint.value <= 255:
        return hint.value
    return None


def _as_bool(hint: TypedHint) -> bool | None:
    if hint.type is HintType.BOOL and isinstance(hint.value, bool):
        return hint.value
    return None


def _as_int32(hint: TypedHint) -> int | None:
    if hint.type is HintType.INT32 and _is_int(hint.value) and INT32_MIN <= hint.value <= INT32_MAX:
        return hint.value
    return None


def _as_uint32(hint: TypedHint) -> int | None:
    if hint.type is HintType.UINT32 and _is_int(hint.value) and 0 <= hint.value <= UINT32_MAX:
        return hint.value
    return None


def _as_string(hint: TypedHint) -> str | None:
    if hint.type is HintType.STRING and isinstance(hint.value, str):
        return hint.value
    return None


def _clean_string(value: str) -> str | None:
    cleaned = CONTROL_PATTERN.sub("", value).strip()
    return cleaned or None


# --- Image source selection ---


def classify_image_path(value: str) -> ImageSource | None:
    """
    Classify an image-path hint value.

    ``file://`` URLs and absolute paths load from disk, bare names go to the
    icon theme. Any other scheme (http, data, ...) is refused: images are
    never fetched over the network.
    """
    value = value.strip()
    if not value or "\x00" in value:
        return None
    scheme = parse_scheme(value)
    if scheme == "file":
        return FileUrl(url=value)
    if scheme is not None:
        return None
    if value.startswith("/"):
        return FilePath(path=value)
    if "/" in value:
        return None
    return IconName(name=value)


def select_image_source(
    hints: Mapping[str, TypedHint],
    app_icon: str = "",
) -> tuple[ImageSource | None, list[HintValidationError]]:
    """
    Pick the image source by fixed priority.

    Raw pixel data first, then an image path hint, then the request's
    app_icon. Wrong-typed hints count as absent; a refused path is final.
    """
    errors: list[HintValidationError] = []

    for key in RAW_IMAGE_KEYS:
        hint = hints.get(key)
        if hint is None:
            continue
        if hint.type is HintType.IMAGE and isinstance(hint.value, ImageData):
            return RawPixels(data=hint.value), errors
        errors.append(_type_error(key, "image struct"))

    for key in PATH_IMAGE_KEYS:
        hint = hints.get(key)
        if hint is None:
            continue
        value = _as_string(hint)
        if value is None:
            errors.append(_type_error(key, "string"))
            continue
        source = classify_image_path(value)
        if source is None:
            errors.append(
                HintValidationError(
                    code="image_path_refused",
                    message="Image path is neither a local file nor an icon name",
                    key=key,
                )
            )
        return source, errors

    if app_icon.strip():
        source = classify_image_path(app_icon)
        if source is None:
            errors.append(
                HintValidationError(
                    code="image_path_refused",
                    message="app_icon is neither a local file nor an icon name",
                    key="app_icon",
                )
            )
        return source, errors

    return None, errors


# --- Helpers ---


def _type_error(key: str, expected: str) -> HintValidationError:
    return HintValidationError(
        code="type_mismatch",
        message=f"Hint '{key}' must be {expected}; ignored",
        key=key,
    )


def _parse_sound(
    hints: Mapping[str, TypedHint], errors: list[HintValidationError]
) -> SoundDirective | None:
    sound_file: str | None = None
    sound_name: str | None = None

    if "sound-file" in hints:
        value = _as_string(hints["sound-file"])
        if value is None:
            errors.append(_type_error("sound-file", "string"))
        elif parse_scheme(value) == "file":
            path = file_url_to_path(value)
            sound_file = str(path) if path is not None else None
        elif value.startswith("/") and "\x00" not in value:
            sound_file = value
        if value is not None and sound_file is None:
            errors.append(
                HintValidationError(
                    code="sound_file_refused",
                    message="sound-file must be an absolute path or file:// URL",
                    key="sound-file",
                )
            )

    if "sound-name" in hints:
        value = _as_string(hints["sound-name"])
        if value is None:
            errors.append(_type_error("sound-name", "string"))
        elif SOUND_NAME_PATTERN.match(value):
            sound_name = value
        else:
            errors.append(
                HintValidationError(
                    code="sound_name_refused",
                    message="sound-name contains characters outside [A-Za-z0-9._-]",
                    key="sound-name",
                )
            )

    if sound_file is None and sound_name is None:
        return None
    return SoundDirective(file=sound_file, name=sound_name)


def _read(
    hints: Mapping[str, TypedHint],
    key: str,
    accessor: Callable[[TypedHint], Any],
    expected: str,
    errors: list[HintValidationError],
) -> Any:
    hint = hints.get(key)
    if hint is None:
        return None
    value = accessor(hint)
    if value is None:
        errors.append(_type_error(key, expected))
    return value


# --- Parser ---


def parse_hints(
    hints: Mapping[str, TypedHint],
    *,
    app_icon: str = "",
) -> tuple[ParsedHints, list[HintValidationError]]:
    """
    Interpret a hint map.

    Never raises on untrusted input; every rejected hint is reported in
    the returned error list and its field keeps the default.

    ``app_icon`` is the lowest-priority image source, used only when no
    image hint is present.

    Returns:
        Tuple of (parsed hints, errors).
    """
    errors: list[HintValidationError] = []

    urgency = Urgency.NORMAL
    raw_urgency = _read(hints, "urgency", _as_byte, "a byte", errors)
    if raw_urgency is not None:
        if raw_urgency in (0, 1, 2):
            urgency = Urgency(raw_urgency)
        else:
            errors.append(
                HintValidationError(
                    code="out_of_range",
                    message=f"urgency {raw_urgency} is not 0, 1 or 2",
                    key="urgency",
                )
            )

    category = _read(hints, "category", _as_string, "a string", errors)
    desktop_entry = _read(hints, "desktop-entry", _as_string, "a string", errors)
    if desktop_entry is not None:
        desktop_entry = _clean_string(desktop_entry)
        if desktop_entry and desktop_entry.endswith(".desktop"):
            desktop_entry = desktop_entry[: -len(".desktop")] or None

    flags = {
        key: bool(_read(hints, key, _as_bool, "a boolean", errors))
        for key in ("transient", "resident", "action-icons", "suppress-sound")
    }

    sender_pid = _read(hints, "sender-pid", _as_uint32, "an unsigned 32-bit integer", errors)

    progress = _read(hints, "value", _as_int32, "a 32-bit integer", errors)
    if progress is not None:
        progress = max(0, min(100, progress))

    x = _read(hints, "x", _as_int32, "a 32-bit integer", errors)
    y = _read(hints, "y", _as_int32, "a 32-bit integer", errors)
    position = Position(x=x, y=y) if x is not None and y is not None else None

    sound = _parse_sound(hints, errors)
    if flags["suppress-sound"]:
        sound = None

    image_source, image_errors = select_image_source(hints, app_icon)
    errors.extend(image_errors)

    extra = MappingProxyType(
        {key: value for key, value in hints.items() if key not in RECOGNIZED_KEYS}
    )

    if errors:
        logger.debug("Ignored %d malformed hint(s): %s", len(errors), [e.key for e in errors])

    parsed = ParsedHints(
        urgency=urgency,
        category=_clean_string(category) if category is not None else None,
        desktop_entry=desktop_entry,
        transient=flags["transient"],
        resident=flags["resident"],
        action_icons=flags["action-icons"],
        suppress_sound=flags["suppress-sound"],
        sender_pid=sender_pid,
        sound=sound,
        progress=progress,
        position=position,
        image_source=image_source,
        extra=extra,
    )
    return parsed, errors
