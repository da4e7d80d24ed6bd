from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from notifyd.components.url_safety.component import is_safe_url

# --- Wire ranges ---
UINT32_MAX = 0xFFFFFFFF
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# --- Enums / Literals ---


class Urgency(IntEnum):
    LOW = 0
    NORMAL = 1
    CRITICAL = 2


class CloseReason(IntEnum):
    EXPIRED = 1
    DISMISSED = 2
    CLOSED = 3
    UNDEFINED = 4

    @classmethod
    def coerce(cls, value: object) -> CloseReason:
        """Map a boundary value onto a known reason; anything unknown is UNDEFINED."""
        if isinstance(value, bool) or not isinstance(value, int):
            return cls.UNDEFINED
        try:
            return cls(value)
        except ValueError:
            return cls.UNDEFINED


class LinkOrigin(str, Enum):
    ANCHOR = "anchor"
    PLAIN_TEXT = "plain_text"
    EMAIL = "email"


class HintType(str, Enum):
    BYTE = "byte"
    BOOL = "bool"
    INT32 = "int32"
    UINT32 = "uint32"
    STRING = "string"
    IMAGE = "image"
    OTHER = "other"


# D-Bus type signatures as delivered by the transport.
SIGNATURE_TO_HINT_TYPE: dict[str, HintType] = {
    "y": HintType.BYTE,
    "b": HintType.BOOL,
    "i": HintType.INT32,
    "u": HintType.UINT32,
    "s": HintType.STRING,
    "(iiibiiay)": HintType.IMAGE,
}

# --- Hints ---


class ImageData(BaseModel):
    """Raw pixel struct carried by the image-data hint."""

    model_config = ConfigDict(frozen=True, strict=True)

    width: int
    height: int
    rowstride: int
    has_alpha: bool
    bits_per_sample: int
    channels: int
    data: bytes = Field(repr=False)

    @classmethod
    def from_struct(cls, value: Any) -> ImageData | None:
        """
        Build from the (iiibiiay) wire tuple.

        Returns None when the struct has the wrong shape or field types.
        """
        if not isinstance(value, (tuple, list)) or len(value) != 7:
            return None
        width, height, rowstride, has_alpha, bits, channels, data = value
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif isinstance(data, list):
            try:
                data = bytes(data)
            except (TypeError, ValueError):
                return None
        try:
            return cls(
                width=width,
                height=height,
                rowstride=rowstride,
                has_alpha=has_alpha,
                bits_per_sample=bits,
                channels=channels,
                data=data,
            )
        except ValidationError:
            return None


class TypedHint(BaseModel):
    """A hint value tagged with the wire type it arrived as."""

    model_config = ConfigDict(frozen=True)

    type: HintType
    value: Any = None

    @classmethod
    def byte(cls, value: int) -> TypedHint:
        return cls(type=HintType.BYTE, value=value)

    @classmethod
    def boolean(cls, value: bool) -> TypedHint:
        return cls(type=HintType.BOOL, value=value)

    @classmethod
    def int32(cls, value: int) -> TypedHint:
        return cls(type=HintType.INT32, value=value)

    @classmethod
    def uint32(cls, value: int) -> TypedHint:
        return cls(type=HintType.UINT32, value=value)

    @classmethod
    def string(cls, value: str) -> TypedHint:
        return cls(type=HintType.STRING, value=value)

    @classmethod
    def image(cls, value: ImageData) -> TypedHint:
        return cls(type=HintType.IMAGE, value=value)

    @classmethod
    def from_signature(cls, signature: str, value: Any) -> TypedHint:
        """Tag a transport value by its D-Bus signature; unknown signatures stay opaque."""
        hint_type = SIGNATURE_TO_HINT_TYPE.get(signature, HintType.OTHER)
        if hint_type is HintType.IMAGE and not isinstance(value, ImageData):
            struct = ImageData.from_struct(value)
            return cls(type=hint_type, value=struct if struct is not None else value)
        return cls(type=hint_type, value=value)


# --- Request ---


class NotificationRequest(BaseModel):
    """A Notify call as delivered by the transport. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    app_name: str = ""
    replaces_id: int = 0
    app_icon: str = ""
    summary: str = ""
    body: str = ""
    actions: tuple[Any, ...] = ()
    hints: dict[str, TypedHint] = Field(default_factory=dict)
    expire_timeout: int = -1

    @field_validator("replaces_id", mode="before")
    @classmethod
    def _coerce_replaces_id(cls, value: Any) -> int:
        # Out-of-range ids are treated as a request for a new notification.
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        if value < 0 or value > UINT32_MAX:
            return 0
        return value


# --- Links ---


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    display_text: str
    origin: LinkOrigin

    @field_validator("url")
    @classmethod
    def _require_safe_scheme(cls, value: str) -> str:
        if not is_safe_url(value):
            raise ValueError("link URL scheme is not allowed")
        return value.strip()


class SanitizedBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    markup: str = ""
    links: tuple[Link, ...] = ()


# --- Images ---


class RawPixels(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["raw"] = "raw"
    data: ImageData


class FilePath(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["path"] = "path"
    path: str


class IconName(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["icon"] = "icon"
    name: str


class FileUrl(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["file_url"] = "file_url"
    url: str


ImageSource = RawPixels | FilePath | IconName | FileUrl


class AnimationFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int
    height: int
    pixels: bytes = Field(repr=False)
    duration_ms: int


class DecodedImage(BaseModel):
    """RGBA8 image, already clamped to the configured maximum dimension."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    pixel_format: Literal["RGBA8"] = "RGBA8"
    pixels: bytes = Field(repr=False)
    frames: tuple[AnimationFrame, ...] = ()

    @property
    def is_animated(self) -> bool:
        return len(self.frames) > 1

    @property
    def total_duration_ms(self) -> int:
        return sum(frame.duration_ms for frame in self.frames)


# --- Actions ---


class ActionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    is_default: bool = False
    show_icon: bool = False


# --- Presentation hints ---


class SoundDirective(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str | None = None
    name: str | None = None


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int
    y: int


# --- Records ---


class NotificationContent(BaseModel):
    """Everything the pipeline produces for a request, before an id is assigned."""

    model_config = ConfigDict(frozen=True)

    app_name: str = ""
    app_icon: str = ""
    summary: str = ""
    body: SanitizedBody = Field(default_factory=SanitizedBody)
    urgency: Urgency = Urgency.NORMAL
    category: str | None = None
    desktop_entry: str | None = None
    transient: bool = False
    resident: bool = False
    sender_pid: int | None = None
    sound: SoundDirective | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    position: Position | None = None
    image: DecodedImage | None = None
    actions: tuple[ActionEntry, ...] = ()
    expire_timeout: int = 0  # effective milliseconds, 0 = never
    popup: bool = True  # False while do-not-disturb holds back a non-critical notification
    hints: dict[str, TypedHint] = Field(default_factory=dict)


class ValidatedNotification(NotificationContent):
    id: int = Field(gt=0, le=UINT32_MAX)

    @classmethod
    def from_content(cls, notification_id: int, content: NotificationContent) -> ValidatedNotification:
        fields = {name: getattr(content, name) for name in NotificationContent.model_fields}
        return cls(id=notification_id, **fields)

    @property
    def visible_actions(self) -> tuple[ActionEntry, ...]:
        return tuple(action for action in self.actions if not action.is_default)

    @property
    def default_action(self) -> ActionEntry | None:
        return next((action for action in self.actions if action.is_default), None)
