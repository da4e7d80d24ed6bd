import itertools
import threading
import time

import pytest

from notifyd.adapters.dev_sinks import InMemoryHistory, LoggingDisplay, RecordingSignals
from notifyd.components.actions import parse_actions, visible_actions
from notifyd.components.images import decode_raw
from notifyd.components.ingest import NotificationService
from notifyd.components.links import scan_links
from notifyd.components.registry import NotificationRegistry
from notifyd.components.richtext import sanitize_body
from notifyd.components.url_safety import is_safe_url
from notifyd.domain.entities import (
    UINT32_MAX,
    CloseReason,
    ImageData,
    LinkOrigin,
    NotificationContent,
    NotificationRequest,
    TypedHint,
)
from notifyd.rules.models import NotificationRules


@pytest.fixture
def sinks():
    return LoggingDisplay(), InMemoryHistory(), RecordingSignals()


def new_registry(sinks, **kwargs) -> NotificationRegistry:
    display, history, signals = sinks
    return NotificationRegistry(display=display, history=history, signals=signals, **kwargs)


# --- R1: Dangerous markup never survives ---
TAGS = ["b", "i", "u", "a", "p", "div", "span", "font", "table"]
PAYLOADS = [
    "<script>alert(1)</script>",
    "<img src=x onerror=alert(1)>",
    "<svg onload=alert(1)>",
    '<iframe src="javascript:alert(1)"></iframe>',
]


@pytest.mark.parametrize(("tag", "payload"), list(itertools.product(TAGS, PAYLOADS)))
def test_R1_no_script_or_handlers(tag, payload):
    """R1: script, img and on* attributes are gone for every tag combination."""
    for raw in (
        f"<{tag}>{payload}</{tag}>",
        f'<{tag} onmouseover="alert(1)">x{payload}</{tag}>',
        f"{payload}<{tag}>",
    ):
        body, _ = sanitize_body(raw)
        lowered = body.markup.lower()
        assert "<script" not in lowered
        assert "<img" not in lowered
        assert "<svg" not in lowered
        assert "<iframe" not in lowered
        assert "onerror" not in lowered
        assert "onmouseover" not in lowered
        assert "onload" not in lowered


# --- R2: Scheme allow-list ---
@pytest.mark.parametrize(
    "url",
    ["javascript:alert(1)", "data:text/html,x", "vbscript:msgbox(1)", "file:///etc/passwd"],
)
def test_R2_unsafe_schemes_rejected(url):
    """R2: unsafe schemes are rejected and never become links."""
    assert not is_safe_url(url)
    assert scan_links(f"see {url} now") == []
    body, _ = sanitize_body(f'<a href="{url}">x</a>')
    assert body.links == ()


@pytest.mark.parametrize("url", ["http://example.com", "https://example.com", "mailto:a@example.com"])
def test_R2_safe_schemes_accepted(url):
    assert is_safe_url(url)
    body, _ = sanitize_body(f'<a href="{url}">x</a>')
    assert [link.url for link in body.links] == [url]


# --- R3: Decode before validate ---
def test_R3_entity_encoded_scheme():
    """R3: an encoded javascript: href is decoded, then rejected."""
    body, errors = sanitize_body('<a href="&#106;avascript:alert(1)">click</a>')
    assert body.links == ()
    assert body.markup == "click"
    assert any(e.code == "unsafe_url" for e in errors)

    body, _ = sanitize_body("&#106;avascript:alert(1)")
    assert body.links == ()


# --- R4: Safe body round-trips ---
def test_R4_safe_body_roundtrip():
    """R4: already safe markup is kept and its anchor gains rel."""
    body, errors = sanitize_body('<b>hi</b> <a href="https://example.com">x</a>')
    assert body.markup == '<b>hi</b> <a href="https://example.com" rel="noopener noreferrer">x</a>'
    assert len(body.links) == 1
    assert body.links[0].origin == LinkOrigin.ANCHOR
    assert errors == []


# --- R5: Image resize ---
def _rgba(width, height):
    return ImageData(
        width=width,
        height=height,
        rowstride=width * 4,
        has_alpha=True,
        bits_per_sample=8,
        channels=4,
        data=bytes(width * height * 4),
    )


def test_R5_image_resize():
    """R5: 1000x500 shrinks to 128x64; 50x50 stays."""
    image, _ = decode_raw(_rgba(1000, 500), 128)
    assert (image.width, image.height) == (128, 64)
    assert len(image.pixels) == 128 * 64 * 4

    image, _ = decode_raw(_rgba(50, 50), 128)
    assert (image.width, image.height) == (50, 50)


# --- R6: Identifier allocation ---
def test_R6_concurrent_ids_distinct(sinks):
    """R6: concurrent new requests get distinct non-zero ids."""
    registry = new_registry(sinks)
    results = []
    lock = threading.Lock()

    def submit():
        notification, _ = registry.submit(NotificationContent(summary="x"))
        with lock:
            results.append(notification.id)

    threads = [threading.Thread(target=submit) for _ in range(64)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(results)) == 64
    assert 0 not in results


def test_R6_wrap_skips_active(sinks):
    """R6: after the maximum the counter wraps to 1, skipping active ids."""
    registry = new_registry(sinks, last_id=UINT32_MAX - 1)
    assert registry.submit(NotificationContent())[0].id == UINT32_MAX
    assert registry.submit(NotificationContent())[0].id == 1

    registry = new_registry(sinks, max_id=3)
    for _ in range(3):
        registry.submit(NotificationContent())
    registry.close(1)
    registry.close(3)
    # Counter sits at 3, wraps to 1 which is free
    assert registry.submit(NotificationContent())[0].id == 1
    # 2 is still active, so the next free id is 3
    assert registry.submit(NotificationContent())[0].id == 3


# --- R7: Action parsing ---
def test_R7_actions():
    """R7: default is not a button; odd lists give nothing."""
    entries, _ = parse_actions(["default", "Open", "reply", "Reply"])
    assert len(entries) == 2
    assert entries[0].is_default is True
    visible = visible_actions(entries)
    assert [(a.id, a.label) for a in visible] == [("reply", "Reply")]

    entries, _ = parse_actions(["default", "Open", "reply"])
    assert entries == ()


# --- R8: Transient routing ---
def test_R8_transient_never_persisted(sinks):
    """R8: transient goes to display, never to history (new and replace)."""
    display, history, _ = sinks
    registry = new_registry(sinks)

    first, _ = registry.submit(NotificationContent(summary="a", transient=True))
    assert first.id in display.shown
    assert history.records == []

    registry.submit(NotificationContent(summary="b", transient=True), replaces_id=first.id)
    assert display.shown[first.id].summary == "b"
    assert history.records == []


# --- R9: Close reason validation ---
def test_R9_close_reason(sinks):
    """R9: reason 99 becomes 4; reason 2 passes through."""
    _, _, signals = sinks
    registry = new_registry(sinks)
    registry.submit(NotificationContent())
    registry.submit(NotificationContent())

    registry.close(1, 99)
    registry.close(2, 2)
    assert signals.closed() == [(1, 4), (2, 2)]
    assert CloseReason.coerce(99) is CloseReason.UNDEFINED


# --- R10: Hostile bodies are sanitized in bounded time ---
@pytest.mark.parametrize("body", ["%" * 100_000, "a." * 50_000, "a-" * 50_000])
def test_R10_hostile_body_is_fast(body):
    """R10: link scanning stays linear on adversarial plain text."""
    started = time.perf_counter()
    sanitized, _ = sanitize_body(body)
    assert time.perf_counter() - started < 1.0
    assert sanitized.links == ()


# --- R11: Unreachable image paths never fail the request ---
@pytest.mark.parametrize(
    "image_path",
    ["/" + "a" * 300 + ".png", "file:///" + "b" * 300 + ".png"],
)
def test_R11_unreachable_image_path(sinks, image_path):
    """R11: a path the OS refuses yields no image, not an exception."""
    service = NotificationService(rules=NotificationRules(), registry=new_registry(sinks))
    notification_id, notification, warnings, errors = service.notify(
        NotificationRequest(summary="hi", hints={"image-path": TypedHint.string(image_path)})
    )
    assert errors == []
    assert notification_id == 1
    assert notification.image is None
    assert [w.stage for w in warnings] == ["image"]
