"""
URL safety component - Scheme allow-list for links, URL opening and image paths.

Key behaviors:
- Accepts http, https and mailto (case-insensitive scheme)
- Accepts file only when the caller is loading a local image
- Rejects every other scheme (javascript, data, vbscript, ...) and any
  string without a parsable scheme
- Rejects URLs carrying whitespace or control characters, which renderers
  may silently strip to reassemble a forbidden scheme
"""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import unquote, urlsplit

from .models import CheckUrlInput, UrlVerdict

SAFE_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto"})
IMAGE_SCHEMES: frozenset[str] = SAFE_SCHEMES | {"file"}

SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
FORBIDDEN_CHARS = re.compile(r"[\x00-\x20\x7f-\x9f]")


def parse_scheme(url: object) -> str | None:
    """Return the lower-cased scheme of ``url`` or None if it has none."""
    if not isinstance(url, str):
        return None
    match = SCHEME_PATTERN.match(url.strip())
    return match.group(1).lower() if match else None


def check_url(url: object, *, allow_file: bool = False) -> UrlVerdict:
    """
    Check a URL against the scheme allow-list.

    Args:
        url: Candidate URL (untrusted).
        allow_file: Also admit ``file:`` URLs (local image loading only).

    Returns:
        UrlVerdict; ``url`` holds the whitespace-trimmed candidate.
    """
    if not isinstance(url, str):
        return UrlVerdict(accepted=False, url="", reason="not_a_string")

    candidate = url.strip()
    if not candidate:
        return UrlVerdict(accepted=False, url=candidate, reason="empty")
    if FORBIDDEN_CHARS.search(candidate):
        return UrlVerdict(accepted=False, url=candidate, reason="control_characters")

    scheme = parse_scheme(candidate)
    if scheme is None:
        return UrlVerdict(accepted=False, url=candidate, reason="no_scheme")

    allowed = IMAGE_SCHEMES if allow_file else SAFE_SCHEMES
    if scheme not in allowed:
        return UrlVerdict(accepted=False, url=candidate, scheme=scheme, reason="forbidden_scheme")

    try:
        parts = urlsplit(candidate)
    except ValueError:
        return UrlVerdict(accepted=False, url=candidate, scheme=scheme, reason="unparsable")

    if scheme in ("http", "https") and not parts.hostname:
        return UrlVerdict(accepted=False, url=candidate, scheme=scheme, reason="missing_host")
    if scheme == "mailto" and not parts.path:
        return UrlVerdict(accepted=False, url=candidate, scheme=scheme, reason="missing_address")
    if scheme == "file":
        if parts.netloc not in ("", "localhost") or not parts.path.startswith("/"):
            return UrlVerdict(accepted=False, url=candidate, scheme=scheme, reason="not_local_path")

    return UrlVerdict(accepted=True, url=candidate, scheme=scheme)


def is_safe_url(url: object, *, allow_file: bool = False) -> bool:
    """True iff ``url`` may be shown, opened, or (with allow_file) loaded."""
    return check_url(url, allow_file=allow_file).accepted


def file_url_to_path(url: str) -> Path | None:
    """Convert an admitted ``file://`` URL to a local path, else None."""
    verdict = check_url(url, allow_file=True)
    if not verdict.accepted or verdict.scheme != "file":
        return None
    path = unquote(urlsplit(verdict.url).path)
    if "\x00" in path:
        return None
    return Path(path)


def run_check(inp: CheckUrlInput) -> UrlVerdict:
    """Entry point: check one URL."""
    return check_url(inp.url, allow_file=inp.allow_file)
