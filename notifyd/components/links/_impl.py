"""
Plain-text link scanner.

Finds bare URLs and email addresses in text that is not inside markup,
and admits each one only through the URL safety check.

Functional Core - pure business logic.
"""

from __future__ import annotations

import logging
import re

from pydantic import ValidationError

from notifyd.components.url_safety import check_url
from notifyd.domain.entities import Link, LinkOrigin

from .models import LinkValidationError, TextSpan

logger = logging.getLogger(__name__)

# Quantifiers stay bounded and the email lookbehind matches the whole
# local-part class: scanning must stay linear in the body length.
URL_CANDIDATE = (
    r"(?:\b[A-Za-z][A-Za-z0-9+.\-]{0,31}://|\bwww\.|\b(?:mailto|javascript|vbscript|data):)"
    r"[^\s<>\"'`]+"
)
EMAIL_CANDIDATE = (
    r"(?<![\w.%+\-])[A-Za-z0-9._%+\-]{1,64}@"
    r"[A-Za-z0-9\-]{1,63}(?:\.[A-Za-z0-9\-]{1,63})*\.[A-Za-z]{2,}"
)

CANDIDATE_PATTERN = re.compile(f"(?P<url>{URL_CANDIDATE})|(?P<email>{EMAIL_CANDIDATE})")

TRAILING_PUNCTUATION = ".,;:!?'\""
BRACKET_PAIRS = {")": "(", "]": "[", "}": "{"}


def trim_candidate(candidate: str) -> str:
    """Drop sentence punctuation and unbalanced closing brackets from the end."""
    surplus = {close: candidate.count(close) - candidate.count(open_) for close, open_ in BRACKET_PAIRS.items()}
    end = len(candidate)
    while end:
        last = candidate[end - 1]
        if last in TRAILING_PUNCTUATION:
            end -= 1
        elif last in BRACKET_PAIRS and surplus[last] > 0:
            surplus[last] -= 1
            end -= 1
        else:
            break
    return candidate[:end]


def _to_link(
    candidate: str, is_email: bool
) -> tuple[Link | None, LinkValidationError | None]:
    if is_email:
        url, origin = f"mailto:{candidate}", LinkOrigin.EMAIL
    elif candidate.lower().startswith("www."):
        url, origin = f"https://{candidate}", LinkOrigin.PLAIN_TEXT
    else:
        url = candidate
        origin = LinkOrigin.EMAIL if candidate.lower().startswith("mailto:") else LinkOrigin.PLAIN_TEXT

    verdict = check_url(url)
    if not verdict.accepted:
        return None, LinkValidationError(
            code="unsafe_url",
            message=f"Rejected link candidate ({verdict.reason})",
            candidate=candidate[:50],
        )
    try:
        return Link(url=verdict.url, display_text=candidate, origin=origin), None
    except ValidationError:
        return None, LinkValidationError(
            code="unsafe_url",
            message="Rejected link candidate",
            candidate=candidate[:50],
        )


def split_links(text: str) -> tuple[list[TextSpan], list[LinkValidationError]]:
    """
    Split text into plain and hyperlinked spans.

    Rejected candidates stay inside the plain spans untouched.

    Returns:
        Tuple of (spans, errors). Adjacent plain text is merged.
    """
    spans: list[TextSpan] = []
    errors: list[LinkValidationError] = []
    pending = ""
    last_end = 0

    for match in CANDIDATE_PATTERN.finditer(text):
        candidate = trim_candidate(match.group(0))
        if not candidate:
            continue
        start = match.start()
        end = start + len(candidate)

        link, error = _to_link(candidate, is_email=match.group("email") is not None)
        if error is not None:
            errors.append(error)
        if link is None:
            continue

        pending += text[last_end:start]
        if pending:
            spans.append(TextSpan(text=pending))
            pending = ""
        spans.append(TextSpan(text=candidate, link=link))
        last_end = end

    pending += text[last_end:]
    if pending:
        spans.append(TextSpan(text=pending))

    if errors:
        logger.debug("Left %d unsafe link candidate(s) as plain text", len(errors))
    return spans, errors


def scan_links(text: str) -> list[Link]:
    """Return the admitted links found in ``text``, in order."""
    spans, _ = split_links(text)
    return [span.link for span in spans if span.link is not None]
