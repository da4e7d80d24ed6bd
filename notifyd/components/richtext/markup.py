"""
Markup helpers for already sanitized notification text.

- parse_markup: sanitized markup -> styled segments for renderers
- strip_html: any text -> plain text (summary, labels, app names)
- has_rich_content: whether text carries real b/i/u/a/p/br tags
"""

from __future__ import annotations

import re
from dataclasses import replace
from html.parser import HTMLParser

from notifyd.components.entity_decode import decode_entities

from .models import StyledSegment, TextStyle

RICH_TAG_PATTERN = re.compile(r"<\s*/?(?:b|i|u|a|p|br)(?:\s+[^>]*)?/?>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"</?[A-Za-z][^>]*>")
SCRIPT_OPEN_PATTERN = re.compile(r"<(script|style)\b[^>]*>", re.IGNORECASE)
SCRIPT_CLOSE_PATTERNS = {
    "script": re.compile(r"</script\s*>", re.IGNORECASE),
    "style": re.compile(r"</style\s*>", re.IGNORECASE),
}
CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _tag_end(text: str) -> int:
    # No tag can match past the last '>'; searching stops there so an
    # unterminated '<' run is not rescanned from every start.
    return text.rfind(">") + 1


def has_rich_content(text: str) -> bool:
    """True if text contains actual markup tags, not escaped entities or bare '<'."""
    return bool(RICH_TAG_PATTERN.search(text, 0, _tag_end(text)))


def _drop_script_blocks(text: str) -> str:
    parts: list[str] = []
    unclosed: set[str] = set()
    end = _tag_end(text)
    pos = 0
    while True:
        opening = SCRIPT_OPEN_PATTERN.search(text, pos, end)
        if opening is None:
            break
        name = opening.group(1).lower()
        closing = None
        if name not in unclosed:
            closing = SCRIPT_CLOSE_PATTERNS[name].search(text, opening.end())
        if closing is None:
            # Unclosed blocks keep their text; only the tag is removed later
            unclosed.add(name)
            parts.append(text[pos : opening.end()])
            pos = opening.end()
            continue
        parts.append(text[pos : opening.start()])
        pos = closing.end()
    parts.append(text[pos:])
    return "".join(parts)


def _remove_tags(text: str) -> str:
    text = _drop_script_blocks(text)
    end = _tag_end(text)
    return TAG_PATTERN.sub("", text[:end]) + text[end:]


def strip_html(text: str) -> str:
    """
    Reduce text to plain text.

    Real tags are removed while entities are still encoded, then entities
    are decoded and any tags that only existed in encoded form are removed
    as well, so neither form of a payload survives.
    """
    if not text:
        return ""
    decoded = decode_entities(_remove_tags(text))
    return CONTROL_PATTERN.sub("", _remove_tags(decoded))


class _MarkupParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.segments: list[StyledSegment] = []
        self._style = TextStyle()
        self._link: str | None = None
        self._stack: list[tuple[str, TextStyle, str | None]] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in ("br", "p"):
            self.segments.append(StyledSegment(text="\n"))
            return

        previous = (self._style, self._link)
        if tag in ("b", "strong"):
            self._stack.append(("b", *previous))
            self._style = replace(self._style, bold=True)
        elif tag in ("i", "em"):
            self._stack.append(("i", *previous))
            self._style = replace(self._style, italic=True)
        elif tag == "u":
            self._stack.append(("u", *previous))
            self._style = replace(self._style, underline=True)
        elif tag == "a":
            href = next((value for name, value in attrs if name == "href"), None)
            if href:
                self._stack.append(("a", *previous))
                self._link = href
                self._style = replace(self._style, underline=True)

    def handle_endtag(self, tag: str) -> None:
        tag = {"strong": "b", "em": "i"}.get(tag, tag)
        if self._stack and self._stack[-1][0] == tag:
            _, self._style, self._link = self._stack.pop()

    def handle_data(self, data: str) -> None:
        if data:
            self.segments.append(StyledSegment(text=data, style=self._style, link=self._link))


def merge_segments(segments: list[StyledSegment]) -> list[StyledSegment]:
    """Merge adjacent segments that share style and link."""
    merged: list[StyledSegment] = []
    for segment in segments:
        if merged and merged[-1].style == segment.style and merged[-1].link == segment.link:
            merged[-1] = replace(merged[-1], text=merged[-1].text + segment.text)
        else:
            merged.append(segment)
    return merged


def parse_markup(markup: str) -> list[StyledSegment]:
    """
    Parse sanitized markup into styled segments.

    Supports b/strong, i/em, u and a[href]; br and p become newlines.
    Nested tags combine their styles.
    """
    if not markup:
        return []
    parser = _MarkupParser()
    parser.feed(markup)
    parser.close()
    return merge_segments(parser.segments)


def segments_to_plain_text(segments: list[StyledSegment]) -> str:
    """Join segment texts (fallback rendering)."""
    return "".join(segment.text for segment in segments)
