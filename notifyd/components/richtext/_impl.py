"""
HTML body sanitizer for notification bodies.

Handles allow-list filtering of tags and attributes, anchor rewriting
and link extraction.

Key behaviors:
- Input is entity-decoded first, so encoded markup and encoded URL
  schemes are judged in their decoded form
- Keeps only b, i, u, a, br, p (strong/em are folded into b/i)
- Drops executable or embeddable elements together with their content
  (script, style, iframe, object, embed, img, video, audio, ...)
- Unwraps every other element: the tag goes, the text stays
- Strips every attribute except href on anchors; on* handlers never survive
- Anchors are rewritten with rel="noopener noreferrer"; anchors whose href
  fails the URL safety check are unwrapped and yield no Link
- Text outside anchors goes through the plain-text link scanner
- Output is always well formed: unclosed tags are closed at the end
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from html.parser import HTMLParser

from pydantic import ValidationError

from notifyd.components.entity_decode import decode_entities
from notifyd.components.links import split_links
from notifyd.components.url_safety import check_url
from notifyd.domain.entities import Link, LinkOrigin, SanitizedBody

from .markup import strip_html
from .models import RichTextValidationError

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class RichTextConfig:
    """Sanitizer configuration."""

    allow_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(["b", "i", "u", "a", "br", "p"])
    )

    # Elements removed together with everything inside them
    drop_content_tags: frozenset[str] = field(
        default_factory=lambda: frozenset(
            [
                "script",
                "style",
                "iframe",
                "object",
                "embed",
                "img",
                "image",
                "video",
                "audio",
                "source",
                "track",
                "picture",
                "svg",
                "math",
                "canvas",
                "noscript",
                "template",
                "frame",
                "frameset",
                "applet",
                "head",
                "title",
                "textarea",
                "select",
                "button",
            ]
        )
    )

    tag_aliases: dict[str, str] = field(default_factory=lambda: {"strong": "b", "em": "i"})

    link_rel: str = "noopener noreferrer"
    enable_links: bool = True
    max_links_per_body: int = 100


DEFAULT_CONFIG = RichTextConfig()

# Elements that never have content or a closing tag
VOID_TAGS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)


@dataclass
class _Anchor:
    url: str | None
    text_parts: list[str] = field(default_factory=list)


class _SanitizingParser(HTMLParser):
    def __init__(self, config: RichTextConfig) -> None:
        super().__init__(convert_charrefs=True)
        self._config = config
        self._out: list[str] = []
        self._open: list[str] = []
        self._anchors: list[_Anchor] = []
        self._dropping: list[str] = []
        self.links: list[Link] = []
        self.errors: list[RichTextValidationError] = []

    # --- Tag handling ---

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._dropping:
            if tag in self._config.drop_content_tags and tag not in VOID_TAGS:
                self._dropping.append(tag)
            return

        if tag in self._config.drop_content_tags:
            self._strip(tag, "dropped_element")
            if tag not in VOID_TAGS:
                self._dropping.append(tag)
            return

        tag = self._config.tag_aliases.get(tag, tag)
        if tag not in self._config.allow_tags:
            self._strip(tag, "unwrapped_element")
            return

        if any(name.startswith("on") for name, _ in attrs):
            self._strip(tag, "event_handler_removed")

        if tag == "br":
            self._out.append("<br>")
        elif tag == "a":
            self._open_anchor(attrs)
        else:
            self._out.append(f"<{tag}>")
            self._open.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._dropping or tag in self._config.drop_content_tags:
            if not self._dropping:
                self._strip(tag, "dropped_element")
            return
        self.handle_starttag(tag, attrs)
        if self._config.tag_aliases.get(tag, tag) != "br":
            self.handle_endtag(tag)

    def handle_endtag(self, tag: str) -> None:
        if self._dropping:
            if tag in self._dropping:
                while self._dropping and self._dropping.pop() != tag:
                    pass
            return

        tag = self._config.tag_aliases.get(tag, tag)
        if tag not in self._open:
            return
        while self._open:
            current = self._open.pop()
            self._emit_close(current)
            if current == tag:
                break

    def handle_data(self, data: str) -> None:
        if self._dropping or not data:
            return

        if self._anchors:
            self._anchors[-1].text_parts.append(data)
            self._out.append(html.escape(data, quote=False))
            return

        if not self._config.enable_links:
            self._out.append(html.escape(data, quote=False))
            return

        spans, _ = split_links(data)
        for span in spans:
            if span.link is not None and len(self.links) < self._config.max_links_per_body:
                self.links.append(span.link)
                self._out.append(
                    f'<a href="{html.escape(span.link.url)}" rel="{self._config.link_rel}">'
                    f"{html.escape(span.text, quote=False)}</a>"
                )
            else:
                self._out.append(html.escape(span.text, quote=False))

    # Comments, doctypes and processing instructions are dropped by not
    # overriding handle_comment / handle_decl / handle_pi.

    # --- Anchors ---

    def _open_anchor(self, attrs: list[tuple[str, str | None]]) -> None:
        # Anchors do not nest; a new one implicitly closes the previous.
        if "a" in self._open:
            self.handle_endtag("a")

        href = next((value for name, value in attrs if name == "href"), None)
        url: str | None = None
        if not self._config.enable_links:
            pass
        elif href is None:
            self._strip("a", "missing_href")
        elif len(self.links) >= self._config.max_links_per_body:
            self._strip("a", "max_links_exceeded")
        else:
            verdict = check_url(href)
            if verdict.accepted:
                url = verdict.url
            else:
                self.errors.append(
                    RichTextValidationError(
                        code="unsafe_url",
                        message=f"Unsafe URL in href ({verdict.reason}): {href[:50]}",
                    )
                )

        self._anchors.append(_Anchor(url=url))
        self._open.append("a")
        if url is not None:
            self._out.append(f'<a href="{html.escape(url)}" rel="{self._config.link_rel}">')

    def _close_anchor(self) -> None:
        anchor = self._anchors.pop()
        if anchor.url is None:
            return
        self._out.append("</a>")
        display_text = "".join(anchor.text_parts).strip() or anchor.url
        try:
            self.links.append(
                Link(url=anchor.url, display_text=display_text, origin=LinkOrigin.ANCHOR)
            )
        except ValidationError:
            # check_url already admitted the URL; Link applies the same rule.
            logger.warning("Anchor URL rejected on Link construction")

    # --- Helpers ---

    def _emit_close(self, tag: str) -> None:
        if tag == "a":
            self._close_anchor()
        else:
            self._out.append(f"</{tag}>")

    def _strip(self, tag: str, code: str) -> None:
        self.errors.append(RichTextValidationError(code=code, message=f"Tag '{tag}': {code}"))

    def finish(self) -> str:
        self.close()
        while self._open:
            self._emit_close(self._open.pop())
        return "".join(self._out)


def sanitize_html(
    text: str,
    config: RichTextConfig = DEFAULT_CONFIG,
) -> tuple[SanitizedBody, list[RichTextValidationError]]:
    """
    Sanitize already entity-decoded HTML.

    Returns:
        Tuple of (sanitized body, list of removals/refusals)
    """
    if not text:
        return SanitizedBody(), []

    parser = _SanitizingParser(config)
    try:
        # Escape bare ampersands so the parser reproduces them literally
        # instead of re-reading legacy references such as "&copy".
        parser.feed(text.replace("&", "&amp;"))
        markup = parser.finish()
    except (AssertionError, ValueError) as exc:
        logger.warning("HTML parser failed on body, falling back to plain text: %s", exc)
        return (
            SanitizedBody(markup=html.escape(strip_html(text), quote=False)),
            [RichTextValidationError(code="parse_failed", message=str(exc)[:100])],
        )

    if parser.errors:
        logger.debug("Sanitizer removed %d item(s) from body", len(parser.errors))
    return SanitizedBody(markup=markup, links=tuple(parser.links)), parser.errors


def sanitize_body(
    raw: str,
    config: RichTextConfig = DEFAULT_CONFIG,
) -> tuple[SanitizedBody, list[RichTextValidationError]]:
    """Decode entities, then sanitize. The order is what defeats encoded payloads."""
    return sanitize_html(decode_entities(raw), config)
