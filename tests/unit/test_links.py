"""
Tests for the plain-text link scanner.

Test assertions:
- Bare http(s) URLs and www. hosts become PlainText links
- Email addresses become mailto: links with Email origin
- Candidates with unsafe schemes stay plain text
- Trailing sentence punctuation is not part of a link
- Scanning stays fast on adversarial text
"""

from __future__ import annotations

import time

import pytest

from notifyd.components.links import (
    ScanLinksInput,
    run_scan,
    scan_links,
    split_links,
    trim_candidate,
)
from notifyd.domain.entities import LinkOrigin


class TestTrimCandidate:
    @pytest.mark.parametrize(
        ("candidate", "trimmed"),
        [
            ("https://example.com.", "https://example.com"),
            ("https://example.com/a,", "https://example.com/a"),
            ("https://example.com/a)", "https://example.com/a"),
            ("https://en.wikipedia.org/wiki/Foo_(bar)", "https://en.wikipedia.org/wiki/Foo_(bar)"),
            ("https://example.com/?!", "https://example.com/"),
        ],
    )
    def test_trim(self, candidate: str, trimmed: str) -> None:
        assert trim_candidate(candidate) == trimmed


class TestScanLinks:
    def test_bare_url(self) -> None:
        links = scan_links("See https://example.com/docs for details")
        assert len(links) == 1
        assert links[0].url == "https://example.com/docs"
        assert links[0].display_text == "https://example.com/docs"
        assert links[0].origin == LinkOrigin.PLAIN_TEXT

    def test_www_normalized_to_https(self) -> None:
        links = scan_links("Visit www.example.org today")
        assert links[0].url == "https://www.example.org"
        assert links[0].display_text == "www.example.org"

    def test_email(self) -> None:
        links = scan_links("Mail alice@example.com.")
        assert len(links) == 1
        assert links[0].url == "mailto:alice@example.com"
        assert links[0].origin == LinkOrigin.EMAIL

    def test_explicit_mailto(self) -> None:
        links = scan_links("write to mailto:bob@example.com")
        assert links[0].url == "mailto:bob@example.com"
        assert links[0].origin == LinkOrigin.EMAIL

    def test_multiple_in_order(self) -> None:
        links = scan_links("a http://one.example b https://two.example c")
        assert [link.url for link in links] == ["http://one.example", "https://two.example"]

    @pytest.mark.parametrize(
        "text",
        [
            "click javascript:alert(document.cookie)",
            "data:text/html;base64,PHNjcmlwdD4=",
            "vbscript:msgbox(1)",
            "file:///etc/passwd",
            "ftp://files.example.com",
        ],
    )
    def test_unsafe_candidates_not_linked(self, text: str) -> None:
        assert scan_links(text) == []


class TestSplitLinks:
    def test_spans_cover_text(self) -> None:
        text = "Go to https://example.com, now"
        spans, errors = split_links(text)
        assert "".join(span.text for span in spans) == text
        assert [span.link is not None for span in spans] == [False, True, False]
        assert errors == []

    def test_rejected_candidate_left_as_text(self) -> None:
        text = "run javascript:alert(1) here"
        spans, errors = split_links(text)
        assert len(spans) == 1
        assert spans[0].text == text
        assert spans[0].link is None
        assert errors[0].code == "unsafe_url"

    def test_no_candidates(self) -> None:
        spans, errors = split_links("nothing to see")
        assert [span.text for span in spans] == ["nothing to see"]
        assert errors == []


class TestHostileText:
    """Adversarial bodies are scanned in time linear in their length."""

    @pytest.mark.parametrize(
        "text",
        [
            "%" * 100_000,
            "a." * 50_000,
            "a-" * 50_000,
            "a@" * 50_000,
            "x@" + "a." * 50_000,
            "https://example.com/" + ")" * 50_000,
            "https://example.com/" + "." * 50_000,
        ],
    )
    def test_scan_is_fast(self, text: str) -> None:
        started = time.perf_counter()
        split_links(text)
        assert time.perf_counter() - started < 1.0

    def test_long_local_part_not_linked(self) -> None:
        assert scan_links("a" * 65 + "@example.com") == []

    def test_email_after_percent_run(self) -> None:
        links = scan_links("%%%% bob@example.com")
        assert [link.url for link in links] == ["mailto:bob@example.com"]

    def test_long_scheme_not_linked(self) -> None:
        assert scan_links("a" * 40 + "://example.com") == []

    def test_unbalanced_brackets_trimmed(self) -> None:
        assert trim_candidate("https://example.com/" + ")" * 1000) == "https://example.com/"


def test_run_scan() -> None:
    output = run_scan(ScanLinksInput(text="x https://example.com y javascript:z()"))
    assert output.success
    assert len(output.links) == 1
    assert len(output.errors) == 1
