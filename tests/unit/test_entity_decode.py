"""
Tests for the entity decoder.

Test assertions:
- Named and numeric references decode to literal characters
- Decoding repeats until nothing decodable remains
- Invalid code points become U+FFFD
"""

from __future__ import annotations

import pytest

from notifyd.components.entity_decode import (
    REPLACEMENT_CHARACTER,
    decode_entities,
    has_entities,
)


class TestNamedReferences:
    @pytest.mark.parametrize(
        ("encoded", "decoded"),
        [
            ("&lt;", "<"),
            ("&gt;", ">"),
            ("&quot;", '"'),
            ("&amp;", "&"),
            ("&apos;", "'"),
            ("&copy; 2024", "© 2024"),
        ],
    )
    def test_decodes(self, encoded: str, decoded: str) -> None:
        assert decode_entities(encoded) == decoded

    def test_requires_semicolon(self) -> None:
        assert decode_entities("&lt no semicolon") == "&lt no semicolon"

    def test_unknown_name_kept(self) -> None:
        assert decode_entities("&notanentity;") == "&notanentity;"


class TestNumericReferences:
    @pytest.mark.parametrize(
        ("encoded", "decoded"),
        [
            ("&#39;", "'"),
            ("&#58;", ":"),
            ("&#x3A;", ":"),
            ("&#X3a;", ":"),
            ("&#106;avascript", "javascript"),
            ("&#0000060;", "<"),
        ],
    )
    def test_decodes(self, encoded: str, decoded: str) -> None:
        assert decode_entities(encoded) == decoded

    def test_semicolon_optional(self) -> None:
        assert decode_entities("&#60script") == "<script"

    @pytest.mark.parametrize("encoded", ["&#0;", "&#xD800;", "&#x110000;", "&#99999999999;"])
    def test_invalid_code_points(self, encoded: str) -> None:
        assert decode_entities(encoded) == REPLACEMENT_CHARACTER

    def test_hash_without_digits_kept(self) -> None:
        assert decode_entities("&#;") == "&#;"
        assert decode_entities("&#x;") == "&#x;"


class TestRecursiveDecoding:
    def test_double_encoded(self) -> None:
        assert decode_entities("&amp;lt;script&amp;gt;") == "<script>"

    def test_triple_encoded(self) -> None:
        assert decode_entities("&amp;amp;#58;") == ":"

    def test_reference_completed_by_decoded_character(self) -> None:
        # "&#108;" is "l", which completes the "&lt;" that precedes it
        assert decode_entities("&&#108;t;") == "<"

    def test_no_escapes_remain(self) -> None:
        decoded = decode_entities("&amp;#x26;#x26;lt;")
        assert "&" not in decoded
        assert decoded == "<"

    def test_long_input_is_linear(self) -> None:
        text = "&amp;" * 20000
        assert decode_entities(text) == "&" * 20000


class TestPlainText:
    def test_no_ampersand_is_identity(self) -> None:
        text = "Plain text with <b>tags</b>"
        assert decode_entities(text) is text

    def test_lone_ampersand(self) -> None:
        assert decode_entities("Fish & Chips") == "Fish & Chips"
        assert decode_entities("trailing &") == "trailing &"

    def test_has_entities(self) -> None:
        assert has_entities("a &amp; b")
        assert not has_entities("a & b")
