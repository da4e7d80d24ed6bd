"""
Entity decode component - Resolve HTML character references before sanitizing.

Key behaviors:
- Decodes named references (``&lt;`` ``&amp;`` ... any HTML5 name, ``;`` required)
- Decodes decimal and hex numeric references (``&#58;`` ``&#x3A;``, ``;`` optional)
- Decoding is repeated until nothing decodable remains, so ``&amp;lt;``
  becomes ``<`` rather than surviving as ``&lt;``
- Invalid code points (NUL, surrogates, beyond U+10FFFF) become U+FFFD

The decoder works in a single left-to-right pass over a stack: any character
produced by a reference is pushed back and re-read together with the input
that follows it, so nested encodings resolve in linear time.
"""

from __future__ import annotations

import re
import string
from html.entities import html5

REPLACEMENT_CHARACTER = "�"

# Longest HTML5 entity name is 32 characters including the semicolon.
MAX_NAMED_REFERENCE = 40
MAX_CODEPOINT_DIGITS = 8

NAMED_REFERENCE = re.compile(r"([A-Za-z][A-Za-z0-9]*);")
REFERENCE_CHARS = frozenset(string.ascii_letters + string.digits + "#")
DECIMAL_DIGITS = frozenset("0123456789")
HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _codepoint_to_text(code: int | None) -> str:
    if code is None or code == 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return REPLACEMENT_CHARACTER
    return chr(code)


def _match_numeric(stack: list[str]) -> tuple[str, int] | None:
    """Match ``#123;`` / ``#x7B;`` at the top of the stack (read right to left)."""
    pos = len(stack) - 2  # stack[-1] is "#"
    digits_allowed = DECIMAL_DIGITS
    base = 10
    if pos >= 0 and stack[pos] in "xX":
        digits_allowed = HEX_DIGITS
        base = 16
        pos -= 1

    significant: list[str] = []
    seen_digit = False
    overflow = False
    while pos >= 0 and stack[pos] in digits_allowed:
        seen_digit = True
        digit = stack[pos]
        if significant or digit != "0":
            if len(significant) >= MAX_CODEPOINT_DIGITS:
                overflow = True
            else:
                significant.append(digit)
        pos -= 1

    if not seen_digit:
        return None
    if pos >= 0 and stack[pos] == ";":
        pos -= 1

    consumed = len(stack) - 1 - pos
    code = None if overflow else int("".join(significant) or "0", base)
    return _codepoint_to_text(code), consumed


def _match_named(stack: list[str]) -> tuple[str, int] | None:
    lookahead = "".join(stack[-1 : -(MAX_NAMED_REFERENCE + 1) : -1])
    match = NAMED_REFERENCE.match(lookahead)
    if match is None:
        return None
    value = html5.get(match.group(0))
    if value is None:
        return None
    return value, match.end()


def _rewind(out: list[str], stack: list[str]) -> None:
    """
    Push a trailing, so far unmatched ``&name`` fragment back for re-reading.

    A decoded character may complete a reference that started earlier, e.g.
    ``&&#108;t;`` decodes to ``&lt;`` which must then become ``<``.
    """
    limit = min(len(out), MAX_NAMED_REFERENCE)
    for offset in range(1, limit + 1):
        ch = out[-offset]
        if ch == "&":
            tail = out[-offset:]
            del out[-offset:]
            stack.extend(reversed(tail))
            return
        if ch not in REFERENCE_CHARS:
            return


def decode_entities(text: str) -> str:
    """Decode all character references in ``text`` until none remain."""
    if "&" not in text:
        return text

    stack = list(reversed(text))
    out: list[str] = []
    while stack:
        ch = stack.pop()
        if ch != "&" or not stack:
            out.append(ch)
            continue

        matched = _match_numeric(stack) if stack[-1] == "#" else _match_named(stack)
        if matched is None:
            out.append(ch)
            continue

        replacement, consumed = matched
        del stack[len(stack) - consumed :]
        if "&" in replacement or ";" in replacement or replacement in REFERENCE_CHARS:
            stack.extend(reversed(replacement))
            _rewind(out, stack)
        else:
            out.append(replacement)

    return "".join(out)


def has_entities(text: str) -> bool:
    """True if ``decode_entities`` would change ``text``."""
    return decode_entities(text) != text
