"""Subtitle text sanitizer.

Turns raw cue text (inline HTML styling, character entities, pasted or
crafted markup) into plain display text.  Legitimate Unicode and intentional
line breaks are kept; anything tag-shaped is removed so that no raw angle
bracket survives.

Two entry points:

``strip_markup``
    Markup removal and whitespace normalization only.  Idempotent.
``sanitize_text``
    The full cue-text pipeline used by the SRT parser: markup removal,
    a single entity-decoding pass, whitespace normalization, and the
    ``&nbsp;`` trim rule.

Nothing here raises or logs; malformed input degrades to the best plausible
plain text.
"""

from __future__ import annotations

import re
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Entity table: looked up case-insensitively, never mutated.
# ---------------------------------------------------------------------------
NAMED_ENTITIES: MappingProxyType[str, str] = MappingProxyType({
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
    "copy": "©",
    "reg": "®",
    "trade": "™",
    "euro": "€",
    "pound": "£",
    "yen": "¥",
})

MAX_CODE_POINT = 0x10FFFF
_SURROGATES = range(0xD800, 0xDFFF + 1)

_ENTITY_RE = re.compile(r"&(?:#[xX]([0-9A-Fa-f]+)|#(-?[0-9]+)|([A-Za-z]+));")

_SCRIPT_RE = re.compile(r"<script\b[\s\S]*?</script\s*>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[\s\S]*?</style\s*>", re.IGNORECASE)
_INLINE_TAG_RE = re.compile(
    r"</?(?:b|i|u|strong|em|font|span|a|small|sub|sup)(?:\s[^>]*)?/?>", re.IGNORECASE
)
_BREAK_AFTER_PUNCT_RE = re.compile(r"([.!?:;])</?(?:br|hr)(?:\s[^>]*)?/?>", re.IGNORECASE)
_BREAK_RE = re.compile(r"</?(?:br|hr)(?:\s[^>]*)?/?>", re.IGNORECASE)
_BLOCK_TAG_RE = re.compile(r"</?(?:p|div)(?:\s[^>]*)?/?>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]*>")
_UNCLOSED_TAG_RE = re.compile(r"<[^>]*$")

_LEADING_NBSP_RE = re.compile(r"^\s*&nbsp;", re.IGNORECASE)
_TRAILING_NBSP_RE = re.compile(r"&nbsp;\s*$", re.IGNORECASE)

_COMMENT_OPEN = "<!--"
_COMMENT_CLOSE = "-->"


def decode_entities(text: str) -> str:
    """Resolve named and numeric character references in a single pass.

    Decoded output is never re-scanned, so ``&amp;amp;`` becomes ``&amp;``.
    Numeric references outside the Unicode scalar range (zero, negative,
    surrogates, above U+10FFFF) decode to the empty string.  Unknown named
    entities are left exactly as written.
    """
    return _ENTITY_RE.sub(_decode_match, text)


def strip_markup(text: str) -> str:
    """Remove HTML-like markup and normalize whitespace.

    Entities are left undecoded, which keeps this pass idempotent:
    ``strip_markup(strip_markup(x)) == strip_markup(x)``.
    """
    return _normalize_whitespace(_remove_markup(text)).strip()


def sanitize_text(text: str) -> str:
    """Convert raw cue text into display-safe plain text.

    Markup goes first so that entities hidden inside removed tags never
    join the surrounding text, then entities are decoded exactly once.
    Leading/trailing whitespace is trimmed unless the original text started
    (or ended) with ``&nbsp;``, in which case one space is kept on that side.
    """
    cleaned = decode_entities(_remove_markup(text))
    cleaned = _normalize_whitespace(cleaned)

    if _LEADING_NBSP_RE.match(text):
        cleaned = re.sub(r"^\s+", " ", cleaned)
    else:
        cleaned = cleaned.lstrip()
    if _TRAILING_NBSP_RE.search(text):
        cleaned = re.sub(r"\s+$", " ", cleaned)
    else:
        cleaned = cleaned.rstrip()
    return cleaned


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _decode_match(match: re.Match[str]) -> str:
    hex_digits, dec_digits, name = match.groups()
    if name is not None:
        return NAMED_ENTITIES.get(name.lower(), match.group(0))
    if hex_digits is not None:
        # Anything longer cannot be <= 0x10FFFF; also avoids huge int parsing.
        if len(hex_digits.lstrip("0")) > 6:
            return ""
        return _code_point_to_char(int(hex_digits, 16))
    if len(dec_digits.lstrip("-0")) > 7:
        return ""
    return _code_point_to_char(int(dec_digits, 10))


def _code_point_to_char(code: int) -> str:
    if code < 1 or code > MAX_CODE_POINT or code in _SURROGATES:
        return ""
    return chr(code)


def _remove_markup(text: str) -> str:
    """Markup passes 1-6; the result contains no ``<``."""
    cleaned = _SCRIPT_RE.sub("", text)
    cleaned = _STYLE_RE.sub("", cleaned)
    cleaned = _remove_comments(cleaned)
    cleaned = _INLINE_TAG_RE.sub("", cleaned)
    cleaned = _BREAK_AFTER_PUNCT_RE.sub(r"\1 ", cleaned)
    cleaned = _BREAK_RE.sub("", cleaned)
    cleaned = _BLOCK_TAG_RE.sub(" ", cleaned)
    cleaned = _ANY_TAG_RE.sub(" ", cleaned)
    return _UNCLOSED_TAG_RE.sub(" ", cleaned)


def _remove_comments(text: str) -> str:
    """Excise ``<!-- ... -->`` comments, honoring nested openers.

    Each excised comment leaves exactly one space behind (surrounding spaces
    are absorbed).  An unterminated comment swallows the rest of the text;
    a ``-->`` outside any comment is ordinary text.
    """
    if _COMMENT_OPEN not in text:
        return text

    out: list[str] = []
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        if text.startswith(_COMMENT_OPEN, i):
            if depth == 0:
                while out and out[-1] == " ":
                    out.pop()
            depth += 1
            i += len(_COMMENT_OPEN)
        elif depth > 0 and text.startswith(_COMMENT_CLOSE, i):
            depth -= 1
            i += len(_COMMENT_CLOSE)
            if depth == 0:
                out.append(" ")
                while i < n and text[i] == " ":
                    i += 1
        else:
            if depth == 0:
                out.append(text[i])
            i += 1
    return "".join(out)


def _normalize_whitespace(text: str) -> str:
    cleaned = re.sub(r"[\t\r\f\v]", " ", text)
    cleaned = re.sub(r" *\n *", "\n", cleaned)
    cleaned = re.sub(r"\n+", "\n", cleaned)
    return re.sub(r" {3,}", "  ", cleaned)
