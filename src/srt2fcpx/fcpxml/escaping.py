"""Injection gate and XML escaping for FCPXML output.

``check_text`` / ``validate_text`` are the loud, early gate: clearly
malicious cue text is rejected with :class:`UnsafeTextError` instead of being
quietly neutralized.  Text that passes goes through ``sanitize_structural``
and then one of the two escapers, depending on whether it lands in an
attribute value or in element content.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from srt2fcpx.errors import InvalidAttributeNameError, UnsafeTextError
from srt2fcpx.ingestion.sanitizer import strip_markup

# (reason, pattern): first match wins.
_DANGEROUS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("DOCTYPE declaration", re.compile(r"<!DOCTYPE", re.IGNORECASE)),
    ("ENTITY declaration", re.compile(r"<!ENTITY", re.IGNORECASE)),
    ("comment opening sequence", re.compile(r"<!--")),
    ("CDATA section marker", re.compile(r"<!\[CDATA\[|\]\]>", re.IGNORECASE)),
    ("XML declaration", re.compile(r"<\?xml", re.IGNORECASE)),
    ("script tag", re.compile(r"<\s*/?\s*script", re.IGNORECASE)),
    ("javascript: URI", re.compile(r"javascript\s*:", re.IGNORECASE)),
    ("data: URI", re.compile(r"\bdata\s*:\s*(?:[a-z]+/[\w.+-]+|[;,])", re.IGNORECASE)),
)

_XML_DECLARATION_RE = re.compile(r"<\?xml[\s\S]*?\?>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
_PROCESSING_INSTRUCTION_RE = re.compile(r"<\?[\s\S]*?\?>")
_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
_CDATA_RE = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>", re.IGNORECASE)

# C0 controls except tab, LF, CR; plus DEL.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")
_NONCHARACTER_RE = re.compile(
    "[\ufdd0-\ufdef\ufffe\uffff"
    + "".join(
        f"{chr(plane * 0x10000 + 0xFFFE)}{chr(plane * 0x10000 + 0xFFFF)}"
        for plane in range(1, 17)
    )
    + "]"
)

_ATTRIBUTE_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.-]*")


def check_text(text: str) -> Optional[str]:
    """Return why *text* must be rejected, or ``None`` if it is acceptable."""
    for reason, pattern in _DANGEROUS_PATTERNS:
        if pattern.search(text):
            return reason
    return None


def validate_text(text: str) -> None:
    """Raise :class:`UnsafeTextError` if *text* matches a dangerous pattern."""
    reason = check_text(text)
    if reason is not None:
        raise UnsafeTextError(text, reason)


def sanitize_structural(text: str) -> str:
    """Drop XML structure remnants and unwrap CDATA, then strip markup.

    A single space already at either edge of *text* is kept, so cue text
    indented with ``&nbsp;`` reaches the document intact.

    The comment and CDATA passes only matter when this is called on its
    own: text that went through ``validate_text`` cannot contain ``<!--``,
    ``<![CDATA[`` or ``]]>``.
    """
    cleaned = _XML_DECLARATION_RE.sub("", text)
    cleaned = _DOCTYPE_RE.sub("", cleaned)
    cleaned = _PROCESSING_INSTRUCTION_RE.sub("", cleaned)
    cleaned = _COMMENT_RE.sub(" ", cleaned)
    cleaned = _CDATA_RE.sub(r"\1", cleaned)
    stripped = strip_markup(cleaned)
    if not stripped:
        return stripped
    if text.startswith(" "):
        stripped = " " + stripped
    if text.endswith(" "):
        stripped += " "
    return stripped


def escape_content(text: str) -> str:
    """Escape text for XML element content.

    All valid Unicode is kept, including supplementary-plane characters;
    only C0 control characters (other than tab/LF/CR) and DEL are dropped.
    """
    cleaned = _CONTROL_RE.sub("", text)
    return (
        cleaned.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def escape_attribute(text: str) -> str:
    """Escape text for a double-quoted XML attribute value.

    Raw LF/CR/tab would be normalized away by XML parsers, so they are
    written as character references.  Lone surrogates and non-characters
    are dropped along with control characters.
    """
    cleaned = _CONTROL_RE.sub("", text)
    cleaned = _SURROGATE_RE.sub("", cleaned)
    cleaned = _NONCHARACTER_RE.sub("", cleaned)
    return (
        cleaned.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("\n", "&#10;")
        .replace("\r", "&#13;")
        .replace("\t", "&#9;")
    )


def build_attributes(attributes: Mapping[str, object]) -> str:
    """Serialize *attributes* as ``key="value"`` pairs in insertion order.

    Raises:
        InvalidAttributeNameError: If a key is not a valid XML name.
    """
    parts = []
    for name, value in attributes.items():
        if not _ATTRIBUTE_NAME_RE.fullmatch(name):
            raise InvalidAttributeNameError(name)
        parts.append(f'{name}="{escape_attribute(str(value))}"')
    return " ".join(parts)
