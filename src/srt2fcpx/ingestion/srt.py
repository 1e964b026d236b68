"""SubRip (SRT) parser.

Best-effort and recoverable: a malformed block is skipped with a diagnostic
appended to :attr:`ParseResult.errors` and parsing continues with the next
block.  Cues keep source order; overlapping or out-of-order timestamps are
passed through untouched.
"""

from __future__ import annotations

import logging
import re

from pysubs2.time import make_time, ms_to_times

from srt2fcpx.ingestion.sanitizer import sanitize_text
from srt2fcpx.models import Cue, ParseResult

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR_RE = re.compile(r"\n(?:[ \t]*\n)+")
_INDEX_RE = re.compile(r"[0-9]+")
_TIMING_RE = re.compile(
    r"([0-9]{2}):([0-9]{2}):([0-9]{2}),([0-9]{3})"
    r"\s*-->\s*"
    r"([0-9]{2}):([0-9]{2}):([0-9]{2}),([0-9]{3})"
)

_PREVIEW_CHARS = 50


def parse_srt(source: str) -> ParseResult:
    """Parse SRT *source* text into cues and diagnostics.

    Parameters
    ----------
    source:
        Full SRT document.  CRLF and lone CR line endings are accepted, as is
        a leading byte-order mark.

    Returns
    -------
    ParseResult
        ``cues`` in source order and ``errors`` as human-readable strings.
        A cue with empty text after sanitization is still returned, with an
        ``"Empty text in cue N"`` diagnostic.
    """
    result = ParseResult()

    normalized = source.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    for block in _BLOCK_SEPARATOR_RE.split(normalized):
        if not block.strip():
            continue
        cue = _parse_block(block, result.errors)
        if cue is not None:
            result.cues.append(cue)

    logger.debug("parse_srt: %d cues, %d diagnostics", len(result.cues), len(result.errors))
    return result


def format_srt_timecode(ms: int) -> str:
    """Format milliseconds as an SRT timecode, e.g. ``3723004`` -> ``01:02:03,004``."""
    h, m, s, frac = ms_to_times(ms)
    return f"{h:02d}:{m:02d}:{s:02d},{frac:03d}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_block(block: str, errors: list[str]) -> Cue | None:
    lines = [line for line in block.split("\n") if line.strip()]
    if len(lines) < 2:
        errors.append(f"Skipping incomplete block: {block[:_PREVIEW_CHARS]}")
        logger.debug("skipped incomplete block %r", block[:_PREVIEW_CHARS])
        return None

    index_line = lines[0].strip()
    if not _INDEX_RE.fullmatch(index_line) or int(index_line) < 1:
        errors.append(f"Invalid index: {index_line}")
        return None
    index = int(index_line)

    timing_line = lines[1].strip()
    match = _TIMING_RE.fullmatch(timing_line)
    if match is None:
        errors.append(f"Invalid timecode format: {timing_line}")
        return None

    g = [int(x) for x in match.groups()]
    start_ms = make_time(h=g[0], m=g[1], s=g[2], ms=g[3])
    end_ms = make_time(h=g[4], m=g[5], s=g[6], ms=g[7])
    if end_ms <= start_ms:
        errors.append(f"End time must be after start time in cue {index}: {timing_line}")
        return None

    text = sanitize_text("\n".join(lines[2:]))
    if not text:
        errors.append(f"Empty text in cue {index}")

    return Cue(index=index, start_ms=start_ms, end_ms=end_ms, text=text)
