"""srt2fcpx: convert SRT subtitles into Final Cut Pro XML title timelines."""
from typing import Optional

from srt2fcpx.config.schema import ConversionOptions
from srt2fcpx.errors import NoCuesError, Srt2FcpxError
from srt2fcpx.fcpxml.builder import build_document, build_document_from_template
from srt2fcpx.ingestion.sanitizer import decode_entities, sanitize_text, strip_markup
from srt2fcpx.ingestion.srt import format_srt_timecode, parse_srt
from srt2fcpx.models import Cue, ParseResult

__version__ = "0.1.0"


def require_cues(result: ParseResult) -> list[Cue]:
    """Return the parsed cues, raising NoCuesError when there are none.

    Diagnostics alone are not fatal; an input that yields zero cues is.
    """
    if not result.cues:
        raise NoCuesError(result.errors)
    return result.cues


def convert_srt_to_fcpxml(source: str, options: Optional[ConversionOptions] = None) -> str:
    """Parse SRT *source* and build an FCPXML document.

    Raises:
        NoCuesError: If no valid cue could be parsed.
        UnsafeTextError: If a cue's text matches a dangerous pattern.
    """
    cues = require_cues(parse_srt(source))
    return build_document(cues, options)


__all__ = [
    "ConversionOptions",
    "Cue",
    "NoCuesError",
    "ParseResult",
    "Srt2FcpxError",
    "build_document",
    "build_document_from_template",
    "convert_srt_to_fcpxml",
    "decode_entities",
    "format_srt_timecode",
    "parse_srt",
    "require_cues",
    "sanitize_text",
    "strip_markup",
]
