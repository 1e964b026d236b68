"""FCPXML document assembly: one Basic Title clip per cue on a single spine."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from srt2fcpx.config.schema import ConversionOptions
from srt2fcpx.errors import TemplateError
from srt2fcpx.fcpxml.escaping import (
    build_attributes,
    escape_attribute,
    escape_content,
    sanitize_structural,
    validate_text,
)
from srt2fcpx.fcpxml.timecode import format_number, hex_to_color_vector, ms_to_frame_fraction
from srt2fcpx.models import Cue

_logger = logging.getLogger(__name__)

TITLE_EFFECT_UID = ".../Titles.localized/Bumper:Opener.localized/Basic Title.localized/Basic Title.moti"
DISPLAY_NAME_CHARS = 20

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_]+)\}\}")


@dataclass(frozen=True)
class TitleStyle:
    """Per-document values shared by every title, converted once."""
    frame_rate: float
    font_family: str
    font_size: str
    font_face: str
    font_color: str
    background_color: str
    stroke_color: Optional[str]     # None when stroke is disabled
    stroke_width: Optional[str]

    @classmethod
    def from_options(cls, options: ConversionOptions) -> "TitleStyle":
        stroked = options.stroke_width != 0
        return cls(
            frame_rate=options.frame_rate,
            font_family=options.font_family,
            font_size=format_number(options.font_size),
            font_face=options.font_face,
            font_color=hex_to_color_vector(options.text_color),
            background_color=hex_to_color_vector(options.background_color),
            stroke_color=hex_to_color_vector(options.stroke_color) if stroked else None,
            stroke_width=format_number(options.stroke_width) if stroked else None,
        )


def display_name(text: str) -> str:
    """Clip name preview: first 20 characters, newlines as spaces, ``...`` if cut."""
    preview = text[:DISPLAY_NAME_CHARS].replace("\n", " ")
    return f"{preview}..." if len(text) > DISPLAY_NAME_CHARS else preview


def emit_title(
    cue: Cue,
    index: int,
    options: ConversionOptions,
    style: Optional[TitleStyle] = None,
) -> str:
    """Render one ``<title>`` element for *cue* at spine position *index* (0-based).

    Raises:
        UnsafeTextError: If the cue text matches a dangerous pattern.
    """
    validate_text(cue.text)
    if style is None:
        style = TitleStyle.from_options(options)

    clean_text = sanitize_structural(cue.text)
    offset = ms_to_frame_fraction(cue.start_ms, style.frame_rate)
    duration = ms_to_frame_fraction(cue.duration_ms, style.frame_rate)
    style_id = f"ts{index + 1}"

    title_attrs = build_attributes({
        "name": f"Basic Title: {display_name(clean_text)}",
        "offset": offset,
        "ref": "r2",
        "duration": duration,
        "start": offset,
    })
    text_style: dict[str, object] = {
        "font": style.font_family,
        "fontSize": style.font_size,
        "fontFace": style.font_face,
        "fontColor": style.font_color,
        "backgroundColor": style.background_color,
        "alignment": "center",
    }
    if style.stroke_width is not None:
        text_style["strokeColor"] = style.stroke_color
        text_style["strokeWidth"] = style.stroke_width

    return (
        f"            <title {title_attrs}>\n"
        f"              <text>\n"
        f"                <text-style ref=\"{style_id}\">{escape_content(clean_text)}</text-style>\n"
        f"              </text>\n"
        f"              <text-style-def id=\"{style_id}\">\n"
        f"                <text-style {build_attributes(text_style)}/>\n"
        f"              </text-style-def>\n"
        f"            </title>\n"
    )


def emit_titles(cues: Sequence[Cue], options: ConversionOptions) -> str:
    style = TitleStyle.from_options(options)
    return "".join(emit_title(cue, i, options, style) for i, cue in enumerate(cues))


def build_document(cues: Sequence[Cue], options: Optional[ConversionOptions] = None) -> str:
    """Build a complete FCPXML document with one title per cue.

    Args:
        cues: Cues in timeline order (as returned by ``parse_srt``).
        options: Conversion options; defaults are used when omitted.

    Returns:
        The FCPXML document as a string.

    Raises:
        UnsafeTextError: If any cue text matches a dangerous pattern.
    """
    options = options if options is not None else ConversionOptions()
    values = _document_values(cues, options)
    _logger.debug("build_document: %d titles, duration %s", len(cues), values["DURATION"])

    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<!DOCTYPE fcpxml>\n"
        f'<fcpxml version="{values["FORMAT_VERSION"]}">\n'
        f"  <resources>\n"
        f'    <format id="r1" name="{values["FORMAT_NAME"]}" frameDuration="{values["FRAME_DURATION"]}"'
        f' width="{values["WIDTH"]}" height="{values["HEIGHT"]}"/>\n'
        f'    <effect id="r2" name="Basic Title" uid="{TITLE_EFFECT_UID}"/>\n'
        f"  </resources>\n"
        f"  <library>\n"
        f'    <event name="{values["TITLE"]}">\n'
        f'      <project name="{values["TITLE"]}">\n'
        f'        <sequence format="r1" duration="{values["DURATION"]}" tcStart="0s" tcFormat="NDF">\n'
        f"          <spine>\n"
        f'{values["TITLES"]}'
        f"          </spine>\n"
        f"        </sequence>\n"
        f"      </project>\n"
        f"    </event>\n"
        f"  </library>\n"
        f"</fcpxml>"
    )


def build_document_from_template(
    cues: Sequence[Cue],
    template: str,
    options: Optional[ConversionOptions] = None,
) -> str:
    """Fill ``{{NAME}}`` placeholders of an FCPXML *template*.

    Substitution is a single pass, so placeholder-like text inside
    substituted values is never expanded.  Unknown placeholders are left
    as-is.

    Raises:
        TemplateError: If the template has no ``{{TITLES}}`` placeholder.
        UnsafeTextError: If any cue text matches a dangerous pattern.
    """
    if "{{TITLES}}" not in template:
        raise TemplateError("Template has no {{TITLES}} placeholder; cues would be dropped.")
    options = options if options is not None else ConversionOptions()
    values = _document_values(cues, options)
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def _document_values(cues: Sequence[Cue], options: ConversionOptions) -> dict[str, str]:
    """Derived values shared by both emission modes, keyed by placeholder name."""
    rate = format_number(options.frame_rate)
    max_end_ms = max((c.end_ms for c in cues), default=0)
    return {
        "TITLE": escape_attribute(options.title_name),
        "FORMAT_VERSION": escape_attribute(options.format_version),
        "FRAME_RATE": rate,
        "FRAME_DURATION": f"1/{rate}s",
        "FORMAT_NAME": f"FFVideoFormat{options.height}p{rate}",
        "WIDTH": str(options.width),
        "HEIGHT": str(options.height),
        "DURATION": ms_to_frame_fraction(max_end_ms, options.frame_rate),
        "TEXT_COLOR": hex_to_color_vector(options.text_color),
        "BACKGROUND_COLOR": hex_to_color_vector(options.background_color),
        "STROKE_COLOR": hex_to_color_vector(options.stroke_color),
        "TITLES": emit_titles(cues, options),
    }
