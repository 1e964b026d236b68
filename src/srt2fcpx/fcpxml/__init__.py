"""FCPXML output: frame-fraction timecodes, escaping, and document assembly."""
from srt2fcpx.fcpxml.builder import (
    TitleStyle,
    build_document,
    build_document_from_template,
    display_name,
    emit_title,
)
from srt2fcpx.fcpxml.escaping import (
    build_attributes,
    check_text,
    escape_attribute,
    escape_content,
    sanitize_structural,
    validate_text,
)
from srt2fcpx.fcpxml.timecode import format_number, hex_to_color_vector, ms_to_frame_fraction

__all__ = [
    "TitleStyle",
    "build_document",
    "build_document_from_template",
    "display_name",
    "emit_title",
    "build_attributes",
    "check_text",
    "escape_attribute",
    "escape_content",
    "sanitize_structural",
    "validate_text",
    "format_number",
    "hex_to_color_vector",
    "ms_to_frame_fraction",
]
