"""End-to-end tests for the convert_srt_to_fcpxml convenience API."""

import xml.etree.ElementTree as ET

import pytest

from srt2fcpx import ConversionOptions, convert_srt_to_fcpxml, parse_srt, require_cues
from srt2fcpx.errors import NoCuesError, UnsafeTextError

_SRT = """\
1
00:00:01,000 --> 00:00:03,000
<i>Fish &amp; Chips</i>

2
00:00:04,000 --> 00:00:06,500
<script>alert(1)</script>Safe text
"""


def test_convert_produces_well_formed_document():
    xml = convert_srt_to_fcpxml(_SRT)
    root = ET.fromstring(xml.encode("utf-8"))
    texts = [el.text for el in root.iter("text-style") if el.get("ref")]
    assert texts == ["Fish & Chips", "Safe text"]
    assert "<script" not in xml
    assert 'duration="156/24s"' in xml


def test_convert_applies_options():
    xml = convert_srt_to_fcpxml(_SRT, ConversionOptions(frame_rate=25, title_name="Demo"))
    assert 'offset="25/25s"' in xml
    assert '<event name="Demo">' in xml


def test_recoverable_errors_do_not_block_conversion():
    source = "garbage\n\n" + _SRT
    assert parse_srt(source).errors
    assert "Safe text" in convert_srt_to_fcpxml(source)


@pytest.mark.parametrize("source", ["", "\n\n\n", "not a subtitle file", "1\n00:00:02,000 --> 00:00:01,000\nX"])
def test_no_cues_raises(source):
    with pytest.raises(NoCuesError, match="No valid SRT cues found in input"):
        convert_srt_to_fcpxml(source)


def test_no_cues_error_carries_diagnostics():
    with pytest.raises(NoCuesError) as exc_info:
        require_cues(parse_srt("1\n00:00:02,000 --> 00:00:01,000\nX"))
    assert len(exc_info.value.errors) == 1
    assert "after start time" in str(exc_info.value)


def test_escaped_doctype_survives_parser_but_fails_emitter():
    source = "1\n00:00:01,000 --> 00:00:02,000\n&lt;!DOCTYPE html&gt;"
    assert parse_srt(source).cues[0].text == "<!DOCTYPE html>"
    with pytest.raises(UnsafeTextError):
        convert_srt_to_fcpxml(source)


def test_nbsp_indent_reaches_document():
    xml = convert_srt_to_fcpxml("1\n00:00:01,000 --> 00:00:03,000\n&nbsp;Indented\n")
    assert '<text-style ref="ts1"> Indented</text-style>' in xml


def test_nbsp_trailing_space_reaches_document():
    xml = convert_srt_to_fcpxml("1\n00:00:01,000 --> 00:00:03,000\nTrailing&nbsp;\n")
    assert '<text-style ref="ts1">Trailing </text-style>' in xml
