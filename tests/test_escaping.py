"""Unit tests for the FCPXML injection gate and escapers."""
import pytest

from srt2fcpx.errors import InvalidAttributeNameError, UnsafeTextError
from srt2fcpx.fcpxml.escaping import (
    build_attributes,
    check_text,
    escape_attribute,
    escape_content,
    sanitize_structural,
    validate_text,
)


class TestCheckText:
    @pytest.mark.parametrize("text,reason", [
        ("<!DOCTYPE html>", "DOCTYPE declaration"),
        ('<!ENTITY xxe SYSTEM "file:///etc/passwd">', "ENTITY declaration"),
        ("before <!-- hidden", "comment opening sequence"),
        ("<![CDATA[payload", "CDATA section marker"),
        ("payload]]>", "CDATA section marker"),
        ('<?xml version="1.0"?>', "XML declaration"),
        ("<script>alert(1)</script>", "script tag"),
        ("< SCRIPT src=x>", "script tag"),
        ("click javascript:alert(1)", "javascript: URI"),
        ("JavaScript :void(0)", "javascript: URI"),
        ("data:text/html;base64,PHNjcmlwdD4=", "data: URI"),
        ("data:,alert(1)", "data: URI"),
        ("data:;base64,PHNjcmlwdD4=", "data: URI"),
    ])
    def test_dangerous_patterns(self, text, reason):
        assert check_text(text) == reason

    @pytest.mark.parametrize("text", [
        "Hello, world!",
        "Fish & Chips < 5 > 3",
        "Big data: the movie",
        "Time: 10:30",
        "こんにちは 😀",
        "",
    ])
    def test_ordinary_text_accepted(self, text):
        assert check_text(text) is None

    def test_validate_raises_with_reason(self):
        with pytest.raises(UnsafeTextError, match="DOCTYPE declaration") as exc_info:
            validate_text("<!DOCTYPE html>")
        assert exc_info.value.reason == "DOCTYPE declaration"

    def test_validate_passes_safe_text(self):
        validate_text("Safe text")


class TestSanitizeStructural:
    def test_removes_declarations_and_instructions(self):
        assert sanitize_structural('<?xml version="1.0"?>Hello') == "Hello"
        assert sanitize_structural("<!DOCTYPE fcpxml>Hello") == "Hello"
        assert sanitize_structural('<?php echo 1; ?>Hello') == "Hello"

    def test_comment_removed(self):
        assert sanitize_structural("a<!-- x -->b") == "a b"

    def test_cdata_unwrapped_not_discarded(self):
        assert sanitize_structural("<![CDATA[Kept text]]>") == "Kept text"

    def test_hands_off_to_strip_markup(self):
        assert sanitize_structural("<b>Bold</b> and <i>italic</i>") == "Bold and italic"

    def test_does_not_decode_entities(self):
        assert sanitize_structural("&amp;") == "&amp;"

    def test_single_edge_space_kept(self):
        assert sanitize_structural(" Indented") == " Indented"
        assert sanitize_structural("Trailing ") == "Trailing "
        assert sanitize_structural(" <b>Both</b> ") == " Both "

    def test_edge_space_not_added_to_empty_text(self):
        assert sanitize_structural(" <b></b> ") == ""


class TestEscapeContent:
    def test_escapes_markup_characters(self):
        assert escape_content("""a & b < c > d "e" 'f'""") == (
            "a &amp; b &lt; c &gt; d &quot;e&quot; &apos;f&apos;"
        )

    def test_keeps_newlines_and_unicode(self):
        assert escape_content("Line 1\nLine 2") == "Line 1\nLine 2"
        assert escape_content("😀 こんにちは \U0010FFFF") == "😀 こんにちは \U0010FFFF"

    def test_strips_control_characters(self):
        assert escape_content("a\x00b\x07c\x1bd\x7fe\tf") == "abcde\tf"


class TestEscapeAttribute:
    def test_escapes_markup_characters_but_not_apostrophe(self):
        assert escape_attribute("""Project <Test> & "Name" it's""") == (
            "Project &lt;Test&gt; &amp; &quot;Name&quot; it's"
        )

    def test_encodes_whitespace_controls(self):
        assert escape_attribute("a\nb\rc\td") == "a&#10;b&#13;c&#9;d"

    def test_strips_controls_surrogates_and_noncharacters(self):
        assert escape_attribute("a\x01b\ud800c\ufffed\ufdd0e\U0001FFFFf") == "abcdef"

    def test_keeps_valid_supplementary_characters(self):
        assert escape_attribute("😀") == "😀"


class TestBuildAttributes:
    def test_serializes_in_order(self):
        assert build_attributes({"font": "Helvetica", "fontSize": 72}) == 'font="Helvetica" fontSize="72"'

    def test_values_escaped(self):
        assert build_attributes({"name": 'x" onload="y'}) == 'name="x&quot; onload=&quot;y"'

    def test_empty_mapping(self):
        assert build_attributes({}) == ""

    @pytest.mark.parametrize("name", ["ok_name", "_x", "a.b-c", "xml1"])
    def test_valid_names(self, name):
        assert build_attributes({name: "v"}) == f'{name}="v"'

    @pytest.mark.parametrize("name", [
        "", "1abc", "-x", 'a="1" b', "on load", "a>b", "name\n", "naïve",
    ])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(InvalidAttributeNameError):
            build_attributes({name: "v"})
