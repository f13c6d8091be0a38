"""
Tokenizer tests

Tests splitting raw messages into plain text and positioned marker events.
"""

import pytest

from typewriter.lib.tokenizer import TagTokenizer, tokenize
from typewriter.models.message import MarkerEvent


class TestEmptyAndPlain:
    """Test inputs without markers"""

    def test_empty_source(self):
        """Empty string has no plain text and no markers"""
        msg = tokenize("")
        assert msg.plainText == ""
        assert msg.markerEvents == []

    def test_none_source(self):
        """None is treated like an empty message"""
        msg = tokenize(None)
        assert msg.plainText == ""
        assert msg.markerEvents == []
        assert msg.raw == ""

    def test_plain_text_only(self):
        """Text without markers passes through unchanged"""
        msg = tokenize("Just some words.")
        assert msg.plainText == "Just some words."
        assert msg.markerEvents == []
        assert msg.totalCount == 16


class TestMarkerEvents:
    """Test marker positions and classification"""

    def test_color_scenario(self):
        """Opening and closing color marker around a word"""
        msg = tokenize("Hello <color=red>World</color>!")

        assert msg.plainText == "Hello World!"
        assert msg.markerEvents == [
            MarkerEvent(position=6, text="<color=red>", isClosing=False),
            MarkerEvent(position=11, text="</color>", isClosing=True),
        ]

    def test_marker_at_start_and_end(self):
        """Markers before the first and after the last character"""
        msg = tokenize("<b>bold</b>")

        assert msg.plainText == "bold"
        assert [(e.position, e.text) for e in msg.markerEvents] == [(0, "<b>"), (4, "</b>")]

    def test_adjacent_markers_share_position(self):
        """Consecutive markers get the same position, in encounter order"""
        msg = tokenize("<b><i>x</i></b>")

        assert msg.plainText == "x"
        assert [(e.position, e.text) for e in msg.markerEvents] == [
            (0, "<b>"),
            (0, "<i>"),
            (1, "</i>"),
            (1, "</b>"),
        ]

    def test_marker_with_attributes(self):
        """Attributes stay part of the marker text"""
        msg = tokenize('Go <link id="3">here</link>')

        assert msg.plainText == "Go here"
        assert msg.markerEvents[0].text == '<link id="3">'
        assert msg.markerEvents[0].position == 3

    def test_unknown_markers_are_markers(self):
        """Any bracketed text counts, recognized keyword or not"""
        msg = tokenize("a<whatever>b")

        assert msg.plainText == "ab"
        assert msg.markerEvents == [MarkerEvent(1, "<whatever>", False)]

    def test_raw_is_kept(self):
        """The untouched message is kept for verbatim display"""
        raw = "Hi <b>there</b>"
        assert tokenize(raw).raw == raw


class TestMalformedInput:
    """Malformed markers are accepted without validation"""

    def test_unbalanced_closing(self):
        """Closing marker without an opening one"""
        msg = tokenize("a</b>c")

        assert msg.plainText == "ac"
        assert msg.markerEvents == [MarkerEvent(1, "</b>", True)]

    def test_unterminated_bracket_is_text(self):
        """A '<' with no following '>' stays plain text"""
        msg = tokenize("3 < 4")

        assert msg.plainText == "3 < 4"
        assert msg.markerEvents == []

    def test_empty_brackets_are_text(self):
        """'<>' has no content and is not a marker"""
        msg = tokenize("a<>b")

        assert msg.plainText == "a<>b"
        assert msg.markerEvents == []

    def test_bracket_runs_to_next_close(self):
        """A marker runs from '<' to the very next '>'"""
        msg = tokenize("x <a <b> y")

        assert msg.plainText == "x  y"
        assert msg.markerEvents[0].text == "<a <b>"


class TestPlainTextProperty:
    """plainText equals raw with every marker removed"""

    @pytest.mark.parametrize("raw", [
        "Hello <color=red>World</color>!",
        "<size=120%><b>Big</b></size> deal",
        "no markers at all",
        "<b>unclosed",
        "</i>stray close",
        "<a><b><c>deep</c></b></a>",
    ])
    def test_plain_matches_strip(self, raw):
        """Tokenizer and plain_strip agree"""
        tokenizer = TagTokenizer()
        assert tokenizer.tokenize(raw).plainText == tokenizer.plain_strip(raw)

    def test_positions_sorted(self):
        """Marker positions never decrease"""
        msg = tokenize("<a>1<b>23</b>4<c></c>5</a>")
        positions = [e.position for e in msg.markerEvents]
        assert positions == sorted(positions)
        assert all(0 <= p <= msg.totalCount for p in positions)

    def test_custom_pattern(self):
        """The marker pattern can be swapped for bracket-style markup"""
        tokenizer = TagTokenizer(r"\[[^\]]+\]")
        msg = tokenizer.tokenize("Hi [b]you[/b]")

        assert msg.plainText == "Hi you"
        assert [e.isClosing for e in msg.markerEvents] == [False, False]
