"""
Tokenizer for inline formatting markers

Separates a raw message into its plain (revealable) characters and a list
of positioned marker events.

Every substring from a '<' up to the next '>' counts as a marker, whether
or not it is a keyword the renderer understands. Nothing is validated:
unbalanced or unknown markers are recorded exactly as found.

Example:
    >>> msg = TagTokenizer().tokenize("Hello <color=red>World</color>!")
    >>> msg.plainText
    'Hello World!'
    >>> [(e.position, e.text, e.isClosing) for e in msg.markerEvents]
    [(6, '<color=red>', False), (11, '</color>', True)]
"""

import re
from typing import List, Optional, Pattern

from ..models.message import MarkerEvent, ProcessedMessage


class TagTokenizer:
    """
    Splits raw text into plain text plus MarkerEvents
    """

    def __init__(self, pattern: Optional[str] = None):
        """
        Initialize tokenizer

        Args:
            pattern: Regular expression matching one marker. Defaults to
                     the marker_pattern application setting.
        """
        if pattern is None:
            from ..config import appsettings
            pattern = appsettings.marker_pattern
        self.pattern: Pattern[str] = re.compile(pattern)

    def tokenize(self, raw: Optional[str]) -> ProcessedMessage:
        """
        Tokenize a raw message

        For each marker match, the text preceding it is appended to the
        plain text, then a MarkerEvent is recorded at the current plain
        text length. The remainder after the last marker is appended at
        the end.

        Args:
            raw: Raw message (None is treated as empty)

        Returns:
            ProcessedMessage with plainText, markerEvents and raw
        """
        raw = raw or ""
        parts: List[str] = []
        events: List[MarkerEvent] = []
        plain_length = 0
        last_index = 0

        for match in self.pattern.finditer(raw):
            text_before = raw[last_index:match.start()]
            parts.append(text_before)
            plain_length += len(text_before)

            marker = match.group(0)
            events.append(MarkerEvent(
                position=plain_length,
                text=marker,
                isClosing=marker.startswith("</"),
            ))
            last_index = match.end()

        parts.append(raw[last_index:])

        return ProcessedMessage(plainText="".join(parts), markerEvents=events, raw=raw)

    def plain_strip(self, raw: Optional[str]) -> str:
        """Remove every marker from raw, keeping the plain characters"""
        return self.pattern.sub("", raw or "")


def tokenize(raw: Optional[str]) -> ProcessedMessage:
    """Tokenize raw with the default marker pattern"""
    return TagTokenizer().tokenize(raw)
