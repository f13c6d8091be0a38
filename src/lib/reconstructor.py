"""
Partial-render reconstructor

Rebuilds a displayable string from a ProcessedMessage for any number of
revealed characters. Markers are re-inserted at their positions, and any
marker still open at the cut point is closed with a synthesized closing
marker, so every intermediate frame is balanced and renderable on its own.

Closing markers pop the open-marker stack by position only: a closing
marker always closes the most recently opened marker, whatever its name.

Example:
    >>> from typewriter.lib.tokenizer import tokenize
    >>> msg = tokenize("Hello <color=red>World</color>!")
    >>> render(msg, 8)
    'Hello <color=red>Wo</color>'
    >>> render(msg, 12)
    'Hello <color=red>World</color>!'
"""

import re
from typing import List

from ..models.message import ProcessedMessage


class Reconstructor:
    """
    Builds balanced prefix frames of a ProcessedMessage
    """

    def render(self, msg: ProcessedMessage, revealCount: int) -> str:
        """
        Render the first revealCount plain characters with their markers

        Markers positioned at index i are emitted just before plain
        character i; markers positioned exactly at revealCount are held
        back until that character is revealed. Still-open markers are then
        closed in LIFO order.

        Args:
            msg: Tokenized message
            revealCount: Characters to reveal, clamped to [0, totalCount]

        Returns:
            Balanced display string
        """
        reveal = max(0, min(revealCount, msg.totalCount))
        events = msg.markerEvents
        result: List[str] = []
        open_markers: List[str] = []
        event_index = 0

        for i in range(reveal):
            while event_index < len(events) and events[event_index].position <= i:
                event = events[event_index]
                result.append(event.text)
                if event.isClosing:
                    if open_markers:
                        open_markers.pop()
                else:
                    open_markers.append(event.text)
                event_index += 1

            result.append(msg.plainText[i])

        while open_markers:
            result.append(f"</{self.tagName_extract(open_markers.pop())}>")

        return "".join(result)

    def tagName_extract(self, marker: str) -> str:
        """
        Extract the base keyword of an opening marker

        Angle brackets are removed, then anything from the first space or
        '=' onwards (the marker's attributes) is discarded.

        Args:
            marker: Marker text (e.g., "<color=red>", "<link id=3>")

        Returns:
            Keyword (e.g., "color", "link")
        """
        name = marker.replace("<", "").replace(">", "")
        cut = re.search(r"[ =]", name)
        if cut and cut.start() > 0:
            name = name[:cut.start()]
        return name


def render(msg: ProcessedMessage, revealCount: int) -> str:
    """Render msg with revealCount characters visible"""
    return Reconstructor().render(msg, revealCount)
