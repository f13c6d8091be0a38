"""
Message and animation data models

Plain data structures shared by the tokenizer, reconstructor, caret blinker
and typing engine.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List


@dataclass
class MarkerEvent:
    """
    A formatting marker found in a raw message

    Returned in ProcessedMessage.markerEvents by TagTokenizer.tokenize().

    Attributes:
        position: Index into the plain text stream, i.e. the number of plain
                  characters already emitted when the marker occurred
        text: The marker exactly as it appeared (e.g., "<color=red>")
        isClosing: True when the marker starts with "</"

    Example:
        For raw "Hi <b>there</b>":
        MarkerEvent(position=3, text="<b>", isClosing=False)
        MarkerEvent(position=8, text="</b>", isClosing=True)
    """
    position: int
    text: str
    isClosing: bool


@dataclass
class ProcessedMessage:
    """
    Tokenized form of one raw message

    Created fresh for every play request and owned by the engine for the
    duration of one animation.

    Attributes:
        plainText: The message with every marker removed
        markerEvents: Markers in encounter order (sorted by position)
        raw: The original, untouched message

    Example:
        Input: "Hello <color=red>World</color>!"
        Result: ProcessedMessage(
            plainText="Hello World!",
            markerEvents=[
                MarkerEvent(6, "<color=red>", False),
                MarkerEvent(11, "</color>", True),
            ],
            raw="Hello <color=red>World</color>!"
        )
    """
    plainText: str = ""
    markerEvents: List[MarkerEvent] = field(default_factory=list)
    raw: str = ""

    @property
    def totalCount(self) -> int:
        """Number of revealable (plain) characters"""
        return len(self.plainText)


@dataclass
class AnimationState:
    """
    Progress of the animation currently owned by an engine

    Attributes:
        revealCount: Plain characters currently shown (0..totalCount)
        totalCount: Length of the processed plain text
        active: True while characters are still being revealed
    """
    revealCount: int = 0
    totalCount: int = 0
    active: bool = False

    def complete_is(self) -> bool:
        """True once every plain character has been revealed"""
        return self.revealCount >= self.totalCount


class CaretPhase(Enum):
    """
    Phases of the caret blink state machine
    """
    HIDDEN = "hidden"
    DURING_TYPING = "during_typing"
    AFTER_TYPING = "after_typing"


@dataclass
class CaretState:
    """
    Caret blink state

    Attributes:
        phase: Current CaretPhase
        glyphVisible: Whether the caret is drawn opaque (True) or transparent
        stablePrefix: Fully rendered text captured when typing completed;
                      only meaningful in the AFTER_TYPING phase
    """
    phase: CaretPhase = CaretPhase.HIDDEN
    glyphVisible: bool = True
    stablePrefix: str = ""
