"""
typewriter - Rich text typewriter animation engine

Reveals formatted text one character at a time, within a fixed total
duration, with an optional non-reflowing blinking caret.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .lib import (
    TypingEngine,
    TagTokenizer,
    Reconstructor,
    TimingScheduler,
    CaretBlinker,
    VirtualClock,
    AsyncioClock,
    FrameRecorder,
    CallbackSink,
    tokenize,
    render,
    schedule,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "TypingEngine",
    "TagTokenizer",
    "Reconstructor",
    "TimingScheduler",
    "CaretBlinker",
    "VirtualClock",
    "AsyncioClock",
    "FrameRecorder",
    "CallbackSink",
    "tokenize",
    "render",
    "schedule",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
