"""
typewriter - Rich text typewriter animation engine

Reveals formatted text one character at a time while keeping inline
markers balanced in every frame.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .tokenizer import TagTokenizer, tokenize
from .reconstructor import Reconstructor, render
from .scheduler import TimingScheduler, schedule
from .caret import CaretBlinker
from .clock import AsyncioClock, VirtualClock
from .engine import TypingEngine
from .sinks import CallbackSink, FrameRecorder, TerminalSink
from .profile import TypingProfile, ProfileError, profiles_listAvailable
from .log import LOG, state_connectToLogger

__all__ = [
    "TagTokenizer",
    "tokenize",
    "Reconstructor",
    "render",
    "TimingScheduler",
    "schedule",
    "CaretBlinker",
    "AsyncioClock",
    "VirtualClock",
    "TypingEngine",
    "CallbackSink",
    "FrameRecorder",
    "TerminalSink",
    "TypingProfile",
    "ProfileError",
    "profiles_listAvailable",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
