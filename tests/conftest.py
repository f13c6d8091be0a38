"""
Shared fixtures for engine tests

Engines run on a VirtualClock so every animation is deterministic, and
frames are captured by a FrameRecorder stamped with virtual time.
"""

import random

import pytest

from typewriter.lib.clock import VirtualClock
from typewriter.lib.engine import TypingEngine
from typewriter.lib.sinks import FrameRecorder
from typewriter.models.engine import EngineConfig


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def recorder(clock):
    return FrameRecorder(clock)


@pytest.fixture
def engine_make(clock, recorder):
    """
    Factory for engines with predictable defaults:
    1s per message, no jitter, caret off, 0.5s blink rate
    """
    def make(**overrides):
        values = dict(
            totalTypingTime=1.0,
            noiseVariation=0.0,
            showCaret=False,
            caretChar="|",
            caretBlinkRate=0.5,
            keepCaretAfterTyping=False,
        )
        values.update(overrides)
        return TypingEngine(
            recorder,
            clock=clock,
            rng=random.Random(1234),
            config=EngineConfig(**values),
        )

    return make
