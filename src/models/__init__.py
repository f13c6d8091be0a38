"""
Models package for typewriter

Contains data structures shared by the engine components and the CLI pipeline.
"""

from .state import ProgramState, pipeline
from .engine import EngineConfig
from .message import MarkerEvent, ProcessedMessage, AnimationState, CaretPhase, CaretState

__all__ = [
    "ProgramState",
    "pipeline",
    "EngineConfig",
    "MarkerEvent",
    "ProcessedMessage",
    "AnimationState",
    "CaretPhase",
    "CaretState",
]
