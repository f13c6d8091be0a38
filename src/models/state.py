"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern used by
the command line front end, and the pipeline() helper for composing stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field, fields
from functools import reduce


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Everything one recording run knows, passed from stage to stage.

    Stages never mutate their input; each copies it and fills in its own
    fields:
        - Initial: CLI options, inputdir, outputdir
        - env_check: inputSourceFile, framesOutputdir, engineConfig, envOK
        - messages_read: messages
        - frames_record: recordResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the messages file
        outputdir: Base output directory for frame logs
        verbosity: Logging verbosity level (1-3)
        inputFile: Messages filename (relative to inputdir)
        outputSubdir: Subdirectory within outputdir for output
        profile: Optional typing profile name
        profilesDir: Directory holding <profile>.yaml files
        totalTypingTime: Override for the per-message typing time
        noiseVariation: Override for the timing jitter
        caretChar: Override for the caret glyph
        caretBlinkRate: Override for the caret blink rate
        noCaret: Disable the caret entirely
        dropCaret: Hide the caret as soon as a message completes
        pause: Seconds between messages (defaults to the blink rate)
        seed: Random seed for reproducible jitter
        realtime: Play in wall-clock time and echo frames to the terminal
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the messages file
        framesOutputdir: Final output directory (outputdir + outputSubdir)
        engineConfig: EngineConfig built from settings, profile and overrides
        pygmentsStyle: Pygments style for the HTML frame log
        messages: Messages read from the input file
        recordResult: Recording results (frames_file, html_file, frame_count, duration)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputSubdir: str = field(default=".")
    profile: Optional[str] = field(default=None)
    profilesDir: str = field(default="profiles")
    totalTypingTime: Optional[float] = field(default=None)
    noiseVariation: Optional[float] = field(default=None)
    caretChar: Optional[str] = field(default=None)
    caretBlinkRate: Optional[float] = field(default=None)
    noCaret: bool = field(default=False)
    dropCaret: bool = field(default=False)
    pause: Optional[float] = field(default=None)
    seed: Optional[int] = field(default=None)
    realtime: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    framesOutputdir: Path = field(default=Path("/"))
    engineConfig: Optional[Any] = field(default=None)  # EngineConfig at runtime
    pygmentsStyle: str = field(default="monokai")
    messages: Optional[List[str]] = field(default=None)
    recordResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Build the initial recording state from parsed CLI options.

        Options without a matching field (chris_plugin adds a few of its own)
        are ignored.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory holding the messages file
            outputdir: Directory receiving the frame logs
        """
        known = {f.name for f in fields(cls)}
        values = {name: value for name, value in vars(options).items() if name in known}
        values.update(inputdir=inputdir, outputdir=outputdir)
        return cls(**values)

    def copy(self: PS) -> PS:
        """Shallow copy, so each stage hands on a fresh state"""
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Thread a ProgramState through stages, left to right.

    Example:
        final_state = pipeline(
            state, env_check, messages_read, frames_record, results_report
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
