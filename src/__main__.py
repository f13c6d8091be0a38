#!/usr/bin/env python3
"""
typewriter - Rich text typewriter animation engine

Command line front end that plays a file of messages through the typing
engine and records every frame the display would have shown.

Philosophy:
    - Markers stay intact: every frame is balanced, renderable rich text
    - Fixed duration: each message takes the configured total typing time
    - No reflow: the caret blinks by turning transparent, not by vanishing

Usage:
    typewriter inputdir/ outputdir/ --inputFile messages.txt

    Messages are separated by blank lines; lines starting with '#' are
    comments. The frame log is written to outputdir/ as frames.txt and a
    syntax-highlighted frames.html.

Examples:
    # Record frames instantly on virtual time
    typewriter . output/ --inputFile messages.txt

    # Slower, noisier typing with an underscore caret and a fixed seed
    typewriter . output/ --inputFile messages.txt --totalTypingTime 4 \\
        --noiseVariation 0.6 --caretChar _ --seed 7

    # Use a YAML profile and watch it play in the terminal
    typewriter . output/ --inputFile messages.txt --profile dramatic --realtime
"""

import sys
import asyncio
import random
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import List

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import (
    TypingEngine,
    TypingProfile,
    ProfileError,
    profiles_listAvailable,
    FrameRecorder,
    TerminalSink,
    CallbackSink,
    VirtualClock,
    AsyncioClock,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import EngineConfig, ProgramState, pipeline


DISPLAY_TITLE = r"""
  _                                _ _
 | |_ _   _ _ __   _____      ___ __(_) |_ ___ _ __
 | __| | | | '_ \ / _ \ \ /\ / / '__| | __/ _ \ '__|
 | |_| |_| | |_) |  __/\ V  V /| |  | | ||  __/ |
  \__|\__, | .__/ \___| \_/\_/ |_|  |_|\__\___|_|
      |___/|_|
  Rich text typewriter animation engine
"""

# Define CLI arguments
parser = ArgumentParser(
    description="typewriter - record rich text typewriter animations frame by frame",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Messages file (relative to inputdir)"
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the frame logs",
)

parser.add_argument(
    "--profile", default=None, type=str, help="Typing profile name (<profilesDir>/<name>.yaml)"
)

parser.add_argument(
    "--profilesDir", default="profiles", type=str, help="Directory containing typing profiles"
)

parser.add_argument(
    "--totalTypingTime", default=None, type=float, help="Seconds to type each message (min 0.1)"
)

parser.add_argument(
    "--noiseVariation", default=None, type=float, help="Per-character timing jitter (0-1)"
)

parser.add_argument("--caretChar", default=None, type=str, help="Caret glyph")

parser.add_argument(
    "--caretBlinkRate", default=None, type=float, help="Seconds between caret blinks (min 0.1)"
)

parser.add_argument("--noCaret", action="store_true", help="Do not show a caret")

parser.add_argument(
    "--dropCaret", action="store_true", help="Hide the caret as soon as a message completes"
)

parser.add_argument(
    "--pause",
    default=None,
    type=float,
    help="Seconds between messages (defaults to the caret blink rate)",
)

parser.add_argument("--seed", default=None, type=int, help="Random seed for timing jitter")

parser.add_argument(
    "--realtime",
    action="store_true",
    help="Play in wall-clock time and echo frames to the terminal",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment, resolve paths and build the engine configuration.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the messages file
            - framesOutputdir: Created output directory path
            - engineConfig: EngineConfig from settings, profile and CLI overrides
            - pygmentsStyle: Style for the HTML frame log
            - envOK: True if environment is valid

    Exits:
        1 if the messages file or the profile cannot be loaded
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    overrides = {
        "totalTypingTime": state.totalTypingTime,
        "noiseVariation": state.noiseVariation,
        "caretChar": state.caretChar,
        "caretBlinkRate": state.caretBlinkRate,
        "showCaret": False if state.noCaret else None,
        "keepCaretAfterTyping": False if state.dropCaret else None,
    }

    if state.profile:
        profiles_dir = Path(state.profilesDir)
        if not profiles_dir.is_absolute():
            profiles_dir = state.inputdir / profiles_dir
        try:
            profile = TypingProfile(state.profile, str(profiles_dir))
            state.engineConfig = profile.engineConfig_build(**overrides)
            state.pygmentsStyle = profile.pygmentsStyle_get()
        except ProfileError as e:
            print(f"Error: {e}", file=sys.stderr)
            available = profiles_listAvailable(str(profiles_dir))
            if available:
                print(f"Available profiles: {', '.join(available)}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        LOG(f"Profile: {profile}", level=2)
    else:
        state.engineConfig = EngineConfig.config_createFromSettings(**overrides)

    LOG(f"Engine config: {state.engineConfig}", level=2)

    state.framesOutputdir = state.outputdir / state.outputSubdir
    state.framesOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.framesOutputdir}", level=2)

    state.envOK = True
    return state


def messages_split(source: str) -> List[str]:
    """
    Split a messages file into messages.

    Messages are separated by one or more blank lines; lines starting with
    '#' are dropped. Line breaks inside a message are kept.

    Example:
        >>> messages_split("# intro\\nHello\\n<b>there</b>\\n\\n\\nBye\\n")
        ['Hello\\n<b>there</b>', 'Bye']
    """
    messages: List[str] = []
    current: List[str] = []

    for line in source.splitlines():
        if line.lstrip().startswith("#"):
            continue
        if line.strip():
            current.append(line)
        elif current:
            messages.append("\n".join(current))
            current = []

    if current:
        messages.append("\n".join(current))
    return messages


def messages_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the messages file.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added field:
            - messages: List of raw messages in playback order

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading messages...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    state.messages = messages_split(source)
    LOG(f"Read {len(state.messages)} messages from {state.inputSourceFile.name}", level=2)
    return state


async def sequence_record(state: ProgramState) -> FrameRecorder:
    """Play all messages through a TypingEngine and record the frames"""
    clock = AsyncioClock() if state.realtime else VirtualClock()
    recorder = FrameRecorder(clock)
    sink = recorder

    if state.realtime:
        terminal = TerminalSink()

        def frame_show(text: str) -> None:
            recorder.text_set(text)
            terminal.text_set(text)

        sink = CallbackSink(frame_show)

    engine = TypingEngine(
        sink,
        clock=clock,
        rng=random.Random(state.seed),
        config=state.engineConfig.copy(),
    )

    playback = engine.sequence_play(*(state.messages or []), pause=state.pause)
    if isinstance(clock, VirtualClock):
        await clock.run_until(playback)
    else:
        await playback

    # A kept caret would blink forever; end on the caret-free frame
    engine.caret_hide()
    if state.realtime:
        terminal.line_end()
    return recorder


def frames_record(inputstate: ProgramState) -> ProgramState:
    """
    Play the messages and write the frame logs.

    Args:
        inputstate: Program state with messages and engineConfig

    Returns:
        ProgramState with added field:
            - recordResult: Dict containing:
                - status: bool
                - frames_file: str (path to frames.txt)
                - html_file: str (path to frames.html)
                - frame_count: int
                - duration: float (seconds of animation recorded)

    Exits:
        1 if there are no messages or recording fails
    """

    state = inputstate.copy()

    LOG("Recording frames...", level=1)

    if not state.messages:
        print("Error: No messages to play", file=sys.stderr)
        sys.exit(1)

    try:
        recorder = asyncio.run(sequence_record(state))

        frames_file = state.framesOutputdir / "frames.txt"
        frames_file.write_text(recorder.text_render(), encoding="utf-8")
        LOG(f"Wrote {frames_file}", level=2)

        html_file = state.framesOutputdir / "frames.html"
        html_file.write_text(
            recorder.html_render(style=state.pygmentsStyle, title=state.inputFile),
            encoding="utf-8",
        )
        LOG(f"Wrote {html_file}", level=2)
    except Exception as e:
        print(f"Recording error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    start = recorder.frames[0][0] if recorder.frames else 0.0
    end = recorder.frames[-1][0] if recorder.frames else 0.0
    state.recordResult = {
        "status": True,
        "frames_file": str(frames_file),
        "html_file": str(html_file),
        "frame_count": len(recorder.frames),
        "duration": end - start,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display recording results to user.

    Args:
        inputstate: Program state with recordResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if recordResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.recordResult:
        print("Error: Recording failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Recording successful!", level=1)
        LOG(f"  Frames:   {state.recordResult['frame_count']}", level=1)
        LOG(f"  Duration: {state.recordResult['duration']:.2f}s", level=1)
        LOG(f"  Log:      {state.recordResult['frames_file']}", level=1)
        LOG(f"  HTML:     {state.recordResult['html_file']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="typewriter - Rich text typewriter animation engine",
    category="Visualization",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - record the typewriter animation of a messages file.

    Orchestrates the pipeline:
        1. env_check: Validate paths, load profile, build engine config
        2. messages_read: Read and split the messages file
        3. frames_record: Play the messages and write the frame logs
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the messages file
        outputdir: Directory where frame logs will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )
    if appsettings.debug_mode:
        state.verbosity = max(state.verbosity, 3)

    # Timer tasks created during recording inherit this connection
    state_connectToLogger(state)

    pipeline(state, env_check, messages_read, frames_record, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
