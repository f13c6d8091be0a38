"""
Verbosity-gated logging on top of Loguru.

LOG() looks up the verbosity of whichever object was last connected with
state_connectToLogger() in the current context and drops messages above it.
Nothing connected means nothing logged, which keeps the engine quiet when it
is embedded as a library.

The connection lives in a ContextVar. Typing and caret timers are asyncio
tasks created after connecting, so they copy the context and log at the
same verbosity as the code that started them.

Levels used across the package:
    1  progress of the command line run
    2  animation lifecycle (start, supersede, stop, complete)
    3  per-character reveals and caret toggles

Usage:
    from typewriter.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Typing 12 characters over 2.00s", level=2)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

_connected: ContextVar[Optional[Any]] = ContextVar('typewriter_log_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make state's `verbosity` govern LOG() in this context.

    Any object with an integer `verbosity` attribute works: the CLI's
    ProgramState, or a SimpleNamespace(verbosity=3) in an embedding host.
    """
    _connected.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit message when the connected verbosity is at least level.

    Args:
        message: Text to log
        level: Verbosity needed to see it
        **kwargs: Passed through to loguru for message formatting
    """
    state = _connected.get()
    verbosity = getattr(state, 'verbosity', None) if state is not None else None

    if verbosity is not None and verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
