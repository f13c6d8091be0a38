"""
Typing engine

Orchestrates one typewriter animation at a time on top of the tokenizer,
reconstructor, timing scheduler and caret blinker, and pushes every frame
to a display sink.

Timers are asyncio tasks suspended on an injected clock:
    - the typing task waits out each character delay, then reveals one
      more character
    - the caret task toggles the caret glyph every blink interval

Starting a new animation, stopping, or hiding the caret cancels the
relevant task before anything else happens, so at most one typing timer
and one caret timer exist per engine and a cancelled timer never touches
the display again.

Example:
    engine = TypingEngine(CallbackSink(print))
    await engine.text_playAwaitable("Hello <b>World</b>!")
    await engine.sequence_play("One", "Two", "Three", pause=1.0)
"""

import asyncio
import random
from typing import Optional, TYPE_CHECKING

from ..models.engine import EngineConfig
from ..models.message import AnimationState, ProcessedMessage
from .caret import CaretBlinker
from .clock import AsyncioClock, Clock
from .log import LOG
from .reconstructor import Reconstructor
from .scheduler import TimingScheduler
from .tokenizer import TagTokenizer

if TYPE_CHECKING:
    from ..config.settings import AppSettings
    from .sinks import DisplaySink


class TypingEngine:
    """
    Typewriter animation engine for one display surface

    Responsibilities:
    - Tokenize each message and track reveal progress
    - Pace reveal with the timing scheduler
    - Compose frames with the caret glyph
    - Expose awaitable completion and sequential playback

    Playback methods start asyncio tasks, so they must be called while an
    event loop is running; outside one they raise RuntimeError. Setters
    and typing_isActive() work anywhere.

    An exception raised by the sink inside a timer ends the animation and
    is set on its completion signal.
    """

    def __init__(
        self,
        sink: "DisplaySink",
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        config: Optional[EngineConfig] = None,
        settings: Optional["AppSettings"] = None,
    ) -> None:
        """
        Initialize engine

        Args:
            sink: Display sink receiving complete frames
            clock: Timer capability (real time by default)
            rng: Uniform random source for timing jitter
            config: Initial engine configuration (from settings by default)
            settings: AppSettings for defaults and clamps
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.sink = sink
        self.clock: Clock = clock if clock is not None else AsyncioClock()
        self.rng = rng if rng is not None else random.Random()
        self.config = config if config is not None else EngineConfig.config_createFromSettings(settings)

        self.tokenizer = TagTokenizer(settings.marker_pattern)
        self.reconstructor = Reconstructor()
        self.caret = CaretBlinker(self.config, settings)

        self.message = ProcessedMessage()
        self.animation = AnimationState()

        self._scheduler: Optional[TimingScheduler] = None
        self._typingTask: Optional[asyncio.Task] = None
        self._caretTask: Optional[asyncio.Task] = None
        self._done: Optional[asyncio.Future] = None
        self.frame: Optional[str] = None

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def typing_isActive(self) -> bool:
        """True while characters are still being revealed"""
        return self.animation.active

    def text_play(self, message: Optional[str]) -> None:
        """
        Start typing message without waiting for it.

        Any animation in flight is cancelled first.
        """
        self.animation_start(message)

    def text_playAwaitable(self, message: Optional[str]) -> "asyncio.Future[None]":
        """
        Start typing message and return its completion signal.

        The returned future resolves once every character is revealed,
        immediately for empty messages. It also resolves if the animation
        is stopped or superseded, so awaiting it never hangs.
        """
        return asyncio.shield(self.animation_start(message))

    def current_wait(self) -> "asyncio.Future[None]":
        """
        Completion signal of the active animation.

        Already resolved when nothing is typing.
        """
        if self.animation.active and self._done is not None and not self._done.done():
            return asyncio.shield(self._done)
        resolved = asyncio.get_running_loop().create_future()
        resolved.set_result(None)
        return resolved

    async def sequence_play(self, *messages: str, pause: Optional[float] = None) -> None:
        """
        Type messages one after another.

        Args:
            *messages: Messages in playback order
            pause: Seconds between consecutive messages; defaults to the
                   caret blink rate at the time of each pause. No pause
                   follows the last message.
        """
        LOG(f"Playing sequence of {len(messages)} messages", level=2)
        for index, message in enumerate(messages):
            await self.text_playAwaitable(message)
            if index < len(messages) - 1:
                delay = self.config.caretBlinkRate if pause is None else max(0.0, pause)
                LOG(f"Pausing {delay:.2f}s before message {index + 2}", level=3)
                await self.clock.sleep(delay)

    def typing_stop(self) -> None:
        """
        Cancel the animation and show the raw message verbatim.

        Markers are left exactly as written, with no reconstruction.
        """
        if self.animation.active:
            LOG(f"Stopped at {self.animation.revealCount}/{self.animation.totalCount}", level=2)
        self.timers_cancel()
        self.caret.hide()
        self.animation.active = False
        self.display_set(self.message.raw)
        self.completion_release()

    def engine_reset(self) -> None:
        """Cancel everything, forget the current message and clear the display"""
        self.timers_cancel()
        self.caret.hide()
        self.message = ProcessedMessage()
        self.animation = AnimationState()
        self.display_set("")
        self.completion_release()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def totalTypingTime_set(self, seconds: float) -> None:
        """Set the total typing time (floor 0.1s)"""
        self.config.totalTypingTime = self.settings.typingTime_clamp(seconds)

    def noiseVariation_set(self, noise: float) -> None:
        """Set the timing jitter fraction (clamped to 0..1)"""
        self.config.noiseVariation = self.settings.noise_clamp(noise)

    def caretChar_set(self, caret: str) -> None:
        """Set the caret glyph; only the first character is used"""
        if caret:
            self.config.caretChar = caret[0]

    def caretBlinkRate_set(self, seconds: float) -> None:
        """Set the caret blink interval (floor 0.1s)"""
        self.config.caretBlinkRate = self.settings.blinkRate_clamp(seconds)

    def showCaret_set(self, show: bool) -> None:
        """
        Enable or disable the caret.

        Disabling it hides a blinking caret right away and stops its timer;
        enabling it takes effect with the next animation.
        """
        self.config.showCaret = show

        if not show and self.caret.blinking_is():
            self.caretTask_cancel()
            self.caret.hide()
            if self.animation.active:
                self.frame_push()
            else:
                self.display_set(self.frame_full())

    def keepCaretAfterTyping_set(self, keep: bool) -> None:
        """
        Choose whether the caret keeps blinking after a message completes.

        Turning this off while idle with the caret still blinking removes
        the caret right away.
        """
        self.config.keepCaretAfterTyping = keep

        if not keep and not self.animation.active and self._caretTask is not None:
            self.caretTask_cancel()
            self.caret.hide()
            self.display_set(self.frame_full())

    def caret_hide(self) -> None:
        """Stop blinking now; when idle, show the caret-free full text"""
        self.caretTask_cancel()
        self.caret.hide()

        if not self.animation.active:
            self.display_set(self.frame_full())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def animation_start(self, message: Optional[str]) -> asyncio.Future:
        """Cancel current work and begin animating message"""
        loop = asyncio.get_running_loop()

        if self.animation.active:
            LOG("Superseding active animation", level=2)
        self.timers_cancel()
        self.completion_release()

        self.message = self.tokenizer.tokenize(message)
        total = self.message.totalCount
        self.animation = AnimationState(revealCount=0, totalCount=total, active=True)
        self._done = loop.create_future()
        done = self._done

        LOG(
            f"Typing {total} characters ({len(self.message.markerEvents)} markers) "
            f"over {self.config.totalTypingTime:.2f}s",
            level=2,
        )

        if total == 0:
            self.caret.hide()
            self.animation.active = False
            self.display_set("")
            self.completion_release()
            return done

        if self.config.showCaret:
            self.caret.typing_begin()
            self.caretTask_start()
        else:
            self.caret.hide()
        self.frame_push()

        self._scheduler = TimingScheduler(total, self.config, self.rng, self.settings)
        self._typingTask = loop.create_task(self.typing_run(self._scheduler))
        return done

    async def typing_run(self, scheduler: TimingScheduler) -> None:
        """Typing timer: reveal one character per scheduler tick"""
        try:
            async for revealCount in scheduler.ticks(self.clock):
                self.animation.revealCount = revealCount
                LOG(f"Reveal {revealCount}/{self.animation.totalCount}", level=3)
                self.frame_push()

            if scheduler.cancelled or not self.animation.complete_is():
                return
            self.animation_finish()
        except Exception as e:
            self.animation_fail(e)

    def animation_finish(self) -> None:
        """Apply completion: caret hand-off, final frame, completion signal"""
        self.animation.active = False
        self._typingTask = None
        self._scheduler = None

        full = self.frame_full()
        if self.caret.typing_finish(full):
            if self._caretTask is None or self._caretTask.done():
                self.caretTask_start()
            self.frame_push()
        else:
            self.caretTask_cancel()
            self.display_set(full)

        LOG(f"Typing complete ({self.animation.totalCount} characters)", level=2)
        self.completion_release()

    async def caret_run(self) -> None:
        """Caret timer: toggle the glyph every blink interval"""
        try:
            while self.caret.blinking_is():
                await self.clock.sleep(self.config.caretBlinkRate)
                visible = self.caret.toggle()
                LOG(f"Caret {'on' if visible else 'off'}", level=3)
                self.frame_push()
        except Exception as e:
            self.animation_fail(e)

    def animation_fail(self, error: Exception) -> None:
        """
        Abandon the animation after a timer raised.

        Both timers are cancelled and the error is handed to whoever awaits
        the completion signal.
        """
        LOG(f"Animation failed: {error!r}", level=1)
        self.timers_cancel()
        self.caret.hide()
        self.animation.active = False
        if self._done is not None and not self._done.done():
            self._done.set_exception(error)

    def caretTask_start(self) -> None:
        self.caretTask_cancel()
        self._caretTask = asyncio.get_running_loop().create_task(self.caret_run())

    def caretTask_cancel(self) -> None:
        if self._caretTask is not None and not self._caretTask.done():
            self._caretTask.cancel()
        self._caretTask = None

    def timers_cancel(self) -> None:
        """Cancel the typing timer and the caret timer"""
        if self._scheduler is not None:
            self._scheduler.cancel()
            self._scheduler = None
        if self._typingTask is not None and not self._typingTask.done():
            self._typingTask.cancel()
        self._typingTask = None
        self.caretTask_cancel()

    def completion_release(self) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(None)

    def frame_full(self) -> str:
        """Fully revealed frame without caret"""
        return self.reconstructor.render(self.message, self.message.totalCount)

    def display_set(self, text: str) -> None:
        """Send text to the sink unless it is already showing"""
        if text != self.frame:
            self.frame = text
            self.sink.text_set(text)

    def frame_push(self) -> None:
        """Render the current reveal count, add the caret and send it to the sink"""
        body = self.reconstructor.render(self.message, self.animation.revealCount)
        self.display_set(self.caret.frame_compose(body))
