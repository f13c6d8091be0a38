"""
Engine playback tests

Tests single-message animation: frame timeline, completion signal,
supersession, stopping and configuration setters.
"""

import random

import pytest

from typewriter.lib.engine import TypingEngine
from typewriter.lib.sinks import CallbackSink
from typewriter.lib.tokenizer import TagTokenizer
from typewriter.models.engine import EngineConfig


class TestTextPlay:
    """Fire-and-forget playback"""

    @pytest.mark.asyncio
    async def test_frame_timeline(self, clock, recorder, engine_make):
        """One frame per revealed character at even intervals"""
        engine = engine_make()

        engine.text_play("Hi")
        await clock.advance(1.0)

        assert [(round(t, 6), text) for t, text in recorder.frames] == [
            (0.0, ""),
            (0.5, "H"),
            (1.0, "Hi"),
        ]
        assert not engine.typing_isActive()

    @pytest.mark.asyncio
    async def test_markup_frames_balanced(self, clock, recorder, engine_make):
        """Intermediate frames close open markers"""
        engine = engine_make()

        engine.text_play("<b>Hi</b>")
        await clock.advance(1.0)

        assert recorder.texts() == ["", "<b>H</b>", "<b>Hi</b>"]

    @pytest.mark.asyncio
    async def test_active_while_typing(self, clock, engine_make):
        """typing_isActive() is True until the last character"""
        engine = engine_make()

        engine.text_play("Hey")
        assert engine.typing_isActive()
        await clock.advance(0.5)
        assert engine.typing_isActive()
        await clock.advance(0.5)
        assert not engine.typing_isActive()

    @pytest.mark.asyncio
    async def test_reveal_count_monotonic(self, clock, recorder, engine_make):
        """Each frame shows at least as many characters as the previous"""
        engine = engine_make(noiseVariation=0.5)
        tokenizer = TagTokenizer()

        engine.text_play("<i>a longer</i> message <b>here</b>")
        await clock.advance(2.0)

        counts = [len(tokenizer.plain_strip(text)) for text in recorder.texts()]
        assert counts == sorted(counts)
        assert counts[-1] == len("a longer message here")

    @pytest.mark.asyncio
    async def test_duration_independent_of_length(self, clock, engine_make):
        """Short and long messages both take the total typing time"""
        engine = engine_make(noiseVariation=0.02)

        await clock.run_until(engine.text_playAwaitable("ok"))
        first = clock.now()
        await clock.run_until(engine.text_playAwaitable("a considerably longer line"))

        assert first == pytest.approx(1.0)
        assert clock.now() - first == pytest.approx(1.0)


class TestEmptyMessage:
    """Messages with no plain characters"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", None])
    async def test_resolves_immediately(self, clock, recorder, engine_make, message):
        """Completion is immediate and the display is cleared"""
        engine = engine_make(showCaret=True)

        done = engine.text_playAwaitable(message)
        await clock.settle()

        assert done.done()
        assert recorder.text == ""
        assert not engine.typing_isActive()
        assert clock.pending_count() == 0

    @pytest.mark.asyncio
    async def test_markers_only(self, clock, recorder, engine_make):
        """A message made only of markers has nothing to type"""
        engine = engine_make()

        await engine.text_playAwaitable("<b></b>")
        assert recorder.text == ""


class TestCompletion:
    """Awaitable completion signal"""

    @pytest.mark.asyncio
    async def test_awaitable_resolves_at_end(self, clock, recorder, engine_make):
        """The future resolves once the last character shows"""
        engine = engine_make()

        done = engine.text_playAwaitable("Hello")
        await clock.advance(0.5)
        assert not done.done()

        await clock.advance(0.5)
        assert done.done()
        assert recorder.text == "Hello"

    @pytest.mark.asyncio
    async def test_current_wait_idle(self, engine_make):
        """Nothing typing: already resolved"""
        engine = engine_make()
        assert engine.current_wait().done()

    @pytest.mark.asyncio
    async def test_current_wait_active(self, clock, engine_make):
        """Waits for the animation in flight"""
        engine = engine_make()
        engine.text_play("Hello")

        waiter = engine.current_wait()
        assert not waiter.done()

        await clock.run_until(waiter)
        assert clock.now() == pytest.approx(1.0)
        assert not engine.typing_isActive()


class TestSupersede:
    """Starting a new animation replaces the current one"""

    @pytest.mark.asyncio
    async def test_old_animation_never_writes_again(self, clock, recorder, engine_make):
        """After supersession only the new message is displayed"""
        engine = engine_make()

        engine.text_play("Hello")
        await clock.advance(0.5)
        mark = len(recorder.frames)

        engine.text_play("Bye")
        await clock.advance(5.0)

        later = recorder.texts()[mark:]
        assert later == ["", "B", "By", "Bye"]
        assert clock.pending_count() == 0

    @pytest.mark.asyncio
    async def test_superseded_future_resolves(self, clock, engine_make):
        """The replaced animation's completion signal does not hang"""
        engine = engine_make()

        first = engine.text_playAwaitable("Hello")
        await clock.advance(0.2)
        second = engine.text_playAwaitable("World")
        await clock.settle()

        assert first.done()
        assert not second.done()

        await clock.run_until(second)
        assert second.done()

    @pytest.mark.asyncio
    async def test_supersede_restarts_timing(self, clock, recorder, engine_make):
        """The new message gets a full typing time of its own"""
        engine = engine_make()

        engine.text_play("Hello")
        await clock.advance(0.7)
        await clock.run_until(engine.text_playAwaitable("Yo"))

        assert clock.now() == pytest.approx(1.7)
        assert recorder.text == "Yo"


class TestStop:
    """Stopping shows the raw message"""

    @pytest.mark.asyncio
    async def test_stop_shows_raw(self, clock, recorder, engine_make):
        """Markers appear exactly as written"""
        engine = engine_make(showCaret=True, keepCaretAfterTyping=True)

        done = engine.text_playAwaitable("<b>Hello</b> <x")
        await clock.advance(0.3)
        engine.typing_stop()
        await clock.settle()

        assert recorder.text == "<b>Hello</b> <x"
        assert not engine.typing_isActive()
        assert done.done()
        assert clock.pending_count() == 0

    @pytest.mark.asyncio
    async def test_no_frames_after_stop(self, clock, recorder, engine_make):
        """Cancelled timers stay silent"""
        engine = engine_make()

        engine.text_play("Hello")
        await clock.advance(0.5)
        engine.typing_stop()
        count = len(recorder.frames)

        await clock.advance(5.0)
        assert len(recorder.frames) == count

    @pytest.mark.asyncio
    async def test_reset_clears_display(self, clock, recorder, engine_make):
        """engine_reset() forgets the message"""
        engine = engine_make()

        engine.text_play("Hello")
        await clock.advance(0.5)
        engine.engine_reset()

        assert recorder.text == ""
        assert engine.message.plainText == ""
        assert clock.pending_count() == 0


class TestSetters:
    """Configuration setters clamp their inputs"""

    @pytest.mark.parametrize("value, expected", [(0.0, 0.1), (-3.0, 0.1), (0.05, 0.1), (4.0, 4.0)])
    def test_total_typing_time(self, engine_make, value, expected):
        """Total typing time floors at 0.1s"""
        engine = engine_make()
        engine.totalTypingTime_set(value)
        assert engine.config.totalTypingTime == pytest.approx(expected)

    @pytest.mark.parametrize("value, expected", [(-0.5, 0.0), (0.4, 0.4), (1.5, 1.0)])
    def test_noise_variation(self, engine_make, value, expected):
        """Noise clamps to [0, 1]"""
        engine = engine_make()
        engine.noiseVariation_set(value)
        assert engine.config.noiseVariation == pytest.approx(expected)

    @pytest.mark.parametrize("value, expected", [(0.0, 0.1), (0.25, 0.25)])
    def test_caret_blink_rate(self, engine_make, value, expected):
        """Blink rate floors at 0.1s"""
        engine = engine_make()
        engine.caretBlinkRate_set(value)
        assert engine.config.caretBlinkRate == pytest.approx(expected)

    def test_caret_char_first_character(self, engine_make):
        """Only the first character is kept; empty is ignored"""
        engine = engine_make()

        engine.caretChar_set("#!")
        assert engine.config.caretChar == "#"
        engine.caretChar_set("")
        assert engine.config.caretChar == "#"

    @pytest.mark.asyncio
    async def test_total_change_applies_to_later_delays(self, clock, engine_make):
        """Changing the total mid-animation stretches the remaining delays"""
        engine = engine_make()

        engine.text_play("abcd")
        await clock.advance(0.25)
        engine.totalTypingTime_set(2.0)

        await clock.run_until(engine.current_wait())
        # 0.25 + 0.25 already scheduled, 0.5 at the new rate, then the rest of 2.0
        assert clock.now() == pytest.approx(2.0)


class TestFailures:
    """Errors outside the engine's control"""

    @staticmethod
    def failing_engine(clock, fail_on, **config):
        calls = []

        def show(text):
            calls.append(text)
            if len(calls) == fail_on:
                raise RuntimeError("sink failed")

        return TypingEngine(
            CallbackSink(show),
            clock=clock,
            rng=random.Random(1),
            config=EngineConfig(**{
                "totalTypingTime": 1.0,
                "noiseVariation": 0.0,
                "showCaret": False,
                **config,
            }),
        )

    @pytest.mark.asyncio
    async def test_sink_error_reaches_awaiter(self, clock):
        """A sink raising mid-animation fails the completion signal"""
        engine = self.failing_engine(clock, fail_on=2)

        done = engine.text_playAwaitable("Hi")
        await clock.advance(5.0)

        assert done.done()
        with pytest.raises(RuntimeError, match="sink failed"):
            done.result()
        assert not engine.typing_isActive()
        assert clock.pending_count() == 0

    @pytest.mark.asyncio
    async def test_sink_error_on_final_frame(self, clock):
        """Failing to show the caret-free final text still fails completion"""
        # Frames: "|", hidden caret, "H" + hidden caret, "H|", "Hi|", then "Hi"
        engine = self.failing_engine(clock, fail_on=6, showCaret=True, keepCaretAfterTyping=False)

        done = engine.text_playAwaitable("Hi")
        await clock.advance(5.0)

        with pytest.raises(RuntimeError, match="sink failed"):
            done.result()
        assert not engine.typing_isActive()
        assert clock.pending_count() == 0

    @pytest.mark.asyncio
    async def test_sink_error_surfaces_from_sequence(self, clock):
        """run_until reports the sink error rather than a timeout"""
        engine = self.failing_engine(clock, fail_on=2)

        with pytest.raises(RuntimeError, match="sink failed"):
            await clock.run_until(engine.sequence_play("Hi", "there"))

    def test_playback_needs_running_loop(self, engine_make):
        """Outside an event loop playback raises and leaves the engine idle"""
        engine = engine_make()

        with pytest.raises(RuntimeError):
            engine.text_play("Hi")
        assert not engine.typing_isActive()

        engine.totalTypingTime_set(3.0)
        assert engine.config.totalTypingTime == pytest.approx(3.0)
