"""
Sequence playback tests

Tests typing several messages in order with pauses in between.
"""

import pytest


class TestSequencePlay:
    """sequence_play() ordering and pauses"""

    @pytest.mark.asyncio
    async def test_explicit_pause(self, clock, recorder, engine_make):
        """Each message types in full, separated by the pause"""
        engine = engine_make()

        await clock.run_until(engine.sequence_play("A", "B", pause=1.0))

        assert [(round(t, 6), text) for t, text in recorder.frames] == [
            (0.0, ""),
            (1.0, "A"),
            (2.0, ""),
            (3.0, "B"),
        ]
        assert clock.sleeps == pytest.approx([1.0, 1.0, 1.0])

    @pytest.mark.asyncio
    async def test_default_pause_is_blink_rate(self, clock, engine_make):
        """Without a pause the caret blink rate is used"""
        engine = engine_make(caretBlinkRate=0.5)

        await clock.run_until(engine.sequence_play("A", "B"))

        assert clock.sleeps == pytest.approx([1.0, 0.5, 1.0])
        assert clock.now() == pytest.approx(2.5)

    @pytest.mark.asyncio
    async def test_no_pause_after_last(self, clock, engine_make):
        """The sequence ends when the last message completes"""
        engine = engine_make()

        await clock.run_until(engine.sequence_play("only", pause=3.0))

        assert clock.now() == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_negative_pause_clamped(self, clock, engine_make):
        """A negative pause behaves like no pause"""
        engine = engine_make()

        await clock.run_until(engine.sequence_play("A", "B", pause=-2.0))

        assert clock.now() == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_empty_sequence(self, clock, recorder, engine_make):
        """No messages: nothing displayed, nothing awaited"""
        engine = engine_make()

        await clock.run_until(engine.sequence_play())

        assert recorder.frames == []
        assert clock.now() == 0.0

    @pytest.mark.asyncio
    async def test_empty_message_in_sequence(self, clock, recorder, engine_make):
        """Empty messages complete immediately and still get their pause"""
        engine = engine_make()

        await clock.run_until(engine.sequence_play("A", "", "B", pause=0.5))

        assert clock.now() == pytest.approx(3.0)
        assert recorder.texts() == ["", "A", "", "B"]

    @pytest.mark.asyncio
    async def test_messages_in_order(self, clock, recorder, engine_make):
        """Completed frames appear in sequence order"""
        engine = engine_make()
        messages = ["<b>one</b>", "two", "<i>three</i>"]

        await clock.run_until(engine.sequence_play(*messages, pause=0.2))

        finals = [text for text in recorder.texts() if text in messages]
        assert finals == messages

    @pytest.mark.asyncio
    async def test_caret_between_messages(self, clock, recorder, engine_make):
        """A kept caret blinks during the pause"""
        engine = engine_make(showCaret=True, keepCaretAfterTyping=True)

        await clock.run_until(engine.sequence_play("A", "B", pause=1.0))

        between = [text for t, text in recorder.frames if 1.0 < t < 2.0]
        assert between
        assert all(text.startswith("A") and "|" in text for text in between)
        engine.caret_hide()
        assert recorder.text == "B"
