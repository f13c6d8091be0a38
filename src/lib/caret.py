"""
Caret blink state machine

Phases:
    HIDDEN         -> no glyph; initial state, and after hide()
    DURING_TYPING  -> glyph appended to the partially revealed text
    AFTER_TYPING   -> glyph appended to the stable, fully revealed text

The glyph is never removed while blinking. Its "off" state is the same
character drawn in a fully transparent color, so the rendered width stays
constant and centered or right-aligned text does not jump.

The blinker holds state only; the engine owns the interval timer that
calls toggle().
"""

from typing import Optional, TYPE_CHECKING

from ..models.engine import EngineConfig
from ..models.message import CaretPhase, CaretState

if TYPE_CHECKING:
    from ..config.settings import AppSettings


class CaretBlinker:
    """
    Tracks caret phase and visibility and composes caret frames
    """

    def __init__(self, config: EngineConfig, settings: Optional["AppSettings"] = None):
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        self.settings = settings
        self.config = config
        self.state = CaretState()

    @property
    def phase(self) -> CaretPhase:
        return self.state.phase

    def blinking_is(self) -> bool:
        """True in either blinking phase"""
        return self.state.phase is not CaretPhase.HIDDEN

    def typing_begin(self) -> None:
        """Enter DURING_TYPING with the glyph visible"""
        self.state = CaretState(phase=CaretPhase.DURING_TYPING, glyphVisible=True)

    def typing_finish(self, fullText: str) -> bool:
        """
        Leave the typing phase.

        Args:
            fullText: The fully revealed frame

        Returns:
            True if the caret keeps blinking (AFTER_TYPING), False if it was
            hidden
        """
        if self.config.showCaret and self.config.keepCaretAfterTyping:
            self.state = CaretState(
                phase=CaretPhase.AFTER_TYPING,
                glyphVisible=True,
                stablePrefix=fullText,
            )
            return True
        self.hide()
        return False

    def hide(self) -> None:
        """Enter HIDDEN"""
        self.state = CaretState()

    def toggle(self) -> bool:
        """Flip glyph visibility; returns the new visibility"""
        self.state.glyphVisible = not self.state.glyphVisible
        return self.state.glyphVisible

    def glyph_make(self) -> str:
        """Caret glyph for the current visibility"""
        caret = self.config.caretChar
        if self.state.glyphVisible:
            return caret
        return self.settings.hiddenCaret_make(caret)

    def frame_compose(self, body: str) -> str:
        """
        Append the caret glyph to a rendered frame.

        In AFTER_TYPING the captured stable prefix replaces body. In HIDDEN,
        or when caret display is switched off, body is returned unchanged.
        """
        if self.state.phase is CaretPhase.AFTER_TYPING:
            body = self.state.stablePrefix
        elif self.state.phase is CaretPhase.HIDDEN:
            return body

        if not self.config.showCaret:
            return body
        return body + self.glyph_make()
