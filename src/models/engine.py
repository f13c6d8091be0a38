"""
Engine configuration model

Holds the per-instance, mutable settings of one TypingEngine.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.settings import AppSettings


@dataclass
class EngineConfig:
    """
    Runtime settings of a single typing engine.

    Values are read at every scheduling decision and every render, so
    changes made through the engine setters apply to the next delay or
    frame without touching output already sent to the display.

    Attributes:
        totalTypingTime: Seconds to reveal a whole message (floor 0.1)
        noiseVariation: Per-character jitter fraction (0-1)
        showCaret: Draw a caret while typing
        caretChar: Caret glyph
        caretBlinkRate: Seconds between blink toggles (floor 0.1)
        keepCaretAfterTyping: Keep blinking after the message completes
    """

    totalTypingTime: float = field(default=2.0)
    noiseVariation: float = field(default=0.3)
    showCaret: bool = field(default=True)
    caretChar: str = field(default="|")
    caretBlinkRate: float = field(default=0.5)
    keepCaretAfterTyping: bool = field(default=True)

    @classmethod
    def config_createFromSettings(
        cls: Type["EngineConfig"],
        settings: Optional["AppSettings"] = None,
        **overrides: Any,
    ) -> "EngineConfig":
        """
        Create an EngineConfig from application settings.

        Clamps every timing value the same way the engine setters do, then
        applies any keyword overrides (also clamped). Overrides whose value
        is None are ignored, so argparse namespaces can be passed through.

        Args:
            settings: AppSettings instance (defaults to the module singleton)
            **overrides: EngineConfig field values taking precedence

        Returns:
            A new EngineConfig
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings

        values = {
            "totalTypingTime": settings.total_typing_time,
            "noiseVariation": settings.noise_variation,
            "showCaret": settings.show_caret,
            "caretChar": settings.caret_char,
            "caretBlinkRate": settings.caret_blink_rate,
            "keepCaretAfterTyping": settings.keep_caret_after_typing,
        }
        values.update({k: v for k, v in overrides.items() if k in values and v is not None})

        values["totalTypingTime"] = settings.typingTime_clamp(values["totalTypingTime"])
        values["noiseVariation"] = settings.noise_clamp(values["noiseVariation"])
        values["caretBlinkRate"] = settings.blinkRate_clamp(values["caretBlinkRate"])
        values["caretChar"] = values["caretChar"][:1] or settings.caret_char[:1] or "|"

        return cls(**values)

    def copy(self) -> "EngineConfig":
        """Shallow copy"""
        return type(self)(**self.__dict__)
