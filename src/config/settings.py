"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TYPEWRITER_ prefix (e.g., TYPEWRITER_TOTAL_TYPING_TIME=3.5).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TYPEWRITER_ prefix. These values seed every new
    engine's EngineConfig; the engine setters then adjust its own copy.

    Examples:
        TYPEWRITER_TOTAL_TYPING_TIME=4
        TYPEWRITER_CARET_CHAR=_
        TYPEWRITER_KEEP_CARET_AFTER_TYPING=false
    """

    model_config = SettingsConfigDict(
        env_prefix="TYPEWRITER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Typing configuration
    total_typing_time: float = Field(
        default=2.0,
        description="Total time in seconds to reveal a whole message, regardless of length",
    )

    noise_variation: float = Field(
        default=0.3,
        description="Random per-character jitter as a fraction of the base delay (0-1)",
    )

    # Caret configuration
    show_caret: bool = Field(
        default=True,
        description="Show a blinking caret while typing",
    )

    caret_char: str = Field(
        default="|",
        description="Glyph used as the caret",
    )

    caret_blink_rate: float = Field(
        default=0.5,
        description="Seconds between caret blink toggles",
    )

    keep_caret_after_typing: bool = Field(
        default=True,
        description="Keep the caret blinking once the message is fully revealed",
    )

    hidden_caret_color: str = Field(
        default="#00000000",
        description="Fully transparent color used to draw the caret in its 'off' blink state",
    )

    # Limits
    min_typing_time: float = Field(
        default=0.1,
        description="Lower bound for the total typing time",
    )

    min_blink_rate: float = Field(
        default=0.1,
        description="Lower bound for the caret blink rate",
    )

    min_char_delay: float = Field(
        default=0.01,
        description="Lower bound for any single character delay",
    )

    # Tokenizer configuration
    marker_pattern: str = Field(
        default=r"<[^>]+>",
        description="Regular expression matching one inline formatting marker",
    )

    debug_mode: bool = Field(
        default=False,
        description="Force trace-level logging in the command line front end",
    )

    def hiddenCaret_make(self, caret: str) -> str:
        """
        Wrap a caret glyph in a fully transparent color marker.

        The wrapped glyph still occupies layout width, so toggling between
        the visible and hidden forms never reflows the text.

        Args:
            caret: Caret glyph

        Returns:
            Transparent caret string

        Example:
            >>> settings = AppSettings()
            >>> settings.hiddenCaret_make('|')
            '<color=#00000000>|</color>'
        """
        return f"<color={self.hidden_caret_color}>{caret}</color>"

    def typingTime_clamp(self, seconds: float) -> float:
        """Floor a total typing time at min_typing_time"""
        return max(self.min_typing_time, seconds)

    def blinkRate_clamp(self, seconds: float) -> float:
        """Floor a caret blink rate at min_blink_rate"""
        return max(self.min_blink_rate, seconds)

    def noise_clamp(self, noise: float) -> float:
        """
        Clamp a noise fraction into [0, 1].

        Example:
            >>> AppSettings().noise_clamp(1.7)
            1.0
        """
        return min(1.0, max(0.0, noise))


# Singleton instance - import this in your code
appsettings = AppSettings()
