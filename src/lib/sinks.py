"""
Display sinks

A sink is whatever shows text: the engine calls text_set() with a complete
frame every time the displayed string changes.
"""

import html
import re
import sys
from typing import Callable, List, Optional, Protocol, TextIO, Tuple, TYPE_CHECKING

from .tokenizer import TagTokenizer

if TYPE_CHECKING:
    from .clock import Clock


class DisplaySink(Protocol):
    """Text surface driven by the engine"""

    def text_set(self, text: str) -> None:
        ...


class CallbackSink:
    """Forwards each frame to a callable"""

    def __init__(self, callback: Callable[[str], None]):
        self.callback = callback
        self.text = ""

    def text_set(self, text: str) -> None:
        self.text = text
        self.callback(text)


class FrameRecorder:
    """
    Records every frame with its timestamp

    Attributes:
        frames: List of (timestamp, frame) in arrival order
        text: Most recent frame
    """

    def __init__(self, clock: Optional["Clock"] = None):
        """
        Args:
            clock: Clock supplying timestamps; without one every frame is
                   stamped 0.0
        """
        self.clock = clock
        self.frames: List[Tuple[float, str]] = []
        self.text = ""

    def text_set(self, text: str) -> None:
        self.text = text
        timestamp = self.clock.now() if self.clock is not None else 0.0
        self.frames.append((timestamp, text))

    def texts(self) -> List[str]:
        """Frame strings without timestamps"""
        return [text for _, text in self.frames]

    def text_render(self) -> str:
        """One 'timestamp<TAB>frame' line per frame"""
        return "".join(f"{timestamp:9.3f}\t{text}\n" for timestamp, text in self.frames)

    def html_render(self, style: str = "monokai", title: str = "typewriter frames") -> str:
        """
        Render the frame log as a standalone HTML page.

        Frames are highlighted with MarkupLexer so markers, attributes and
        revealed text are colored separately.

        Args:
            style: Pygments style name
            title: Page title

        Returns:
            Complete HTML document
        """
        from pygments import highlight
        from pygments.formatters import HtmlFormatter
        from pygments.util import ClassNotFound
        from .lexer import get_lexer

        try:
            formatter = HtmlFormatter(style=style, noclasses=True, linenos=False)
        except ClassNotFound:
            formatter = HtmlFormatter(noclasses=True, linenos=False)

        lexer = get_lexer()
        rows = []
        for timestamp, text in self.frames:
            highlighted = highlight(text or " ", lexer, formatter)
            rows.append(
                f'<tr><td class="ts">{timestamp:.3f}</td>'
                f'<td class="frame">{highlighted}</td></tr>'
            )

        return (
            "<!DOCTYPE html>\n"
            f"<html><head><meta charset=\"utf-8\"><title>{html.escape(title)}</title>\n"
            "<style>td.ts{font-family:monospace;vertical-align:top;padding-right:1em}"
            "td.frame pre{margin:0}</style></head>\n"
            f"<body><table>\n{''.join(rows)}\n</table></body></html>\n"
        )


class TerminalSink:
    """
    Shows frames on a single terminal line

    Markers are stripped, so the terminal sees only revealed characters and
    the caret. The hidden caret becomes a space to keep the width constant.
    """

    def __init__(self, stream: Optional[TextIO] = None, tokenizer: Optional[TagTokenizer] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.tokenizer = tokenizer if tokenizer is not None else TagTokenizer()
        self.text = ""
        self._width = 0

        from ..config import appsettings
        self._hidden = re.compile(
            rf"<color={re.escape(appsettings.hidden_caret_color)}>(.*?)</color>"
        )

    def text_set(self, text: str) -> None:
        self.text = text
        text = self._hidden.sub(lambda m: " " * len(m.group(1)), text)

        plain = self.tokenizer.plain_strip(text).replace("\n", " ")
        padding = " " * max(0, self._width - len(plain))
        self._width = len(plain)
        self.stream.write(f"\r{plain}{padding}")
        self.stream.flush()

    def line_end(self) -> None:
        """Finish the current line"""
        self.stream.write("\n")
        self.stream.flush()
        self._width = 0
