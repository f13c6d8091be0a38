"""
Custom Pygments lexer for inline formatting markers

Provides syntax highlighting for <marker> markup when frame logs are
exported as HTML, so markers stand out from the revealed text and the
transparent caret is easy to spot.

Token types:
- Name.Tag: Marker keywords (e.g., color, b, link)
- Punctuation: Angle brackets and the closing slash
- Name.Attribute / Literal.String: Marker attributes (e.g., =red, id=3)
- Text: Revealed plain characters
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    Literal,
    Whitespace,
)


class MarkupLexer(RegexLexer):
    """
    Lexer for rich text marker markup

    Example:
        Hello <color=red>World</color>!

    Tokens:
        < → Punctuation
        color → Name.Tag
        = → Punctuation
        red → Literal.String
        World → Text
    """

    name = 'Typewriter markup'
    aliases = ['typewriter', 'richtext']
    filenames = ['*.tw']

    tokens = {
        'root': [
            # Closing marker
            (r'(</)([^\s=>]*)(>)', bygroups(Punctuation, Name.Tag, Punctuation)),

            # Opening marker
            (r'(<)([^\s=>/]+)', bygroups(Punctuation, Name.Tag), 'marker'),

            # Everything else is revealed text
            (r'[^<]+', Text),
            (r'<', Text),
        ],

        'marker': [
            (r'>', Punctuation, '#pop'),

            # Shorthand value, e.g. <color=red> or <size=120%>
            (r'(=)("[^"]*"|[^\s>]+)', bygroups(Punctuation, Literal.String)),

            # key=value attribute, e.g. <link id=3>
            (r'([^\s=>]+)(=)("[^"]*"|[^\s>]+)',
             bygroups(Name.Attribute, Punctuation, Literal.String)),

            (r'\s+', Whitespace),
            (r'[^\s=>]+', Name.Attribute),
        ],
    }


def get_lexer() -> MarkupLexer:
    """
    Get the MarkupLexer instance

    Returns:
        MarkupLexer instance ready for use with Pygments
    """
    return MarkupLexer()
