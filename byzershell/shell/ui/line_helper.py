"""
Line editing helper: statement completeness and display rendering.
"""

from typing import Iterable

from .highlighter import KeywordHighlighter

STATEMENT_TERMINATOR = ";"


def is_complete(buffer: str) -> bool:
    """Whether the buffer ends, ignoring trailing whitespace, with ';'."""
    return buffer.rstrip().endswith(STATEMENT_TERMINATOR)


class StatementHelper:
    """
    The operations the read loop needs from the line editor.

    validate() tells whether the accumulated text is a complete statement,
    render() returns the cosmetic form of a line for display.
    """

    def __init__(self, keywords: Iterable[str] = ()):
        self.highlighter = KeywordHighlighter(keywords)

    def validate(self, partial_text: str) -> bool:
        return is_complete(partial_text)

    def render(self, line: str) -> str:
        return self.highlighter.highlight(line)
