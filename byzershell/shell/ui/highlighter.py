"""
Keyword highlighting for the line being edited.

Splits a line into word runs (letters, digits and '!') and separator runs,
and wraps keyword words in a bold blue ANSI sequence. Joining the tokens
back always yields the original line plus escape codes.
"""

import re
from typing import Callable, Iterable, Iterator, List, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import ANSI, to_formatted_text
from prompt_toolkit.lexers import Lexer

BOLD_BLUE = "\x1b[1;34m"
RESET = "\x1b[0m"

_WORD_RE = re.compile(r"(?:[^\W_]|!)+")
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def tokenize(line: str) -> Iterator[Tuple[bool, str]]:
    """
    Partition a line into (is_word, text) tokens.

    Word tokens are maximal runs of alphanumeric or '!' characters; the text
    between them is yielded as separator tokens. No character is dropped.
    """
    pos = 0
    for match in _WORD_RE.finditer(line):
        start, end = match.span()
        if start > pos:
            yield False, line[pos:start]
        yield True, match.group()
        pos = end
    if pos < len(line):
        yield False, line[pos:]


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences."""
    return _ANSI_RE.sub("", text)


class KeywordHighlighter:
    """Colors keyword tokens of an input line."""

    def __init__(self, keywords: Iterable[str] = ()):
        """
        Initialize highlighter.

        Args:
            keywords: Case-insensitive keyword vocabulary
        """
        self.keywords = frozenset(k.lower() for k in keywords)

    def is_keyword(self, word: str) -> bool:
        return word.lower() in self.keywords

    def highlight(self, line: str) -> str:
        """Return the line with keywords wrapped in bold blue."""
        if len(line) <= 1 or not self.keywords:
            return line

        parts: List[str] = []
        for is_word, text in tokenize(line):
            if is_word and text.lower() in self.keywords:
                parts.append(f"{BOLD_BLUE}{text}{RESET}")
            else:
                parts.append(text)
        return "".join(parts)


class KeywordLexer(Lexer):
    """
    prompt_toolkit lexer showing each line in its rendered form.

    ``render`` maps a line to its ANSI-styled display text, usually
    StatementHelper.render.
    """

    def __init__(self, render: Callable[[str], str]):
        self.render = render

    def lex_document(self, document: Document):
        lines = document.lines

        def get_line(lineno: int):
            try:
                line = lines[lineno]
            except IndexError:
                return []
            return to_formatted_text(ANSI(self.render(line)))

        return get_line
