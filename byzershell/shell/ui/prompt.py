"""
Prompts and line readers for the Byzer shell.

A line reader returns one physical line per call and raises EOFError on
end of input and KeyboardInterrupt on Ctrl-C.
"""

import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .highlighter import KeywordLexer
from .line_helper import StatementHelper

logger = logging.getLogger(__name__)


class ShellPrompt:
    """Prompt strings for the shell."""

    def __init__(self, prompt: str = ">> ", unclosed_prompt: str = ".. "):
        """
        Initialize prompt.

        Args:
            prompt: Prompt for the first line of a statement
            unclosed_prompt: Prompt while a statement is still open
        """
        self.prompt = prompt
        self.unclosed_prompt = unclosed_prompt

    def get_prompt(self, continuation: bool = False) -> str:
        """
        Get the prompt string.

        Args:
            continuation: Whether this is a continuation prompt

        Returns:
            Prompt string
        """
        if continuation:
            return self.unclosed_prompt
        return self.prompt

    def get_continuation_prompt(self) -> str:
        """Get the continuation prompt."""
        return self.get_prompt(continuation=True)


class StreamLineReader:
    """Reads plain lines from a SharedIO channel."""

    def __init__(self, io, echo_prompt: bool = True):
        self.io = io
        self.echo_prompt = echo_prompt

    def __call__(self, prompt: str) -> str:
        if self.echo_prompt:
            self.io.write(prompt)
        line = self.io.readline()
        if line == "":
            raise EOFError()
        return line.rstrip("\r\n")


class PromptToolkitLineReader:
    """Interactive reader with in-memory history and keyword highlighting."""

    def __init__(self, helper: StatementHelper):
        self.session = PromptSession(
            history=InMemoryHistory(),
            lexer=KeywordLexer(helper.render),
        )

    def __call__(self, prompt: str) -> str:
        return self.session.prompt(prompt)


def create_line_reader(io, helper: StatementHelper, interactive: Optional[bool] = None):
    """
    Pick a line reader for the channel.

    Args:
        io: SharedIO channel
        helper: Statement helper providing highlighting
        interactive: Force (or disable) the prompt_toolkit reader

    Returns:
        A callable taking a prompt and returning one line
    """
    if interactive is None:
        interactive = io.input_isatty() and io.isatty()
    if interactive:
        logger.debug("Using prompt_toolkit line reader")
        return PromptToolkitLineReader(helper)
    logger.debug("Using plain stream line reader")
    return StreamLineReader(io)
