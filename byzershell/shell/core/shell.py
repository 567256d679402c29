"""
Main Byzer shell implementation.

Reads statements terminated by ';' (possibly spanning several physical
lines), dispatches them to a builtin command or to the caller's default
handler, and records what ran in a bounded history.
"""

import logging
import re
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..commands import Command, CommandRegistry, register_builtins
from ..ui.line_helper import STATEMENT_TERMINATOR, StatementHelper
from ..ui.prompt import ShellPrompt, create_line_reader
from ..utils.shared_io import SharedIO
from .errors import (
    CommandFailedError,
    EmptyLineError,
    MissingArgsError,
    QuitSignal,
    ShellError,
)
from .history import History

logger = logging.getLogger(__name__)

T = TypeVar("T")

# default_handler(io, shell, statement)
DefaultHandler = Callable[[SharedIO, "Shell", str], None]
LineReader = Callable[[str], str]

_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0b\x0c]+")


def split_statement(line: str) -> List[str]:
    """
    Split a statement into whitespace-delimited tokens.

    The statement terminator is removed from the last token, and a token
    left empty by that is dropped.
    """
    tokens = [tok for tok in _ASCII_WHITESPACE.split(line) if tok]
    if tokens and tokens[-1].endswith(STATEMENT_TERMINATOR):
        last = tokens[-1][: -len(STATEMENT_TERMINATOR)]
        if last:
            tokens[-1] = last
        else:
            tokens.pop()
    return tokens


class Shell(Generic[T]):
    """Interactive read-evaluate loop with builtin commands and history."""

    def __init__(
        self,
        default_handler: DefaultHandler,
        data: Optional[T] = None,
        prompt: str = ">> ",
        unclosed_prompt: str = ".. ",
        history_capacity: int = 10,
        keywords: Iterable[str] = (),
        io: Optional[SharedIO] = None,
        line_reader: Optional[LineReader] = None,
    ):
        """
        Initialize the shell.

        Args:
            default_handler: Called with (io, shell, statement) for any
                statement whose first word is not a registered command
            data: Caller-owned payload available to handlers as shell.data
            prompt: Prompt for the first line of a statement
            unclosed_prompt: Prompt while a statement is not terminated
            history_capacity: Number of statements kept in history
            keywords: Words highlighted while editing
            io: Shared terminal channel
            line_reader: Callable returning one physical line per prompt
        """
        self.default_handler = default_handler
        self.data = data
        self.io = io or SharedIO()
        self.prompt = ShellPrompt(prompt, unclosed_prompt)
        self.history = History(history_capacity)
        self.helper = StatementHelper(keywords)

        self.registry = CommandRegistry()
        register_builtins(self.registry)

        self._line_reader = line_reader
        self._edit_lines: List[str] = []
        self.execution_count = 0

    def register(self, command: Command) -> None:
        """Register an extra command before the loop starts."""
        self.registry.register(command)

    def add_command(
        self,
        name: str,
        description: str,
        handler: Callable[[SharedIO, "Shell", Sequence[str]], None],
        min_args: int = 0,
    ) -> Command:
        """Build and register an extra command."""
        return self.registry.add(name, description, handler, min_args)

    def dispatch(self, line: str) -> None:
        """
        Evaluate one statement.

        The first token selects a registered command, which receives the
        remaining tokens. Otherwise the whole statement goes to the default
        handler unchanged.

        Raises:
            EmptyLineError: The statement has no tokens
            MissingArgsError: Too few arguments for the command
            QuitSignal: The quit command ran
            ShellError: Any other failure, handler errors wrapped in
                CommandFailedError
        """
        tokens = split_statement(line)
        if not tokens:
            raise EmptyLineError()

        cmd = self.registry.get_command(tokens[0])
        if cmd is None:
            logger.debug("Forwarding statement to default handler")
            self._call(self.default_handler, line)
            return

        args = tokens[1:]
        if len(args) < cmd.min_args:
            raise MissingArgsError(cmd.name, cmd.min_args, len(args))

        logger.debug("Running command %s with %d argument(s)", cmd.name, len(args))
        self._call(cmd.invoke, args)

    def _call(self, func: Callable[..., Any], payload: Any) -> None:
        try:
            func(self.io, self, payload)
        except ShellError:
            raise
        except Exception as e:
            raise CommandFailedError(e) from e

    def execute(self, statement: str) -> None:
        """Dispatch a statement and record it in history when it succeeds."""
        self.dispatch(statement)
        self.history.push(statement)
        self.execution_count += 1

    def read_statement(self, reader: LineReader) -> str:
        """
        Read physical lines until they form a complete statement.

        A blank first line is returned as is, so it evaluates as empty.

        Raises:
            EOFError: End of input
            KeyboardInterrupt: Ctrl-C at the prompt
        """
        self._edit_lines = []
        prompt = self.prompt.get_prompt()
        while True:
            line = reader(prompt)
            if not self._edit_lines and not line.strip():
                return line
            self._edit_lines.append(line)
            buffer = "\n".join(self._edit_lines)
            if self.helper.validate(buffer):
                self._edit_lines = []
                return buffer
            prompt = self.prompt.get_continuation_prompt()

    def run(self) -> None:
        """Run the read-evaluate loop until quit, EOF or Ctrl-C."""
        reader = self._line_reader or create_line_reader(self.io, self.helper)
        logger.info("Shell loop started")

        while True:
            try:
                statement = self.read_statement(reader)
            except EOFError:
                self._discard_partial()
                self.io.write("CTRL-D\n")
                break
            except KeyboardInterrupt:
                self._discard_partial()
                self.io.write("CTRL-C\n")
                break

            try:
                self.execute(statement)
            except QuitSignal:
                break
            except EmptyLineError:
                continue
            except ShellError as e:
                logger.warning("Statement failed: %s", e)
                self.io.write(f"Error: {e}\n")
            except KeyboardInterrupt:
                logger.warning("Statement interrupted")
                self.io.write("Error: interrupted\n")

        logger.info("Shell loop stopped after %d statement(s)", self.execution_count)

    def _discard_partial(self) -> None:
        if self._edit_lines:
            logger.debug(
                "Discarding unterminated statement (%d line(s))", len(self._edit_lines)
            )
        self._edit_lines = []
