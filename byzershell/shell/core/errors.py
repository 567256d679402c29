"""
Error kinds raised while evaluating shell statements.

Everything except QuitSignal is reported to the user and the loop continues.
"""

from typing import Optional


class ShellError(Exception):
    """Base class for statement evaluation errors."""


class EmptyLineError(ShellError):
    """The statement contained no tokens."""

    def __init__(self):
        super().__init__("empty statement")


class QuitSignal(ShellError):
    """Sentinel raised by the quit command to end the read loop."""

    def __init__(self):
        super().__init__("quit")


class MissingArgsError(ShellError):
    """A command received fewer arguments than it declares."""

    def __init__(self, command: str, expected: int, actual: int):
        self.command = command
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"command '{command}' expects at least {expected} argument(s), got {actual}"
        )


class UnknownCommandError(ShellError):
    """Raised by a default handler that refuses a statement."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown command: {name}")


class InvalidHistoryError(ShellError):
    """History replay was requested for an index that does not exist."""

    def __init__(self, index: str):
        self.index = index
        super().__init__(f"invalid history index: {index}")


class CommandFailedError(ShellError):
    """Wraps a failure raised by a command or default handler."""

    def __init__(self, cause: BaseException, message: Optional[str] = None):
        self.cause = cause
        super().__init__(message or str(cause) or type(cause).__name__)
        self.__cause__ = cause
