"""Core shell components."""

from .errors import (
    CommandFailedError,
    EmptyLineError,
    InvalidHistoryError,
    MissingArgsError,
    QuitSignal,
    ShellError,
    UnknownCommandError,
)
from .history import History

__all__ = [
    "History",
    "ShellError",
    "EmptyLineError",
    "QuitSignal",
    "MissingArgsError",
    "UnknownCommandError",
    "InvalidHistoryError",
    "CommandFailedError",
]
