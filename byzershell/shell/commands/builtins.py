"""
Builtin shell commands: help, quit and history.
"""

from typing import Sequence

from ..core.errors import InvalidHistoryError, QuitSignal
from .registry import Command, CommandRegistry


def help_command(io, shell, args: Sequence[str]) -> None:
    """Print every registered command with its description."""
    commands = shell.registry.list_commands()
    width = max(len(cmd.name) for cmd in commands)
    for cmd in commands:
        io.write(f"{cmd.name.ljust(width)}  {cmd.description}\n")


def quit_command(io, shell, args: Sequence[str]) -> None:
    raise QuitSignal()


def history_command(io, shell, args: Sequence[str]) -> None:
    """List the history, or replay the entry at the given index."""
    if not args:
        shell.history.print(io)
        return

    raw = args[0]
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidHistoryError(raw)

    line = shell.history.get(int(raw))
    if line is None:
        raise InvalidHistoryError(raw)

    shell.dispatch(line)


BUILTIN_COMMANDS = (
    Command("help", "Print this help", help_command),
    Command("quit", "Quit the shell", quit_command),
    Command("history", "Print history, or replay an entry with 'history <index>'", history_command),
)


def register_builtins(registry: CommandRegistry) -> None:
    """Register help, quit and history."""
    for cmd in BUILTIN_COMMANDS:
        registry.register(cmd)
