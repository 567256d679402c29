"""
Command registry for the Byzer shell.

Provides a centralized system for registering and looking up commands.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

# handler(io, shell, args)
CommandHandler = Callable[[Any, Any, Sequence[str]], None]


@dataclass(frozen=True)
class Command:
    """Represents a shell command."""
    name: str
    description: str
    handler: CommandHandler
    min_args: int = 0

    def __post_init__(self):
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(f"invalid command name: {self.name!r}")
        if self.min_args < 0:
            raise ValueError("min_args must be non-negative")

    def invoke(self, io, shell, args: Sequence[str]) -> None:
        """Run the command handler."""
        self.handler(io, shell, args)


class CommandRegistry:
    """Registry for shell commands."""

    def __init__(self):
        """Initialize the command registry."""
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Register a command, replacing any command with the same name."""
        self._commands[command.name] = command

    def add(
        self,
        name: str,
        description: str,
        handler: CommandHandler,
        min_args: int = 0,
    ) -> Command:
        """
        Build and register a command.

        Args:
            name: Command name
            description: Short description
            handler: Callable receiving (io, shell, args)
            min_args: Minimum number of arguments

        Returns:
            The registered command
        """
        cmd = Command(name=name, description=description, handler=handler, min_args=min_args)
        self.register(cmd)
        return cmd

    def get_command(self, name: str) -> Optional[Command]:
        """Get a command by exact name."""
        return self._commands.get(name)

    def list_commands(self) -> List[Command]:
        """List all commands sorted by name."""
        return [self._commands[name] for name in sorted(self._commands)]

    def __contains__(self, name: str) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
