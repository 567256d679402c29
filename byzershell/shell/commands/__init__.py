"""Command system for the Byzer shell."""

from .registry import Command, CommandHandler, CommandRegistry
from .builtins import BUILTIN_COMMANDS, register_builtins

__all__ = [
    "Command",
    "CommandHandler",
    "CommandRegistry",
    "BUILTIN_COMMANDS",
    "register_builtins",
]
