"""
Byzer Interactive Shell

A generic read-evaluate loop for statement languages terminated by ';':
- Builtin help, quit and history commands
- Multi-line statement buffering
- Bounded, replayable history
- Keyword highlighting while typing
- Thread-safe output shared with progress monitors

Usage:
    python -m byzershell
    byzer-shell  # If installed

Copyright 2025 Firefly Software Solutions Inc
Licensed under the Apache License, Version 2.0
"""

from .core.shell import Shell, split_statement
from .commands import Command, CommandRegistry
from .utils import SharedIO

__all__ = ["Shell", "split_statement", "Command", "CommandRegistry", "SharedIO"]
