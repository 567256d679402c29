#!/usr/bin/env python3
"""
byzershell - Interactive shell for the Byzer engine

Interactive command shell for writing and running Byzer (MLSQL) scripts
against a local or remote Byzer engine.

Key Features:
- Generic read-evaluate loop with a registry of builtin commands
- Multi-line statements terminated by ';'
- Bounded, replayable statement history
- Keyword highlighting while typing
- Local engine process supervision and HTTP script execution
- Table rendering of engine responses

Usage:
    from byzershell.shell import Shell

    shell = Shell(default_handler=my_handler, data=my_state)
    shell.run()

Copyright (c) 2025 Firefly Software Solutions Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at:

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

__version__ = "0.1.0"
__author__ = "Firefly Software Solutions Inc"
__license__ = "Apache 2.0"

# Configuration
from .config.shell_config import (
    ByzerShellConfig,
    ConfigurationManager,
    EngineConfig,
    LoggingConfig,
    ShellConfig,
)

# Shell core
from .shell.commands.registry import Command, CommandRegistry
from .shell.core.errors import (
    CommandFailedError,
    EmptyLineError,
    InvalidHistoryError,
    MissingArgsError,
    QuitSignal,
    ShellError,
    UnknownCommandError,
)
from .shell.core.history import History
from .shell.core.shell import Shell
from .shell.ui.highlighter import KeywordHighlighter
from .shell.ui.line_helper import StatementHelper, is_complete
from .shell.ui.progress import ProgressMonitor
from .shell.utils.shared_io import SharedIO

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Configuration
    "ByzerShellConfig",
    "ConfigurationManager",
    "EngineConfig",
    "LoggingConfig",
    "ShellConfig",
    # Shell core
    "Shell",
    "Command",
    "CommandRegistry",
    "History",
    "KeywordHighlighter",
    "StatementHelper",
    "is_complete",
    "ProgressMonitor",
    "SharedIO",
    # Errors
    "ShellError",
    "EmptyLineError",
    "QuitSignal",
    "MissingArgsError",
    "UnknownCommandError",
    "InvalidHistoryError",
    "CommandFailedError",
]
