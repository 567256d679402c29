"""
Centralized logging manager for byzershell.

Provides unified logging setup with JSON or text formatting, optional
rotating log files, and routing of engine process output.
"""

"""
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

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .json_formatter import EngineLogFormatter, ShellLogFormatter

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ENGINE_LOGGER = "byzershell.engine.process"


class ByzerShellLoggingManager:
    """
    Central manager for the byzershell logging system.

    Log records go to stderr or a rotating file, never to the stdout the
    prompt is drawn on.
    """

    def __init__(self, config=None, stream=None):
        """
        Initialize the logging manager.

        Args:
            config: ByzerShellConfig or LoggingConfig with logging settings
            stream: Console stream for log records (defaults to sys.stderr)
        """
        self.config = config
        self.stream = stream
        self.configured = False
        self._handlers: List[Tuple[logging.Logger, logging.Handler]] = []

        # Default settings if no config provided
        self.log_level = logging.WARNING
        self.format_type = "text"
        self.enable_engine_logs = True
        self.output_file = None
        self.max_file_size_mb = 100
        self.backup_count = 5

        logging_config = getattr(config, "logging", config)
        if logging_config is not None and hasattr(logging_config, "level"):
            self.log_level = getattr(logging, logging_config.level)
            self.format_type = logging_config.format
            self.enable_engine_logs = logging_config.enable_engine_logs
            self.output_file = logging_config.output_file
            self.max_file_size_mb = logging_config.max_file_size_mb
            self.backup_count = logging_config.backup_count

    def setup_logging(self) -> None:
        """Setup the complete byzershell logging system."""
        if self.configured:
            return

        root_logger = logging.getLogger("byzershell")
        root_logger.setLevel(self.log_level)
        root_logger.propagate = False
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

        # With a log file configured the console stays clean for the prompt
        if self.output_file:
            self._add_handler(root_logger, self._create_file_handler(self.output_file))
        else:
            console_handler = logging.StreamHandler(self.stream or sys.stderr)
            console_handler.setFormatter(self._shell_formatter())
            console_handler.setLevel(self.log_level)
            self._add_handler(root_logger, console_handler)

        self._setup_engine_logging()

        self.configured = True

        logging.getLogger("byzershell.logging").info(
            "byzershell logging system initialized",
            extra={
                "log_level": logging.getLevelName(self.log_level),
                "format_type": self.format_type,
                "engine_logs_enabled": self.enable_engine_logs,
                "output_file": self.output_file,
            },
        )

    def _shell_formatter(self) -> logging.Formatter:
        if self.format_type == "json":
            return ShellLogFormatter()
        return logging.Formatter(TEXT_FORMAT)

    def _create_file_handler(self, output_file: str, engine: bool = False) -> logging.Handler:
        """Create a rotating file handler."""
        output_path = Path(output_file)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(output_path),
            maxBytes=self.max_file_size_mb * 1024 * 1024,  # Convert MB to bytes
            backupCount=self.backup_count,
            encoding="utf-8",
        )

        if self.format_type == "json":
            file_handler.setFormatter(EngineLogFormatter() if engine else ShellLogFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(TEXT_FORMAT))

        file_handler.setLevel(self.log_level)
        return file_handler

    def _setup_engine_logging(self) -> None:
        """Route engine process output to its own logger."""
        engine_logger = logging.getLogger(ENGINE_LOGGER)
        for handler in list(engine_logger.handlers):
            engine_logger.removeHandler(handler)
        # Prevent engine lines from propagating to avoid duplicates
        engine_logger.propagate = False

        if not self.enable_engine_logs:
            engine_logger.disabled = True
            return

        engine_logger.disabled = False
        engine_logger.setLevel(self.log_level)
        if self.output_file:
            engine_file = str(Path(self.output_file).with_suffix(".engine.log"))
            self._add_handler(engine_logger, self._create_file_handler(engine_file, engine=True))
        else:
            handler = logging.StreamHandler(self.stream or sys.stderr)
            if self.format_type == "json":
                handler.setFormatter(EngineLogFormatter())
            else:
                handler.setFormatter(logging.Formatter(TEXT_FORMAT))
            handler.setLevel(self.log_level)
            self._add_handler(engine_logger, handler)

    def _add_handler(self, logger: logging.Logger, handler: logging.Handler) -> None:
        logger.addHandler(handler)
        self._handlers.append((logger, handler))

    def shutdown(self) -> None:
        """Detach and close the handlers this manager installed."""
        for logger, handler in self._handlers:
            logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        logging.getLogger("byzershell").propagate = True
        engine_logger = logging.getLogger(ENGINE_LOGGER)
        engine_logger.propagate = True
        engine_logger.disabled = False
        self.configured = False


# Global logging manager instance
_logging_manager: Optional[ByzerShellLoggingManager] = None


def get_logging_manager(config=None) -> ByzerShellLoggingManager:
    """Get or create the global logging manager."""
    global _logging_manager

    if _logging_manager is None:
        _logging_manager = ByzerShellLoggingManager(config)

    return _logging_manager


def setup_byzershell_logging(config=None) -> None:
    """Setup the byzershell logging system."""
    manager = get_logging_manager(config)
    manager.setup_logging()


def shutdown_byzershell_logging() -> None:
    """Shutdown the byzershell logging system."""
    global _logging_manager

    if _logging_manager:
        _logging_manager.shutdown()
        _logging_manager = None
