#!/usr/bin/env python3
"""
Command-line interface for the Byzer shell.

Loads the configuration, starts or reaches a Byzer engine and runs the
interactive shell against it.

Copyright 2025 Firefly Software Solutions Inc
Licensed under the Apache License, Version 2.0
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from . import __version__
from .app import ByzerSession, build_shell, print_header, start_session
from .config.shell_config import ByzerShellConfig, ConfigurationManager
from .engine.errors import EngineError
from .logging import setup_byzershell_logging, shutdown_byzershell_logging
from .shell.ui.formatter import ShellFormatter
from .shell.utils.shared_io import SharedIO

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".mlsql.config"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="byzer-shell",
        description="Interactive shell for the Byzer engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  byzer-shell                                   # Start a local engine and the shell
  byzer-shell -c conf/.mlsql.config             # Use a configuration file
  byzer-shell --engine-url http://host:9003     # Use a running engine
  byzer-shell --format markdown                 # Print results as markdown tables
  byzer-shell --init-config byzer.yaml          # Write a default configuration
        """,
    )

    parser.add_argument("--version", action="version", version=f"byzer-shell {__version__}")

    parser.add_argument(
        "-c",
        "--conf",
        help=f"Configuration file (defaults to {DEFAULT_CONFIG_FILE} when present)",
    )

    parser.add_argument("--engine-url", help="URL of a running engine; no local engine is started")

    parser.add_argument(
        "--no-engine", action="store_true", help="Run the shell without any engine"
    )

    parser.add_argument(
        "--format",
        choices=["default", "markdown", "html", "html-raw"],
        help="Result table format",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level",
    )

    parser.add_argument("--log-format", choices=["json", "text"], help="Set log output format")

    parser.add_argument("--log-file", help="Write logs to this file instead of stderr")

    parser.add_argument(
        "--init-config", metavar="PATH", help="Write a default configuration file and exit"
    )

    return parser


def resolve_config_file(conf: Optional[str]) -> Optional[str]:
    """Configuration file named on the command line, or the default one if present."""
    if conf:
        return conf
    if Path(DEFAULT_CONFIG_FILE).exists():
        return DEFAULT_CONFIG_FILE
    return None


def load_cli_config(args: argparse.Namespace) -> ByzerShellConfig:
    """
    Load the configuration and apply command-line overrides.

    Raises:
        ValueError: The configuration file or an override is invalid
    """
    config = ConfigurationManager.load_config(resolve_config_file(args.conf))

    overrides = {}
    if args.engine_url:
        overrides.setdefault("engine", {})["engine_url"] = args.engine_url
    if args.format:
        overrides.setdefault("shell", {})["table_format"] = args.format
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.log_format:
        overrides.setdefault("logging", {})["format"] = args.log_format
    if args.log_file:
        overrides.setdefault("logging", {})["output_file"] = args.log_file

    if not overrides:
        return config
    return ConfigurationManager.merge_configs(config, ByzerShellConfig(**overrides))


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    io = SharedIO()
    formatter = ShellFormatter(io)

    if args.init_config:
        ConfigurationManager.create_default_config_file(args.init_config, format="auto")
        formatter.print_success(f"Configuration written to {args.init_config}")
        return 0

    try:
        config = load_cli_config(args)
    except ValueError as e:
        formatter.print_error(f"Invalid configuration: {e}")
        return 1

    setup_byzershell_logging(config)
    session: Optional[ByzerSession] = None
    try:
        if args.no_engine:
            session = ByzerSession(config)
        else:
            session = start_session(config, io)

        print_header(session, io)
        shell = build_shell(session, io=io)
        shell.run()
        if session.statement_count:
            formatter.print_info(session.summary())
    except EngineError as e:
        logger.error(f"Engine startup failed: {e}")
        formatter.print_error(f"Failed to start engine: {e}")
        return 1
    except KeyboardInterrupt:
        io.write("\n")
    finally:
        if session is not None:
            session.close()
        shutdown_byzershell_logging()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
