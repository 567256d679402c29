"""
Wiring of the Byzer shell.

Connects the generic shell to a Byzer engine: every statement that is not
a builtin command is posted to the engine and the response is printed as a
table.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .config.shell_config import ByzerShellConfig
from .engine.client import EngineClient, is_parser_error
from .engine.launcher import EngineProcess
from .engine.render import render_response
from .shell.core.errors import UnknownCommandError
from .shell.core.shell import Shell, split_statement
from .shell.ui.banner import show_banner
from .shell.ui.formatter import ShellFormatter
from .shell.ui.progress import ProgressMonitor
from .shell.utils.shared_io import SharedIO

logger = logging.getLogger(__name__)


class ByzerSession:
    """State of one shell session against a Byzer engine."""

    def __init__(
        self,
        config: ByzerShellConfig,
        client: Optional[EngineClient] = None,
        engine: Optional[EngineProcess] = None,
    ):
        """
        Initialize a new session.

        Args:
            config: Complete shell configuration
            client: Client posting scripts to the engine, None without engine
            engine: Engine process owned by this session, if any
        """
        self.config = config
        self.client = client
        self.engine = engine
        self.start_time = datetime.now()
        self.version_info: Optional[Dict[str, Any]] = None

        self.statement_count = 0
        self.failed_count = 0
        self.last_error: Optional[str] = None

    @property
    def uptime(self) -> float:
        """Get session uptime in seconds."""
        return (datetime.now() - self.start_time).total_seconds()

    def record_result(self, success: bool, error: Optional[str] = None) -> None:
        self.statement_count += 1
        if not success:
            self.failed_count += 1
            self.last_error = error

    def summary(self) -> str:
        """One-line account of the statements run in this session."""
        text = (
            f"{self.statement_count} statement(s), {self.failed_count} failed "
            f"in {self.uptime:.0f}s"
        )
        if self.last_error:
            text += f"; last error: {self.last_error}"
        return text

    def close(self) -> None:
        """Close the client and stop the engine this session started."""
        logger.info(f"Session closed: {self.summary()}")
        if self.client is not None:
            self.client.close()
        if self.engine is not None:
            self.engine.stop()
            self.engine = None


def execute_statement(io: SharedIO, shell: Shell, statement: str) -> None:
    """
    Run a statement on the engine and print the result.

    A progress monitor runs while the request is in flight and always
    receives the outcome, also when the request fails.

    Raises:
        EngineRequestError: The engine could not be reached
    """
    session: ByzerSession = shell.data
    monitor = ProgressMonitor(io, tick_seconds=session.config.shell.progress_tick_seconds)
    thread, finished = monitor.start("Executing")

    success = False
    error: Optional[str] = None
    try:
        response = session.client.run_script(statement)
        success = not is_parser_error(response)
        if not success:
            error = response.splitlines()[0] if response else response
    except Exception as e:
        error = str(e)
        raise
    finally:
        finished.send(success)
        thread.join()
        session.record_result(success, error)

    render_response(response, session.config.shell.table_format, ShellFormatter(io))


def build_shell(
    session: ByzerSession,
    config: Optional[ByzerShellConfig] = None,
    io: Optional[SharedIO] = None,
    line_reader=None,
) -> Shell:
    """Construct the shell for a session from its shell settings."""
    config = config or session.config
    return Shell(
        default_handler=execute_statement if session.client is not None else reject_statement,
        data=session,
        prompt=config.shell.prompt,
        unclosed_prompt=config.shell.unclosed_prompt,
        history_capacity=config.shell.history_capacity,
        keywords=config.shell.keywords,
        io=io,
        line_reader=line_reader,
    )


def start_session(config: ByzerShellConfig, io: SharedIO) -> ByzerSession:
    """
    Start or reach the engine and wait until it answers.

    A local engine is launched unless an engine URL is configured; the
    startup is shown with a progress monitor.

    Raises:
        EngineStartError: The local engine could not be started
        EngineRequestError: The engine never answered the version query
    """
    engine = EngineProcess(config.engine)
    monitor = ProgressMonitor(io, tick_seconds=config.shell.progress_tick_seconds)
    thread, finished = monitor.start("Starting engine")

    client = None
    success = False
    try:
        engine.start()
        client = EngineClient(
            engine.engine_url,
            owner=config.engine.owner,
            request_config=config.engine.request_config,
            output_size=config.engine.output_size,
            timeout=config.engine.request_timeout_seconds,
        )
        version_info = client.wait_until_ready(config.engine.startup_timeout_seconds)
        success = True
    finally:
        finished.send(success)
        thread.join()
        if not success:
            if client is not None:
                client.close()
            engine.stop()

    session = ByzerSession(config, client, engine if engine.process is not None else None)
    session.version_info = version_info
    logger.info(f"Engine ready at {engine.engine_url}")
    return session


def print_header(session: ByzerSession, io: SharedIO, use_rich: bool = True) -> None:
    """Print the banner with the engine version and the exit hint."""
    show_banner(session.version_info, io=io, use_rich=use_rich)


def reject_statement(io: SharedIO, shell: Shell, statement: str) -> None:
    """Default handler used without an engine: only builtins are available."""
    tokens = split_statement(statement)
    raise UnknownCommandError(tokens[0] if tokens else statement)
