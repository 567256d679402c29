#!/usr/bin/env python3
"""
Local Byzer engine process management.

Builds the Java command line for the engine, starts it as a subprocess
and forwards its output to the engine logger.
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
import os
import socket
import subprocess
import sys
import threading
import time
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional

from ..config.shell_config import DEFAULT_PLUGIN_CLASSES, EngineConfig
from ..logging.manager import ENGINE_LOGGER
from .errors import EngineStartError

logger = logging.getLogger(__name__)

SCRIPT_PATH = "/run/script"
CLASSPATH_DIRS = ("main", "libs", "plugin", "spark")


def is_port_in_use(port: int, host: str = "127.0.0.1") -> bool:
    """Whether something accepts connections on host:port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(0.5)
        return sock.connect_ex((host, port)) == 0


def find_available_port(start: int = 9003, host: str = "127.0.0.1") -> int:
    """Get the first port from start upwards with nothing listening on it."""
    port = start
    while port <= 65535:
        if not is_port_in_use(port, host):
            return port
        port += 1
    raise EngineStartError(f"No free port found from {start}")


def resolve_java_home(byzer_home: str, java_home: Optional[str] = None) -> str:
    """
    Resolve the Java home directory.

    Uses the explicit value, then JAVA_HOME, then the JDK bundled under
    <byzer_home>/jdk8. Returns '' when none exists.
    """
    if java_home:
        return java_home

    env_home = os.getenv("JAVA_HOME")
    if env_home:
        return env_home

    bundled = Path(byzer_home) / "jdk8"
    if sys.platform == "darwin":
        bundled = bundled / "Contents" / "Home"
    if bundled.exists():
        return str(bundled)
    return ""


def java_executable(java_home: str) -> str:
    """Path of the java binary for java_home, or 'java' from PATH."""
    java_name = "java.exe" if os.name == "nt" else "java"
    if not java_home:
        return "java"
    return str(Path(java_home) / "bin" / java_name)


def default_engine_args(config: EngineConfig, port: int) -> Dict[str, str]:
    """Engine arguments used for a local shell engine."""
    return {
        "-streaming.master": "local[*]",
        "-streaming.name": "Byzer-shell",
        "-streaming.rest": "true",
        "-streaming.thrift": "false",
        "-streaming.platform": "spark",
        "-streaming.spark.service": "true",
        "-streaming.job.cancel": "true",
        "-streaming.datalake.path": str(Path(".") / "data"),
        "-streaming.driver.port": str(port),
        "-streaming.plugin.clzznames": DEFAULT_PLUGIN_CLASSES,
        "-streaming.mlsql.script.owner": config.owner,
    }


def merge_engine_args(defaults: Dict[str, str], overrides: Dict[str, str]) -> Dict[str, str]:
    """
    Apply configured overrides to the default engine arguments.

    Plugin class names and platform hooks are appended to the defaults
    rather than replacing them.
    """
    merged = dict(defaults)
    for key, value in overrides.items():
        if key in ("-streaming.plugin.clzznames", "-streaming.platform_hooks") and merged.get(key):
            merged[key] = f"{merged[key]},{value}"
        else:
            merged[key] = value
    return merged


def build_classpath(byzer_home: str) -> str:
    separator = ";" if os.name == "nt" else ":"
    return separator.join(str(Path(byzer_home) / name / "*") for name in CLASSPATH_DIRS)


def build_engine_command(config: EngineConfig, port: int) -> List[str]:
    """
    Build the full command line of a local engine.

    Args:
        config: Engine configuration
        port: Port the engine REST service listens on

    Returns:
        Command line starting with the java executable
    """
    java_home = resolve_java_home(config.byzer_home, config.java_home)
    command = [java_executable(java_home)]

    if config.memory:
        command.append(f"-Xmx{config.memory}")

    command.extend(["-cp", build_classpath(config.byzer_home), config.main_class])

    engine_args = merge_engine_args(default_engine_args(config, port), config.engine_args)
    for key, value in engine_args.items():
        command.extend([key, value])

    return command


class EngineProcess:
    """A Byzer engine, either started locally or reached at a configured URL."""

    def __init__(self, config: EngineConfig, log_buffer_size: int = 2000):
        """
        Initialize the engine process.

        Args:
            config: Engine configuration
            log_buffer_size: Number of recent output lines kept in memory
        """
        self.config = config
        self.port: Optional[int] = None
        self._process: Optional[subprocess.Popen] = None
        self._log_buffer = deque(maxlen=log_buffer_size)
        self._reader_threads: List[threading.Thread] = []
        self._engine_logger = logging.getLogger(ENGINE_LOGGER)

    @property
    def engine_url(self) -> str:
        """URL scripts are posted to."""
        if self.config.engine_url:
            return f"{self.config.engine_url}{SCRIPT_PATH}"
        port = self.port if self.port is not None else self.config.start_port
        return f"http://127.0.0.1:{port}{SCRIPT_PATH}"

    @property
    def process(self) -> Optional[subprocess.Popen]:
        """The engine subprocess, if one was started."""
        return self._process

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def start(self, startup_wait: float = 1.0) -> None:
        """
        Start the local engine unless a remote URL is configured.

        Raises:
            EngineStartError: The process could not be spawned or exited at once
        """
        if self.config.is_remote:
            logger.info(f"Using remote engine at {self.config.engine_url}")
            return
        if self.is_running:
            logger.debug("Engine process already started")
            return

        self.port = find_available_port(self.config.start_port)
        command = build_engine_command(self.config, self.port)
        logger.info(f"Starting engine: {' '.join(command)}")

        try:
            self._process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,  # Line buffered
            )
        except OSError as e:
            raise EngineStartError(f"Failed to start engine process: {e}") from e

        time.sleep(startup_wait)

        if self._process.poll() is not None:
            stdout, stderr = self._process.communicate()
            self._process = None
            raise EngineStartError(
                f"Engine process exited immediately. stdout: {stdout}, stderr: {stderr}"
            )

        self._start_log_readers()
        logger.info(f"Engine process {self._process.pid} listening on port {self.port}")

    def _start_log_readers(self) -> None:
        """Start background threads reading engine stdout/stderr."""
        self._reader_threads = [
            threading.Thread(
                target=self._log_reader,
                args=("STDOUT", self._process.stdout),
                name="engine-stdout",
                daemon=True,
            ),
            threading.Thread(
                target=self._log_reader,
                args=("STDERR", self._process.stderr),
                name="engine-stderr",
                daemon=True,
            ),
        ]
        for thread in self._reader_threads:
            thread.start()

    def _log_reader(self, stream_name: str, pipe) -> None:
        """Read a pipe until EOF, forwarding lines to the engine logger."""
        for raw_line in iter(pipe.readline, ""):
            line = raw_line.rstrip("\n")
            if not line:
                continue
            self._log_buffer.append((stream_name, line))
            if stream_name == "STDERR" and ("Exception" in line or "ERROR" in line):
                level = logging.ERROR
            elif stream_name == "STDERR":
                level = logging.WARNING
            else:
                level = logging.INFO
            self._engine_logger.log(level, line, extra={"stream": stream_name})
        self._engine_logger.debug(f"Engine {stream_name} closed")

    def recent_logs(self, count: int = 100) -> List[str]:
        """Get the last count output lines of the engine."""
        return [line for _, line in list(self._log_buffer)[-count:]]

    def stop(self, timeout: float = 5.0) -> None:
        """Terminate the engine, killing it if it does not exit in time."""
        if self._process is None:
            return

        if self._process.poll() is None:
            logger.info(f"Stopping engine process {self._process.pid}")
            self._process.terminate()
            try:
                self._process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning("Engine did not stop in time, killing it")
                self._process.kill()
                self._process.wait()

        for thread in self._reader_threads:
            thread.join(timeout=1.0)
        self._reader_threads = []
        self._process = None

    def __enter__(self) -> "EngineProcess":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
