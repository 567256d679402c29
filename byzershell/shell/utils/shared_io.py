"""
Thread-safe terminal stream shared by the read loop and monitor threads.
"""

import sys
import threading
from typing import Optional, TextIO


class SharedIO:
    """
    A single logical input/output stream usable from several threads.

    Input and output are guarded by separate locks. Concurrent writers never
    interleave the text of individual write calls, and a thread blocked in
    readline() does not hold up writers. Clones share the underlying streams
    and both locks.
    """

    def __init__(
        self,
        input: Optional[TextIO] = None,
        output: Optional[TextIO] = None,
        _read_lock: Optional[threading.Lock] = None,
        _write_lock: Optional[threading.RLock] = None,
    ):
        """
        Initialize the channel.

        Args:
            input: Input stream (defaults to sys.stdin)
            output: Output stream (defaults to sys.stdout)
        """
        self._input = input if input is not None else sys.stdin
        self._output = output if output is not None else sys.stdout
        self._read_lock = _read_lock if _read_lock is not None else threading.Lock()
        self._write_lock = _write_lock if _write_lock is not None else threading.RLock()

    def clone(self) -> "SharedIO":
        """Get another handle to the same underlying streams."""
        return SharedIO(
            self._input, self._output, _read_lock=self._read_lock, _write_lock=self._write_lock
        )

    def write(self, text: str) -> int:
        with self._write_lock:
            written = self._output.write(text)
            self._output.flush()
            return written if written is not None else len(text)

    def writeln(self, text: str = "") -> int:
        return self.write(f"{text}\n")

    def flush(self) -> None:
        with self._write_lock:
            self._output.flush()

    def readline(self) -> str:
        """Read one line; returns '' at end of input."""
        with self._read_lock:
            return self._input.readline()

    def read(self, size: int = -1) -> str:
        with self._read_lock:
            return self._input.read(size)

    def isatty(self) -> bool:
        isatty = getattr(self._output, "isatty", None)
        return bool(isatty and isatty())

    def input_isatty(self) -> bool:
        isatty = getattr(self._input, "isatty", None)
        return bool(isatty and isatty())

    @property
    def output(self) -> TextIO:
        """The underlying output stream."""
        return self._output

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing output."""
        return self._write_lock

    @property
    def encoding(self) -> str:
        return getattr(self._output, "encoding", None) or "utf-8"

    def same_stream(self, other: "SharedIO") -> bool:
        """Whether two handles refer to the same channel."""
        return self._write_lock is other._write_lock
