"""
Progress indicator for long-running statements.

A monitor thread shows a spinner with the elapsed seconds until the
caller sends the finish signal, then prints the outcome and exits.
"""

import logging
import queue
import threading
import time
from typing import Optional, Tuple

try:
    from rich.console import Console
    RICH_AVAILABLE = True
except ImportError:
    RICH_AVAILABLE = False

from ..utils.shared_io import SharedIO

logger = logging.getLogger(__name__)


class FinishSignal:
    """Single-use signal telling a monitor thread the operation is done."""

    def __init__(self):
        self._queue: "queue.Queue[bool]" = queue.Queue(maxsize=1)
        self._sent = False
        self._lock = threading.Lock()

    def send(self, success: bool) -> None:
        """Deliver the outcome; may only be called once."""
        with self._lock:
            if self._sent:
                raise RuntimeError("finish signal already sent")
            self._sent = True
        self._queue.put(bool(success))

    @property
    def sent(self) -> bool:
        return self._sent

    def wait(self, timeout: float) -> Optional[bool]:
        """Wait up to timeout seconds for the outcome, None if not sent yet."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None


class ProgressMonitor:
    """Spinner shown while one statement runs."""

    def __init__(
        self,
        io: Optional[SharedIO] = None,
        tick_seconds: float = 1.0,
        use_rich: bool = True,
    ):
        """
        Initialize monitor.

        Args:
            io: Channel the spinner and result are written to
            tick_seconds: Interval between spinner updates
            use_rich: Whether to use rich formatting
        """
        self.io = io or SharedIO()
        self.tick_seconds = tick_seconds
        self.use_rich = use_rich and RICH_AVAILABLE
        self.elapsed: Optional[int] = None
        self.success: Optional[bool] = None

    def start(self, label: str) -> Tuple[threading.Thread, FinishSignal]:
        """
        Start the monitor thread.

        Args:
            label: Text shown before the elapsed seconds

        Returns:
            The thread to join and the signal to send exactly once
        """
        signal = FinishSignal()
        thread = threading.Thread(
            target=self._run, args=(label, signal), name="progress-monitor", daemon=True
        )
        thread.start()
        return thread, signal

    def _run(self, label: str, signal: FinishSignal) -> None:
        started = time.monotonic()
        status = None
        if self.use_rich:
            console = Console(file=self.io)
            status = console.status(f"{label} 0s", spinner="dots")
            status.start()

        try:
            while True:
                elapsed = int(time.monotonic() - started)
                if status is not None:
                    status.update(f"{label} {elapsed}s")
                success = signal.wait(self.tick_seconds)
                if success is not None:
                    break
        finally:
            if status is not None:
                status.stop()

        self.elapsed = int(time.monotonic() - started)
        self.success = success
        mark = "✅" if success else "❌"
        self.io.write(f"{mark} {self.elapsed}s.\n")
        logger.debug("%s finished in %ss (success=%s)", label, self.elapsed, success)


def start_monitor(
    label: str, io: Optional[SharedIO] = None, tick_seconds: float = 1.0
) -> Tuple[threading.Thread, FinishSignal]:
    """Start a progress monitor and return (thread, finish_signal)."""
    return ProgressMonitor(io, tick_seconds=tick_seconds).start(label)
