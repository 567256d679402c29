"""
Bounded statement history.

Keeps the last N executed statements in insertion order so they can be
listed and replayed by index.
"""

import threading
from typing import List, Optional, TextIO


class History:
    """Bounded FIFO log of executed statements."""

    def __init__(self, capacity: int = 10):
        """
        Initialize history.

        Args:
            capacity: Maximum number of entries kept
        """
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._entries: List[str] = []
        self._lock = threading.Lock()

    def push(self, line: str) -> None:
        """Append a statement, evicting the oldest one when full."""
        with self._lock:
            if len(self._entries) >= self.capacity:
                del self._entries[0]
            self._entries.append(line)

    def get(self, index: int) -> Optional[str]:
        """Get the entry at index, or None when out of range."""
        with self._lock:
            if 0 <= index < len(self._entries):
                return self._entries[index]
            return None

    def entries(self) -> List[str]:
        """Get a snapshot of all entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def print(self, out: TextIO) -> None:
        """Write every entry as 'index: entry'."""
        for index, entry in enumerate(self.entries()):
            out.write(f"{index}: {entry}\n")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
