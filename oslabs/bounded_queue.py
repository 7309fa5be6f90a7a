"""A bounded FIFO of integers that keeps attempt and success counters."""

from __future__ import annotations

import os
import sys
import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class QueueStats:
    """A snapshot of a queue's size and counters."""

    count: int
    add_attempts: int
    get_attempts: int
    add_count: int
    get_count: int

    def format(self) -> str:
        """Render the snapshot as a single stats line."""
        return (
            f"queue stats: current size {self.count}; "
            f"attempts: ({self.add_attempts} {self.get_attempts} "
            f"{self.add_attempts - self.get_attempts}); "
            f"counts ({self.add_count} {self.get_count} "
            f"{self.add_count - self.get_count})"
        )


class BoundedQueue:
    """A FIFO holding at most ``max_count`` values.

    ``add`` never blocks: it returns False when the queue is full.
    ``get`` never blocks: it returns None when the queue is empty.
    With ``monitor`` set, a background thread prints the stats every second
    until the queue is closed.
    """

    def __init__(self, max_count: int, monitor: bool = True) -> None:
        if max_count < 0:
            raise ValueError(f"max_count must not be negative, got {max_count}")
        self.max_count = max_count
        self._items: deque[int] = deque()
        self._add_attempts = 0
        self._get_attempts = 0
        self._add_count = 0
        self._get_count = 0
        self._closed = False
        self._stop = threading.Event()
        self._monitor: threading.Thread | None = None
        if monitor:
            self._monitor = threading.Thread(
                target=self._run_monitor, name="qmonitor", daemon=True
            )
            self._monitor.start()

    def _run_monitor(self) -> None:
        print(
            f"qmonitor: [{os.getpid()} {os.getppid()} {threading.get_native_id()}]",
            flush=True,
        )
        while True:
            self.print_stats()
            if self._stop.wait(1.0):
                break

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("queue is closed")

    def add(self, value: int) -> bool:
        """Append ``value``; return False if the queue is full."""
        self._check_open()
        self._add_attempts += 1
        if len(self._items) >= self.max_count:
            return False
        self._items.append(value)
        self._add_count += 1
        return True

    def get(self) -> int | None:
        """Remove and return the oldest value, or None if the queue is empty."""
        self._check_open()
        self._get_attempts += 1
        try:
            value = self._items.popleft()
        except IndexError:
            return None
        self._get_count += 1
        return value

    def stats(self) -> QueueStats:
        """Return a snapshot of the current size and counters."""
        return QueueStats(
            count=len(self._items),
            add_attempts=self._add_attempts,
            get_attempts=self._get_attempts,
            add_count=self._add_count,
            get_count=self._get_count,
        )

    def print_stats(self) -> None:
        """Print the stats line to standard output."""
        print(self.stats().format(), flush=True)

    def close(self) -> None:
        """Stop the monitor thread and drop any values left in the queue."""
        if self._closed:
            return
        self._stop.set()
        if self._monitor is not None and self._monitor is not threading.current_thread():
            self._monitor.join()
        self._items.clear()
        self._closed = True

    def __len__(self) -> int:
        return len(self._items)

    def __enter__(self) -> "BoundedQueue":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


if __name__ == "__main__":
    with BoundedQueue(10, monitor=False) as _queue:
        _queue.print_stats()
    sys.exit(0)