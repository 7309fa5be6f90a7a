"""Thread-safe bounded queues built on different synchronisation primitives."""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Callable, Union

from oslabs.bounded_queue import BoundedQueue, QueueStats


class QueueKind(Enum):
    """The synchronisation primitive a queue is built on."""

    SPINLOCK = "spinlock"
    MUTEX = "mutex"
    CONDVAR = "condvar"
    SEMAPHORE = "semaphore"


class SpinLock:
    """A lock that busy-waits instead of sleeping until it is free."""

    def __init__(self) -> None:
        self._flag = threading.Lock()

    def acquire(self) -> bool:
        while not self._flag.acquire(blocking=False):
            time.sleep(0)
        return True

    def release(self) -> None:
        """Release the lock; raises RuntimeError if it is not held."""
        self._flag.release()

    def locked(self) -> bool:
        return self._flag.locked()

    def __enter__(self) -> "SpinLock":
        self.acquire()
        return self

    def __exit__(self, *args: object) -> None:
        self.release()


class _LockedQueue(BoundedQueue):
    """A queue whose size and counters are read under its own lock."""

    _lock: Union[threading.Lock, SpinLock]

    def stats(self) -> QueueStats:
        with self._lock:
            return super().stats()


class _NonBlockingQueue(_LockedQueue):
    """Add fails on a full queue and get yields None on an empty one."""

    _lock_factory: Callable[[], Union[threading.Lock, SpinLock]] = threading.Lock

    def __init__(self, max_count: int, monitor: bool = True) -> None:
        self._lock = type(self)._lock_factory()
        super().__init__(max_count, monitor)

    def _try_add(self, value: int) -> bool:
        with self._lock:
            self._check_open()
            self._add_attempts += 1
            if len(self._items) >= self.max_count:
                return False
            self._items.append(value)
            self._add_count += 1
            return True

    def _try_get(self) -> int | None:
        with self._lock:
            self._check_open()
            self._get_attempts += 1
            if not self._items:
                return None
            value = self._items.popleft()
            self._get_count += 1
            return value


class MutexQueue(_NonBlockingQueue):
    """A non-blocking queue guarded by a mutex."""

    _lock_factory = threading.Lock

    def add(self, value: int) -> bool:
        """Append ``value``; return False if the queue is full."""
        return self._try_add(value)

    def get(self) -> int | None:
        """Remove and return the oldest value, or None if the queue is empty."""
        return self._try_get()


class SpinlockQueue(_NonBlockingQueue):
    """A non-blocking queue guarded by a spin lock."""

    _lock_factory = SpinLock

    def add(self, value: int) -> bool:
        """Append ``value``; return False if the queue is full."""
        return self._try_add(value)

    def get(self) -> int | None:
        """Remove and return the oldest value, or None if the queue is empty."""
        return self._try_get()


class CondvarQueue(_LockedQueue):
    """A queue whose add waits while full and whose get waits while empty."""

    def __init__(self, max_count: int, monitor: bool = True) -> None:
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        super().__init__(max_count, monitor)

    def add(self, value: int) -> bool:
        """Append ``value``, waiting for room; always returns True."""
        with self._lock:
            self._check_open()
            self._add_attempts += 1
            while len(self._items) >= self.max_count:
                self._not_full.wait()
            self._items.append(value)
            self._add_count += 1
            self._not_empty.notify()
        return True

    def get(self) -> int:
        """Remove and return the oldest value, waiting until there is one."""
        with self._lock:
            self._check_open()
            self._get_attempts += 1
            while not self._items:
                self._not_empty.wait()
            value = self._items.popleft()
            self._get_count += 1
            self._not_full.notify()
        return value


class SemaphoreQueue(_LockedQueue):
    """A queue that counts free slots and ready items with semaphores."""

    def __init__(self, max_count: int, monitor: bool = True) -> None:
        self._lock = threading.Lock()
        self._filled = threading.Semaphore(0)
        self._slots = threading.Semaphore(max(max_count, 0))
        super().__init__(max_count, monitor)

    def add(self, value: int) -> bool:
        """Append ``value``, waiting for a free slot; always returns True."""
        self._check_open()
        with self._lock:
            self._add_attempts += 1
        self._slots.acquire()
        with self._lock:
            self._items.append(value)
            self._add_count += 1
        self._filled.release()
        return True

    def get(self) -> int:
        """Remove and return the oldest value, waiting until there is one."""
        self._check_open()
        with self._lock:
            self._get_attempts += 1
        self._filled.acquire()
        with self._lock:
            value = self._items.popleft()
            self._get_count += 1
        self._slots.release()
        return value


_QUEUE_TYPES: dict[QueueKind, type[_LockedQueue]] = {
    QueueKind.SPINLOCK: SpinlockQueue,
    QueueKind.MUTEX: MutexQueue,
    QueueKind.CONDVAR: CondvarQueue,
    QueueKind.SEMAPHORE: SemaphoreQueue,
}


def make_queue(
    kind: QueueKind | str, max_count: int, monitor: bool = True
) -> _LockedQueue:
    """Build the queue of the given kind; a kind may be given by name."""
    return _QUEUE_TYPES[QueueKind(kind)](max_count, monitor)