"""Threads with numeric ids, cooperative cancellation and cleanup handlers."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable

MAX_THREADS = 1024
CANCELED = -1

_id_lock = threading.Lock()
_ids = itertools.count(1)

_slots_lock = threading.Lock()
_active = 0

_local = threading.local()


class ThreadError(Exception):
    """Raised when a thread operation is not allowed or cannot be done."""


class _ThreadExit(SystemExit):
    """Unwinds a thread that called exit_thread()."""

    def __init__(self, retval: Any) -> None:
        super().__init__()
        self.retval = retval


def _next_id() -> int:
    with _id_lock:
        return next(_ids)


def _reserve_slot() -> None:
    global _active
    with _slots_lock:
        if _active >= MAX_THREADS:
            raise ThreadError(f"too many threads: at most {MAX_THREADS} may run at once")
        _active += 1


def _release_slot() -> None:
    global _active
    with _slots_lock:
        _active -= 1


class MyThread:
    """A thread handle with an id, a return value and a stack of cleanup handlers."""

    def __init__(self, start_routine: Callable[[Any], Any] | None, arg: Any = None) -> None:
        self.id = _next_id()
        self.tid: int | None = None
        self.retval: Any = None
        self._routine = start_routine
        self._arg = arg
        self._cleanup: list[tuple[Callable[[Any], Any], Any]] = []
        self._state = threading.Lock()
        self._finished = threading.Event()
        self._canceled = threading.Event()
        self._joined = False
        self._detached = False
        self._error: BaseException | None = None
        self._thread: threading.Thread | None = None

    @property
    def finished(self) -> bool:
        return self._finished.is_set()

    @property
    def canceled(self) -> bool:
        return self._canceled.is_set()

    @property
    def joined(self) -> bool:
        return self._joined

    @property
    def detached(self) -> bool:
        return self._detached

    def _run(self) -> None:
        _local.current = self
        self.tid = threading.get_native_id()
        assert self._routine is not None
        try:
            self.retval = self._routine(self._arg)
        except _ThreadExit as exc:
            self.retval = exc.retval
        except BaseException as exc:  # reported by join() or re-raised when detached
            self._error = exc
        _release_slot()
        with self._state:
            self._finished.set()
            detached = self._detached
        if detached:
            self._run_cleanup()
            if self._error is not None:
                raise self._error

    def _run_cleanup(self) -> None:
        while self._cleanup:
            routine, arg = self._cleanup.pop()
            routine(arg)

    def join(self) -> Any:
        """Wait for the thread to finish and return its return value."""
        if self._thread is None:
            raise ThreadError("only threads started by create() can be joined")
        if self._thread is threading.current_thread():
            raise ThreadError("a thread cannot join itself")
        with self._state:
            if self._joined:
                raise ThreadError("thread already joined")
            if self._detached:
                raise ThreadError("thread is detached")
            self._joined = True
        self._finished.wait()
        self._thread.join()
        self._run_cleanup()
        if self._error is not None:
            raise ThreadError(f"thread {self.id} failed: {self._error!r}") from self._error
        return self.retval

    def detach(self) -> None:
        """Let the thread clean up after itself; it can no longer be joined."""
        with self._state:
            if self._joined:
                raise ThreadError("thread already joined")
            if self._detached:
                raise ThreadError("thread already detached")
            self._detached = True
            finished = self._finished.is_set()
        if finished:
            self._run_cleanup()

    def cancel(self) -> None:
        """Ask the thread to stop at its next testcancel()."""
        self._canceled.set()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MyThread):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"MyThread(id={self.id}, tid={self.tid})"


def create(start_routine: Callable[[Any], Any], arg: Any = None) -> MyThread:
    """Start ``start_routine(arg)`` in a new thread and return its handle."""
    if not callable(start_routine):
        raise ThreadError("start_routine must be callable")
    _reserve_slot()
    thread = MyThread(start_routine, arg)
    runner = threading.Thread(target=thread._run, name=f"mythread-{thread.id}")
    thread._thread = runner
    try:
        runner.start()
    except RuntimeError as exc:
        _release_slot()
        raise ThreadError(f"cannot start thread: {exc}") from exc
    return thread


def current() -> MyThread:
    """Return the handle of the calling thread, making one for threads not started here."""
    thread = getattr(_local, "current", None)
    if thread is None:
        thread = MyThread(None)
        thread.tid = threading.get_native_id()
        _local.current = thread
    return thread


def equal(t1: MyThread | None, t2: MyThread | None) -> bool:
    """Whether both handles name the same thread; False if either is missing."""
    if t1 is None or t2 is None:
        return False
    return t1.id == t2.id


def get_id(thread: MyThread | None) -> int:
    """Return the thread's id, or 0 for no thread."""
    return 0 if thread is None else thread.id


def exit_thread(retval: Any = None) -> None:
    """Run the caller's cleanup handlers and end the calling thread with ``retval``."""
    self_ = current()
    self_.retval = retval
    self_._run_cleanup()
    if self_._thread is None:
        self_._finished.set()
    raise _ThreadExit(retval)


def testcancel() -> None:
    """End the calling thread with CANCELED if it has been asked to stop."""
    if current().canceled:
        exit_thread(CANCELED)


def cleanup_push(routine: Callable[[Any], Any], arg: Any = None) -> None:
    """Push a handler that runs with ``arg`` when the thread ends."""
    current()._cleanup.append((routine, arg))


def cleanup_pop(execute: bool = False) -> None:
    """Remove the most recent handler, running it first if ``execute`` is true."""
    stack = current()._cleanup
    if not stack:
        return
    routine, arg = stack.pop()
    if execute:
        routine(arg)