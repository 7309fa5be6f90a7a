"""Single-threaded and reader/writer exercises for BoundedQueue."""

from __future__ import annotations

import argparse
import os
import sys
import threading
import time

from oslabs.bounded_queue import BoundedQueue

RED = "\033[41m"
NOCOLOR = "\033[0m"


def _ids() -> str:
    return f"[{os.getpid()} {os.getppid()} {threading.get_native_id()}]"


def set_cpu(n: int) -> bool:
    """Pin the calling thread to CPU ``n``; return whether it worked."""
    try:
        os.sched_setaffinity(0, {n})
    except (AttributeError, OSError, ValueError, OverflowError):
        print(f"set_cpu: pthread_setaffinity failed for cpu {n}")
        return False
    print(f"set_cpu: set cpu {n}")
    return True


def run_example(queue: BoundedQueue) -> tuple[list[bool], list[int | None]]:
    """Add 0..9, then get twelve times, printing each step and the stats.

    Returns the add results and the values taken (None where the queue was empty).
    """
    added: list[bool] = []
    for i in range(10):
        ok = queue.add(i)
        added.append(ok)
        print(f"ok {int(ok)}: add value {i}")
        queue.print_stats()

    taken: list[int | None] = []
    for _ in range(12):
        value = queue.get()
        taken.append(value)
        shown = -1 if value is None else value
        print(f"ok: {int(value is not None)}: get value {shown}")
        queue.print_stats()
    return added, taken


def reader(
    queue: BoundedQueue,
    limit: int | None = None,
    errors: list[tuple[int, int]] | None = None,
) -> list[tuple[int, int]]:
    """Take values until ``limit`` have arrived, checking they run consecutively.

    Each break in the sequence is recorded as (value, expected).
    """
    found = [] if errors is None else errors
    print(f"reader {_ids()}")
    set_cpu(1)
    expected = 0
    received = 0
    while limit is None or received < limit:
        value = queue.get()
        if value is None:
            continue
        received += 1
        if value != expected:
            print(f"{RED}ERROR: get value is {value} but expected - {expected}{NOCOLOR}")
            found.append((value, expected))
        expected = value + 1
    return found


def writer(queue: BoundedQueue, limit: int | None = None) -> int:
    """Add 0, 1, 2, ... retrying while full, until ``limit`` values are in."""
    print(f"writer {_ids()}")
    set_cpu(1)
    i = 0
    while limit is None or i < limit:
        if not queue.add(i):
            continue
        i += 1
    return i


def _run_threads(max_count: int, limit: int | None, monitor: bool) -> int:
    errors: list[tuple[int, int]] = []
    with BoundedQueue(max_count, monitor=monitor) as queue:
        read_thread = threading.Thread(target=reader, args=(queue, limit, errors), daemon=True)
        read_thread.start()
        time.sleep(0)
        write_thread = threading.Thread(target=writer, args=(queue, limit), daemon=True)
        write_thread.start()
        read_thread.join()
        write_thread.join()
    return 1 if errors else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="queue-demo")
    parser.add_argument("mode", nargs="?", choices=("example", "threads"), default="threads")
    parser.add_argument("--max-count", type=int, default=None)
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--no-monitor", action="store_true")
    args = parser.parse_args(argv)

    print(f"main {_ids()}")
    monitor = not args.no_monitor
    if args.mode == "example":
        max_count = 1000 if args.max_count is None else args.max_count
        with BoundedQueue(max_count, monitor=monitor) as queue:
            run_example(queue)
        return 0
    max_count = 1000000 if args.max_count is None else args.max_count
    return _run_threads(max_count, args.limit, monitor)


if __name__ == "__main__":
    sys.exit(main())