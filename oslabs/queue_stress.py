"""Reader/writer stress runs over the synchronised queues."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from dataclasses import dataclass, field

from oslabs import queue_demo
from oslabs.bounded_queue import BoundedQueue, QueueStats
from oslabs.sync_queues import QueueKind, make_queue

PAUSE_SECONDS = 1e-6


@dataclass
class StressResult:
    """The outcome of one reader/writer run."""

    kind: QueueKind
    written: int
    errors: list[tuple[int, int]] = field(default_factory=list)
    stats: QueueStats | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


def reader(
    queue: BoundedQueue,
    limit: int | None = None,
    errors: list[tuple[int, int]] | None = None,
) -> list[tuple[int, int]]:
    """Take values until ``limit`` have arrived; return the (value, expected) breaks."""
    return queue_demo.reader(queue, limit, errors)


def writer(queue: BoundedQueue, limit: int | None = None, pause: bool = False) -> int:
    """Add 0, 1, 2, ... retrying while full, until ``limit`` values are in.

    With ``pause`` the writer sleeps briefly after each value except every tenth.
    """
    print(f"writer [{queue_demo._ids()[1:-1]}]")
    queue_demo.set_cpu(1)
    i = 0
    while limit is None or i < limit:
        if not queue.add(i):
            continue
        i += 1
        if pause and i % 10:
            time.sleep(PAUSE_SECONDS)
    return i


def run_stress(
    kind: QueueKind | str,
    max_count: int = 1000000,
    limit: int | None = None,
    pause: bool = False,
) -> StressResult:
    """Run one reader and one writer over a queue of ``kind`` until ``limit`` values pass."""
    queue_kind = QueueKind(kind)
    errors: list[tuple[int, int]] = []
    written: list[int] = []
    with make_queue(queue_kind, max_count) as queue:
        read_thread = threading.Thread(
            target=reader, args=(queue, limit, errors), daemon=True
        )
        read_thread.start()
        time.sleep(0)
        write_thread = threading.Thread(
            target=lambda: written.append(writer(queue, limit, pause)), daemon=True
        )
        write_thread.start()
        read_thread.join()
        write_thread.join()
        stats = queue.stats()
    return StressResult(
        kind=queue_kind,
        written=written[0] if written else 0,
        errors=errors,
        stats=stats,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="queue-stress")
    parser.add_argument(
        "kind", nargs="?", choices=[k.value for k in QueueKind], default="mutex"
    )
    parser.add_argument("--max-count", type=int, default=1000000)
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--usleep", action="store_true")
    args = parser.parse_args(argv)

    print(f"main {queue_demo._ids()}")
    result = run_stress(args.kind, args.max_count, args.limit, args.usleep)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())