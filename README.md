# oslabs

Small, self-contained operating-systems exercises to run and study: a reader
for the Linux page map, a first-fit heap allocator, bounded queues guarded by
different synchronisation primitives, a small thread library with
cancellation and cleanup handlers, a UDP echo server and client, and a TCP
echo server that multiplexes its clients with `select`.

It needs Python 3.10 or later and has no third-party runtime dependencies.
Some parts use Linux-only facilities such as `/proc` and CPU affinity.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

| Command | What it does |
| --- | --- |
| `oslabs-pagemap <pid>` | Lists the present pages of a process, with the raw page-map bits and their meaning (present, swapped, file/shared, soft-dirty, PFN). |
| `oslabs-heap` | Runs the allocator demo: three allocations of 400 bytes in a 1024-byte heap, two frees, and one 900-byte allocation that reuses the merged space. |
| `oslabs-queue-demo [example\|threads]` | `example` adds ten values to a bounded queue, takes twelve, and prints the statistics after each step; `threads` (the default) runs a reader and a writer thread and reports values that arrive out of order. Options: `--max-count`, `--limit`, `--no-monitor`. |
| `oslabs-queue-stress [spinlock\|mutex\|condvar\|semaphore]` | Runs a reader and a writer thread against a queue built on the chosen primitive (default `mutex`) and reports ordering errors. Options: `--max-count`, `--limit`, `--usleep` (the writer pauses briefly after most values). |
| `oslabs-udp-server` | A UDP echo server on port 8080. Options: `--host`, `--port`. |
| `oslabs-udp-client` | Greets the UDP server every five seconds and prints each reply. Options: `--host`, `--port`, `--count`, `--interval`. |
| `oslabs-multiplexer` | A single-process TCP echo server on port 8080 serving up to ten clients at once. Options: `--host`, `--port`, `--max-clients`. |

Without `--limit`, the queue commands run until interrupted; so do the
servers, and the UDP client without `--count`.

## Using the library

### Heap allocator

`Heap` manages a fixed region as a list of blocks, each with a 24-byte
header. Requests are rounded up to a multiple of eight bytes, `malloc`
returns a payload offset (or `None` when nothing fits), and a freed block is
merged with free neighbours.

```python
from oslabs.heap import Heap

heap = Heap(1024)
first = heap.malloc(400)
second = heap.malloc(400)
heap.free(first)
heap.free(second)
big = heap.malloc(900)      # fits again once the two blocks are merged
for block in heap.blocks():
    print(block)
```

### Bounded queues

`BoundedQueue` (in `oslabs.bounded_queue`) is a FIFO of integers with a
capacity and counters for attempts and successes. `add` returns `False` when
the queue is full and `get` returns `None` when it is empty. With
`monitor=True` a background thread prints the statistics every second; the
queue is a context manager that stops it on exit.

```python
from oslabs.bounded_queue import BoundedQueue

with BoundedQueue(1000, monitor=False) as queue:
    queue.add(1)
    queue.add(2)
    print(queue.get(), len(queue))
    print(queue.stats().format())
```

`oslabs.sync_queues` provides thread-safe versions: `MutexQueue` and
`SpinlockQueue` never block, while `CondvarQueue` and `SemaphoreQueue` wait
for room on `add` and for a value on `get`. `make_queue(kind, max_count,
monitor)` builds one from a `QueueKind` or its name. `oslabs.queue_stress`
exposes `run_stress`, which returns a `StressResult` with the number of
values written, any ordering errors and the final statistics.

### Thread library

`oslabs.mythreads` offers a small threading interface with joinable and
detached threads, numeric ids, deferred cancellation and cleanup handlers.

```python
from oslabs import mythreads

def worker(arg):
    mythreads.cleanup_push(print, "cleaning up")
    mythreads.exit_thread(arg * 2)

thread = mythreads.create(worker, 21)
print(thread.join())        # 42, after the cleanup handler has run
```

A thread that calls `testcancel()` after `cancel()` has been requested ends
with the value -1 (`CANCELED`). Joining or detaching a thread twice, or
joining a detached thread, raises `ThreadError`; so does creating more than
1024 threads at once.

### Page map

`PagemapEntry.from_raw` decodes a 64-bit page-map entry, `format_bits` shows
it in groups of eight bits, `parse_maps` reads address ranges from a maps
file, and `iter_present_pages` walks the mapped pages of a process.

### Networking

`oslabs.udp_echo` holds `serve`, `ping` and `client_message`.
`MultiplexServer` (in `oslabs.multiplexer`) can be driven one `poll` at a
time, which makes it easy to embed or test.

## What it does not do

- There is no forking TCP echo server and no line-by-line TCP client; the
  only TCP server is the single-process `oslabs-multiplexer`.
- There is no linked storage with per-node locks.
- There are no standalone demos of thread creation, signal handling, `fork`,
  zombie or orphaned processes; the thread library above is the package's
  threading exercise.