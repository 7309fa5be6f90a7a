import threading
import time

import pytest

from oslabs.sync_queues import (
    CondvarQueue,
    MutexQueue,
    QueueKind,
    SemaphoreQueue,
    SpinLock,
    SpinlockQueue,
    make_queue,
)

ALL_KINDS = list(QueueKind)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_fifo_order(kind):
    with make_queue(kind, 10, monitor=False) as queue:
        for value in range(5):
            assert queue.add(value) is True
        assert [queue.get() for _ in range(5)] == [0, 1, 2, 3, 4]
        assert len(queue) == 0


@pytest.mark.parametrize("cls", [MutexQueue, SpinlockQueue])
def test_nonblocking_full_and_empty(cls):
    with cls(2, monitor=False) as queue:
        assert queue.add(7)
        assert queue.add(8)
        assert queue.add(9) is False
        assert queue.get() == 7
        assert queue.get() == 8
        assert queue.get() is None
        stats = queue.stats()
        assert (stats.add_attempts, stats.add_count) == (3, 2)
        assert (stats.get_attempts, stats.get_count) == (3, 2)


def test_stats_line_format():
    with MutexQueue(5, monitor=False) as queue:
        queue.add(1)
        assert queue.stats().format() == (
            "queue stats: current size 1; attempts: (1 0 1); counts (1 0 1)"
        )


@pytest.mark.parametrize("cls", [CondvarQueue, SemaphoreQueue])
def test_blocking_get_waits_for_value(cls):
    with cls(3, monitor=False) as queue:
        result = []
        worker = threading.Thread(target=lambda: result.append(queue.get()))
        worker.start()
        time.sleep(0.05)
        assert result == []
        queue.add(42)
        worker.join(timeout=5)
        assert not worker.is_alive()
        assert result == [42]


@pytest.mark.parametrize("cls", [CondvarQueue, SemaphoreQueue])
def test_blocking_add_waits_for_room(cls):
    with cls(1, monitor=False) as queue:
        queue.add(1)
        done = threading.Event()

        def producer():
            queue.add(2)
            done.set()

        worker = threading.Thread(target=producer)
        worker.start()
        assert not done.wait(0.05)
        assert queue.get() == 1
        worker.join(timeout=5)
        assert done.is_set()
        assert queue.get() == 2


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_concurrent_producers_keep_every_value(kind):
    producers, per_producer = 4, 100
    with make_queue(kind, 16, monitor=False) as queue:

        def produce(base):
            for k in range(per_producer):
                while not queue.add(base + k):
                    time.sleep(0)

        threads = [
            threading.Thread(target=produce, args=(p * per_producer,))
            for p in range(producers)
        ]
        for thread in threads:
            thread.start()
        received = []
        while len(received) < producers * per_producer:
            value = queue.get()
            if value is not None:
                received.append(value)
        for thread in threads:
            thread.join(timeout=5)
        assert sorted(received) == list(range(producers * per_producer))
        for p in range(producers):
            own = [v for v in received if v // per_producer == p]
            assert own == sorted(own)
        stats = queue.stats()
        assert stats.add_count == stats.get_count == producers * per_producer
        assert stats.count == 0


def test_spinlock_acquire_release():
    lock = SpinLock()
    assert lock.acquire() is True
    assert lock.locked()
    lock.release()
    assert not lock.locked()
    with lock:
        assert lock.locked()
    assert not lock.locked()


def test_spinlock_release_unlocked_raises():
    with pytest.raises(RuntimeError):
        SpinLock().release()


def test_spinlock_mutual_exclusion():
    lock = SpinLock()
    counter = [0]
    acquired = []

    def bump():
        for _ in range(500):
            acquired.append(lock.acquire())
            try:
                current = counter[0]
                time.sleep(0)
                counter[0] = current + 1
            finally:
                lock.release()

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert counter[0] == 2000
    assert acquired == [True] * 2000
    assert lock.locked() is False


@pytest.mark.parametrize(
    "name, cls",
    [
        ("mutex", MutexQueue),
        ("spinlock", SpinlockQueue),
        ("condvar", CondvarQueue),
        ("semaphore", SemaphoreQueue),
    ],
)
def test_make_queue_by_name(name, cls):
    with make_queue(name, 3, monitor=False) as queue:
        assert type(queue) is cls
        assert queue.max_count == 3


def test_make_queue_unknown_kind():
    with pytest.raises(ValueError):
        make_queue("lockfree", 3, monitor=False)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_negative_capacity_rejected(kind):
    with pytest.raises(ValueError):
        make_queue(kind, -1, monitor=False)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_closed_queue_rejects_use(kind):
    queue = make_queue(kind, 3, monitor=False)
    queue.add(1)
    queue.close()
    assert len(queue) == 0
    with pytest.raises(ValueError):
        queue.add(2)
    with pytest.raises(ValueError):
        queue.get()


def test_monitor_prints_stats(capsys):
    queue = MutexQueue(4, monitor=True)
    queue.add(5)
    time.sleep(0.1)
    queue.close()
    out = capsys.readouterr().out
    assert "qmonitor: [" in out
    assert "queue stats: current size" in out