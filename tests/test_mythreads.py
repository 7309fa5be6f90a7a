import threading
import time

import pytest

from oslabs import mythreads
from oslabs.mythreads import (
    CANCELED,
    ThreadError,
    cleanup_pop,
    cleanup_push,
    create,
    current,
    equal,
    exit_thread,
    get_id,
    testcancel,
)


def worker_id(arg):
    return arg


def test_basic():
    n = 10
    threads = [create(worker_id, i) for i in range(n)]
    ids = [get_id(t) for t in threads]
    assert len(set(ids)) == n
    for i in range(n):
        for j in range(i + 1, n):
            assert not equal(threads[i], threads[j])

    main_thr = current()
    assert get_id(main_thr) != 0
    assert not equal(threads[0], main_thr)

    for i, t in enumerate(threads):
        assert t.join() == i


def test_detach():
    finished = threading.Event()

    def worker_detach(arg):
        finished.set()
        return 123

    t = create(worker_detach, None)
    t.detach()
    assert finished.wait(5)
    assert t.detached is True


def test_cancel():
    flag = [0]

    def worker_cancellable(box):
        for _ in range(100):
            time.sleep(0.001)
            testcancel()
        box[0] = 1
        return None

    t = create(worker_cancellable, flag)
    time.sleep(0.01)
    t.cancel()
    assert t.join() == CANCELED
    assert flag == [0]
    assert t.canceled is True


def test_cleanup():
    counter = [0]

    def cleanup_func1(box):
        box[0] += 1

    def cleanup_func2(box):
        box[0] = 42

    def worker_cleanup(box):
        cleanup_push(cleanup_func1, box)
        cleanup_push(cleanup_func2, box)
        exit_thread(777)
        return None

    t = create(worker_cleanup, counter)
    assert t.join() == 777
    assert counter == [43]


def test_errors():
    with pytest.raises(ThreadError):
        create(None, None)
    assert get_id(None) == 0
    assert equal(None, current()) is False

    t = create(worker_id, None)
    t.detach()
    with pytest.raises(ThreadError):
        t.detach()
    with pytest.raises(ThreadError):
        t.join()


def test_double_join_fails():
    t = create(worker_id, 3)
    assert t.join() == 3
    with pytest.raises(ThreadError):
        t.join()
    with pytest.raises(ThreadError):
        t.detach()


def test_thread_cannot_join_itself():
    def worker(_):
        me = current()
        try:
            me.join()
        except ThreadError:
            return "refused"
        return "joined"

    assert create(worker).join() == "refused"


def test_current_inside_thread_is_handle():
    t = create(lambda _: current(), None)
    result = t.join()
    assert result is t
    assert result.tid is not None


def test_current_is_stable_in_one_thread():
    assert current() is current()
    assert equal(current(), current())


def test_ids_increase():
    t1 = create(worker_id, None)
    t2 = create(worker_id, None)
    assert get_id(t2) > get_id(t1)
    t1.join()
    t2.join()


def test_equality_and_hash_follow_id():
    t = create(worker_id, None)
    assert t == t
    assert {t: 1}[t] == 1
    assert t.join() is None


def test_cleanup_pop_execute_and_discard():
    def worker(_):
        calls = []
        cleanup_push(calls.append, "first")
        cleanup_push(calls.append, "second")
        cleanup_pop(False)
        cleanup_pop(True)
        cleanup_pop(True)
        return calls

    assert create(worker).join() == ["first"]


def test_join_runs_leftover_handlers():
    calls = []

    def worker(_):
        cleanup_push(calls.append, "left")
        return 5

    t = create(worker)
    assert t.join() == 5
    assert calls == ["left"]


def test_detached_thread_runs_its_handlers():
    gate = threading.Event()
    done = threading.Event()

    def worker(_):
        gate.wait(5)
        cleanup_push(lambda ev: ev.set(), done)
        return None

    t = create(worker)
    t.detach()
    assert t.detached is True
    gate.set()
    assert done.wait(5)
    with pytest.raises(ThreadError):
        t.join()


def test_testcancel_without_cancel_continues():
    def worker(_):
        testcancel()
        return "ran"

    assert create(worker).join() == "ran"


def test_error_in_routine_reported_by_join():
    def worker(_):
        raise ValueError("boom")

    t = create(worker)
    with pytest.raises(ThreadError) as info:
        t.join()
    assert isinstance(info.value.__cause__, ValueError)


def test_slots_are_released():
    for i in range(5):
        assert create(worker_id, i).join() == i
    assert mythreads._active == 0