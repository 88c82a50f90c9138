import threading
import time

import pytest

from ompcore.thread_pool import (
    InterruptFlag,
    InterruptibleThread,
    ThreadInterrupted,
    ThreadPool,
    WorkStealingQueue,
    interruptible_wait,
    interruption_point,
)


class Member:
    def func(self, ready):
        ready.wait(5)

    def funcret(self, ready):
        ready.wait(5)
        return 5.0

    def withparam(self, ready, a, b):
        ready.wait(5)
        return a + b

    def consfunc(self, ready):
        ready.wait(5)


def myfunc(ready):
    ready.wait(5)


def ues():
    i = 4
    i += 1


def test_pool_runs_functions_methods_and_lambdas():
    ready = threading.Event()
    member = Member()

    def lymd():
        ready.wait(5)
        return 2

    def lamd():
        ready.wait(5)
        return 0.0

    with ThreadPool() as pool:
        a = pool.submit(member.func, ready)
        b = pool.submit(myfunc, ready)
        z = pool.submit(ues)
        s = pool.submit(member.funcret, ready)
        d = pool.submit(member.withparam, ready, 3.0, 5.0)
        x = pool.submit(member.consfunc, ready)
        ints = [pool.submit(lymd) for _ in range(8)]
        floats = [pool.submit(lamd) for _ in range(6)]
        ready.set()

        assert a.result(timeout=5) is None
        assert b.result(timeout=5) is None
        assert z.result(timeout=5) is None
        assert x.result(timeout=5) is None
        assert [f.result(timeout=5) for f in ints] == [2] * 8
        assert s.result(timeout=5) == 5.0
        assert d.result(timeout=5) == 8.0
        assert [f.result(timeout=5) for f in floats] == [0.0] * 6


def test_submit_passes_keyword_arguments():
    with ThreadPool(2) as pool:
        future = pool.submit(lambda a, b=0: a - b, 10, b=4)
        assert future.result(timeout=5) == 6


def test_exception_reaches_future():
    def fail():
        raise ValueError("boom")

    with ThreadPool(1) as pool:
        future = pool.submit(fail)
        with pytest.raises(ValueError, match="boom"):
            future.result(timeout=5)


def test_task_can_submit_further_tasks():
    with ThreadPool(2) as pool:
        outer = pool.submit(lambda: pool.submit(lambda: "inner"))
        inner = outer.result(timeout=5)
        assert inner.result(timeout=5) == "inner"


def test_submit_after_shutdown_raises():
    pool = ThreadPool(1)
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.submit(ues)


def test_zero_threads_rejected():
    with pytest.raises(ValueError):
        ThreadPool(0)


def test_thread_count_is_capped_and_positive():
    with ThreadPool(1) as pool:
        assert pool.thread_count == 1


def test_run_pending_task_on_idle_pool_returns_false():
    with ThreadPool(1) as pool:
        assert pool.run_pending_task() is False


def test_run_pending_task_runs_queued_task_in_caller():
    started = threading.Event()
    gate = threading.Event()
    with ThreadPool(1) as pool:
        first = pool.submit(lambda: (started.set(), gate.wait(5)))
        assert started.wait(5)
        second = pool.submit(lambda: 7)
        assert pool.run_pending_task() is True
        assert second.result(timeout=0) == 7
        gate.set()
        assert first.result(timeout=5)[1] is True


def test_work_stealing_queue_pop_takes_newest_and_steal_takes_oldest():
    queue = WorkStealingQueue()
    tasks = [lambda: 1, lambda: 2, lambda: 3]
    for task in tasks:
        queue.push(task)
    assert queue.empty() is False
    assert queue.try_pop() is tasks[2]
    assert queue.try_steal() is tasks[0]
    assert queue.try_pop() is tasks[1]
    assert queue.try_pop() is None
    assert queue.try_steal() is None
    assert queue.empty() is True


def test_interrupt_flag_set():
    flag = InterruptFlag()
    assert flag.is_set() is False
    flag.set()
    assert flag.is_set() is True


def test_flag_wait_raises_when_already_set():
    flag = InterruptFlag()
    flag.set()
    condition = threading.Condition()
    with condition:
        with pytest.raises(ThreadInterrupted):
            flag.wait(condition)


def test_interruption_point_message():
    messages = []

    def body():
        try:
            while True:
                interruption_point()
                time.sleep(0.001)
        except ThreadInterrupted as exc:
            messages.append(str(exc))
            raise

    thread = InterruptibleThread(body)
    thread.interrupt()
    thread.join(5)
    assert thread.is_alive() is False
    assert messages == ["Thread interrupted"]


def test_interruptible_thread_stops_at_interruption_point():
    def loop():
        while True:
            interruption_point()
            time.sleep(0.001)

    thread = InterruptibleThread(loop)
    thread.interrupt()
    thread.join(5)
    assert thread.is_alive() is False


def test_interruptible_wait_is_woken_by_interrupt():
    condition = threading.Condition()
    outcome = []

    def waiter():
        with condition:
            try:
                interruptible_wait(condition)
            except ThreadInterrupted:
                outcome.append("interrupted")
                raise

    thread = InterruptibleThread(waiter)
    thread.interrupt()
    thread.join(5)
    assert outcome == ["interrupted"]
    assert thread.is_alive() is False