"""A work-stealing thread pool and cooperative thread interruption."""

from __future__ import annotations

import os
import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from ompcore.threadsafe_queue import ThreadSafeQueue

_thread_state = threading.local()


class ThreadInterrupted(Exception):
    """Raised in a thread whose interrupt flag has been set."""

    def __init__(self, message: str = "Thread interrupted") -> None:
        super().__init__(message)


class InterruptFlag:
    """A flag that, once set, wakes the condition its owner is waiting on."""

    def __init__(self) -> None:
        self._flag = threading.Event()
        self._guard = threading.Lock()
        self._condition: threading.Condition | None = None

    def set(self) -> None:
        self._flag.set()
        with self._guard:
            condition = self._condition
        if condition is not None:
            with condition:
                condition.notify_all()

    def is_set(self) -> bool:
        return self._flag.is_set()

    def wait(self, condition: threading.Condition) -> None:
        """Wait on condition, whose lock the caller holds.

        Raises ThreadInterrupted if the flag is set before or during the wait.
        """
        with self._guard:
            self._condition = condition
        try:
            self._raise_if_set()
            condition.wait()
            self._raise_if_set()
        finally:
            with self._guard:
                self._condition = None

    def _raise_if_set(self) -> None:
        if self._flag.is_set():
            raise ThreadInterrupted()


def _current_flag() -> InterruptFlag:
    flag = getattr(_thread_state, "interrupt_flag", None)
    if flag is None:
        flag = InterruptFlag()
        _thread_state.interrupt_flag = flag
    return flag


def interruption_point() -> None:
    """Raise ThreadInterrupted if the calling thread has been interrupted."""
    if _current_flag().is_set():
        raise ThreadInterrupted()


def interruptible_wait(condition: threading.Condition) -> None:
    """Wait on condition in a way that an interrupt of this thread can end."""
    _current_flag().wait(condition)


class InterruptibleThread:
    """A thread that can be asked to stop at its next interruption point."""

    def __init__(self, function: Callable[[], Any]) -> None:
        self._flag = InterruptFlag()
        self._thread = threading.Thread(target=self._run, args=(function,), daemon=True)
        self._thread.start()

    def _run(self, function: Callable[[], Any]) -> None:
        _thread_state.interrupt_flag = self._flag
        try:
            function()
        except ThreadInterrupted:
            pass

    def interrupt(self) -> None:
        self._flag.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()


class WorkStealingQueue:
    """A deque whose owner works at the front while others steal from the back."""

    def __init__(self) -> None:
        self._tasks: deque[Callable[[], Any]] = deque()
        self._lock = threading.Lock()

    def push(self, task: Callable[[], Any]) -> None:
        with self._lock:
            self._tasks.appendleft(task)

    def empty(self) -> bool:
        with self._lock:
            return not self._tasks

    def try_pop(self) -> Callable[[], Any] | None:
        """Take the most recently pushed task, or None."""
        with self._lock:
            return self._tasks.popleft() if self._tasks else None

    def try_steal(self) -> Callable[[], Any] | None:
        """Take the oldest task, or None."""
        with self._lock:
            return self._tasks.pop() if self._tasks else None


class _Task:
    __slots__ = ("function", "args", "kwargs", "future")

    def __init__(self, function: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        self.function = function
        self.args = args
        self.kwargs = kwargs
        self.future: Future = Future()

    def __call__(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        try:
            result = self.function(*self.args, **self.kwargs)
        except BaseException as exc:
            self.future.set_exception(exc)
        else:
            self.future.set_result(result)


class ThreadPool:
    """Worker threads with one local queue each, stealing work from one another."""

    def __init__(self, thread_count: int | None = None) -> None:
        available = os.cpu_count() or 1
        if thread_count is None:
            count = available
        elif thread_count < 1:
            raise ValueError("a ThreadPool needs at least one thread")
        else:
            count = min(thread_count, available)

        self._done = threading.Event()
        self._submit_lock = threading.Lock()
        self._wakeup = threading.Condition()
        self._pool_queue: ThreadSafeQueue[_Task] = ThreadSafeQueue()
        self._queues = [WorkStealingQueue() for _ in range(count)]
        self._threads = [
            threading.Thread(target=self._worker, args=(index,), daemon=True)
            for index in range(count)
        ]
        for thread in self._threads:
            thread.start()

    @property
    def thread_count(self) -> int:
        return len(self._threads)

    def _worker(self, index: int) -> None:
        _thread_state.worker = (self, index)
        while not self._done.is_set():
            if not self.run_pending_task():
                with self._wakeup:
                    if not self._done.is_set():
                        self._wakeup.wait(0.01)

    def _worker_index(self) -> int | None:
        slot = getattr(_thread_state, "worker", None)
        if slot is not None and slot[0] is self:
            return slot[1]
        return None

    def submit(self, function: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Schedule function(*args, **kwargs) and return a future for its result."""
        task = _Task(function, args, kwargs)
        index = self._worker_index()
        with self._submit_lock:
            if self._done.is_set():
                raise RuntimeError("cannot submit to a ThreadPool that has been shut down")
            if index is not None:
                self._queues[index].push(task)
            else:
                self._pool_queue.push(task)
        with self._wakeup:
            self._wakeup.notify()
        return task.future

    def _next_task(self) -> Callable[[], Any] | None:
        index = self._worker_index()
        if index is not None:
            task = self._queues[index].try_pop()
            if task is not None:
                return task
        task = self._pool_queue.try_pop()
        if task is not None:
            return task
        start = (0 if index is None else index) + 1
        for queue in self._queues[start:] + self._queues[:start]:
            task = queue.try_steal()
            if task is not None:
                return task
        return None

    def run_pending_task(self) -> bool:
        """Run one waiting task in the calling thread; False if none was waiting."""
        task = self._next_task()
        if task is None:
            return False
        task()
        return True

    def shutdown(self) -> None:
        """Stop the workers once their current tasks end and cancel queued tasks."""
        with self._submit_lock:
            self._done.set()
        with self._wakeup:
            self._wakeup.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        while (task := self._pool_queue.try_pop()) is not None:
            task.future.cancel()
        for queue in self._queues:
            while (task := queue.try_pop()) is not None:
                task.future.cancel()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.shutdown()