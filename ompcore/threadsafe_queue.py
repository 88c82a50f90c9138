"""A first-in first-out queue safe for concurrent use."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ThreadSafeQueue(Generic[T]):
    """A FIFO queue whose operations never block waiting for items."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._lock = threading.Lock()

    def push(self, value: T) -> None:
        with self._lock:
            self._items.append(value)

    def try_pop(self, default: Any = None) -> T | Any:
        """Remove and return the oldest item, or default if empty."""
        with self._lock:
            if not self._items:
                return default
            return self._items.popleft()

    def empty(self) -> bool:
        with self._lock:
            return not self._items