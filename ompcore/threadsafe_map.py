"""A hash map split into independently locked buckets."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Bucket(Generic[K, V]):
    def __init__(self) -> None:
        self.entries: dict[K, V] = {}
        self.lock = threading.Lock()


class ThreadSafeMap(Generic[K, V]):
    """A map whose buckets each carry their own lock."""

    def __init__(self, num_buckets: int = 19, hasher: Callable[[K], int] = hash) -> None:
        if num_buckets < 1:
            raise ValueError("a ThreadSafeMap needs at least one bucket")
        self._buckets: list[_Bucket[K, V]] = [_Bucket() for _ in range(num_buckets)]
        self._hasher = hasher

    def _bucket(self, key: K) -> _Bucket[K, V]:
        return self._buckets[self._hasher(key) % len(self._buckets)]

    def value_for(self, key: K, default: Any = None) -> V | Any:
        """Return the value stored for key, or default."""
        bucket = self._bucket(key)
        with bucket.lock:
            return bucket.entries.get(key, default)

    def add_or_update_mapping(self, key: K, value: V) -> None:
        bucket = self._bucket(key)
        with bucket.lock:
            bucket.entries[key] = value

    def remove_mapping(self, key: K) -> None:
        """Remove key if present; a missing key is ignored."""
        bucket = self._bucket(key)
        with bucket.lock:
            bucket.entries.pop(key, None)

    def foreach(self, functor: Callable[[K, V], Any]) -> None:
        """Call functor(key, value) for every entry, one bucket locked at a time."""
        for bucket in self._buckets:
            with bucket.lock:
                for key, value in list(bucket.entries.items()):
                    functor(key, value)