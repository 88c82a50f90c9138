"""Generation of identifiers that are unique within a running process."""

from __future__ import annotations

import threading
import time

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_TEN_SECONDS_NS = 10_000_000_000


class _IdState:
    def __init__(self, randomizer_mask: int, skip_below: int) -> None:
        self.diff_point_ns = time.time_ns() - _TEN_SECONDS_NS
        self.randomizer = 0
        self.randomizer_mask = randomizer_mask
        self.skip_below = skip_below
        self.lock = threading.Lock()

    def next_randomizer(self) -> int:
        while 0 < self.randomizer < self.skip_below:
            self.randomizer += 1
        return self.randomizer

    def advance(self) -> None:
        self.diff_point_ns = time.time_ns()
        self.randomizer = (self.randomizer + 1) & self.randomizer_mask


_state32 = _IdState(0xFF, 8)
_state64 = _IdState(0xFFFF, 4)


def generate_id32() -> int:
    """Return a 32-bit identifier built from time, thread and a counter."""
    with _state32.lock:
        randomizer = _state32.next_randomizer()
        now_ns = time.time_ns()
        seconds = (now_ns // 1_000_000_000) & _MASK32
        micro = ((now_ns - _state32.diff_point_ns) // 1000) & _MASK32
        micro = (micro << 20) & _MASK32
        thread_id = threading.get_ident() & _MASK32

        first = seconds & 0x0FF000F0
        second = micro & 0x00FF0000
        third = thread_id & 0x000000FF
        fourth = (randomizer << 28) & 0xFF000000
        fifth = (randomizer << 8) & 0x0000FF00

        _state32.advance()
        return first ^ second ^ third ^ fourth ^ fifth


def generate_id64() -> int:
    """Return a 64-bit identifier built from time, thread and a counter."""
    with _state64.lock:
        randomizer = _state64.next_randomizer()
        now_ns = time.time_ns()
        seconds = (now_ns // 1_000_000_000) & _MASK64
        micro = ((now_ns - _state64.diff_point_ns) // 1000) & _MASK64
        micro = (micro << 48) & _MASK64
        thread_id = threading.get_ident() & _MASK64

        first = seconds & 0x0000FF00FF00FFFF
        second = micro & 0xFFFF000000000000
        third = thread_id & 0x000000FF00FF0000
        fourth = (randomizer << 32) & 0x0000FFFF00000000
        fifth = (randomizer << 16) & 0x00000000FFFF0000

        _state64.advance()
        return first ^ second ^ third ^ fourth ^ fifth