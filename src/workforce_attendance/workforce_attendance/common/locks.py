from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterable, Iterator

from ..core.exceptions import AttendanceTimeoutError


class KeyedLock:
    """One mutex per key, created on first use.

    Used to serialize writes that target the same (employee_id, work_date).
    Entries are dropped again once nobody holds or waits for them.
    """

    def __init__(self, *, timeout: float | None = None):
        self._timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    def _checkout(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._waiters[key] = self._waiters.get(key, 0) + 1
            return lock

    def _checkin(self, key: Hashable) -> None:
        with self._guard:
            left = self._waiters[key] - 1
            if left:
                self._waiters[key] = left
            else:
                del self._waiters[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self.hold_many([key]):
            yield

    @contextmanager
    def hold_many(self, keys: Iterable[Hashable]) -> Iterator[None]:
        # Sorted acquisition keeps two multi-key holders from deadlocking.
        ordered = sorted(set(keys), key=repr)
        acquired: list[Hashable] = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                timeout = -1 if self._timeout is None else self._timeout
                if not lock.acquire(timeout=timeout):
                    self._checkin(key)
                    raise AttendanceTimeoutError(f"Timed out waiting for lock on {key!r}")
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
                self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
