import threading
from contextlib import contextmanager
from typing import Iterator


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        # one lock per instance key ever seen, bounded by the fleet size
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield
