from __future__ import annotations

from threading import Lock
import time


class SystemClock:
    def now_ms(self) -> int:
        return int(time.time() * 1000)


class InMemoryStateStore:
    """Process-wide key/value store for initialization bookkeeping."""

    def __init__(self):
        self._values: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
