from __future__ import annotations

from typing import Protocol


class ClockPort(Protocol):
    def now_ms(self) -> int:
        ...


class StateStorePort(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class RegistrySnapshotPort(Protocol):
    def save_snapshot(self, *, payload: str, created_at_ms: int) -> int:
        ...

    def load_latest_snapshot(self) -> str | None:
        ...
