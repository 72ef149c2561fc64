from __future__ import annotations

import random
from collections.abc import Generator

import pytest

from engine import Session
from model import ObstacleSet, Grid
from playcount import MemoryCounter


class ManualScheduler:
    """Virtual-time scheduler: callbacks only run inside advance()."""

    def __init__(self) -> None:
        self.now = 0
        self._seq = 0
        self._pending: dict[int, tuple[int, object]] = {}

    def call_later(self, delay_ms, callback):
        self._seq += 1
        self._pending[self._seq] = (self.now + delay_ms, callback)
        return self._seq

    def cancel(self, handle) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [(when, seq) for seq, (when, _) in self._pending.items() if when <= target]
            if not due:
                break
            when, seq = min(due)
            _, callback = self._pending.pop(seq)
            self.now = when
            callback()
        self.now = target


class RecordingRenderer:
    """Keeps every renderer call as (method, args) for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args):
            self.calls.append((name, args))

        return record

    def named(self, name: str) -> list[tuple]:
        return [args for method, args in self.calls if method == name]


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture()
def counter() -> MemoryCounter:
    return MemoryCounter()


@pytest.fixture()
def grid() -> Grid:
    return Grid()


@pytest.fixture()
def obstacles(grid: Grid) -> ObstacleSet:
    return ObstacleSet(grid)


@pytest.fixture()
def session(renderer, scheduler, counter) -> Generator[Session, None, None]:
    s = Session(renderer, scheduler, counter, rng=random.Random(7), strict=True)
    yield s
    s.destroy()
