from __future__ import annotations

import asyncio

import pytest


class ManualClock:
    """Sleep replacement whose waits only finish when the test releases them."""

    def __init__(self) -> None:
        self.waits: list[float] = []
        self._pending: list[asyncio.Future[None]] = []

    async def sleep(self, seconds: float) -> None:
        self.waits.append(seconds)
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        await future

    @property
    def pending(self) -> int:
        return sum(1 for future in self._pending if not future.done())

    def release_next(self) -> None:
        while self._pending:
            future = self._pending.pop(0)
            if not future.done():
                future.set_result(None)
                return

    def release_all(self) -> None:
        for future in self._pending:
            if not future.done():
                future.set_result(None)
        self._pending.clear()

    @staticmethod
    async def settle() -> None:
        for _ in range(5):
            await asyncio.sleep(0)


class RecordingSleep:
    """Sleep replacement that only yields to the loop and records requested waits."""

    def __init__(self) -> None:
        self.waits: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.waits.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def instant() -> RecordingSleep:
    return RecordingSleep()
