"""Self-clearing message slots driven by asyncio timer tasks."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

SleepFn = Callable[[float], Awaitable[None]]


class TransientMessage:
    """A message that clears itself after a delay.

    Every ``show`` starts its own clearing timer and the timers are not
    coordinated: an earlier timer clears whatever message is showing when it
    fires. Outside an event loop no timer is scheduled and the message stays
    until the next ``show`` or ``clear``.
    """

    def __init__(
        self,
        *,
        sleep: SleepFn = asyncio.sleep,
        time_scale: float = 1.0,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._sleep = sleep
        self._time_scale = time_scale
        self._on_change = on_change
        self._value: str | None = None
        self._timers: set[asyncio.Task[None]] = set()

    @property
    def value(self) -> str | None:
        return self._value

    @property
    def pending(self) -> int:
        return len(self._timers)

    def show(self, text: str, duration_ms: float) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # no loop to time it: the message stays until the next show or clear
            loop = None
        if loop is not None:
            task = loop.create_task(self._expire(duration_ms), name="transient-message")
            self._timers.add(task)
            task.add_done_callback(self._timers.discard)
        self._set(text)

    def clear(self) -> None:
        for task in list(self._timers):
            task.cancel()
        self._timers.clear()
        self._set(None)

    async def _expire(self, duration_ms: float) -> None:
        await self._sleep(duration_ms / 1000 * self._time_scale)
        self._set(None)

    def _set(self, value: str | None) -> None:
        changed = value != self._value
        self._value = value
        if changed and self._on_change is not None:
            self._on_change()
