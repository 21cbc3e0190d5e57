"""Cancellable background tasks used by the access gate."""

import asyncio
from typing import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)

Check = Callable[[], Awaitable[None]]
Listener = Callable[[], None]
Sleep = Callable[[float], Awaitable[None]]


class PollingTask:
    """Runs a coroutine function now and then every `interval` seconds.

    The handle owns every asyncio task it creates, including one-off runs
    requested through trigger(); cancel() stops all of them. start() and
    cancel() are idempotent. Must be started from a running event loop.
    `sleep` is the wait between ticks; inject a manual timer to drive it.
    """

    def __init__(
        self,
        check: Check,
        interval: float,
        name: str = "poll",
        sleep: Sleep = asyncio.sleep,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.check = check
        self.interval = interval
        self.name = name
        self.sleep = sleep
        self.ticks = 0
        self._loop_task: asyncio.Task | None = None
        self._one_offs: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def pending_tasks(self) -> int:
        """Live tasks owned by this handle (loop + outstanding one-off runs)."""
        live = [t for t in self._one_offs if not t.done()]
        return len(live) + (1 if self.running else 0)

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._loop_task = loop.create_task(self._run(), name=self.name)
        logger.debug("poll_started", name=self.name, interval=self.interval)

    def trigger(self) -> None:
        """Run the check once now, outside the regular schedule."""
        if not self.running:
            return
        task = asyncio.get_running_loop().create_task(self._tick())
        self._one_offs.add(task)
        task.add_done_callback(self._one_offs.discard)

    def cancel(self) -> None:
        # A tick cancelling its own poll unwinds at its next await
        for task in [self._loop_task, *self._one_offs]:
            if task is not None and not task.done():
                task.cancel()
        if self._loop_task is not None:
            logger.debug("poll_cancelled", name=self.name, ticks=self.ticks)
        self._loop_task = None
        self._one_offs.clear()

    async def _run(self) -> None:
        await self._tick()
        while True:
            await self.sleep(self.interval)
            await self._tick()

    async def _tick(self) -> None:
        self.ticks += 1
        logger.debug("poll_tick", name=self.name, tick=self.ticks)
        await self.check()


class FocusEvents:
    """Window-focus notifications the gate listens to for immediate re-checks."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self) -> None:
        for listener in list(self._listeners):
            listener()
