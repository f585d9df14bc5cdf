"""Background tasks and delayed actions on the bot's single event loop.

Remote calls are spawned as tasks so handling the next update never waits
on the network, and their completions run on the same loop, one at a time.
"""

import asyncio
import heapq
import itertools
import logging

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    def __init__(self):
        self._tasks = set()

    def spawn(self, coro):
        """Run coro as a task; keep a reference until it finishes."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def call_later(self, delay, factory):
        """After delay seconds, spawn factory(). Not cancellable."""
        asyncio.get_running_loop().call_later(delay, lambda: self.spawn(factory()))

    async def drain(self):
        """Wait for every spawned task, including ones spawned meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _finished(self, task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[scheduler] background task failed", exc_info=exc)


class VirtualScheduler(AsyncioScheduler):
    """AsyncioScheduler whose delays run on a virtual clock.

    Nothing scheduled with call_later fires until advance() moves the clock
    past its due time. The bot always runs on AsyncioScheduler; this one
    exists so tests can step through reset delays without sleeping.
    """

    def __init__(self):
        super().__init__()
        self.now = 0.0
        self._timers = []
        self._seq = itertools.count()

    def call_later(self, delay, factory):
        heapq.heappush(self._timers, (self.now + delay, next(self._seq), factory))

    @property
    def pending(self):
        return len(self._timers)

    async def advance(self, seconds):
        target = self.now + seconds
        while self._timers and self._timers[0][0] <= target:
            due, _, factory = heapq.heappop(self._timers)
            self.now = due
            self.spawn(factory())
            await self.drain()
        self.now = target
        await self.drain()
