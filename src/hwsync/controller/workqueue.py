"""Rate-limited work queue keyed by update name.

Guarantees:
- a key is queued at most once, however often it is added
- a key is handed to at most one worker at a time; adds that arrive while
  it is being processed are replayed once ``done`` is called
- delayed adds keep the earliest deadline per key
"""

import asyncio
import logging
from collections import deque
from collections.abc import Hashable

from hwsync.controller.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


class RateLimitingQueue:
    """asyncio work queue with per-key dedup and rate-limited requeue.

    Must be used from within a running event loop.
    """

    def __init__(self, rate_limiter: RateLimiter, name: str = "update") -> None:
        self.name = name
        self.rate_limiter = rate_limiter
        self._queue: deque[Hashable] = deque()
        self._dirty: set[Hashable] = set()
        self._processing: set[Hashable] = set()
        self._waiting: dict[Hashable, tuple[float, asyncio.TimerHandle]] = {}
        self._wakeup = asyncio.Event()
        self._shutting_down = False

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    def add(self, item: Hashable) -> None:
        """Queue ``item`` unless it is already queued."""
        if self._shutting_down or item in self._dirty:
            return
        self._dirty.add(item)
        if item in self._processing:
            return
        self._queue.append(item)
        self._wakeup.set()

    def add_after(self, item: Hashable, delay: float) -> None:
        """Queue ``item`` once ``delay`` seconds have passed."""
        if self._shutting_down:
            return
        if delay <= 0:
            self.add(item)
            return

        loop = asyncio.get_running_loop()
        ready_at = loop.time() + delay
        existing = self._waiting.get(item)
        if existing is not None:
            if existing[0] <= ready_at:
                return
            existing[1].cancel()

        handle = loop.call_later(delay, self._fire, item)
        self._waiting[item] = (ready_at, handle)
        logger.debug(f"[{self.name}] {item} queued in {delay:.2f}s")

    def add_rate_limited(self, item: Hashable) -> None:
        """Queue ``item`` after the delay the rate limiter assigns it."""
        self.add_after(item, self.rate_limiter.when(item))

    def forget(self, item: Hashable) -> None:
        """Clear the failure history of ``item``."""
        self.rate_limiter.forget(item)

    def num_requeues(self, item: Hashable) -> int:
        return self.rate_limiter.num_requeues(item)

    async def get(self) -> Hashable | None:
        """Wait for the next item; None once the queue is shut down and empty.

        The caller must call ``done(item)`` when finished with it.
        """
        while not self._queue:
            if self._shutting_down:
                return None
            self._wakeup.clear()
            await self._wakeup.wait()

        item = self._queue.popleft()
        self._processing.add(item)
        self._dirty.discard(item)
        return item

    def done(self, item: Hashable) -> None:
        """Mark ``item`` as processed; replay it if it was re-added meanwhile."""
        self._processing.discard(item)
        if item in self._dirty and not self._shutting_down:
            self._queue.append(item)
            self._wakeup.set()

    def shutdown(self) -> None:
        """Stop accepting items and release idle workers."""
        self._shutting_down = True
        for _, handle in self._waiting.values():
            handle.cancel()
        self._waiting.clear()
        self._wakeup.set()

    def _fire(self, item: Hashable) -> None:
        self._waiting.pop(item, None)
        self.add(item)
