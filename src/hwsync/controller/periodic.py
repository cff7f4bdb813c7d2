"""Periodic trigger - synthetic reconcile events on a fixed interval.

Inventory edits made outside the controller never produce a change event,
so the runner pushes one event right away and then one per interval into a
bounded channel. When stopped or cancelled it stops ticking and closes the
channel; consumers iterating over it finish cleanly.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChannelClosedError(Exception):
    """Send on a closed channel."""


class EventChannel(Generic[T]):
    """Bounded async channel that can be closed.

    ``receive`` returns None once the channel is closed and drained.
    """

    def __init__(self, maxsize: int = 1) -> None:
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    async def send(self, item: T) -> None:
        """Put ``item``, waiting while the channel is full."""
        if self.closed:
            raise ChannelClosedError("send on closed channel")
        await self._queue.put(item)

    def close(self) -> None:
        self._closed.set()

    async def receive(self) -> T | None:
        while True:
            if not self._queue.empty():
                return self._queue.get_nowait()
            if self.closed:
                return None

            getter = asyncio.ensure_future(self._queue.get())
            closer = asyncio.ensure_future(self._closed.wait())
            try:
                done, _ = await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                closer.cancel()
                if not getter.done():
                    getter.cancel()

            if getter in done:
                return getter.result()

    def __aiter__(self) -> "EventChannel[T]":
        return self

    async def __anext__(self) -> T:
        item = await self.receive()
        if item is None:
            raise StopAsyncIteration
        return item


@dataclass(frozen=True)
class PeriodicEvent:
    """Synthetic trigger carrying no payload beyond its origin."""

    source: str = "periodic"
    sequence: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class PeriodicRunner:
    """Send a PeriodicEvent into ``channel`` every ``interval`` seconds."""

    def __init__(self, interval: float, channel: EventChannel[PeriodicEvent]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.channel = channel
        self._stop_event = asyncio.Event()
        self._sequence = 0

    def stop(self) -> None:
        """Request the runner to stop after the current wait."""
        self._stop_event.set()

    async def start(self) -> None:
        """Tick until stopped or cancelled, then close the channel."""
        logger.info(f"periodic runner started, interval {self.interval}s")
        try:
            # Initial event triggers the first reconciliation
            await self._emit()

            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                    break  # Stop event was set
                except TimeoutError:
                    pass  # Time to tick

                await self._emit()
        finally:
            self.channel.close()
            logger.info("periodic runner stopped")

    async def _emit(self) -> None:
        """Send the next event unless stopped first; a pending send is dropped on stop."""
        if self._stop_event.is_set():
            return
        event = PeriodicEvent(sequence=self._sequence)

        sender = asyncio.ensure_future(self.channel.send(event))
        stopper = asyncio.ensure_future(self._stop_event.wait())
        try:
            done, _ = await asyncio.wait({sender, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not sender.done():
                sender.cancel()

        if sender not in done:
            logger.debug(f"periodic event {event.sequence} dropped, runner stopped")
            return
        sender.result()
        self._sequence += 1
        logger.debug(f"periodic event {event.sequence} sent")
