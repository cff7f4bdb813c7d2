"""Update controller - drives reconciliation from triggers.

Flow:
    PeriodicRunner -> EventChannel -> enqueue every update key (source read off-loop)
    workers: queue.get -> ClusterReconciler.reconcile (thread) -> StatusStore
        success: forget failures, requeue after reconcile_interval
        failure: requeue rate-limited
"""

import asyncio
import logging
import signal
import sys

from hwsync.controller.periodic import EventChannel, PeriodicEvent, PeriodicRunner
from hwsync.controller.ratelimit import RateLimiterConfig, default_controller_rate_limiter
from hwsync.controller.workqueue import RateLimitingQueue
from hwsync.core.errors import HwsyncError
from hwsync.core.settings import EnvSettings
from hwsync.sync.models import ReconcileOutcome
from hwsync.sync.reconciler import ClusterReconciler
from hwsync.sync.source import UpdateSource
from hwsync.sync.status import StatusStore

logger = logging.getLogger(__name__)


class UpdateController:
    """Runs reconcile workers fed by a rate-limited queue."""

    def __init__(
        self,
        reconciler: ClusterReconciler,
        source: UpdateSource,
        queue: RateLimitingQueue,
        status: StatusStore | None = None,
        reconcile_interval: float = 300.0,
        workers: int = 1,
    ) -> None:
        self.reconciler = reconciler
        self.source = source
        self.queue = queue
        self.status = status or StatusStore()
        self.reconcile_interval = reconcile_interval
        self.workers = workers

    async def enqueue_all(self) -> int:
        """Queue every known update key; returns how many were offered."""
        try:
            keys = await asyncio.to_thread(self.source.keys)
        except HwsyncError as e:
            logger.error(f"unable to list updates: {e}")
            return 0
        for key in keys:
            self.queue.add(key)
        return len(keys)

    async def pump(self, events: EventChannel[PeriodicEvent]) -> None:
        """Turn trigger events into queued keys until the channel closes."""
        async for event in events:
            count = await self.enqueue_all()
            logger.debug(f"event {event.sequence} from {event.source}: {count} updates queued")
        logger.info("trigger channel closed, shutting down queue")
        self.queue.shutdown()

    async def worker(self, index: int) -> None:
        while True:
            key = await self.queue.get()
            if key is None:
                logger.debug(f"worker {index} exiting")
                return
            try:
                await self.process(key)
            finally:
                self.queue.done(key)

    async def process(self, key: str) -> ReconcileOutcome | None:
        """Run one reconcile pass for ``key`` and schedule the next one."""
        logger.info(f"reconciling update {key}")

        try:
            spec = await asyncio.to_thread(self.source.get, key)
        except HwsyncError as e:
            logger.error(f"unable to load update {key}: {e}")
            self.queue.add_rate_limited(key)
            return None

        if spec is None:
            logger.info(f"update {key} no longer exists, dropping it")
            self.queue.forget(key)
            await self.status.remove(key)
            return None

        try:
            outcome = await asyncio.to_thread(self.reconciler.reconcile, spec.clusters)
        except Exception as e:
            logger.exception(f"unexpected error while reconciling update {key}")
            outcome = ReconcileOutcome.failure(f"unexpected error: {e}")

        await self.status.record(key, outcome)

        if outcome.ready:
            self.queue.forget(key)
            self.queue.add_after(key, self.reconcile_interval)
        else:
            retries = self.queue.num_requeues(key)
            logger.info(f"update {key} failed, retry #{retries + 1} scheduled")
            self.queue.add_rate_limited(key)
        return outcome

    async def run(self, events: EventChannel[PeriodicEvent]) -> None:
        """Run pump and workers until the trigger channel closes."""
        pump = asyncio.create_task(self.pump(events), name="hwsync-pump")
        workers = [
            asyncio.create_task(self.worker(i), name=f"hwsync-worker-{i}")
            for i in range(self.workers)
        ]
        try:
            await asyncio.gather(pump, *workers)
        finally:
            self.queue.shutdown()
            for task in (pump, *workers):
                if not task.done():
                    task.cancel()


async def run_controller(
    settings: EnvSettings,
    reconciler: ClusterReconciler,
    source: UpdateSource,
    status: StatusStore | None = None,
) -> None:
    """Run the periodic trigger and the controller until a shutdown signal."""
    queue = RateLimitingQueue(default_controller_rate_limiter(RateLimiterConfig.from_settings(settings)))
    controller = UpdateController(
        reconciler=reconciler,
        source=source,
        queue=queue,
        status=status,
        reconcile_interval=settings.reconcile_interval,
        workers=settings.max_concurrent_reconciles,
    )
    channel: EventChannel[PeriodicEvent] = EventChannel(maxsize=settings.trigger_buffer_size)
    runner = PeriodicRunner(settings.reconcile_interval, channel)

    # Setup signal handlers for graceful shutdown
    if sys.platform != "win32":
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, runner.stop)

    runner_task = asyncio.create_task(runner.start(), name="hwsync-periodic")
    try:
        await controller.run(channel)
    finally:
        runner.stop()
        if not runner_task.done():
            runner_task.cancel()
        try:
            await runner_task
        except asyncio.CancelledError:
            pass
        logger.info("controller stopped")
