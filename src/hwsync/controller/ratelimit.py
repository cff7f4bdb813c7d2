"""Rate limiters deciding when a failed update is retried.

The controller limiter is the max of two:

- ItemExponentialFailureRateLimiter: per-key backoff, base * 2^failures,
  capped at max delay
- BucketRateLimiter: global token bucket (burst, frequency per second)

So a key is retried at the later of its own backoff deadline and the next
free slot of the global budget.
"""

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Protocol

from hwsync.core.settings import EnvSettings


@dataclass(frozen=True)
class RateLimiterConfig:
    burst: int = 200
    frequency: float = 30.0
    base_delay: float = 1.0
    failure_max_delay: float = 1000.0

    @classmethod
    def from_settings(cls, settings: EnvSettings) -> "RateLimiterConfig":
        return cls(
            burst=settings.rate_limiter_burst,
            frequency=settings.rate_limiter_frequency,
            base_delay=settings.failure_base_delay,
            failure_max_delay=settings.failure_max_delay,
        )


class RateLimiter(Protocol):
    def when(self, item: Hashable) -> float:
        """Seconds to wait before ``item`` may be processed again."""
        ...

    def forget(self, item: Hashable) -> None: ...

    def num_requeues(self, item: Hashable) -> int: ...


class ItemExponentialFailureRateLimiter:
    """Backoff doubling on every failure of the same item."""

    def __init__(self, base_delay: float, max_delay: float) -> None:
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._failures: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def when(self, item: Hashable) -> float:
        with self._lock:
            exp = self._failures.get(item, 0)
            self._failures[item] = exp + 1

        # Avoid float overflow for long-failing items
        if exp >= 64:
            return self.max_delay
        return min(self.base_delay * (2**exp), self.max_delay)

    def forget(self, item: Hashable) -> None:
        with self._lock:
            self._failures.pop(item, None)

    def num_requeues(self, item: Hashable) -> int:
        with self._lock:
            return self._failures.get(item, 0)


class BucketRateLimiter:
    """Token bucket shared by all items.

    Each ``when`` call reserves one token and returns how long the caller
    has to wait for it.
    """

    def __init__(
        self,
        frequency: float,
        burst: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if frequency <= 0:
            raise ValueError("frequency must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")
        self.frequency = frequency
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._last = clock()
        self._lock = threading.Lock()

    def when(self, item: Hashable) -> float:
        with self._lock:
            now = self._clock()
            elapsed = max(0.0, now - self._last)
            self._last = now
            self._tokens = min(float(self.burst), self._tokens + elapsed * self.frequency)
            self._tokens -= 1.0
            if self._tokens >= 0:
                return 0.0
            return -self._tokens / self.frequency

    def forget(self, item: Hashable) -> None:
        pass

    def num_requeues(self, item: Hashable) -> int:
        return 0


class MaxOfRateLimiter:
    """Waits for the slowest of several limiters."""

    def __init__(self, *limiters: RateLimiter) -> None:
        if not limiters:
            raise ValueError("at least one rate limiter is required")
        self.limiters = limiters

    def when(self, item: Hashable) -> float:
        return max(limiter.when(item) for limiter in self.limiters)

    def forget(self, item: Hashable) -> None:
        for limiter in self.limiters:
            limiter.forget(item)

    def num_requeues(self, item: Hashable) -> int:
        return max(limiter.num_requeues(item) for limiter in self.limiters)


def default_controller_rate_limiter(
    config: RateLimiterConfig,
    clock: Callable[[], float] = time.monotonic,
) -> MaxOfRateLimiter:
    return MaxOfRateLimiter(
        ItemExponentialFailureRateLimiter(config.base_delay, config.failure_max_delay),
        BucketRateLimiter(config.frequency, config.burst, clock=clock),
    )
