"""Controller runtime: periodic trigger, rate-limited queue and workers."""

from hwsync.controller.manager import UpdateController, run_controller
from hwsync.controller.periodic import EventChannel, PeriodicEvent, PeriodicRunner
from hwsync.controller.ratelimit import (
    BucketRateLimiter,
    ItemExponentialFailureRateLimiter,
    MaxOfRateLimiter,
    RateLimiterConfig,
    default_controller_rate_limiter,
)
from hwsync.controller.workqueue import RateLimitingQueue

__all__ = [
    "BucketRateLimiter",
    "EventChannel",
    "ItemExponentialFailureRateLimiter",
    "MaxOfRateLimiter",
    "PeriodicEvent",
    "PeriodicRunner",
    "RateLimiterConfig",
    "RateLimitingQueue",
    "UpdateController",
    "default_controller_rate_limiter",
    "run_controller",
]
