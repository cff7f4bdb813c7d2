"""Tests for retry rate limiters."""

import pytest

from hwsync.controller.ratelimit import (
    BucketRateLimiter,
    ItemExponentialFailureRateLimiter,
    MaxOfRateLimiter,
    RateLimiterConfig,
    default_controller_rate_limiter,
)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestItemExponentialFailureRateLimiter:
    def test_doubles_per_failure(self):
        limiter = ItemExponentialFailureRateLimiter(base_delay=1.0, max_delay=1000.0)

        delays = [limiter.when("a") for _ in range(5)]

        assert delays == [1.0, 2.0, 4.0, 8.0, 16.0]
        assert limiter.num_requeues("a") == 5

    def test_capped_at_max_delay(self):
        limiter = ItemExponentialFailureRateLimiter(base_delay=1.0, max_delay=10.0)

        delays = [limiter.when("a") for _ in range(6)]

        assert delays[-1] == 10.0
        assert max(delays) == 10.0

    def test_no_overflow_for_long_failing_items(self):
        limiter = ItemExponentialFailureRateLimiter(base_delay=1.0, max_delay=1000.0)

        for _ in range(200):
            delay = limiter.when("a")

        assert delay == 1000.0

    def test_items_are_independent(self):
        limiter = ItemExponentialFailureRateLimiter(base_delay=0.5, max_delay=100.0)
        limiter.when("a")
        limiter.when("a")

        assert limiter.when("b") == 0.5

    def test_forget_resets_backoff(self):
        limiter = ItemExponentialFailureRateLimiter(base_delay=1.0, max_delay=1000.0)
        limiter.when("a")
        limiter.when("a")

        limiter.forget("a")

        assert limiter.num_requeues("a") == 0
        assert limiter.when("a") == 1.0


class TestBucketRateLimiter:
    def test_burst_is_free(self):
        clock = FakeClock()
        limiter = BucketRateLimiter(frequency=10.0, burst=3, clock=clock)

        assert [limiter.when(i) for i in range(3)] == [0.0, 0.0, 0.0]

    def test_over_burst_waits(self):
        clock = FakeClock()
        limiter = BucketRateLimiter(frequency=10.0, burst=1, clock=clock)
        limiter.when("a")

        assert limiter.when("b") == pytest.approx(0.1)
        assert limiter.when("c") == pytest.approx(0.2)

    def test_tokens_refill_over_time(self):
        clock = FakeClock()
        limiter = BucketRateLimiter(frequency=10.0, burst=1, clock=clock)
        limiter.when("a")

        clock.advance(0.1)

        assert limiter.when("b") == 0.0

    def test_refill_capped_at_burst(self):
        clock = FakeClock()
        limiter = BucketRateLimiter(frequency=10.0, burst=2, clock=clock)

        clock.advance(100.0)
        delays = [limiter.when(i) for i in range(3)]

        assert delays[:2] == [0.0, 0.0]
        assert delays[2] == pytest.approx(0.1)

    @pytest.mark.parametrize("frequency,burst", [(0, 1), (-1.0, 1), (1.0, 0)])
    def test_invalid_parameters(self, frequency, burst):
        with pytest.raises(ValueError):
            BucketRateLimiter(frequency=frequency, burst=burst)


class TestMaxOfRateLimiter:
    def test_takes_slowest(self):
        clock = FakeClock()
        limiter = MaxOfRateLimiter(
            ItemExponentialFailureRateLimiter(base_delay=1.0, max_delay=1000.0),
            BucketRateLimiter(frequency=10.0, burst=100, clock=clock),
        )

        assert limiter.when("a") == 1.0
        assert limiter.when("a") == 2.0
        assert limiter.num_requeues("a") == 2

    def test_forget_reaches_every_limiter(self):
        limiter = MaxOfRateLimiter(ItemExponentialFailureRateLimiter(1.0, 1000.0))
        limiter.when("a")

        limiter.forget("a")

        assert limiter.num_requeues("a") == 0

    def test_requires_limiters(self):
        with pytest.raises(ValueError):
            MaxOfRateLimiter()

    def test_default_controller_limiter(self):
        clock = FakeClock()
        limiter = default_controller_rate_limiter(RateLimiterConfig(), clock=clock)

        assert limiter.when("a") == 1.0
        assert limiter.when("a") == 2.0

    def test_config_from_settings(self, test_settings):
        config = RateLimiterConfig.from_settings(test_settings)

        assert config == RateLimiterConfig(burst=200, frequency=30.0, base_delay=1.0, failure_max_delay=1000.0)
