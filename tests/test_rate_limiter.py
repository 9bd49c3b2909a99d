"""Fixed-window rate limiter."""

import threading
import uuid

import pytest

from hookguard.shared.rate_limiter import FixedWindowRateLimiter
from tests.conftest import FakeMonotonic


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def limiter(monotonic):
    return FixedWindowRateLimiter(max_requests=3, window_seconds=60, clock=monotonic)


class TestFixedWindow:

    def test_allows_up_to_max_then_rejects(self, limiter):
        key = uuid.uuid4()
        decisions = [limiter.check_and_increment(key) for _ in range(4)]

        assert [d.allowed for d in decisions] == [True, True, True, False]
        assert [d.remaining for d in decisions] == [2, 1, 0, 0]
        assert decisions[-1].retry_after == 60

    def test_rejections_do_not_extend_window(self, limiter, monotonic):
        key = uuid.uuid4()
        for _ in range(10):
            limiter.check_and_increment(key)

        monotonic.advance(60)
        assert limiter.check_and_increment(key).remaining == 2

    def test_counter_resets_after_window(self, limiter, monotonic):
        key = uuid.uuid4()
        for _ in range(3):
            limiter.check_and_increment(key)
        assert not limiter.check_and_increment(key).allowed

        monotonic.advance(59.9)
        assert not limiter.check_and_increment(key).allowed

        monotonic.advance(0.1)
        assert limiter.check_and_increment(key).allowed

    def test_keys_are_independent(self, limiter):
        first, second = uuid.uuid4(), uuid.uuid4()
        for _ in range(3):
            limiter.check_and_increment(first)

        assert not limiter.check_and_increment(first).allowed
        assert limiter.check_and_increment(second).allowed

    def test_burst_straddling_boundary_admits_twice_the_rate(self, limiter, monotonic):
        key = uuid.uuid4()
        limiter.check_and_increment(key)
        monotonic.advance(59)
        late = [limiter.check_and_increment(key).allowed for _ in range(2)]
        monotonic.advance(1)
        early = [limiter.check_and_increment(key).allowed for _ in range(3)]

        # 5 requests admitted within about one second
        assert late + early == [True] * 5

    def test_retry_after_rounds_up(self, monotonic):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=1.5, clock=monotonic)
        assert limiter.retry_after == 2

    @pytest.mark.parametrize("max_requests, window", [(0, 60), (5, 0), (-1, 10)])
    def test_rejects_non_positive_configuration(self, max_requests, window):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(max_requests=max_requests, window_seconds=window)


class TestEviction:

    def test_purge_drops_only_expired_windows(self, limiter, monotonic):
        old = uuid.uuid4()
        limiter.check_and_increment(old)
        monotonic.advance(30)
        fresh = uuid.uuid4()
        limiter.check_and_increment(fresh)
        monotonic.advance(30)

        assert limiter.purge_expired() == 1
        assert len(limiter) == 1
        assert limiter.check_and_increment(fresh).remaining == 1

    def test_reset_clears_everything(self, limiter):
        limiter.check_and_increment(uuid.uuid4())
        limiter.reset()
        assert len(limiter) == 0


class TestConcurrency:

    def test_no_lost_updates_under_thread_contention(self):
        limiter = FixedWindowRateLimiter(max_requests=100, window_seconds=3600)
        key = uuid.uuid4()
        allowed = []
        allowed_lock = threading.Lock()
        start = threading.Barrier(16)

        def worker():
            start.wait()
            results = [limiter.check_and_increment(key).allowed for _ in range(25)]
            with allowed_lock:
                allowed.extend(results)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(allowed) == 400
        assert allowed.count(True) == 100
