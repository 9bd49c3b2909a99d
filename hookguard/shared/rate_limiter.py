# hookguard/shared/rate_limiter.py

"""
Fixed-window request counter keyed by token identity.

Each key gets a counter and a window expiry. The first request for a key,
or the first one after its window elapsed, opens a new window. Because the
window is fixed rather than sliding, a burst straddling a window boundary
can admit up to twice the configured rate in a short interval.

Counters live in process memory only; expired windows are evicted lazily
on access and in bulk through ``purge_expired``.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: int


@dataclass
class _Window:
    count: int
    expires_at: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class FixedWindowRateLimiter:
    """
    In-memory fixed-window rate limiter.

    Safe under concurrent access from threads and from an event loop: map
    membership is guarded by one lock and every window has its own lock for
    the compare-and-increment.
    """

    def __init__(self, max_requests: int, window_seconds: float,
                 clock: Callable[[], float] = time.monotonic):
        if max_requests <= 0 or window_seconds <= 0:
            raise ValueError("max_requests and window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[Hashable, _Window] = {}
        self._map_lock = threading.Lock()

    @property
    def retry_after(self) -> int:
        """Retry hint in whole seconds: the window length."""
        return int(math.ceil(self.window_seconds))

    def _current_window(self, key: Hashable, now: float) -> _Window:
        with self._map_lock:
            window = self._windows.get(key)
            if window is None or window.expires_at <= now:
                window = _Window(count=0, expires_at=now + self.window_seconds)
                self._windows[key] = window
            return window

    def check_and_increment(self, key: Hashable) -> RateLimitDecision:
        """
        Count one request for ``key``.

        Returns:
            Decision with ``allowed`` False once ``max_requests`` were already
            admitted in the current window; a rejected request is not counted.
        """
        while True:
            now = self.clock()
            window = self._current_window(key, now)
            with window.lock:
                if window.expires_at <= now:
                    # Window rolled over between lookup and lock
                    continue
                if window.count >= self.max_requests:
                    return RateLimitDecision(allowed=False, remaining=0, retry_after=self.retry_after)
                window.count += 1
                return RateLimitDecision(
                    allowed=True,
                    remaining=self.max_requests - window.count,
                    retry_after=self.retry_after,
                )

    def purge_expired(self) -> int:
        """
        Drop every window whose expiry has passed.

        Returns:
            Number of evicted keys
        """
        now = self.clock()
        with self._map_lock:
            expired = [key for key, window in self._windows.items() if window.expires_at <= now]
            for key in expired:
                del self._windows[key]

        if expired:
            logger.debug(f"Evicted {len(expired)} expired rate limit windows")
        return len(expired)

    def reset(self) -> None:
        with self._map_lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)
