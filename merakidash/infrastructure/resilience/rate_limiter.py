"""Implementation of the shared rate limiter.

Controls the frequency of outgoing requests to stay inside the Dashboard's
per-organization budget (10 requests per second by default). Uses a
sliding window of send timestamps, plus a shared "blocked until" deadline
that every 429 response pushes forward (by its Retry-After, or by a
default hold when the header is missing), so that every thread
holding a reference backs off together.
"""

import email.utils
import logging
import threading
import time
from collections import deque
from datetime import timezone
from typing import Callable, Deque, Mapping, Optional

from merakidash.domain.events.api_events import ApiCallDeferred, dispatch_event
from merakidash.domain.interfaces.rate_limiter import RateLimiter
from merakidash.domain.models.policies import RateLimitSettings

logger = logging.getLogger(__name__)


def parse_retry_after(value: Optional[str], now: Optional[float] = None) -> Optional[float]:
    """Parses a Retry-After header (delta-seconds or HTTP-date) into seconds.

    Returns None when the header is absent or unparseable.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        retry_at = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        logger.warning(f"Ignoring unparseable Retry-After header: {value!r}")
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    current = now if now is not None else time.time()
    return max(0.0, retry_at.timestamp() - current)


class SlidingWindowRateLimiter(RateLimiter):
    """Thread-safe sliding window limiter with a shared 429 backoff deadline."""

    def __init__(
        self,
        settings: RateLimitSettings = RateLimitSettings(),
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initializes the rate limiter.

        Args:
            settings: Maximum requests per time window.
            clock: Monotonic clock (injectable for tests).
            sleep: Sleep function (injectable for tests).
        """
        self.max_requests = settings.max_requests
        self.time_window = settings.time_window
        self.default_hold = settings.default_hold
        self.timestamps: Deque[float] = deque()
        self._blocked_until = 0.0
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        logger.info(f"RateLimiter initialized: {self.max_requests} requests / {self.time_window} seconds")

    def _cleanup_timestamps(self, now: float) -> None:
        """Removes timestamps older than the time window."""
        while self.timestamps and now - self.timestamps[0] >= self.time_window:
            self.timestamps.popleft()

    @property
    def blocked_until(self) -> float:
        with self._lock:
            return self._blocked_until

    def await_slot(self) -> None:
        """Waits until a request is permitted, then records it."""
        while True:
            with self._lock:
                now = self._clock()
                self._cleanup_timestamps(now)
                if now >= self._blocked_until and len(self.timestamps) < self.max_requests:
                    self.timestamps.append(now)
                    return
                if now < self._blocked_until:
                    wait_time = self._blocked_until - now
                    reason = "retry-after"
                else:
                    wait_time = self.timestamps[0] + self.time_window - now
                    reason = "window"

            wait_time = max(0.0, wait_time)
            logger.debug(f"Rate limit reached ({reason}). Waiting for {wait_time:.2f} seconds.")
            dispatch_event(ApiCallDeferred(wait_time_seconds=wait_time, reason=reason))
            self._sleep(wait_time)

    def record_response(self, status_code: int, headers: Mapping[str, str]) -> None:
        """Extends the shared backoff deadline when the server says 429."""
        if status_code != 429:
            return
        retry_after = parse_retry_after(headers.get("Retry-After"))
        if retry_after is None:
            retry_after = self.default_hold
        with self._lock:
            deadline = self._clock() + retry_after
            if deadline > self._blocked_until:
                self._blocked_until = deadline
                logger.warning(f"Rate limited by Dashboard API; all calls held for {retry_after:.2f}s")


class UnlimitedRateLimiter(RateLimiter):
    """A limiter that never waits. Useful for tests and single-shot scripts."""

    def await_slot(self) -> None:
        return None

    def record_response(self, status_code: int, headers: Mapping[str, str]) -> None:
        return None
