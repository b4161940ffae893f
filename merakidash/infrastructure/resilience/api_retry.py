"""Service for executing HTTP round trips with automatic retries.

Implements exponential backoff with jitter for transient failures, honors
the server's Retry-After on 429 (rate limited), and consults the shared
rate limiter before every attempt. Every round trip the engine makes,
including each page fetch, goes through RetryController.execute.

State per round trip:
    ATTEMPTING -> DONE      final response (2xx, or an error not worth retrying)
    ATTEMPTING -> BACKOFF   429, whitelisted 5xx, transient TransportError
    BACKOFF    -> ATTEMPTING
    BACKOFF    -> FAILED    attempt or total-wait budget exhausted
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

from merakidash.domain.events.api_events import (
    ApiCallFailed, ApiCallInitiated, ApiCallSucceeded, RetryScheduled, dispatch_event
)
from merakidash.domain.exceptions import TransportError
from merakidash.domain.interfaces.rate_limiter import RateLimiter
from merakidash.domain.models.http import ApiResponse, PreparedRequest
from merakidash.domain.models.policies import RetryPolicy
from merakidash.infrastructure.resilience.rate_limiter import parse_retry_after

logger = logging.getLogger(__name__)

RATE_LIMITED = 429


@dataclass
class RetryOutcome:
    """The final response of a round trip and the attempts it took.

    ``exhausted`` is True when the response is still a retryable failure
    because the retry budget ran out.
    """

    response: ApiResponse
    attempts: int
    exhausted: bool = False


class RetryController:
    """Handles HTTP attempt execution with rate limiting and retries."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        policy: RetryPolicy = RetryPolicy(),
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ):
        """Initializes the RetryController.

        Args:
            rate_limiter: The shared rate limiter instance to use.
            policy: Attempt and wait budgets plus the retryable 5xx set.
            sleep: Sleep function (injectable for tests).
            jitter: Picks a delay in [low, high] (injectable for tests).
        """
        self.rate_limiter = rate_limiter
        self.policy = policy
        self._sleep = sleep
        self._jitter = jitter

        logger.info(
            f"RetryController initialized: max_attempts={policy.max_attempts}, "
            f"initial_backoff={policy.initial_backoff}s, factor={policy.backoff_factor}, "
            f"max_total_wait={policy.max_total_wait}s"
        )
        logger.debug(f"Retryable statuses: 429, {sorted(policy.retryable_statuses)}")

    # --- Classification ---

    def _may_retry_failure(self, request: PreparedRequest) -> bool:
        """5xx and transport failures are only retried for idempotent verbs."""
        return request.method.is_idempotent or self.policy.retry_non_idempotent

    def is_retryable_status(self, status_code: int, request: PreparedRequest) -> bool:
        if status_code == RATE_LIMITED:
            return True
        return status_code in self.policy.retryable_statuses and self._may_retry_failure(request)

    # --- Backoff ---

    def backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter for the retry after ``attempt``."""
        computed = self.policy.initial_backoff * (self.policy.backoff_factor ** (attempt - 1))
        computed = min(computed, self.policy.max_backoff)
        return self._jitter(computed / 2, computed)

    def delay_for_response(self, response: ApiResponse, attempt: int) -> float:
        if response.status_code == RATE_LIMITED:
            retry_after = parse_retry_after(response.header("Retry-After"))
            if retry_after is not None:
                return retry_after
        return self.backoff_delay(attempt)

    # --- Execution ---

    def execute(
        self,
        send: Callable[[PreparedRequest], ApiResponse],
        request: PreparedRequest,
        path: Optional[str] = None,
    ) -> RetryOutcome:
        """Executes one round trip with rate limiting and retries.

        Args:
            send: Performs a single HTTP attempt (usually Transport.send).
            request: The prepared request, re-sent unchanged on retry.
            path: Logical path for logs and errors (defaults to the URL).

        Returns:
            The final response and the number of attempts made. Responses
            with error statuses are returned, not raised; the normalizer
            turns them into APIError.

        Raises:
            TransportError: A non-transient transport failure, or the last
                transient one once the budget is spent. ``attempts`` is set.
        """
        path = path or request.url
        method = request.method.value
        total_wait = 0.0
        attempt = 0

        while True:
            attempt += 1
            self.rate_limiter.await_slot()
            dispatch_event(ApiCallInitiated(method=method, path=path, attempt=attempt))
            start_time = time.perf_counter()

            last_error: Optional[TransportError] = None
            response: Optional[ApiResponse] = None
            try:
                response = send(request)
            except TransportError as e:
                e.attempts = attempt
                e.path = e.path or path
                e.url = e.url or request.url
                if not (e.transient and self._may_retry_failure(request)):
                    logger.error(f"Non-retryable transport error calling {method} {path} on attempt {attempt}: {e.message}")
                    dispatch_event(ApiCallFailed(method=method, path=path, error_type=type(e).__name__, error_message=e.message, attempts=attempt))
                    raise
                last_error = e
                delay = self.backoff_delay(attempt)
                reason = f"TransportError ({e.message})"
            else:
                self.rate_limiter.record_response(response.status_code, response.headers)
                if not self.is_retryable_status(response.status_code, request):
                    latency_ms = (time.perf_counter() - start_time) * 1000
                    if response.ok:
                        dispatch_event(ApiCallSucceeded(method=method, path=path, status_code=response.status_code, latency_ms=latency_ms, attempts=attempt))
                    else:
                        dispatch_event(ApiCallFailed(method=method, path=path, error_type="HTTPStatus", error_message=f"status {response.status_code}", attempts=attempt, status_code=response.status_code))
                    return RetryOutcome(response=response, attempts=attempt)
                delay = self.delay_for_response(response, attempt)
                reason = f"status {response.status_code}"

            if attempt >= self.policy.max_attempts or total_wait + delay > self.policy.max_total_wait:
                logger.error(
                    f"Retry budget exhausted for {method} {path} after {attempt} attempt(s) "
                    f"and {total_wait:.2f}s of backoff. Last error: {reason}"
                )
                dispatch_event(ApiCallFailed(
                    method=method, path=path, error_type=type(last_error).__name__ if last_error else "HTTPStatus",
                    error_message=reason, attempts=attempt,
                    status_code=response.status_code if response is not None else None,
                ))
                if last_error is not None:
                    raise last_error
                return RetryOutcome(response=response, attempts=attempt, exhausted=True)

            logger.warning(
                f"Retryable error calling {method} {path} on attempt {attempt}/{self.policy.max_attempts}: "
                f"{reason}. Waiting {delay:.2f}s..."
            )
            dispatch_event(RetryScheduled(method=method, path=path, attempt_number=attempt, delay_seconds=delay, reason=reason))
            self._sleep(delay)
            total_wait += delay
