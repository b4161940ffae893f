import pytest

from conftest import FakeClock, make_response
from merakidash.domain.exceptions import TransportError
from merakidash.domain.models.http import HttpMethod, PreparedRequest
from merakidash.domain.models.policies import RetryPolicy
from merakidash.infrastructure.resilience.api_retry import RetryController
from merakidash.infrastructure.resilience.rate_limiter import UnlimitedRateLimiter

GET = PreparedRequest(method=HttpMethod.GET, url="https://api.meraki.com/api/v1/organizations")
POST = PreparedRequest(method=HttpMethod.POST, url="https://api.meraki.com/api/v1/organizations", json_body={"name": "x"})


class Replay:
    """send() stand-in returning or raising the given items in order."""

    def __init__(self, *items):
        self.items = list(items)
        self.calls = 0

    def __call__(self, request):
        self.calls += 1
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(mocker):
    return mocker.MagicMock(wraps=UnlimitedRateLimiter())


def _controller(rate_limiter, clock, **policy):
    return RetryController(rate_limiter, RetryPolicy(**policy), sleep=clock.sleep, jitter=lambda low, high: high)


def test_success_first_try(rate_limiter, clock):
    send = Replay(make_response(200, {"ok": True}))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert outcome.attempts == 1
    assert outcome.exhausted is False
    assert clock.sleeps == []
    rate_limiter.await_slot.assert_called_once()
    rate_limiter.record_response.assert_called_once()


def test_429_uses_retry_after(rate_limiter, clock):
    send = Replay(make_response(429, headers={"Retry-After": "2"}), make_response(200, []))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert outcome.attempts == 2
    assert clock.sleeps == [2.0]


def test_429_without_retry_after_backs_off_exponentially(rate_limiter, clock):
    send = Replay(make_response(429), make_response(429), make_response(429), make_response(200, []))
    outcome = _controller(rate_limiter, clock, initial_backoff=1.0, backoff_factor=2.0).execute(send, GET)
    assert outcome.attempts == 4
    assert clock.sleeps == [1.0, 2.0, 4.0]


def test_backoff_capped_by_max_backoff(rate_limiter, clock):
    controller = _controller(rate_limiter, clock, initial_backoff=10.0, max_backoff=15.0)
    assert controller.backoff_delay(1) == 10.0
    assert controller.backoff_delay(3) == 15.0


def test_jitter_range_is_half_to_full(rate_limiter, clock, mocker):
    jitter = mocker.MagicMock(return_value=0.7)
    controller = RetryController(rate_limiter, RetryPolicy(initial_backoff=1.0), sleep=clock.sleep, jitter=jitter)
    assert controller.backoff_delay(2) == 0.7
    jitter.assert_called_once_with(1.0, 2.0)


def test_429_retried_for_post(rate_limiter, clock):
    send = Replay(make_response(429), make_response(201, {"id": "N_1"}))
    outcome = _controller(rate_limiter, clock).execute(send, POST)
    assert outcome.attempts == 2


def test_always_429_exhausts_after_max_attempts(rate_limiter, clock):
    send = Replay(*[make_response(429) for _ in range(3)])
    outcome = _controller(rate_limiter, clock, max_attempts=3).execute(send, GET)
    assert send.calls == 3
    assert outcome.attempts == 3
    assert outcome.exhausted is True
    assert outcome.response.status_code == 429
    assert len(clock.sleeps) == 2


def test_5xx_retried_for_get(rate_limiter, clock):
    send = Replay(make_response(503), make_response(200, []))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert outcome.attempts == 2


def test_5xx_not_retried_for_post(rate_limiter, clock):
    send = Replay(make_response(503))
    outcome = _controller(rate_limiter, clock).execute(send, POST)
    assert outcome.attempts == 1
    assert outcome.response.status_code == 503


def test_5xx_retried_for_post_when_enabled(rate_limiter, clock):
    send = Replay(make_response(500), make_response(201, {}))
    outcome = _controller(rate_limiter, clock, retry_non_idempotent=True).execute(send, POST)
    assert outcome.attempts == 2


def test_status_outside_retryable_set_not_retried(rate_limiter, clock):
    send = Replay(make_response(501))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert outcome.attempts == 1


def test_4xx_never_retried(rate_limiter, clock):
    send = Replay(make_response(404, {"errors": ["Not found"]}))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert send.calls == 1
    assert outcome.response.status_code == 404
    assert clock.sleeps == []


def test_transient_transport_error_retried(rate_limiter, clock):
    send = Replay(TransportError("reset", transient=True), make_response(200, {}))
    outcome = _controller(rate_limiter, clock).execute(send, GET)
    assert outcome.attempts == 2


def test_permanent_transport_error_raised_immediately(rate_limiter, clock):
    send = Replay(TransportError("dns", transient=False))
    with pytest.raises(TransportError) as exc_info:
        _controller(rate_limiter, clock).execute(send, GET, "/organizations")
    assert exc_info.value.attempts == 1
    assert send.calls == 1


def test_transient_transport_error_not_retried_for_post(rate_limiter, clock):
    send = Replay(TransportError("timeout", transient=True))
    with pytest.raises(TransportError):
        _controller(rate_limiter, clock).execute(send, POST)
    assert send.calls == 1


def test_transport_error_after_budget_carries_attempts(rate_limiter, clock):
    send = Replay(*[TransportError("timeout", transient=True) for _ in range(2)])
    with pytest.raises(TransportError) as exc_info:
        _controller(rate_limiter, clock, max_attempts=2).execute(send, GET, "/organizations")
    assert exc_info.value.attempts == 2
    assert exc_info.value.path == "/organizations"


def test_total_wait_budget_stops_retries(rate_limiter, clock):
    send = Replay(make_response(429, headers={"Retry-After": "30"}), make_response(429, headers={"Retry-After": "30"}))
    outcome = _controller(rate_limiter, clock, max_total_wait=45.0).execute(send, GET)
    assert outcome.attempts == 2
    assert outcome.exhausted is True
    assert clock.sleeps == [30.0]


def test_rate_limiter_consulted_every_attempt(rate_limiter, clock):
    send = Replay(make_response(429), make_response(429), make_response(200, []))
    _controller(rate_limiter, clock).execute(send, GET)
    assert rate_limiter.await_slot.call_count == 3
    assert rate_limiter.record_response.call_count == 3
