import json
from collections import deque
from typing import Any, List, Optional

import pytest
from typer.testing import CliRunner

from merakidash.core.engine import RequestEngine
from merakidash.domain.interfaces.transport import Transport
from merakidash.domain.models.http import ApiResponse, PreparedRequest
from merakidash.domain.models.policies import RetryPolicy
from merakidash.infrastructure.config import settings
from merakidash.infrastructure.resilience.api_retry import RetryController
from merakidash.infrastructure.resilience.rate_limiter import UnlimitedRateLimiter

BASE_URL = "https://api.meraki.com/api/v1"


def make_response(status_code: int = 200, body: Any = None, headers: Optional[dict] = None) -> ApiResponse:
    """Builds an ApiResponse; dicts and lists are JSON encoded."""
    if isinstance(body, (dict, list)):
        raw = json.dumps(body).encode()
    elif isinstance(body, str):
        raw = body.encode()
    else:
        raw = body or b""
    return ApiResponse(status_code=status_code, headers=headers or {}, body=raw)


def next_link(url: str) -> dict:
    return {"Link": f"<{url}>; rel=next"}


class FakeTransport(Transport):
    """Records every request and replays queued responses or exceptions."""

    def __init__(self, *items: Any):
        self.queue = deque(items)
        self.requests: List[PreparedRequest] = []
        self.closed = False

    def queue_response(self, status_code: int = 200, body: Any = None, headers: Optional[dict] = None) -> "FakeTransport":
        self.queue.append(make_response(status_code, body, headers))
        return self

    def queue_error(self, error: Exception) -> "FakeTransport":
        self.queue.append(error)
        return self

    @property
    def calls(self) -> int:
        return len(self.requests)

    def send(self, request: PreparedRequest) -> ApiResponse:
        self.requests.append(request)
        if not self.queue:
            raise AssertionError(f"Unexpected request: {request.method.value} {request.url}")
        item = self.queue.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Monotonic clock whose sleep advances time instead of blocking."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_engine(fake_clock):
    """Factory for engines that never really sleep; jitter picks the upper bound."""

    def _make(transport: Transport, policy: RetryPolicy = RetryPolicy(), rate_limiter=None) -> RequestEngine:
        limiter = rate_limiter or UnlimitedRateLimiter()
        controller = RetryController(limiter, policy, sleep=fake_clock.sleep, jitter=lambda low, high: high)
        return RequestEngine(transport, limiter, base_url=BASE_URL, policy=policy, retry_controller=controller)

    return _make


@pytest.fixture
def engine(make_engine, fake_transport) -> RequestEngine:
    return make_engine(fake_transport)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests away from the developer's real config, env and API key."""
    monkeypatch.delenv(settings.API_KEY_ENV_VAR, raising=False)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "missing.yaml")
    monkeypatch.chdir(tmp_path)
    yield
    settings.clear_test_config()


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()
