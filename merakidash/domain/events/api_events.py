"""Domain Events related to API calls and resilience.

Emitted by the retry controller and the pagination walker when calls are
deferred, retried, fail, succeed or fetch another page.
"""

import logging
from dataclasses import dataclass, field
import time
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


# --- Specific API Events ---

@dataclass
class ApiCallInitiated(DomainEvent):
    """Event triggered when an HTTP attempt is about to be made."""
    method: str
    path: str
    attempt: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallSucceeded(DomainEvent):
    """Event triggered when an HTTP attempt produced a final response."""
    method: str
    path: str
    status_code: int
    latency_ms: float
    attempts: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when a round trip fails definitively (after retries)."""
    method: str
    path: str
    error_type: str
    error_message: str
    attempts: int
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class ApiCallDeferred(DomainEvent):
    """Event triggered when a request is held back by the rate limiter."""
    wait_time_seconds: float
    reason: str  # 'window' or 'retry-after'
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed attempt."""
    method: str
    path: str
    attempt_number: int
    delay_seconds: float
    reason: str  # e.g. 'status 429', 'TransportError'
    timestamp: float = field(default_factory=time.time)


@dataclass
class PageFetched(DomainEvent):
    """Event triggered when the pagination walker receives another page."""
    path: str
    page_number: int
    item_count: int
    has_next: bool
    timestamp: float = field(default_factory=time.time)


def dispatch_event(event: DomainEvent) -> None:
    """Publishes an event. Currently events are only written to the debug log."""
    logger.debug(f"EVENT: {event}")
