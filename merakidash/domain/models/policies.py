"""Value Objects describing retry, rate-limit and transport configuration."""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from merakidash.domain.exceptions import ValidationError

DEFAULT_RETRYABLE_STATUSES: Tuple[int, ...] = (500, 502, 503, 504)
DEFAULT_BASE_URL = "https://api.meraki.com/api/v1"


@dataclass(frozen=True)
class RetryPolicy:
    """Retry and pagination budget for one logical call.

    Attributes:
        max_attempts: Total HTTP attempts per round trip, first one included.
        initial_backoff: Delay in seconds before the first retry.
        backoff_factor: Multiplier applied per retry (2 for exponential).
        max_backoff: Upper bound on any single computed delay.
        max_total_wait: Upper bound on cumulative sleep per round trip.
        retryable_statuses: 5xx statuses retried in addition to 429.
        retry_non_idempotent: Also retry POSTs on 5xx and transport errors.
        max_pages: Hard cap on pages fetched by one paginated call.
    """

    max_attempts: int = 5
    initial_backoff: float = 1.0
    backoff_factor: float = 2.0
    max_backoff: float = 60.0
    max_total_wait: float = 300.0
    retryable_statuses: FrozenSet[int] = frozenset(DEFAULT_RETRYABLE_STATUSES)
    retry_non_idempotent: bool = False
    max_pages: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValidationError("max_attempts must be at least 1")
        if self.initial_backoff < 0 or self.max_backoff < 0 or self.max_total_wait < 0:
            raise ValidationError("Backoff durations must not be negative")
        if self.backoff_factor < 1:
            raise ValidationError("backoff_factor must be >= 1")
        if self.max_pages < 1:
            raise ValidationError("max_pages must be at least 1")
        # Accept any iterable of codes from config files.
        object.__setattr__(self, "retryable_statuses", frozenset(int(s) for s in self.retryable_statuses))

    @classmethod
    def from_values(
        cls,
        retryable_statuses: Optional[Union[Iterable[int], str, int]] = None,
        **kwargs,
    ) -> "RetryPolicy":
        """Builds a policy from loosely typed config values (e.g. "500,503")."""
        if isinstance(retryable_statuses, int):
            retryable_statuses = [retryable_statuses]
        elif isinstance(retryable_statuses, str):
            retryable_statuses = [int(s) for s in retryable_statuses.split(",") if s.strip()]
        if retryable_statuses is not None:
            kwargs["retryable_statuses"] = frozenset(retryable_statuses)
        return cls(**kwargs)


@dataclass(frozen=True)
class RateLimitSettings:
    """Sliding-window budget: max_requests per time_window seconds.

    default_hold is how long every caller is held after a 429 that carries
    no usable Retry-After header.
    """

    max_requests: int = 10
    time_window: float = 1.0
    default_hold: float = 1.0

    def __post_init__(self) -> None:
        if self.max_requests <= 0 or self.time_window <= 0:
            raise ValidationError("Max requests and time window must be positive.")
        if self.default_hold < 0:
            raise ValidationError("Default hold must not be negative.")


@dataclass(frozen=True)
class TransportSettings:
    """Connection settings for the HTTP transport."""

    base_url: str = DEFAULT_BASE_URL
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    pool_maxsize: int = 10
    verify_ssl: bool = True
    user_agent: str = "merakidash"
