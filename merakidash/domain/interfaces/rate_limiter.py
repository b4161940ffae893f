"""Interface for rate-limit bookkeeping shared across logical calls.

An instance is passed to the engine at construction and may be shared by
several engines or threads, so that a 429 seen by one call slows down all
of them.
"""

import abc
from typing import Mapping


class RateLimiter(abc.ABC):
    """Abstract Base Class for request pacing."""

    @abc.abstractmethod
    def await_slot(self) -> None:
        """Blocks until a request may be sent."""
        pass

    @abc.abstractmethod
    def record_response(self, status_code: int, headers: Mapping[str, str]) -> None:
        """Feeds an observed response back into the limiter.

        Args:
            status_code: HTTP status of the response.
            headers: Response headers (Retry-After is honored on 429).
        """
        pass
