"""Interface for the HTTP transport.

Defines the contract for sending one prepared request and returning one
raw response. Implementations own connection reuse.
"""

import abc

from merakidash.domain.models.http import ApiResponse, PreparedRequest


class Transport(abc.ABC):
    """Abstract Base Class for executing single HTTP round trips."""

    @abc.abstractmethod
    def send(self, request: PreparedRequest) -> ApiResponse:
        """Sends one request and returns the raw response.

        Args:
            request: The fully qualified request to send.

        Returns:
            The response, whatever its HTTP status.

        Raises:
            TransportError: On connection, timeout, TLS or DNS failure.
        """
        pass

    def close(self) -> None:
        """Releases pooled connections. Optional for implementations."""
        pass
