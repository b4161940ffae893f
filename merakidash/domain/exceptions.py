"""Error taxonomy shared by the request engine and every resource wrapper.

Every failed logical call raises exactly one of these, carrying enough
context (status code, path, attempt count) to diagnose the failure without
re-running the call.
"""

from typing import Any, Optional


def _location(path: Optional[str], url: Optional[str]) -> str:
    if url and url != path:
        return f"{path} via {url}" if path else url
    return path or ""


class DashboardError(Exception):
    """Base class for all errors raised by merakidash."""


class ValidationError(DashboardError, ValueError):
    """Caller-supplied input is malformed. Raised before any network I/O."""


class TransportError(DashboardError):
    """Network-level failure: refused, reset, timeout, TLS or DNS failure.

    Attributes:
        transient: Whether retrying the same request may succeed.
        path: The logical path of the call that failed.
        attempts: Number of HTTP attempts made before giving up.
        url: The URL actually requested.
    """

    def __init__(
        self,
        message: str,
        transient: bool = False,
        path: Optional[str] = None,
        attempts: int = 1,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.transient = transient
        self.path = path
        self.attempts = attempts
        self.url = url

    def __str__(self) -> str:
        where = f" ({_location(self.path, self.url)})" if self.path or self.url else ""
        return f"{self.message}{where} after {self.attempts} attempt(s)"


class APIError(DashboardError):
    """The Dashboard API rejected the request with a 4xx/5xx status.

    The server's message and body are kept verbatim.
    """

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        message: Optional[str] = None,
        path: Optional[str] = None,
        attempts: int = 1,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.message = message or ""
        self.path = path
        self.attempts = attempts
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"Dashboard API error {self.status_code}"
        if self.path or self.url:
            text += f" for {_location(self.path, self.url)}"
        if self.message:
            text += f": {self.message}"
        return f"{text} (attempts={self.attempts})"


class DecodeError(DashboardError):
    """A 2xx response body could not be decoded into the expected shape."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        status_code: Optional[int] = None,
        raw: Optional[bytes] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.status_code = status_code
        self.raw = raw
        self.url = url

    def __str__(self) -> str:
        where = f" ({_location(self.path, self.url)}, status {self.status_code})" if self.path or self.url else ""
        return f"{self.message}{where}"


class PaginationError(DashboardError):
    """Pagination did not terminate: page cap exceeded or a cursor repeated."""

    def __init__(self, message: str, path: Optional[str] = None, pages: int = 0):
        super().__init__(message)
        self.message = message
        self.path = path
        self.pages = pages

    def __str__(self) -> str:
        return f"{self.message} ({self.path}, pages fetched={self.pages})"
