"""Value objects that flow through the request engine.

ApiRequest -> PreparedRequest -> ApiResponse (one per round trip) -> ApiResult
(one per logical call).
"""

import enum
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from requests.structures import CaseInsensitiveDict

from merakidash.domain.exceptions import ValidationError


class HttpMethod(str, enum.Enum):
    """HTTP verbs the Dashboard API accepts."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: Any) -> "HttpMethod":
        """Accepts an HttpMethod or a case-insensitive verb name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValidationError(
                f"Unsupported HTTP method {value!r}; expected one of "
                f"{', '.join(m.value for m in cls)}"
            ) from None

    @property
    def is_idempotent(self) -> bool:
        return self is not HttpMethod.POST

    @property
    def sends_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT)


@dataclass(frozen=True)
class ApiRequest:
    """A caller's logical request: path, verb and opaque options."""

    path: str
    method: HttpMethod
    options: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class PreparedRequest:
    """A fully qualified, transport-ready HTTP request."""

    method: HttpMethod
    url: str
    params: List[Tuple[str, str]] = field(default_factory=list)
    json_body: Optional[Mapping[str, Any]] = None
    body: Optional[bytes] = None


@dataclass
class ApiResponse:
    """One raw HTTP response. Consumed immediately by the normalizer."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})
        if self.body is None:
            self.body = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name, default)


@dataclass(frozen=True)
class ApiResult:
    """The single result of a logical call.

    Callers pick the view they need without re-issuing the request:
    ``data`` for the decoded payload, ``status_code`` for the bare status,
    ``has_status(204)`` for a boolean, or ``value`` for "payload if any,
    otherwise the status code".
    """

    status_code: int
    data: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    pages: int = 1
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def value(self) -> Any:
        return self.data if self.data is not None else self.status_code

    def has_status(self, status_code: int) -> bool:
        return self.status_code == status_code
