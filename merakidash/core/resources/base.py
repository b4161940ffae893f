"""Shared plumbing for the resource wrappers.

Each wrapper method supplies a path, a verb and options to the request
engine and returns one view of the ApiResult. Preconditions specific to a
wrapper (timespan bounds, port numbers, required keys) raise
ValidationError here, before the engine is reached.
"""

import warnings
from typing import Any

from merakidash.core.engine import RequestEngine
from merakidash.domain.exceptions import ValidationError
from merakidash.domain.models.common import MAX_TIMESPAN_SECONDS
from merakidash.domain.models.http import ApiResult, HttpMethod


def check_timespan(timespan: Any) -> int:
    """Validates a timespan in seconds against the one-month Dashboard limit."""
    try:
        seconds = int(timespan)
    except (TypeError, ValueError):
        raise ValidationError(f"Timespan must be a number of seconds, got {timespan!r}") from None
    if seconds > MAX_TIMESPAN_SECONDS:
        raise ValidationError(f"Timespan can not be larger than {MAX_TIMESPAN_SECONDS} seconds")
    return seconds


def warn_deprecated(old: str, new: str) -> None:
    warnings.warn(f"{old} is deprecated, use {new} instead", DeprecationWarning, stacklevel=3)


class ResourceClient:
    """Base class for a group of Dashboard endpoints."""

    def __init__(self, engine: RequestEngine):
        self._engine = engine

    def _execute(self, path: str, method: HttpMethod = HttpMethod.GET, options: Any = None) -> ApiResult:
        return self._engine.execute(path, method, options)

    def _call(self, path: str, method: HttpMethod = HttpMethod.GET, options: Any = None) -> Any:
        """Returns the decoded payload, or the bare status code for empty bodies."""
        return self._execute(path, method, options).value
