"""Maps a final HTTP response onto the logical result of a call.

2xx bodies decode to an object or an ordered list, empty 2xx bodies yield
the bare status code, error statuses raise APIError with the server's
message intact, and undecodable 2xx bodies raise DecodeError.
"""

import json
import logging
from typing import Any, Optional

from merakidash.domain.exceptions import APIError, DecodeError
from merakidash.domain.models.http import ApiResponse, ApiResult

logger = logging.getLogger(__name__)


def _error_message(body: Any) -> Optional[str]:
    """Extracts the Dashboard's error text: {"errors": ["..."]} or similar."""
    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(e) for e in errors)
        if errors:
            return str(errors)
        for key in ("message", "error"):
            if body.get(key):
                return str(body[key])
        return None
    if isinstance(body, str) and body.strip():
        return body.strip()
    return None


class ResponseNormalizer:
    """Turns ApiResponses into ApiResults or typed errors."""

    def decode(self, response: ApiResponse, path: str, url: Optional[str] = None) -> Any:
        """Decodes a 2xx body. Returns None for an empty body.

        Raises:
            DecodeError: If the body is not JSON or is a bare scalar.
        """
        if not response.body or not response.body.strip():
            return None
        try:
            payload = json.loads(response.body)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Malformed JSON in response body: {e}",
                path=path,
                status_code=response.status_code,
                raw=response.body,
                url=url,
            ) from e
        if not isinstance(payload, (dict, list)):
            raise DecodeError(
                f"Expected a JSON object or array, got {type(payload).__name__}",
                path=path,
                status_code=response.status_code,
                raw=response.body,
                url=url,
            )
        return payload

    def raise_for_status(self, response: ApiResponse, path: str, attempts: int = 1, url: Optional[str] = None) -> None:
        """Raises APIError for any non-2xx response."""
        if response.ok:
            return
        body: Any = None
        if response.body:
            try:
                body = json.loads(response.body)
            except (ValueError, UnicodeDecodeError):
                body = response.body.decode("utf-8", errors="replace")
        message = _error_message(body)
        logger.error(f"Dashboard API returned {response.status_code} for {url or path} after {attempts} attempt(s): {message}")
        raise APIError(response.status_code, body=body, message=message, path=path, attempts=attempts, url=url)

    def normalize(self, response: ApiResponse, path: str, attempts: int = 1) -> ApiResult:
        """Produces the ApiResult for a single-page response."""
        self.raise_for_status(response, path, attempts)
        return ApiResult(
            status_code=response.status_code,
            data=self.decode(response, path),
            headers=response.headers,
            pages=1,
            attempts=attempts,
        )
