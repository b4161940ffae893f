"""The request engine: the single entry point every resource wrapper uses.

One logical call = build -> (rate limit -> send -> retry)* -> normalize,
plus, for list responses carrying a continuation link, the same loop for
every further page. Exactly one ApiResult or one typed error comes out,
however many HTTP round trips it took.

The engine holds no per-call state, so one instance can serve many threads
concurrently; the transport's connection pool and the rate limiter are the
only shared resources, and both are thread-safe.
"""

import logging
from typing import Any, Optional

from merakidash.domain.interfaces.rate_limiter import RateLimiter
from merakidash.domain.interfaces.transport import Transport
from merakidash.domain.models.common import PageCursor
from merakidash.domain.models.http import ApiRequest, ApiResult, HttpMethod
from merakidash.domain.models.policies import DEFAULT_BASE_URL, RetryPolicy
from merakidash.infrastructure.http.normalizer import ResponseNormalizer
from merakidash.infrastructure.http.pagination import FetchedPage, PaginationWalker, next_cursor
from merakidash.infrastructure.http.request_builder import build_request, prepare
from merakidash.infrastructure.resilience.api_retry import RetryController

logger = logging.getLogger(__name__)


class RequestEngine:
    """Builds, sends, retries, paginates and normalizes Dashboard API calls."""

    def __init__(
        self,
        transport: Transport,
        rate_limiter: RateLimiter,
        base_url: str = DEFAULT_BASE_URL,
        policy: RetryPolicy = RetryPolicy(),
        retry_controller: Optional[RetryController] = None,
        normalizer: Optional[ResponseNormalizer] = None,
    ):
        """Initializes the engine.

        Args:
            transport: Executes single HTTP round trips.
            rate_limiter: Shared pacing/backoff state, passed by reference.
            base_url: API root prefixed to relative paths.
            policy: Retry budget and page cap.
            retry_controller: Optional pre-built controller (tests inject
                one with a fake sleep).
            normalizer: Optional response normalizer.
        """
        self.transport = transport
        self.rate_limiter = rate_limiter
        self.base_url = base_url.rstrip("/")
        self.policy = policy
        self.retry_controller = retry_controller or RetryController(rate_limiter, policy)
        self.normalizer = normalizer or ResponseNormalizer()
        self.walker = PaginationWalker(max_pages=policy.max_pages)
        logger.info(f"RequestEngine initialized for {self.base_url}")

    def execute(
        self,
        path: str,
        method: Any = HttpMethod.GET,
        options: Any = None,
        *,
        paginate: bool = True,
    ) -> ApiResult:
        """Performs one logical call.

        Args:
            path: Resource path, e.g. '/organizations/123/networks'.
            method: GET, POST, PUT or DELETE (HttpMethod or string).
            options: Query parameters (GET/DELETE) or JSON body (POST/PUT).
            paginate: Follow continuation links on list responses.

        Returns:
            The ApiResult; list results hold every page's items in order.

        Raises:
            ValidationError: Before any I/O, for bad options or method.
            APIError: Non-2xx status, immediately or after retries.
            DecodeError: A 2xx body that is not a JSON object or array.
            TransportError: Network failure that retrying did not fix.
            PaginationError: Page cap exceeded or cursor loop.
        """
        http_method = HttpMethod.parse(method)
        request = ApiRequest(path=path, method=http_method, options=options)
        prepared = prepare(self.base_url, request)
        logger.debug(f"Executing {http_method.value} {path}")

        outcome = self.retry_controller.execute(self.transport.send, prepared, path)
        result = self.normalizer.normalize(outcome.response, path, outcome.attempts)

        if paginate and http_method is HttpMethod.GET and isinstance(result.data, list) and next_cursor(outcome.response):
            collection = self.walker.walk(
                path, result.data, outcome.response, self._fetch_page, first_attempts=outcome.attempts
            )
            last = collection.last_response
            return ApiResult(
                status_code=last.status_code,
                data=collection.items,
                headers=last.headers,
                pages=collection.pages,
                attempts=collection.attempts,
            )
        return result

    def _fetch_page(self, path: str, cursor: PageCursor) -> FetchedPage:
        """Fetches one continuation page through the retry controller.

        Errors name the logical path and carry the cursor as their url.
        """
        prepared = build_request(self.base_url, cursor, HttpMethod.GET)
        outcome = self.retry_controller.execute(self.transport.send, prepared, path)
        self.normalizer.raise_for_status(outcome.response, path, outcome.attempts, url=cursor)
        return FetchedPage(
            items=self.normalizer.decode(outcome.response, path, url=cursor),
            response=outcome.response,
            attempts=outcome.attempts,
        )

    # --- Convenience verbs ---

    def get(self, path: str, options: Any = None, paginate: bool = True) -> ApiResult:
        return self.execute(path, HttpMethod.GET, options, paginate=paginate)

    def post(self, path: str, options: Any = None) -> ApiResult:
        return self.execute(path, HttpMethod.POST, options)

    def put(self, path: str, options: Any = None) -> ApiResult:
        return self.execute(path, HttpMethod.PUT, options)

    def delete(self, path: str, options: Any = None) -> ApiResult:
        return self.execute(path, HttpMethod.DELETE, options)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "RequestEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
