"""Pagination walker for list-returning endpoints.

The Dashboard API paginates with an RFC 5988 Link header:

    Link: <https://api.meraki.com/api/v1/organizations/1/networks?startingAfter=N_2>; rel=next

The walker follows rel=next cursors, fetching every page through the same
retry path as the first one, and concatenates items in server order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from requests.utils import parse_header_links

from merakidash.domain.events.api_events import PageFetched, dispatch_event
from merakidash.domain.exceptions import DecodeError, PaginationError
from merakidash.domain.models.common import PageCursor
from merakidash.domain.models.http import ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 1000


def next_cursor(response: ApiResponse) -> Optional[PageCursor]:
    """Extracts the rel=next continuation URL, or None on the last page."""
    link_header = response.header("Link")
    if not link_header:
        return None
    for link in parse_header_links(link_header):
        rels = str(link.get("rel", "")).split()
        if "next" in rels and link.get("url"):
            return PageCursor(link["url"])
    return None


@dataclass
class PageCollection:
    """Accumulated items plus bookkeeping for one logical list call."""

    items: List[Any] = field(default_factory=list)
    pages: int = 0
    attempts: int = 0
    last_response: Optional[ApiResponse] = None


class PaginationWalker:
    """Follows continuation cursors until exhaustion or the page cap."""

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES):
        self.max_pages = max_pages

    def walk(
        self,
        path: str,
        first_items: List[Any],
        first_response: ApiResponse,
        fetch_page: Callable[[str, PageCursor], "FetchedPage"],
        first_attempts: int = 1,
    ) -> PageCollection:
        """Collects every page of a list response.

        Args:
            path: The logical call's path (for errors and events).
            first_items: Decoded items of the first page.
            first_response: The raw first page (its Link header seeds the walk).
            fetch_page: Fetches and decodes the page at a cursor, given the
                logical path for errors; must go through the retry controller.
            first_attempts: HTTP attempts spent on the first page.

        Returns:
            A PageCollection with all items in server order.

        Raises:
            PaginationError: If more than max_pages pages would be needed, or
                the server hands back the cursor that was just fetched.
            DecodeError: If a continuation page is not a list.
        """
        collection = PageCollection(
            items=list(first_items), pages=1, attempts=first_attempts, last_response=first_response
        )
        cursor = next_cursor(first_response)
        dispatch_event(PageFetched(path=path, page_number=1, item_count=len(first_items), has_next=cursor is not None))

        previous: Optional[str] = None
        while cursor is not None:
            if cursor == previous:
                raise PaginationError(f"Server repeated continuation cursor {cursor}", path=path, pages=collection.pages)
            if collection.pages >= self.max_pages:
                raise PaginationError(
                    f"Exceeded maximum of {self.max_pages} pages", path=path, pages=collection.pages
                )

            page = fetch_page(path, cursor)
            if not isinstance(page.items, list):
                raise DecodeError(
                    f"Continuation page returned {type(page.items).__name__}, expected a list",
                    path=path,
                    status_code=page.response.status_code,
                    raw=page.response.body,
                    url=cursor,
                )

            collection.items.extend(page.items)
            collection.pages += 1
            collection.attempts += page.attempts
            collection.last_response = page.response

            previous, cursor = cursor, next_cursor(page.response)
            dispatch_event(
                PageFetched(path=path, page_number=collection.pages, item_count=len(page.items), has_next=cursor is not None)
            )

        if collection.pages > 1:
            logger.info(f"Fetched {collection.pages} pages ({len(collection.items)} items) for {path}")
        return collection


@dataclass
class FetchedPage:
    """One decoded continuation page."""

    items: Any
    response: ApiResponse
    attempts: int = 1
