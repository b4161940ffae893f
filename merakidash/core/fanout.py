"""Runs one wrapper call across many inputs on a thread pool.

The request engine is thread-safe, so independent logical calls (for
example listing devices in every network of an organization) can share one
engine, its connection pool and its rate limiter.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, TypeVar

from merakidash.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 4


def fan_out(func: Callable[[T], R], items: Iterable[T], max_workers: int = DEFAULT_MAX_WORKERS) -> List[R]:
    """Applies func to every item concurrently.

    Args:
        func: Called once per item, typically a bound wrapper method.
        items: Inputs; consumed eagerly.
        max_workers: Maximum worker threads.

    Returns:
        Results in input order.

    Raises:
        ValidationError: If max_workers is below 1.
        Exception: The first failure in input order, after every call has
            finished.
    """
    if max_workers < 1:
        raise ValidationError("max_workers must be >= 1")

    work = list(items)
    if not work:
        return []

    with ThreadPoolExecutor(max_workers=min(max_workers, len(work))) as executor:
        futures = [executor.submit(func, item) for item in work]

    failures = [f for f in futures if f.exception() is not None]
    if failures:
        logger.warning(f"fan_out: {len(failures)} of {len(futures)} calls failed")
        raise failures[0].exception()

    logger.debug(f"fan_out: {len(futures)} calls completed")
    return [f.result() for f in futures]
