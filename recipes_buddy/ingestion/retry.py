"""Retry helper for transient upstream failures."""

import logging
import time
from typing import Any, Callable, TypeVar

from recipes_buddy.data_layer.exceptions import UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def call_with_retry(
    func: Callable[..., T],
    *args: Any,
    max_retries: int = 2,
    delay: float = 1.0,
    **kwargs: Any
) -> T:
    """Call ``func``, retrying transient :class:`UpstreamError` failures.

    The first call is followed by at most ``max_retries`` further attempts,
    each after a fixed ``delay`` in seconds. Non-transient errors (404, other
    4xx) propagate immediately.

    Raises:
        UpstreamError: The last transient failure once retries are exhausted
    """
    attempts = max_retries + 1
    for attempt in range(1, attempts + 1):
        try:
            return func(*args, **kwargs)
        except UpstreamError as e:
            if not e.transient or attempt == attempts:
                if e.transient:
                    logger.error(f"Upstream call failed after {attempts} attempts: {e}")
                raise
            logger.warning(
                f"Transient upstream failure on attempt {attempt}/{attempts}: {e}. "
                f"Retrying in {delay}s..."
            )
            if delay > 0:
                time.sleep(delay)

    raise AssertionError("retry loop exited without result")
